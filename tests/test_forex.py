"""
Chase Tracker — Currency Conversion Tests

Fixed static rates into GBP, rounded to 2 dp ROUND_HALF_UP.
All money values use Decimal (no float rounding).
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from chase_tracker.config import Currency, settings
from chase_tracker.errors import UnsupportedCurrencyError
from chase_tracker.utils.forex import convert_to_display


class TestConvertUSD:
    """USD → GBP at 0.79."""

    def test_basic_conversion(self) -> None:
        """100 USD × 0.79 = 79.00 GBP."""
        assert convert_to_display(Decimal("100"), Currency.USD) == Decimal("79.00")

    def test_accepts_iso_string(self) -> None:
        assert convert_to_display(Decimal("100"), "USD") == Decimal("79.00")

    def test_rounds_half_up(self) -> None:
        """0.50 × 0.79 = 0.395 → 0.40."""
        assert convert_to_display(Decimal("0.50"), Currency.USD) == Decimal("0.40")

    def test_result_has_two_decimal_places(self) -> None:
        result = convert_to_display(Decimal("12.345"), Currency.USD)

        assert result == Decimal("9.75")
        assert result.as_tuple().exponent == -2


class TestConvertEUR:
    """EUR → GBP at 0.85."""

    def test_basic_conversion(self) -> None:
        """40 EUR × 0.85 = 34.00 GBP."""
        assert convert_to_display(Decimal("40"), Currency.EUR) == Decimal("34.00")

    def test_rate_comes_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "EUR_TO_GBP_RATE", Decimal("0.90"))

        assert convert_to_display(Decimal("10"), Currency.EUR) == Decimal("9.00")


class TestDisplayCurrency:
    def test_gbp_passes_through_quantized(self) -> None:
        assert convert_to_display(Decimal("89.99"), Currency.GBP) == Decimal("89.99")
        assert convert_to_display(Decimal("5"), Currency.GBP) == Decimal("5.00")


class TestConvertEdgeCases:
    def test_zero_stays_zero(self) -> None:
        assert convert_to_display(Decimal("0"), Currency.USD) == Decimal("0.00")

    def test_negative_amount_raises(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            convert_to_display(Decimal("-1"), Currency.USD)

    @pytest.mark.parametrize("tag", ["JPY", "usd", ""])
    def test_unknown_currency_fails_loudly(self, tag: str) -> None:
        """Unknown tags are rejected rather than passed through unconverted."""
        with pytest.raises(UnsupportedCurrencyError):
            convert_to_display(Decimal("10"), tag)

    def test_unsupported_currency_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            convert_to_display(Decimal("10"), "CAD")


class TestConvertProperties:
    @pytest.mark.parametrize("currency", [Currency.USD, Currency.EUR, Currency.GBP])
    def test_monotonic_and_non_negative(self, currency: Currency) -> None:
        amounts = [Decimal(x) for x in ("0", "0.01", "0.99", "1", "10.50", "99.99", "1000")]

        results = [convert_to_display(a, currency) for a in amounts]

        assert all(r >= Decimal("0") for r in results)
        assert results == sorted(results)
