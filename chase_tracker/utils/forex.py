"""
Chase Tracker — Currency Conversion

Converts marketplace prices into the single display currency (GBP) using
fixed static rates from config. No live rate lookup.

All money values use Decimal, never float, and results are rounded to
2 dp with ROUND_HALF_UP.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

import structlog

from chase_tracker.config import Currency, settings
from chase_tracker.errors import UnsupportedCurrencyError

logger = structlog.get_logger(__name__)

_TWO_DP = Decimal("0.01")


def _display_rate(currency: Currency) -> Decimal:
    if currency == settings.DISPLAY_CURRENCY:
        return Decimal("1")
    if currency == Currency.USD:
        return settings.USD_TO_GBP_RATE
    if currency == Currency.EUR:
        return settings.EUR_TO_GBP_RATE
    raise UnsupportedCurrencyError(
        f"No conversion rate from {currency.value} to {settings.DISPLAY_CURRENCY.value}",
        details={"currency": currency.value},
    )


def convert_to_display(amount: Decimal, from_currency: Currency | str) -> Decimal:
    """
    Convert an amount into the display currency.

    Args:
        amount: Non-negative amount in ``from_currency``.
        from_currency: Source currency (enum or ISO code string).

    Returns:
        Amount in the display currency, 2dp.

    Raises:
        ValueError: If amount is negative.
        UnsupportedCurrencyError: If the currency has no configured rate.

    Examples:
        >>> convert_to_display(Decimal("100"), Currency.USD)
        Decimal('79.00')
    """
    if amount < Decimal("0"):
        raise ValueError(f"amount must be non-negative, got {amount}")

    try:
        currency = Currency(from_currency)
    except ValueError as e:
        raise UnsupportedCurrencyError(
            f"Unknown currency tag {from_currency!r}",
            details={"currency": str(from_currency)},
        ) from e

    rate = _display_rate(currency)
    result = (amount * rate).quantize(_TWO_DP, rounding=ROUND_HALF_UP)

    logger.debug(
        "forex_to_display",
        amount=str(amount),
        from_currency=currency.value,
        rate=str(rate),
        result=str(result),
    )
    return result
