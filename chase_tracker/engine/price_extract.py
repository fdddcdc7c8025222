"""
Chase Tracker — Price Field Extractor

Upstream price payloads come in several loose shapes. Each marketplace block
(``tcgplayer``, ``ebay``, ``cardmarket``) is resolved to one market price by
an ordered list of rules; the first rule that yields a usable value wins:

1. direct     — top-level ``market`` (or ``price``)
2. variant    — ``prices.<variant>.market`` in variant priority order
3. variant_mid — ``prices.<variant>.mid`` in the same order
4. graded     — ``prices.<grade>.market`` best grade first (eBay only)

A value is usable only if it parses as a positive finite number. Zero means
"no price from this source", never a real zero price. Nothing here raises.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Mapping, NamedTuple

import structlog

from chase_tracker.config import SOURCE_CURRENCY, Currency, PriceSource
from chase_tracker.models.card import PriceQuote
from chase_tracker.utils.forex import convert_to_display

logger = structlog.get_logger(__name__)

_ZERO = Decimal("0")

# ---------------------------------------------------------------------------
# Variant / grade priority
# ---------------------------------------------------------------------------

_DEFAULT_VARIANTS: tuple[str, ...] = (
    "holofoil",
    "normal",
    "reverseHolofoil",
    "1stEditionHolofoil",
    "unlimitedHolofoil",
)

VARIANT_PRIORITY: dict[PriceSource, tuple[str, ...]] = {
    PriceSource.TCGPLAYER: _DEFAULT_VARIANTS,
    PriceSource.EBAY: _DEFAULT_VARIANTS,
    PriceSource.CARDMARKET: ("normal", "holofoil", "reverseHolofoil"),
}

# PSA-style grades, best first
GRADE_PRIORITY: tuple[str, ...] = ("10", "9", "8")


class ExtractedPrice(NamedTuple):
    """Native-currency result of the rule search. ``rule`` is None when nothing matched."""
    market: Decimal
    low: Decimal | None
    high: Decimal | None
    rule: str | None


class PriceRule(NamedTuple):
    name: str
    sources: frozenset[PriceSource] | None   # None = every live source
    extract: Callable[[Mapping[str, Any], PriceSource], ExtractedPrice | None]


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def usable_price(value: Any) -> Decimal | None:
    """Parse a raw price field. Returns None unless it is a positive finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite() or parsed <= _ZERO:
        return None
    return parsed


def _group(payload: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = payload.get(key)
    return value if isinstance(value, Mapping) else None


def _nested(payload: Mapping[str, Any], keys: tuple[str, ...], field: str, rule: str) -> ExtractedPrice | None:
    prices = _group(payload, "prices")
    if prices is None:
        return None
    for key in keys:
        group = _group(prices, key)
        if group is None:
            continue
        value = usable_price(group.get(field))
        if value is not None:
            return ExtractedPrice(
                market=value,
                low=usable_price(group.get("low")) or usable_price(payload.get("low")),
                high=usable_price(group.get("high")) or usable_price(payload.get("high")),
                rule=f"{rule}:{key}",
            )
    return None


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def _direct(payload: Mapping[str, Any], source: PriceSource) -> ExtractedPrice | None:
    value = usable_price(payload.get("market")) or usable_price(payload.get("price"))
    if value is None:
        return None
    return ExtractedPrice(
        market=value,
        low=usable_price(payload.get("low")),
        high=usable_price(payload.get("high")),
        rule="direct",
    )


def _variant_market(payload: Mapping[str, Any], source: PriceSource) -> ExtractedPrice | None:
    return _nested(payload, VARIANT_PRIORITY[source], "market", "variant")


def _variant_mid(payload: Mapping[str, Any], source: PriceSource) -> ExtractedPrice | None:
    return _nested(payload, VARIANT_PRIORITY[source], "mid", "variant_mid")


def _graded_market(payload: Mapping[str, Any], source: PriceSource) -> ExtractedPrice | None:
    return _nested(payload, GRADE_PRIORITY, "market", "graded")


PRICE_RULES: tuple[PriceRule, ...] = (
    PriceRule("direct", None, _direct),
    PriceRule("variant", None, _variant_market),
    PriceRule("variant_mid", None, _variant_mid),
    PriceRule("graded", frozenset({PriceSource.EBAY}), _graded_market),
)

NO_PRICE = ExtractedPrice(market=_ZERO, low=None, high=None, rule=None)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def extract_price(payload: Any, source: PriceSource) -> ExtractedPrice:
    """
    Resolve one marketplace block to a native-currency market price.

    Args:
        payload: Raw ``tcgplayer`` / ``ebay`` / ``cardmarket`` block (any shape).
        source: Which marketplace the block belongs to.

    Returns:
        ExtractedPrice from the first matching rule, or NO_PRICE (market 0).
    """
    if source == PriceSource.FALLBACK or not isinstance(payload, Mapping):
        return NO_PRICE

    for rule in PRICE_RULES:
        if rule.sources is not None and source not in rule.sources:
            continue
        result = rule.extract(payload, source)
        if result is not None:
            return result

    return NO_PRICE


def _to_display(value: Decimal | None, currency: Currency, source: PriceSource) -> Decimal | None:
    """Convert one extracted field; None if absent or beyond Decimal precision."""
    if value is None:
        return None
    try:
        return convert_to_display(value, currency)
    except InvalidOperation:
        logger.warning(
            "price_quote_unconvertible",
            source=source.value,
            native_value=str(value),
        )
        return None


def build_price_quote(payload: Any, source: PriceSource) -> PriceQuote | None:
    """
    Extract and convert one marketplace block into a display-currency quote.

    Returns None when the source has no usable price (including prices that
    round to 0.00 after conversion, or are too large to convert). Missing or
    unconvertible low/high default to market.
    """
    extracted = extract_price(payload, source)
    if extracted.rule is None:
        return None

    currency = SOURCE_CURRENCY[source]
    market = _to_display(extracted.market, currency, source)
    if market is None or market <= _ZERO:
        return None

    low = _to_display(extracted.low, currency, source)
    high = _to_display(extracted.high, currency, source)
    if low is None:
        low = market
    if high is None:
        high = market

    logger.debug(
        "price_quote_built",
        source=source.value,
        rule=extracted.rule,
        native_market=str(extracted.market),
        market=str(market),
    )
    return PriceQuote(source=source, market=market, low=low, high=high)


def build_price_quotes(record: Mapping[str, Any]) -> list[PriceQuote]:
    """Quotes for every live marketplace block present on a raw card record."""
    quotes: list[PriceQuote] = []
    for source in (PriceSource.TCGPLAYER, PriceSource.EBAY, PriceSource.CARDMARKET):
        quote = build_price_quote(record.get(source.value), source)
        if quote is not None:
            quotes.append(quote)
    return quotes
