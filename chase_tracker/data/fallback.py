"""
Chase Tracker — Curated Fallback Data

Hand-maintained GBP prices for the most sought-after cards of each set.
Served when live pricing is unavailable or unconfigured, and used per card
in hybrid mode once the live lookup quota is spent.

Entries are authored highest price first; that order is the fallback rank.
Update manually when the market moves.
"""

from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, NamedTuple

import structlog

from chase_tracker.config import PriceSource
from chase_tracker.models.card import Card, PriceQuote, RankedCard
from chase_tracker.utils.sets import SET_NAMES

logger = structlog.get_logger(__name__)

_IMAGE_BASE = "https://images.pokemontcg.io"


class FallbackEntry(NamedTuple):
    name: str
    price: Decimal              # GBP
    number: str = ""
    image_url: str | None = None


def _sv1(name: str, price: str, number: str) -> FallbackEntry:
    return FallbackEntry(name, Decimal(price), number, f"{_IMAGE_BASE}/sv1/{number}.png")


FALLBACK_CHASE_CARDS: Mapping[str, tuple[FallbackEntry, ...]] = MappingProxyType({
    "sv1": (
        _sv1("Charizard ex Special Art Rare", "89.99", "195"),
        _sv1("Miraidon ex Special Art Rare", "45.99", "194"),
        _sv1("Koraidon ex Special Art Rare", "42.99", "193"),
        _sv1("Professor's Research Special Art Rare", "38.99", "190"),
        _sv1("Nemona Special Art Rare", "35.99", "191"),
        _sv1("Arven Special Art Rare", "32.99", "192"),
        _sv1("Charizard ex", "28.99", "6"),
        _sv1("Miraidon ex", "18.99", "101"),
        _sv1("Koraidon ex", "16.99", "71"),
        _sv1("Gardevoir ex", "14.99", "86"),
    ),
    "sv2": (
        FallbackEntry("Charizard ex Special Art Rare", Decimal("65.99")),
        FallbackEntry("Miraidon ex Gold", Decimal("45.99")),
        FallbackEntry("Chien-Pao ex Special Art Rare", Decimal("35.99")),
        FallbackEntry("Professor Sada Special Art Rare", Decimal("28.99")),
        FallbackEntry("Professor Turo Special Art Rare", Decimal("28.99")),
    ),
    "sv3": (
        FallbackEntry("Charizard ex Special Art Rare", Decimal("89.99")),
        FallbackEntry("Ting-Lu ex Special Art Rare", Decimal("32.99")),
        FallbackEntry("Pidgeot ex Special Art Rare", Decimal("28.99")),
        FallbackEntry("Mela Special Art Rare", Decimal("25.99")),
    ),
})


def _fallback_quote(price: Decimal) -> PriceQuote:
    return PriceQuote(source=PriceSource.FALLBACK, market=price, low=price, high=price)


def get_fallback(set_id: str) -> list[RankedCard]:
    """
    Curated ranked list for a dropdown set id, in table order.

    Returns an empty list for sets without curated data.
    """
    entries = FALLBACK_CHASE_CARDS.get(set_id, ())
    set_name = SET_NAMES.get(set_id, "")

    cards = [
        RankedCard(
            card=Card(
                id=f"{set_id}-fallback-{rank}",
                number=entry.number,
                name=entry.name,
                set_id=set_id,
                set_name=set_name,
                image_url=entry.image_url,
            ),
            quotes=[_fallback_quote(entry.price)],
            rank=rank,
            has_live_pricing=False,
        )
        for rank, entry in enumerate(entries, start=1)
    ]

    logger.info("fallback_served", set_id=set_id, count=len(cards))
    return cards


def get_fallback_price(set_id: str, card_name: str) -> Decimal | None:
    """
    Curated GBP price for a card name, or None.

    Exact (case-insensitive) name match first; otherwise the longest table
    name contained in ``card_name``, then the first table name that contains
    ``card_name``.
    """
    entries = FALLBACK_CHASE_CARDS.get(set_id)
    if not entries or not card_name.strip():
        return None

    wanted = card_name.strip().casefold()

    for entry in entries:
        if entry.name.casefold() == wanted:
            return entry.price

    contained = [e for e in entries if e.name.casefold() in wanted]
    if contained:
        return max(contained, key=lambda e: len(e.name)).price

    for entry in entries:
        if wanted in entry.name.casefold():
            return entry.price

    return None
