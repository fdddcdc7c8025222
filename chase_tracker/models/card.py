"""
Chase Tracker — Card & Price Models

Request-scoped pydantic models. Nothing here is persisted.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from chase_tracker.config import PriceSource


class Card(BaseModel):
    """A single printed card. ``name`` is not unique; variants share names."""

    id: str = Field(..., description="Unique per printing, e.g. 'sv1-195'")
    number: str = Field(default="", description="Collector number within its set")
    name: str
    rarity: str = Field(default="", description="Rarity label from the upstream catalog")
    set_id: str = Field(default="", description="Upstream set identifier")
    set_name: str = Field(default="")
    image_url: str | None = None


class PriceQuote(BaseModel):
    """One marketplace's normalized price for one card, in the display currency."""

    source: PriceSource
    market: Decimal = Field(..., ge=0)
    low: Decimal = Field(..., ge=0)
    high: Decimal = Field(..., ge=0)


class RankedCard(BaseModel):
    """
    A card with its price quotes and a 1-based rank.

    The rank is provisional while candidates are assembled and is
    overwritten once the final price sort is done.
    """

    card: Card
    quotes: list[PriceQuote] = Field(default_factory=list)
    rank: int = Field(default=0, ge=0)
    has_live_pricing: bool = True

    @property
    def effective_price(self) -> Decimal:
        """Highest market price across all quotes (already display currency)."""
        return max((q.market for q in self.quotes), default=Decimal("0"))

    def quote_for(self, source: PriceSource) -> PriceQuote | None:
        for quote in self.quotes:
            if quote.source == source:
                return quote
        return None


class ChaseCardsResult(BaseModel):
    """What the presentation layer receives for one set request."""

    set_id: str
    cards: list[RankedCard] = Field(default_factory=list)
    is_fallback: bool = False
    notice: str | None = None
