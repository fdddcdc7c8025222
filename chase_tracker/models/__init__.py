"""
Models package — export the request-scoped card and price models.
"""

from chase_tracker.models.card import Card, ChaseCardsResult, PriceQuote, RankedCard

__all__ = ["Card", "ChaseCardsResult", "PriceQuote", "RankedCard"]
