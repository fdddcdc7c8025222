"""
Chase Tracker — Final Price Ranking

Sorts assembled candidates by effective price (highest first), truncates to
the requested limit and assigns dense 1-based ranks.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

import structlog

from chase_tracker.models.card import RankedCard

logger = structlog.get_logger(__name__)


def rank_by_price(candidates: Iterable[RankedCard], limit: int) -> list[RankedCard]:
    """
    Rank candidates by effective price.

    Candidates with no usable quote are excluded. The sort is stable, so
    equal prices keep the incoming (chase-priority) order. Provisional ranks
    on the inputs are overwritten on copies; inputs are not mutated.

    Raises:
        ValueError: If limit is not positive.
    """
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")

    priced = [c for c in candidates if c.effective_price > Decimal("0")]
    # reverse=True keeps equal elements in their original order
    ordered = sorted(priced, key=lambda c: c.effective_price, reverse=True)[:limit]

    ranked = [
        card.model_copy(update={"rank": position})
        for position, card in enumerate(ordered, start=1)
    ]

    logger.debug(
        "ranking_complete",
        candidates=len(priced),
        returned=len(ranked),
        top_price=str(ranked[0].effective_price) if ranked else None,
    )
    return ranked
