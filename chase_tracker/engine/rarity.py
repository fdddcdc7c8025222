"""
Chase Tracker — Rarity Classifier

Decides which rarity tiers count as "chase" cards and orders them by
collector demand. Lower priority value = more desirable.

Filtering is strict: a card whose rarity is not in the table is dropped.
"""

from __future__ import annotations

from typing import Callable, Iterable, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Highest demand first
CHASE_RARITIES: tuple[str, ...] = (
    "Special Illustration Rare",
    "Hyper Rare",
    "Special Art Rare",
    "Ultra Rare",
    "Illustration Rare",
    "Double Rare",
    "Rare Holo V",
    "Rare Holo VMAX",
    "Rare Holo VSTAR",
    "Rare Secret",
    "Rare Rainbow",
    "Rare Gold",
)

# Sorts every unknown label after the whole table
UNRANKED_PRIORITY = 999

_PRIORITY_BY_LABEL: dict[str, int] = {
    label.casefold(): index for index, label in enumerate(CHASE_RARITIES)
}


def _normalize(rarity: str | None) -> str:
    return (rarity or "").strip().casefold()


def is_chase(rarity: str | None) -> bool:
    """True if the rarity label is one of the chase tiers."""
    return _normalize(rarity) in _PRIORITY_BY_LABEL


def rarity_priority(rarity: str | None) -> int:
    """Index in CHASE_RARITIES, or UNRANKED_PRIORITY for unknown labels."""
    return _PRIORITY_BY_LABEL.get(_normalize(rarity), UNRANKED_PRIORITY)


def select_chase_cards(items: Iterable[T], rarity_of: Callable[[T], str | None]) -> list[T]:
    """
    Keep only chase-tier items, stably sorted by rarity priority.

    Items of equal priority keep their original (fetch) order.
    """
    items = list(items)
    chase = [item for item in items if is_chase(rarity_of(item))]
    chase.sort(key=lambda item: rarity_priority(rarity_of(item)))

    logger.debug(
        "rarity_chase_selected",
        total=len(items),
        chase=len(chase),
        dropped=len(items) - len(chase),
    )
    return chase
