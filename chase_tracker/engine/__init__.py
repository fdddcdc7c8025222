from chase_tracker.engine.price_extract import (
    build_price_quote,
    build_price_quotes,
    extract_price,
)
from chase_tracker.engine.ranking import rank_by_price
from chase_tracker.engine.rarity import is_chase, rarity_priority, select_chase_cards

__all__ = [
    "build_price_quote",
    "build_price_quotes",
    "extract_price",
    "is_chase",
    "rank_by_price",
    "rarity_priority",
    "select_chase_cards",
]
