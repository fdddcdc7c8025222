"""
Chase Tracker — Curated Fallback Data Tests
"""

from __future__ import annotations

from decimal import Decimal

from chase_tracker.config import PriceSource
from chase_tracker.data.fallback import (
    FALLBACK_CHASE_CARDS,
    get_fallback,
    get_fallback_price,
)


class TestGetFallback:
    def test_sv1_in_table_order_ranked_1_to_10(self) -> None:
        cards = get_fallback("sv1")

        assert [c.rank for c in cards] == list(range(1, 11))
        assert [c.card.name for c in cards] == [e.name for e in FALLBACK_CHASE_CARDS["sv1"]]
        assert cards[0].card.name == "Charizard ex Special Art Rare"
        assert cards[0].effective_price == Decimal("89.99")

    def test_fallback_cards_carry_curated_quote_only(self) -> None:
        card = get_fallback("sv1")[0]

        assert not card.has_live_pricing
        assert [q.source for q in card.quotes] == [PriceSource.FALLBACK]
        assert card.card.number == "195"
        assert card.card.image_url == "https://images.pokemontcg.io/sv1/195.png"
        assert card.card.set_name == "Scarlet & Violet Base Set"

    def test_ids_unique_within_set(self) -> None:
        ids = [c.card.id for c in get_fallback("sv2")]

        assert len(ids) == len(set(ids))

    def test_unmapped_set_is_empty(self) -> None:
        assert get_fallback("sv9") == []
        assert get_fallback("sv99") == []

    def test_authored_in_price_order(self) -> None:
        for set_id in FALLBACK_CHASE_CARDS:
            prices = [c.effective_price for c in get_fallback(set_id)]
            assert prices == sorted(prices, reverse=True)

    def test_returns_fresh_objects(self) -> None:
        first = get_fallback("sv1")
        first[0].rank = 42

        assert get_fallback("sv1")[0].rank == 1


class TestGetFallbackPrice:
    def test_exact_match(self) -> None:
        assert get_fallback_price("sv1", "Charizard ex") == Decimal("28.99")

    def test_exact_match_ignores_case(self) -> None:
        assert get_fallback_price("sv1", "charizard EX special art rare") == Decimal("89.99")

    def test_longest_contained_name_wins(self) -> None:
        """'Charizard ex Special Art Rare' beats the shorter 'Charizard ex'."""
        price = get_fallback_price("sv1", "Charizard ex Special Art Rare 195/198")

        assert price == Decimal("89.99")

    def test_card_name_contained_in_table_name(self) -> None:
        assert get_fallback_price("sv3", "Ting-Lu ex") == Decimal("32.99")

    def test_no_match(self) -> None:
        assert get_fallback_price("sv1", "Pikachu") is None

    def test_unknown_set(self) -> None:
        assert get_fallback_price("sv99", "Charizard ex") is None

    def test_blank_name(self) -> None:
        assert get_fallback_price("sv1", "   ") is None
