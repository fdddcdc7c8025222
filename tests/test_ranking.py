"""
Chase Tracker — Final Price Ranking Tests

Ranking invariant: prices non-increasing by rank, ranks exactly 1..n,
ties keep chase-priority order, unpriced candidates excluded.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from chase_tracker.config import PriceSource
from chase_tracker.engine.ranking import rank_by_price
from chase_tracker.models.card import Card, PriceQuote, RankedCard


def _candidate(name: str, *prices: str, provisional_rank: int = 0) -> RankedCard:
    sources = [PriceSource.TCGPLAYER, PriceSource.EBAY, PriceSource.CARDMARKET]
    quotes = [
        PriceQuote(source=source, market=Decimal(p), low=Decimal(p), high=Decimal(p))
        for source, p in zip(sources, prices)
    ]
    return RankedCard(card=Card(id=name, name=name), quotes=quotes, rank=provisional_rank)


class TestRankByPrice:
    def test_sorted_descending_with_dense_ranks(self) -> None:
        candidates = [
            _candidate("a", "10.00"),
            _candidate("b", "79.00"),
            _candidate("c", "34.00"),
        ]

        ranked = rank_by_price(candidates, limit=10)

        assert [c.card.name for c in ranked] == ["b", "c", "a"]
        assert [c.rank for c in ranked] == [1, 2, 3]

    def test_effective_price_is_max_across_quotes(self) -> None:
        candidates = [
            _candidate("a", "10.00", "90.00", "5.00"),
            _candidate("b", "50.00"),
        ]

        ranked = rank_by_price(candidates, limit=10)

        assert ranked[0].card.name == "a"
        assert ranked[0].effective_price == Decimal("90.00")

    def test_ties_keep_incoming_order(self) -> None:
        """Two cards at 50.00: the one with better chase priority stays ahead."""
        candidates = [
            _candidate("sir", "50.00", provisional_rank=1),
            _candidate("hyper", "50.00", provisional_rank=2),
            _candidate("cheap", "5.00", provisional_rank=3),
        ]

        ranked = rank_by_price(candidates, limit=10)

        assert [c.card.name for c in ranked] == ["sir", "hyper", "cheap"]

    def test_truncates_to_limit(self) -> None:
        candidates = [_candidate(str(i), f"{i}.00") for i in range(1, 8)]

        ranked = rank_by_price(candidates, limit=3)

        assert [c.card.name for c in ranked] == ["7", "6", "5"]
        assert [c.rank for c in ranked] == [1, 2, 3]

    def test_unpriced_candidates_excluded(self) -> None:
        candidates = [_candidate("none"), _candidate("zero", "0.00"), _candidate("ok", "1.00")]

        ranked = rank_by_price(candidates, limit=10)

        assert [c.card.name for c in ranked] == ["ok"]

    def test_provisional_rank_overwritten_without_mutating_input(self) -> None:
        candidates = [_candidate("a", "1.00", provisional_rank=1), _candidate("b", "2.00", provisional_rank=2)]

        ranked = rank_by_price(candidates, limit=10)

        assert [(c.card.name, c.rank) for c in ranked] == [("b", 1), ("a", 2)]
        assert [c.rank for c in candidates] == [1, 2]

    def test_empty_input(self) -> None:
        assert rank_by_price([], limit=10) == []

    @pytest.mark.parametrize("limit", [0, -1])
    def test_limit_must_be_positive(self, limit: int) -> None:
        with pytest.raises(ValueError):
            rank_by_price([_candidate("a", "1.00")], limit=limit)

    def test_ranking_invariant(self) -> None:
        prices = ["3.10", "99.99", "3.10", "0.01", "45.00", "45.00", "12.34", "0.00"]
        candidates = [_candidate(f"c{i}", p) for i, p in enumerate(prices)]

        ranked = rank_by_price(candidates, limit=len(prices))

        assert [c.rank for c in ranked] == list(range(1, len(ranked) + 1))
        for upper, lower in zip(ranked, ranked[1:]):
            assert upper.effective_price >= lower.effective_price
        assert all(c.effective_price > 0 for c in ranked)
