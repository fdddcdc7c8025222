"""
Chase Tracker — Card Price Aggregator

Produces the top-N chase cards for a set, ranked by best display-currency
price. One aggregator, two strategies:

- PRICE_ONLY: one price tracker call returns a page of cards with prices;
  every chase card on the page is priced, then the top ``limit`` kept.
- HYBRID: pokemontcg.io supplies the catalog and rarities; the price tracker
  is queried per card for the best candidates, capped at LIVE_PRICE_CALL_CAP
  calls per request. Cards without a live price get curated fallback pricing.

Upstream failures at the catalog level propagate as typed errors. The
caller decides whether to substitute fallback data (see loader.py).
"""

from __future__ import annotations

import structlog

from chase_tracker.config import ChaseStrategy, PriceSource, settings
from chase_tracker.data.fallback import get_fallback_price
from chase_tracker.engine.price_extract import build_price_quotes
from chase_tracker.engine.ranking import rank_by_price
from chase_tracker.engine.rarity import select_chase_cards
from chase_tracker.errors import MissingCredentialError, UpstreamRequestError
from chase_tracker.models.card import Card, PriceQuote, RankedCard
from chase_tracker.pipeline.pokemontcg import PokemonTCGClient
from chase_tracker.pipeline.pricetracker import PriceTrackerClient, PriceTrackerCard
from chase_tracker.utils.sets import UpstreamApi, resolve_set_id

logger = structlog.get_logger(__name__)


class ChaseCardAggregator:
    """
    Ranks a set's chase cards by price.

    Usage:
        aggregator = ChaseCardAggregator(strategy=ChaseStrategy.HYBRID)
        cards = await aggregator.get_top_chase_cards("sv1", limit=10)
    """

    def __init__(
        self,
        strategy: ChaseStrategy | None = None,
        price_api_key: str | None = None,
        catalog_api_key: str | None = None,
        live_price_cap: int | None = None,
    ):
        self.strategy = strategy or settings.CHASE_STRATEGY
        self._price_api_key = (
            price_api_key if price_api_key is not None else settings.POKEMON_PRICE_TRACKER_API_KEY
        )
        self._catalog_api_key = catalog_api_key
        self.live_price_cap = (
            live_price_cap if live_price_cap is not None else settings.LIVE_PRICE_CALL_CAP
        )

    async def get_top_chase_cards(self, ui_set_id: str, limit: int | None = None) -> list[RankedCard]:
        """
        Top ``limit`` chase cards for a dropdown set id, highest price first.

        Raises:
            ValueError: If limit is not positive.
            UnsupportedSetError: Set id has no mapping for the upstream API.
            MissingCredentialError: PRICE_ONLY without a price tracker key.
            UpstreamRequestError: Catalog fetch failed or returned no cards
                (MalformedResponseError for unrecognized bodies).
        """
        limit = limit if limit is not None else settings.DEFAULT_CHASE_LIMIT
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")

        logger.info(
            "aggregator_start",
            set_id=ui_set_id,
            limit=limit,
            strategy=self.strategy.value,
        )

        if self.strategy == ChaseStrategy.HYBRID:
            ranked = await self._hybrid(ui_set_id, limit)
        else:
            ranked = await self._price_only(ui_set_id, limit)

        logger.info(
            "aggregator_complete",
            set_id=ui_set_id,
            strategy=self.strategy.value,
            returned=len(ranked),
            live_priced=sum(1 for c in ranked if c.has_live_pricing),
        )
        return ranked

    # -----------------------------------------------------------------------
    # PRICE_ONLY
    # -----------------------------------------------------------------------

    async def _price_only(self, ui_set_id: str, limit: int) -> list[RankedCard]:
        set_id = resolve_set_id(ui_set_id, UpstreamApi.PRICE_TRACKER)
        if not self._price_api_key:
            raise MissingCredentialError(
                "Pokemon Price Tracker API key not configured",
                details={"set_id": ui_set_id},
            )

        async with PriceTrackerClient(api_key=self._price_api_key) as client:
            records = await client.fetch_set_prices(set_id, limit=settings.PRICE_TRACKER_PAGE_SIZE)

        if not records:
            raise UpstreamRequestError(
                f"No cards returned for set {set_id}",
                details={"set_id": ui_set_id},
            )

        chase = select_chase_cards(records, lambda r: r.rarity)

        # Every chase card on the page is a candidate; rank_by_price truncates
        candidates: list[RankedCard] = []
        for record in chase:
            quotes = build_price_quotes(record.price_blocks())
            if not quotes:
                logger.debug("aggregator_card_unpriced", card_name=record.name)
                continue
            candidates.append(
                RankedCard(
                    card=record.to_card(set_id),
                    quotes=quotes,
                    rank=len(candidates) + 1,
                    has_live_pricing=True,
                )
            )

        return rank_by_price(candidates, limit)

    # -----------------------------------------------------------------------
    # HYBRID
    # -----------------------------------------------------------------------

    async def _hybrid(self, ui_set_id: str, limit: int) -> list[RankedCard]:
        catalog_set_id = resolve_set_id(ui_set_id, UpstreamApi.POKEMONTCG)
        price_set_id = resolve_set_id(ui_set_id, UpstreamApi.PRICE_TRACKER)

        async with PokemonTCGClient(api_key=self._catalog_api_key) as catalog:
            cards = await catalog.fetch_set_cards(catalog_set_id, page_size=settings.CATALOG_PAGE_SIZE)

        if not cards:
            raise UpstreamRequestError(
                f"No cards found for set {catalog_set_id}",
                details={"set_id": ui_set_id},
            )

        chase = select_chase_cards(cards, lambda c: c.rarity)
        logger.info(
            "aggregator_chase_candidates",
            set_id=ui_set_id,
            chase=len(chase),
            total=len(cards),
        )

        if self._price_api_key:
            async with PriceTrackerClient(api_key=self._price_api_key) as prices:
                candidates, calls_used = await self._price_candidates(
                    chase[: limit * 2], ui_set_id, price_set_id, limit, prices
                )
        else:
            logger.info("aggregator_no_price_key", set_id=ui_set_id, note="using fallback pricing")
            candidates, calls_used = await self._price_candidates(
                chase[: limit * 2], ui_set_id, price_set_id, limit, None
            )

        logger.info(
            "aggregator_live_calls",
            set_id=ui_set_id,
            calls_used=calls_used,
            cap=self.live_price_cap,
        )
        return rank_by_price(candidates, limit)

    async def _price_candidates(
        self,
        chase: list[Card],
        ui_set_id: str,
        price_set_id: str,
        limit: int,
        prices: PriceTrackerClient | None,
    ) -> tuple[list[RankedCard], int]:
        """Attach live or curated quotes to candidates. Returns (candidates, live calls issued)."""
        candidates: list[RankedCard] = []
        calls_used = 0

        for card in chase:
            if len(candidates) >= limit:
                break

            quotes: list[PriceQuote] = []
            # Quota is checked before every call and spent even if the call fails
            if prices is not None and calls_used < self.live_price_cap:
                calls_used += 1
                quotes = await self._live_quotes(prices, card, price_set_id)

            has_live_pricing = bool(quotes)
            if not quotes:
                fallback_price = get_fallback_price(ui_set_id, card.name)
                if fallback_price is not None:
                    quotes = [
                        PriceQuote(
                            source=PriceSource.FALLBACK,
                            market=fallback_price,
                            low=fallback_price,
                            high=fallback_price,
                        )
                    ]

            if not quotes:
                logger.debug("aggregator_card_unpriced", card_name=card.name)
                continue

            candidates.append(
                RankedCard(
                    card=card,
                    quotes=quotes,
                    rank=len(candidates) + 1,
                    has_live_pricing=has_live_pricing,
                )
            )

        return candidates, calls_used

    async def _live_quotes(
        self,
        prices: PriceTrackerClient,
        card: Card,
        price_set_id: str,
    ) -> list[PriceQuote]:
        """One live lookup. A failure only costs this card its live price."""
        try:
            record: PriceTrackerCard | None = await prices.fetch_card_price(card.name, price_set_id)
        except UpstreamRequestError as e:
            logger.info(
                "aggregator_live_price_skipped",
                card_name=card.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return []

        if record is None:
            return []
        return build_price_quotes(record.price_blocks())
