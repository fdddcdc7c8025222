"""
Chase Tracker — Pokemon Price Tracker API Client

Fetches per-card price payloads (TCGPlayer, eBay, Cardmarket blocks) from
pokemonpricetracker.com. Bearer-token auth; the free tier has a daily quota,
so every call is a single attempt with a short timeout and no retries.

Responses are loosely typed: a bare list of cards, or a wrapper object with
the list under ``data`` or ``cards``.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from chase_tracker.config import settings
from chase_tracker.errors import (
    MalformedResponseError,
    MissingCredentialError,
    UpstreamRequestError,
)
from chase_tracker.models.card import Card

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Pydantic Response Models
# ---------------------------------------------------------------------------


class PriceTrackerCard(BaseModel):
    """
    One card record from the price tracker.

    Only identity fields are validated. Marketplace blocks stay raw dicts;
    their shapes vary and are resolved by the price extractor.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | None = None
    record_id: str | None = Field(default=None, alias="_id")
    name: str
    number: str = ""
    rarity: str = ""
    set: dict[str, Any] | None = None
    images: dict[str, Any] | None = None
    tcgplayer: dict[str, Any] | None = None
    ebay: dict[str, Any] | None = None
    cardmarket: dict[str, Any] | None = None

    @field_validator("number", "rarity", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        """Collector numbers sometimes arrive as ints; nulls become ''."""
        if v is None:
            return ""
        return str(v)

    def to_card(self, fallback_set_id: str) -> Card:
        set_info = self.set or {}
        set_id = str(set_info.get("id") or fallback_set_id)
        images = self.images or {}
        return Card(
            id=self.id or self.record_id or f"{set_id}-{self.number}",
            number=self.number,
            name=self.name,
            rarity=self.rarity,
            set_id=set_id,
            set_name=str(set_info.get("name") or ""),
            image_url=images.get("large") or images.get("small") or None,
        )

    def price_blocks(self) -> dict[str, Any]:
        """Raw marketplace blocks keyed by PriceSource value."""
        return {"tcgplayer": self.tcgplayer, "ebay": self.ebay, "cardmarket": self.cardmarket}


def unwrap_list(data: Any) -> list[Any]:
    """
    Pull the item list out of any recognized response shape.

    Raises:
        MalformedResponseError: If the body is neither a list nor a known wrapper.
    """
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("data", "cards"):
            if isinstance(data.get(key), list):
                return data[key]
    logger.error("pricetracker_unexpected_format", body_type=type(data).__name__)
    raise MalformedResponseError(
        "Unexpected API response format",
        details={"body_type": type(data).__name__},
    )


def parse_cards(items: list[Any]) -> list[PriceTrackerCard]:
    """Validate card records, skipping any that lack the identity fields."""
    cards: list[PriceTrackerCard] = []
    for item in items:
        try:
            cards.append(PriceTrackerCard.model_validate(item))
        except ValidationError as e:
            logger.warning(
                "pricetracker_parse_error",
                error=str(e),
                card_data=str(item)[:100],
            )
    return cards


# ---------------------------------------------------------------------------
# API Client
# ---------------------------------------------------------------------------


class PriceTrackerClient:
    """
    Async client for the Pokemon Price Tracker API.

    Usage:
        async with PriceTrackerClient() as client:
            cards = await client.fetch_set_prices("sv1")
            card = await client.fetch_card_price("Charizard ex", "sv1")
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        self._api_key = api_key if api_key is not None else settings.POKEMON_PRICE_TRACKER_API_KEY
        if not self._api_key:
            raise MissingCredentialError("Pokemon Price Tracker API key not configured")
        self._base_url = base_url or settings.PRICE_TRACKER_BASE_URL
        self._timeout = timeout or settings.PRICE_REQUEST_TIMEOUT_SECONDS
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> PriceTrackerClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            timeout=self._timeout,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()

    async def _request(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Single GET attempt. Any failure becomes an UpstreamRequestError."""
        assert self._client is not None, "Client not initialized. Use 'async with'."

        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "pricetracker_http_error",
                status_code=e.response.status_code,
                path=path,
            )
            raise UpstreamRequestError(
                f"API request failed: {e.response.status_code} {e.response.reason_phrase}",
                details={"path": path, "status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            logger.error(
                "pricetracker_request_error",
                error=str(e),
                error_type=type(e).__name__,
                path=path,
            )
            raise UpstreamRequestError(
                f"API request failed: {type(e).__name__}",
                details={"path": path},
            ) from e

        try:
            return response.json()
        except ValueError as e:
            logger.error("pricetracker_invalid_json", path=path)
            raise MalformedResponseError(
                "Response body is not valid JSON",
                details={"path": path},
            ) from e

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    async def fetch_set_prices(self, set_id: str, limit: int | None = None) -> list[PriceTrackerCard]:
        """
        Fetch one page of cards with prices for a set.

        Args:
            set_id: Price tracker set id (already mapped).
            limit: Page size (default from config: 50).
        """
        page_size = limit or settings.PRICE_TRACKER_PAGE_SIZE
        logger.info("pricetracker_fetch_set", set_id=set_id, limit=page_size)

        data = await self._request("/prices", params={"setId": set_id, "limit": page_size})
        cards = parse_cards(unwrap_list(data))

        logger.info("pricetracker_fetch_set_complete", set_id=set_id, results_count=len(cards))
        return cards

    async def fetch_card_price(self, card_name: str, set_id: str) -> PriceTrackerCard | None:
        """
        Look up a single card by name within a set.

        Returns:
            The first matching record, or None if the tracker has none.
        """
        logger.debug("pricetracker_fetch_card", card_name=card_name, set_id=set_id)

        data = await self._request(
            "/prices",
            params={"name": card_name, "setId": set_id, "limit": 1},
        )
        cards = parse_cards(unwrap_list(data))

        if not cards:
            logger.info("pricetracker_no_data", card_name=card_name, set_id=set_id)
            return None
        return cards[0]

    async def fetch_sets(self) -> list[dict[str, Any]]:
        """Sets known to the price tracker, ordered by release date."""
        logger.info("pricetracker_fetch_sets")

        data = await self._request("/sets", params={"sortBy": "releaseDate"})
        sets = [s for s in unwrap_list(data) if isinstance(s, dict)]

        logger.info("pricetracker_fetch_sets_complete", results_count=len(sets))
        return sets
