"""
Chase Tracker — pokemontcg.io API Client

Fetches card catalog metadata (name, number, rarity, set, images) from the
pokemontcg.io v2 API. No prices are read from here; in hybrid mode this is
the catalog and the price tracker supplies prices.

Base URL: https://api.pokemontcg.io/v2/
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator

from chase_tracker.config import settings
from chase_tracker.errors import MalformedResponseError, UpstreamRequestError
from chase_tracker.models.card import Card

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Pydantic Response Models
# ---------------------------------------------------------------------------


class SetInfo(BaseModel):
    """Set metadata from pokemontcg.io."""
    id: str = Field(..., description="Set code (e.g., 'sv1')")
    name: str = Field(default="", description="Set name (e.g., 'Scarlet & Violet')")


class CardData(BaseModel):
    """Card metadata from pokemontcg.io. ID format: "{set_code}-{card_number}"."""
    id: str
    name: str
    number: str = ""
    rarity: str = ""
    set: SetInfo
    images: dict[str, str] | None = None

    @field_validator("rarity", mode="before")
    @classmethod
    def missing_rarity(cls, v: Any) -> str:
        # Promos and energies have no rarity
        return v or ""

    @property
    def image_url(self) -> str | None:
        """Get the best available image URL."""
        if self.images:
            return self.images.get("large") or self.images.get("small")
        return None

    def to_card(self) -> Card:
        return Card(
            id=self.id,
            number=self.number,
            name=self.name,
            rarity=self.rarity,
            set_id=self.set.id,
            set_name=self.set.name,
            image_url=self.image_url,
        )


class CardListResponse(BaseModel):
    """Paginated response from pokemontcg.io cards endpoint."""
    data: list[CardData] = Field(default_factory=list)
    page: int = Field(default=1)
    pageSize: int = Field(default=250)
    count: int = Field(default=0)
    totalCount: int = Field(default=0)


# ---------------------------------------------------------------------------
# API Client
# ---------------------------------------------------------------------------


class PokemonTCGClient:
    """
    Async client for the pokemontcg.io v2 API.

    Usage:
        async with PokemonTCGClient() as client:
            cards = await client.fetch_set_cards("sv8pt5")
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        self._api_key = api_key if api_key is not None else settings.POKEMONTCG_API_KEY
        self._base_url = base_url or settings.POKEMONTCG_BASE_URL
        self._timeout = timeout or settings.CATALOG_REQUEST_TIMEOUT_SECONDS
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> PokemonTCGClient:
        headers: dict[str, str] = {}
        if self._api_key:
            headers["X-Api-Key"] = self._api_key
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=self._timeout,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()

    async def _request(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Single GET attempt. Any failure becomes an UpstreamRequestError."""
        assert self._client is not None, "Client not initialized. Use 'async with'."

        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "pokemontcg_http_error",
                status_code=e.response.status_code,
                path=path,
            )
            raise UpstreamRequestError(
                f"pokemontcg.io request failed: {e.response.status_code}",
                details={"path": path, "status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            logger.error(
                "pokemontcg_request_error",
                error=str(e),
                error_type=type(e).__name__,
                path=path,
            )
            raise UpstreamRequestError(
                f"pokemontcg.io request failed: {type(e).__name__}",
                details={"path": path},
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                "pokemontcg.io body is not valid JSON",
                details={"path": path},
            ) from e

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    async def fetch_set_cards(self, set_code: str, page_size: int | None = None) -> list[Card]:
        """
        Fetch the first page of cards in a set, ordered by collector number.

        Args:
            set_code: pokemontcg.io set code (e.g., "sv8pt5").
            page_size: Cards to request (default from config: 100).

        Returns:
            Catalog cards. Prices are not included.
        """
        size = page_size or settings.CATALOG_PAGE_SIZE
        logger.info("pokemontcg_fetch_set", set_code=set_code, page_size=size)

        data = await self._request(
            "/cards",
            params={
                "q": f"set.id:{set_code}",
                "pageSize": size,
                "orderBy": "number",
            },
        )

        try:
            response = CardListResponse.model_validate(data)
        except ValidationError as e:
            logger.error("pokemontcg_unexpected_format", set_code=set_code, error=str(e))
            raise MalformedResponseError(
                "Unexpected pokemontcg.io response format",
                details={"set_code": set_code},
            ) from e

        logger.info(
            "pokemontcg_fetch_set_complete",
            set_code=set_code,
            total_cards=len(response.data),
            total_in_set=response.totalCount,
        )
        return [card.to_card() for card in response.data]
