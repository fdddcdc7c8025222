"""
Chase Tracker — Configuration & Constants

Every rate, cap, timeout and page size lives here. No hardcoded values in
business logic.

Usage:
    from chase_tracker.config import settings
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Currency(str, Enum):
    """Currencies quoted by the upstream marketplaces, plus the display currency."""
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"


class PriceSource(str, Enum):
    """Where a price quote came from. Values match the raw payload keys."""
    TCGPLAYER = "tcgplayer"     # primary marketplace (USD)
    EBAY = "ebay"               # secondary marketplace, graded sales (USD)
    CARDMARKET = "cardmarket"   # regional marketplace (EUR)
    FALLBACK = "fallback"       # curated static table (already GBP)


class ChaseStrategy(str, Enum):
    """Which upstream sources the aggregator drives."""
    PRICE_ONLY = "price_only"   # price tracker only, set page of 50
    HYBRID = "hybrid"           # pokemontcg.io catalog + capped price lookups


# Native currency of each live marketplace payload.
SOURCE_CURRENCY: dict[PriceSource, Currency] = {
    PriceSource.TCGPLAYER: Currency.USD,
    PriceSource.EBAY: Currency.USD,
    PriceSource.CARDMARKET: Currency.EUR,
    PriceSource.FALLBACK: Currency.GBP,
}


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """
    Central configuration for Chase Tracker.

    Loads from environment variables with fallback defaults.
    """

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # -----------------------------------------------------------------------
    # API Keys
    # An empty price tracker key is not an error: it switches to fallback data.
    # -----------------------------------------------------------------------
    POKEMON_PRICE_TRACKER_API_KEY: str = ""
    POKEMONTCG_API_KEY: str = ""

    # -----------------------------------------------------------------------
    # Upstream endpoints
    # -----------------------------------------------------------------------
    PRICE_TRACKER_BASE_URL: str = "https://www.pokemonpricetracker.com/api"
    POKEMONTCG_BASE_URL: str = "https://api.pokemontcg.io/v2"

    # Single attempt per call, no retries
    PRICE_REQUEST_TIMEOUT_SECONDS: float = 5.0
    CATALOG_REQUEST_TIMEOUT_SECONDS: float = 10.0

    PRICE_TRACKER_PAGE_SIZE: int = 50
    CATALOG_PAGE_SIZE: int = 100

    # -----------------------------------------------------------------------
    # Aggregation
    # -----------------------------------------------------------------------
    CHASE_STRATEGY: ChaseStrategy = ChaseStrategy.PRICE_ONLY
    DEFAULT_CHASE_LIMIT: int = 10
    LIVE_PRICE_CALL_CAP: int = 20        # hard per-request ceiling (hybrid)

    # -----------------------------------------------------------------------
    # Currency: fixed static rates into the display currency
    # -----------------------------------------------------------------------
    DISPLAY_CURRENCY: Currency = Currency.GBP
    USD_TO_GBP_RATE: Decimal = Decimal("0.79")
    EUR_TO_GBP_RATE: Decimal = Decimal("0.85")

    # -----------------------------------------------------------------------
    # Logging
    # -----------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"

    @field_validator("POKEMON_PRICE_TRACKER_API_KEY", "POKEMONTCG_API_KEY", mode="before")
    @classmethod
    def strip_api_key(cls, v: Any) -> Any:
        """Whitespace-only keys count as missing."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def default_log_level(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return "INFO"
        return v


# Singleton instance
settings = Settings()
