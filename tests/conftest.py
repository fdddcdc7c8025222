"""
Chase Tracker — Shared pytest Fixtures & Configuration

Provides common fixtures for all test modules:
- Settings overrides (API keys on/off)
- Raw price tracker and pokemontcg.io payload builders
- Async test support via pytest-asyncio
"""

from __future__ import annotations

from typing import Any

import pytest

from chase_tracker.config import ChaseStrategy, settings


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

pytest_plugins = ("pytest_asyncio",)

PRICE_TRACKER_URL = "https://www.pokemonpricetracker.com/api"
POKEMONTCG_URL = "https://api.pokemontcg.io/v2"


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin endpoints and defaults so a local .env cannot leak into tests."""
    monkeypatch.setattr(settings, "PRICE_TRACKER_BASE_URL", PRICE_TRACKER_URL)
    monkeypatch.setattr(settings, "POKEMONTCG_BASE_URL", POKEMONTCG_URL)
    monkeypatch.setattr(settings, "POKEMON_PRICE_TRACKER_API_KEY", "")
    monkeypatch.setattr(settings, "POKEMONTCG_API_KEY", "")
    monkeypatch.setattr(settings, "CHASE_STRATEGY", ChaseStrategy.PRICE_ONLY)
    monkeypatch.setattr(settings, "LIVE_PRICE_CALL_CAP", 20)
    monkeypatch.setattr(settings, "DEFAULT_CHASE_LIMIT", 10)


@pytest.fixture
def price_key(monkeypatch: pytest.MonkeyPatch) -> str:
    """Configure a price tracker API key."""
    monkeypatch.setattr(settings, "POKEMON_PRICE_TRACKER_API_KEY", "test-key")
    return "test-key"


# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------


def tracker_record(
    name: str,
    rarity: str,
    number: str = "1",
    set_id: str = "sv1",
    tcgplayer: dict[str, Any] | None = None,
    ebay: dict[str, Any] | None = None,
    cardmarket: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """One raw card record as the price tracker returns it."""
    record: dict[str, Any] = {
        "id": f"{set_id}-{number}",
        "name": name,
        "number": number,
        "rarity": rarity,
        "set": {"id": set_id, "name": "Scarlet & Violet"},
        "images": {
            "small": f"https://images.pokemontcg.io/{set_id}/{number}.png",
            "large": f"https://images.pokemontcg.io/{set_id}/{number}_hires.png",
        },
    }
    if tcgplayer is not None:
        record["tcgplayer"] = tcgplayer
    if ebay is not None:
        record["ebay"] = ebay
    if cardmarket is not None:
        record["cardmarket"] = cardmarket
    return record


def tcgplayer_market(usd: float | str) -> dict[str, Any]:
    """A TCGPlayer block with only a direct market price."""
    return {"market": usd}


def catalog_card(name: str, rarity: str, number: str, set_id: str = "sv1") -> dict[str, Any]:
    """One pokemontcg.io card record."""
    return {
        "id": f"{set_id}-{number}",
        "name": name,
        "number": number,
        "rarity": rarity,
        "set": {"id": set_id, "name": "Scarlet & Violet"},
        "images": {
            "small": f"https://images.pokemontcg.io/{set_id}/{number}.png",
            "large": f"https://images.pokemontcg.io/{set_id}/{number}_hires.png",
        },
    }


def catalog_page(cards: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "data": cards,
        "page": 1,
        "pageSize": 100,
        "count": len(cards),
        "totalCount": len(cards),
    }


@pytest.fixture
def sv1_price_page() -> list[dict[str, Any]]:
    """
    A small sv1 page in fetch order: one non-chase card, chase cards priced
    through different payload shapes, and one chase card with no price.
    """
    return [
        tracker_record("Pawmi", "Common", "74", tcgplayer=tcgplayer_market(0.25)),
        tracker_record(
            "Gardevoir ex",
            "Double Rare",
            "86",
            tcgplayer={"prices": {"holofoil": {"market": 12.0, "low": 9.0, "high": 15.0}}},
        ),
        tracker_record(
            "Charizard ex Special Art Rare",
            "Special Illustration Rare",
            "199",
            tcgplayer={"prices": {"holofoil": {"market": 100}}},
        ),
        tracker_record(
            "Miraidon ex",
            "Ultra Rare",
            "244",
            cardmarket={"prices": {"normal": {"market": 40}}},
        ),
        tracker_record("Nemona", "Illustration Rare", "238", tcgplayer={"market": 0}),
        tracker_record(
            "Koraidon ex",
            "Hyper Rare",
            "254",
            ebay={"prices": {"10": {"market": 200}, "9": {"market": 80}}},
        ),
    ]
