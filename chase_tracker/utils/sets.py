"""
Chase Tracker — Set Identifier Mapping

The dropdown uses its own set ids. The price tracker and pokemontcg.io
disagree on ids for the special sets (e.g. Prismatic Evolutions is
"sv-prismatic" on the price tracker but "sv8pt5" on pokemontcg.io), so each
upstream API gets its own read-only table.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, NamedTuple

import structlog

from chase_tracker.errors import UnsupportedSetError

logger = structlog.get_logger(__name__)


class UpstreamApi(str, Enum):
    """External APIs with their own set id scheme."""
    PRICE_TRACKER = "pokemonpricetracker"
    POKEMONTCG = "pokemontcg"


class SupportedSet(NamedTuple):
    """One dropdown entry."""
    id: str
    name: str


# ---------------------------------------------------------------------------
# Dropdown sets, newest era first in release order
# ---------------------------------------------------------------------------

SUPPORTED_SETS: tuple[SupportedSet, ...] = (
    SupportedSet("sv1", "Scarlet & Violet Base Set"),
    SupportedSet("sv2", "Paldea Evolved"),
    SupportedSet("sv3", "Obsidian Flames"),
    SupportedSet("sv4", "Paradox Rift"),
    SupportedSet("sv5", "Temporal Forces"),
    SupportedSet("sv6", "Twilight Masquerade"),
    SupportedSet("sv7", "Stellar Crown"),
    SupportedSet("sv8", "Surging Sparks"),
    SupportedSet("sv9", "Journey Together"),
    SupportedSet("sv10", "Destined Rivals"),
    SupportedSet("sv-prismatic", "Prismatic Evolutions"),
    SupportedSet("sv-black-bolt", "Black Bolt"),
    SupportedSet("sv-white-flare", "White Flare"),
)

SET_NAMES: Mapping[str, str] = MappingProxyType({s.id: s.name for s in SUPPORTED_SETS})


# ---------------------------------------------------------------------------
# Per-API id tables
# ---------------------------------------------------------------------------

_PRICE_TRACKER_SET_IDS: Mapping[str, str] = MappingProxyType({
    "sv1": "sv1",
    "sv2": "sv2",
    "sv3": "sv3",
    "sv4": "sv4",
    "sv5": "sv5",
    "sv6": "sv6",
    "sv7": "sv7",
    "sv8": "sv8",
    "sv9": "sv9",
    "sv10": "sv10",
    "sv-prismatic": "sv-prismatic",
    "sv-black-bolt": "sv-black-bolt",
    "sv-white-flare": "sv-white-flare",
})

_POKEMONTCG_SET_IDS: Mapping[str, str] = MappingProxyType({
    "sv1": "sv1",
    "sv2": "sv2",
    "sv3": "sv3",
    "sv4": "sv4",
    "sv5": "sv5",
    "sv6": "sv6",
    "sv7": "sv7",
    "sv8": "sv8",
    "sv9": "sv9",
    "sv10": "sv10",
    "sv-prismatic": "sv8pt5",
    # Black Bolt and White Flare share one catalog entry
    "sv-black-bolt": "sv10pt5",
    "sv-white-flare": "sv10pt5",
})

_SET_ID_TABLES: Mapping[UpstreamApi, Mapping[str, str]] = MappingProxyType({
    UpstreamApi.PRICE_TRACKER: _PRICE_TRACKER_SET_IDS,
    UpstreamApi.POKEMONTCG: _POKEMONTCG_SET_IDS,
})


def resolve_set_id(ui_set_id: str, api: UpstreamApi) -> str:
    """
    Translate a dropdown set id into ``api``'s own identifier.

    Raises:
        UnsupportedSetError: If the set has no mapping for that API.
    """
    mapped = _SET_ID_TABLES[api].get(ui_set_id)
    if mapped is None:
        logger.warning("set_id_unsupported", ui_set_id=ui_set_id, api=api.value)
        raise UnsupportedSetError(
            f"Set ID {ui_set_id} not supported",
            details={"set_id": ui_set_id, "api": api.value},
        )
    return mapped


def list_supported_sets() -> list[SupportedSet]:
    """Dropdown entries in display order."""
    return list(SUPPORTED_SETS)
