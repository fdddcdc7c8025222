"""
Chase Tracker — Command Line Entrypoint

Configures structlog and prints the ranked chase cards for one set as JSON.

Run via:
    python -m chase_tracker.main sv1
    python -m chase_tracker.main sv-prismatic --limit 5 --strategy hybrid
    python -m chase_tracker.main --list-sets
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

import structlog

from chase_tracker.config import ChaseStrategy, settings
from chase_tracker.models.card import ChaseCardsResult
from chase_tracker.pipeline.loader import load_chase_cards
from chase_tracker.utils.sets import list_supported_sets


# ---------------------------------------------------------------------------
# Structlog Configuration
# ---------------------------------------------------------------------------


def _configure_logging(log_level: str = "INFO") -> None:
    """
    Set up structured logging with JSON output on stderr.

    stdout is reserved for the command's JSON result.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def render_result(result: ChaseCardsResult) -> str:
    """Flatten a result into the JSON the page consumes."""
    payload = {
        "set_id": result.set_id,
        "is_fallback": result.is_fallback,
        "notice": result.notice,
        "cards": [
            {
                "rank": ranked.rank,
                "id": ranked.card.id,
                "name": ranked.card.name,
                "number": ranked.card.number,
                "rarity": ranked.card.rarity,
                "set_name": ranked.card.set_name,
                "image_url": ranked.card.image_url,
                "price": str(ranked.effective_price),
                "currency": settings.DISPLAY_CURRENCY.value,
                "has_live_pricing": ranked.has_live_pricing,
                "prices": {
                    q.source.value: {"market": str(q.market), "low": str(q.low), "high": str(q.high)}
                    for q in ranked.quotes
                },
            }
            for ranked in result.cards
        ],
    }
    return json.dumps(payload, indent=2)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Show the top chase cards for a Pokemon TCG set.",
    )
    parser.add_argument("set_id", nargs="?", help="Set id from --list-sets (e.g. sv1).")
    parser.add_argument(
        "--limit",
        type=int,
        default=settings.DEFAULT_CHASE_LIMIT,
        help=f"Number of cards to show (default: {settings.DEFAULT_CHASE_LIMIT}).",
    )
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in ChaseStrategy],
        default=settings.CHASE_STRATEGY.value,
        help="price_only | hybrid (default from CHASE_STRATEGY).",
    )
    parser.add_argument("--list-sets", action="store_true", help="Print supported sets and exit.")

    args = parser.parse_args(argv)
    if not args.list_sets and not args.set_id:
        parser.error("set_id is required unless --list-sets is given")
    if args.limit <= 0:
        parser.error("--limit must be positive")
    return args


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    _configure_logging(log_level=settings.LOG_LEVEL)
    logger = structlog.get_logger(__name__)

    if args.list_sets:
        print(json.dumps([s._asdict() for s in list_supported_sets()], indent=2))
        return 0

    if not settings.POKEMON_PRICE_TRACKER_API_KEY:
        logger.warning("config_price_tracker_api_key_missing", note="serving fallback data")

    result = await load_chase_cards(
        args.set_id,
        limit=args.limit,
        strategy=ChaseStrategy(args.strategy),
    )
    print(render_result(result))
    return 0


# ---------------------------------------------------------------------------
# CLI Entry
# ---------------------------------------------------------------------------


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
