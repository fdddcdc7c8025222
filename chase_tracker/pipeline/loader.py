"""
Chase Tracker — Chase Card Loader

The one entry point the page uses: run the aggregator and, when it fails
for any reason, serve the curated fallback list with a notice instead of
an error. Never raises for credential, set or upstream failures.
"""

from __future__ import annotations

import structlog

from chase_tracker.config import ChaseStrategy, settings
from chase_tracker.data.fallback import get_fallback
from chase_tracker.errors import ChaseTrackerError, MissingCredentialError, UnsupportedSetError
from chase_tracker.models.card import ChaseCardsResult
from chase_tracker.pipeline.aggregator import ChaseCardAggregator

logger = structlog.get_logger(__name__)

FALLBACK_NOTICE = "Using sample data - API unavailable"


async def load_chase_cards(
    set_id: str,
    limit: int | None = None,
    strategy: ChaseStrategy | None = None,
    aggregator: ChaseCardAggregator | None = None,
) -> ChaseCardsResult:
    """
    Ranked chase cards for a dropdown set id, or the curated fallback.

    Args:
        set_id: Dropdown set id (e.g. "sv1").
        limit: Number of cards (default from config: 10).
        strategy: Aggregator strategy when no aggregator is supplied.
        aggregator: Pre-built aggregator (tests, custom keys).
    """
    limit = limit if limit is not None else settings.DEFAULT_CHASE_LIMIT
    aggregator = aggregator or ChaseCardAggregator(strategy=strategy)

    try:
        cards = await aggregator.get_top_chase_cards(set_id, limit)
    except MissingCredentialError as e:
        logger.info("loader_fallback_no_credential", set_id=set_id, error=str(e))
    except UnsupportedSetError as e:
        logger.warning("loader_fallback_unsupported_set", set_id=set_id, error=str(e))
    except ChaseTrackerError as e:
        logger.warning(
            "loader_fallback_upstream_failure",
            set_id=set_id,
            error=str(e),
            error_type=type(e).__name__,
        )
    else:
        return ChaseCardsResult(set_id=set_id, cards=cards)

    return ChaseCardsResult(
        set_id=set_id,
        cards=get_fallback(set_id)[:limit],
        is_fallback=True,
        notice=FALLBACK_NOTICE,
    )
