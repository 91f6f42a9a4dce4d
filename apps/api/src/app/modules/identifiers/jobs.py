"""
Identifier Background Jobs

Daily pruning of sequence counters. Counters are only read on the day they
belong to, so rows older than the retention window are dead weight.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import settings
from app.core.database import async_session_maker
from app.core.scheduler import register_job
from app.modules.identifiers import repository
from app.modules.identifiers.allocator import date_stamp

logger = logging.getLogger(__name__)

JOB_ID_PRUNE_COUNTERS = "identifiers_prune_sequence_counters"


async def prune_sequence_counters() -> dict[str, Any]:
    """
    Delete counters older than settings.sequence_counter_retention_days.

    Returns:
        Dict with the cutoff date stamp and number of rows deleted
    """
    cutoff = date_stamp(
        datetime.now(UTC) - timedelta(days=settings.sequence_counter_retention_days)
    )
    logger.info(f"Pruning sequence counters older than {cutoff}")

    async with async_session_maker() as db:
        deleted = await repository.delete_counters_before(db, cutoff)

    logger.info(f"Pruned {deleted} sequence counters")
    return {"cutoff": cutoff, "deleted": deleted}


def register_identifier_jobs() -> None:
    """Register identifier jobs with the scheduler (call before it starts)."""
    register_job(
        job_id=JOB_ID_PRUNE_COUNTERS,
        func=prune_sequence_counters,
        trigger=IntervalTrigger(days=1),
    )
