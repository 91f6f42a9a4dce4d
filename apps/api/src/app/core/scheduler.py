"""
Background Job Scheduler

Scheduled task execution using APScheduler's AsyncIOScheduler.

Jobs are registered during startup (before the scheduler starts) and are
added to the scheduler when it starts. Every registered job can also be
triggered manually through the debug endpoints.

Usage:
    register_job("my_job", my_coroutine_function, IntervalTrigger(hours=1))
    await start_scheduler()
    ...
    await stop_scheduler()
"""

import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.base import BaseTrigger

logger = logging.getLogger(__name__)

JobFunc = Callable[[], Coroutine[Any, Any, Any]]

_scheduler: AsyncIOScheduler | None = None


@dataclass
class _RegisteredJob:
    func: JobFunc
    trigger: BaseTrigger


_job_registry: dict[str, _RegisteredJob] = {}


class SchedulerConfig:
    """Configuration for the background scheduler."""

    TIMEZONE = "UTC"

    JOB_DEFAULTS = {
        "coalesce": True,  # Collapse missed runs into one
        "max_instances": 1,
        "misfire_grace_time": 60 * 5,
    }


def _job_listener(event: JobExecutionEvent) -> None:
    """Log the outcome of each scheduled run."""
    if event.exception:
        logger.error(
            f"Job {event.job_id} failed with exception: {event.exception}",
            exc_info=event.exception,
        )
    else:
        logger.info(f"Job {event.job_id} executed successfully")


def get_scheduler() -> AsyncIOScheduler | None:
    """Return the running scheduler, or None if not started."""
    return _scheduler


def register_job(job_id: str, func: JobFunc, trigger: BaseTrigger) -> None:
    """
    Register a job.

    If the scheduler is already running the job is scheduled immediately,
    otherwise it is scheduled when start_scheduler() runs.
    """
    _job_registry[job_id] = _RegisteredJob(func=func, trigger=trigger)

    if _scheduler is not None:
        _scheduler.add_job(func, trigger=trigger, id=job_id, replace_existing=True)

    logger.info(f"Registered job: {job_id}")


async def start_scheduler() -> AsyncIOScheduler:
    """Create the scheduler, add every registered job and start it."""
    global _scheduler

    if _scheduler is not None and _scheduler.running:
        logger.warning("Scheduler already running, returning existing instance")
        return _scheduler

    _scheduler = AsyncIOScheduler(
        timezone=SchedulerConfig.TIMEZONE,
        job_defaults=SchedulerConfig.JOB_DEFAULTS,
    )
    _scheduler.add_listener(_job_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)

    for job_id, job in _job_registry.items():
        _scheduler.add_job(job.func, trigger=job.trigger, id=job_id, replace_existing=True)

    _scheduler.start()
    logger.info(f"Background scheduler started with {len(_job_registry)} jobs")
    return _scheduler


async def stop_scheduler() -> None:
    """Shut the scheduler down, waiting for running jobs."""
    global _scheduler

    if _scheduler is None or not _scheduler.running:
        logger.debug("Scheduler not running, nothing to stop")
        return

    _scheduler.shutdown(wait=True)
    _scheduler = None
    logger.info("Background scheduler stopped")


async def trigger_job_manually(job_id: str) -> dict[str, Any]:
    """
    Run a registered job now, outside its schedule.

    Returns:
        Dict with job_id, status ("success" or "error"), executed_at,
        and either the job's result or the error message

    Raises:
        ValueError: If job_id is not registered
    """
    if job_id not in _job_registry:
        raise ValueError(f"Job {job_id} not found. Available jobs: {list(_job_registry)}")

    executed_at = datetime.now(UTC).isoformat()
    logger.info(f"Manually triggering job: {job_id}")

    try:
        result = await _job_registry[job_id].func()
    except Exception as e:
        logger.error(f"Manual execution of job {job_id} failed: {e}", exc_info=True)
        return {"job_id": job_id, "status": "error", "executed_at": executed_at, "error": str(e)}

    return {"job_id": job_id, "status": "success", "executed_at": executed_at, "result": result}


def list_registered_jobs() -> list[dict[str, Any]]:
    """List registered jobs with their next run time and pause state."""
    jobs = []

    for job_id in _job_registry:
        info: dict[str, Any] = {"job_id": job_id, "next_run_time": None, "is_paused": True}
        scheduled = _scheduler.get_job(job_id) if _scheduler is not None else None
        if scheduled and scheduled.next_run_time:
            info["next_run_time"] = scheduled.next_run_time.isoformat()
            info["is_paused"] = False
        jobs.append(info)

    return jobs


def pause_job(job_id: str) -> bool:
    """Pause a scheduled job. Returns False if it is not scheduled."""
    if _scheduler is None or _scheduler.get_job(job_id) is None:
        logger.warning(f"Cannot pause job {job_id}: not scheduled")
        return False

    _scheduler.pause_job(job_id)
    logger.info(f"Paused job: {job_id}")
    return True


def resume_job(job_id: str) -> bool:
    """Resume a paused job. Returns False if it is not scheduled."""
    if _scheduler is None or _scheduler.get_job(job_id) is None:
        logger.warning(f"Cannot resume job {job_id}: not scheduled")
        return False

    _scheduler.resume_job(job_id)
    logger.info(f"Resumed job: {job_id}")
    return True
