"""Erasmus Journey — Scheduler Jobs.

APScheduler interval jobs:
- stale sweep: enqueue background refreshes for stale published destinations
- generation: fold pending submissions into their destinations

Plus the handler the refresh queue worker runs for each destination.
"""

from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from erasmus_journey.config import settings
from erasmus_journey.database import session_scope
from erasmus_journey.scheduler.refresh_queue import RefreshQueue
from erasmus_journey.services.destination_service import build_destination_service
from erasmus_journey.core.logging import get_logger

logger = get_logger("scheduler")

scheduler = AsyncIOScheduler()


async def refresh_destination_job(destination_id: str) -> None:
    """Recompute one destination in its own session."""
    with session_scope() as session:
        await build_destination_service(session).refresh(destination_id)


async def stale_sweep_job(refresh_queue: RefreshQueue) -> None:
    try:
        with session_scope() as session:
            queued = build_destination_service(session, refresh_queue).schedule_stale_refreshes()
        logger.info(f"Stale sweep queued {queued} refreshes", extra={"job": "stale_sweep"})
    except Exception as e:
        logger.error(f"Stale sweep failed: {e}", extra={"job": "stale_sweep"})


async def generation_job() -> None:
    try:
        with session_scope() as session:
            built = build_destination_service(session).generate_all()
        logger.info(f"Generation run updated {len(built)} destinations", extra={"job": "generation"})
    except Exception as e:
        logger.error(f"Generation run failed: {e}", extra={"job": "generation"})


def start_scheduler(refresh_queue: Optional[RefreshQueue] = None):
    """Configure and start the scheduler."""
    if not settings.scheduler_enabled:
        logger.info("Scheduler disabled via config")
        return

    if refresh_queue is not None:
        scheduler.add_job(
            stale_sweep_job,
            "interval",
            minutes=settings.stale_sweep_minutes,
            args=[refresh_queue],
            id="stale_sweep",
            replace_existing=True,
            misfire_grace_time=600,
        )
    scheduler.add_job(
        generation_job,
        "interval",
        minutes=settings.generation_interval_minutes,
        id="generation",
        replace_existing=True,
        misfire_grace_time=600,
    )
    scheduler.start()
    logger.info(
        f"Scheduler started. Stale sweep every {settings.stale_sweep_minutes}m, "
        f"generation every {settings.generation_interval_minutes}m"
    )


def stop_scheduler():
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
