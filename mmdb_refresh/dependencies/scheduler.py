from datetime import UTC
from functools import lru_cache

from apscheduler.schedulers.asyncio import AsyncIOScheduler


@lru_cache
def get_scheduler() -> AsyncIOScheduler:
    """
    Get the process-wide APScheduler instance
    """
    return AsyncIOScheduler(timezone=UTC)


def start_scheduler() -> None:
    scheduler = get_scheduler()
    if not scheduler.running:
        scheduler.start()


def stop_scheduler() -> None:
    scheduler = get_scheduler()
    if scheduler.running:
        # Pending re-arm jobs are abandoned, not awaited.
        scheduler.shutdown(wait=False)
