"""GeoIP database refresh lifecycle.

Starts the local and remote refresh triggers on startup and removes the
published database file on shutdown.
"""

from mmdb_refresh.config import get_settings
from mmdb_refresh.dependencies.geoip import get_store, get_update_scheduler
from mmdb_refresh.dependencies.scheduler import start_scheduler, stop_scheduler
from mmdb_refresh.helpers.background_task import bg_tasks
from mmdb_refresh.log import logger, setup_logging


async def start_geoip_updater() -> None:
    """Start the scheduler and fire the initial local and remote updates.

    Failures of the initial runs are logged by the routines themselves and do
    not block startup.
    """
    setup_logging(get_settings().log_level)
    start_scheduler()
    get_update_scheduler().start()
    logger.info("GeoIP database updater started")


async def stop_geoip_updater() -> None:
    """Stop the triggers and delete the published database file.

    Armed timers are abandoned rather than awaited.
    """
    get_update_scheduler().stop()
    bg_tasks.stop()
    stop_scheduler()
    await get_store().teardown()
    logger.info("GeoIP database updater stopped")
