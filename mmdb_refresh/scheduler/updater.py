"""Database refresh scheduling.

Two triggers drive the refresh routines:

- ``local`` runs once at start and is never re-armed.
- ``remote`` runs at start and re-arms itself after every completed run. A run
  that raised is retried after ``update_repeat_interval``; any other run,
  including one where the server answered with an unexpected status, waits
  ``update_interval``.

Re-arming registers a one-shot APScheduler job only after the previous run,
persistence included, has finished.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta

from mmdb_refresh.config import Settings, get_settings
from mmdb_refresh.fetcher import LocalLoader, RemoteFetcher
from mmdb_refresh.helpers.background_task import BackgroundTasks, bg_tasks
from mmdb_refresh.helpers.time import utcnow
from mmdb_refresh.log import task_logger
from mmdb_refresh.models.refresh import RefreshOutcome

from .channel import TriggerChannel

from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.date import DateTrigger

REMOTE_JOB_ID = "geoip_remote_update"

logger = task_logger("GeoIPUpdate")


class DatabaseUpdateScheduler:
    """Owns the local and remote triggers and the remote re-arm policy.

    Attributes:
        local_loader: Routine run by the local trigger.
        remote_fetcher: Routine run by the remote trigger.
    """

    def __init__(
        self,
        local_loader: LocalLoader,
        remote_fetcher: RemoteFetcher,
        scheduler: BaseScheduler,
        settings_provider: Callable[[], Settings] = get_settings,
    ):
        self.local_loader = local_loader
        self.remote_fetcher = remote_fetcher
        self._scheduler = scheduler
        self._settings = settings_provider
        self._local = TriggerChannel("local", self.run_local)
        self._remote = TriggerChannel("remote", self.run_remote)

    def start(self, tasks: BackgroundTasks = bg_tasks) -> None:
        """Start both consumers and fire each trigger once."""
        self._local.start(tasks)
        self._remote.start(tasks)
        self.trigger_local()
        self.trigger_remote()

    def stop(self) -> None:
        self._local.stop()
        self._remote.stop()

    def trigger_local(self) -> None:
        self._local.post()

    def trigger_remote(self) -> None:
        self._remote.post()

    async def _fire_remote(self) -> None:
        # Coroutine job: APScheduler's asyncio executor runs it on the loop thread.
        self.trigger_remote()

    async def join(self) -> None:
        """Wait until all posted triggers have been handled."""
        await self._local.join()
        await self._remote.join()

    async def run_local(self) -> RefreshOutcome | None:
        """Run the local routine once. Failures are logged, never raised."""
        settings = self._settings()
        try:
            return await self.local_loader.load(settings)
        except Exception:
            logger.exception(f"Can't update MaxMind DB from {settings.local_path}")
            return None

    async def run_remote(self) -> timedelta | None:
        """Run the remote routine once and re-arm the remote trigger.

        Returns:
            The delay the trigger was re-armed with, or None when the remote
            source is not configured and nothing was scheduled.
        """
        settings = self._settings()
        try:
            outcome = await self.remote_fetcher.fetch(settings)
        except Exception as e:
            logger.opt(exception=e).warning("Can't update MaxMind DB")
            delay = settings.update_repeat_interval
        else:
            if outcome is RefreshOutcome.SKIPPED:
                return None
            # UNEXPECTED_STATUS is not a failure here: it gets the long interval.
            delay = settings.update_interval

        self.schedule_remote(delay)
        return delay

    def schedule_remote(self, delay: timedelta) -> None:
        """Fire the remote trigger once after ``delay``, replacing any pending re-arm."""
        run_date = utcnow() + delay
        self._scheduler.add_job(
            self._fire_remote,
            trigger=DateTrigger(run_date=run_date),
            id=REMOTE_JOB_ID,
            name="MaxMind DB remote update",
            replace_existing=True,
            misfire_grace_time=None,
        )
        logger.info(f"Next remote update at {run_date.isoformat()} (in {delay})")
