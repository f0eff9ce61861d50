"""Local database loader.

Publishes the newest pre-staged archive from a directory. Archive names are
expected to embed a sortable date, so the lexicographically greatest name is
the most recent one.
"""

from pathlib import Path
import re

from mmdb_refresh.config import Settings
from mmdb_refresh.helpers.archive import extract_database
from mmdb_refresh.helpers.background_task import run_in_threadpool
from mmdb_refresh.log import fetcher_logger
from mmdb_refresh.models.refresh import RefreshOutcome
from mmdb_refresh.storage import DatabaseStore

import aiofiles

ARCHIVE_PATTERN = re.compile(r".+\.(tar\.gz|tgz)$")
LOCAL_PREFIX = "local"

logger = fetcher_logger("LocalLoader")


def select_latest_archive(directory: Path) -> Path | None:
    """Return the archive with the greatest file name in ``directory``.

    Raises:
        OSError: If the directory cannot be listed.
    """
    names = [entry.name for entry in directory.iterdir() if entry.is_file() and ARCHIVE_PATTERN.match(entry.name)]
    if not names:
        return None
    return directory / max(names)


class LocalLoader:
    """Loads the database from a directory of ``*.tar.gz`` archives."""

    def __init__(self, store: DatabaseStore):
        self.store = store

    async def load(self, settings: Settings) -> RefreshOutcome:
        """Publish the newest archive in ``settings.local_path``.

        Local updates never carry a revalidation token.

        Raises:
            OSError: If the directory or archive cannot be read.
            ArchiveEntryNotFoundError: If the archive holds no database.
        """
        if not settings.local_path:
            logger.warning("Config option [maxmind.db.local.path] not specified")
            return RefreshOutcome.SKIPPED

        directory = Path(settings.local_path).expanduser()
        archive = await run_in_threadpool(select_latest_archive, directory)
        if archive is None:
            logger.warning(f"No archive found in {directory}")
            return RefreshOutcome.SKIPPED

        async with aiofiles.open(archive, "rb") as archive_file:
            data = await archive_file.read()
        payload = await run_in_threadpool(extract_database, data)
        await self.store.swap(payload, LOCAL_PREFIX)
        logger.info(f"Successfully update MaxMind DB from {archive}")
        return RefreshOutcome.UPDATED
