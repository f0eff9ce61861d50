"""Published database file store.

Holds the path of the database file currently exposed to consumers and the
revalidation token it was downloaded with. New payloads are written to a fresh
temporary file which then replaces the current one; the replaced file is
deleted afterwards. All mutations go through one lock, because the local and
remote routines may finish at the same time.

Classes:
    StoreState: Immutable snapshot of the published file and its token.
    DatabaseStore: Swap-and-cleanup owner of the StoreState.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import os
from pathlib import Path
import tempfile

from mmdb_refresh.helpers.background_task import run_in_threadpool
from mmdb_refresh.log import system_logger
from mmdb_refresh.models.events import DatabaseUpdatedEvent
from mmdb_refresh.plugins import EventHub, event_hub

import aiofiles

# Existing deployments expect this exact suffix.
FILE_SUFFIX = ".mmmd"

logger = system_logger("DatabaseStore")


@dataclass(frozen=True)
class StoreState:
    current_path: str | None = None
    last_modified: str | None = None


def _delete_if_exists(path: str) -> bool:
    target = Path(path)
    if target.exists():
        target.unlink(missing_ok=True)
        return True
    return False


def _create_temp_file(prefix: str, dest_dir: Path | None) -> str:
    if dest_dir is not None:
        dest_dir.mkdir(parents=True, exist_ok=True)
    fd, path = tempfile.mkstemp(prefix=f"{prefix}_", suffix=FILE_SUFFIX, dir=dest_dir)
    os.close(fd)
    return path


class DatabaseStore:
    """Owner of the currently published database file.

    Attributes:
        dest_dir: Directory for new files. None means the system temp dir.
    """

    def __init__(self, dest_dir: str | Path | None = None, hub: EventHub | None = None):
        self.dest_dir = Path(dest_dir).expanduser() if dest_dir else None
        self._hub = hub or event_hub
        self._state = StoreState()
        self._lock = asyncio.Lock()

    @property
    def state(self) -> StoreState:
        return self._state

    async def swap(self, payload: bytes, prefix: str, tag: str | None = None) -> str:
        """Write ``payload`` to a new file and publish it as the current database.

        The new path and ``tag`` replace the previous state together, the
        update event is emitted, and only then is the previous file deleted.

        Args:
            payload: Database bytes.
            prefix: File name prefix, e.g. ``"local"`` or a timestamp.
            tag: Revalidation token to store alongside, or None.

        Returns:
            The path of the new file.
        """
        async with self._lock:
            path = await self._create_file(prefix)
            try:
                async with aiofiles.open(path, "wb") as db_file:
                    await db_file.write(payload)
            except BaseException:
                await self.delete(path)
                raise

            logger.info(f"Local file: [{path}], lastModified: [{tag}]")
            old_path = self._state.current_path
            self._state = StoreState(current_path=path, last_modified=tag)
            self._hub.emit(DatabaseUpdatedEvent(path=path, last_modified=tag))

            if old_path != path:
                await self.delete(old_path)
            return path

    async def _create_file(self, prefix: str) -> str:
        creating = asyncio.ensure_future(run_in_threadpool(_create_temp_file, prefix, self.dest_dir))
        try:
            return await asyncio.shield(creating)
        except asyncio.CancelledError:
            # The worker thread still creates the file; remove it before giving up.
            await asyncio.wait([creating])
            if not creating.cancelled() and creating.exception() is None:
                await self.delete(creating.result())
            raise

    async def teardown(self) -> None:
        """Delete the published file, if any. Called once at shutdown."""
        async with self._lock:
            path = self._state.current_path
            self._state = StoreState()
            await self.delete(path)

    @staticmethod
    async def delete(path: str | None) -> None:
        """Delete ``path`` if it exists. Missing or empty paths are ignored."""
        if not path:
            return
        if await run_in_threadpool(_delete_if_exists, path):
            logger.debug(f"Deleted {path}")
