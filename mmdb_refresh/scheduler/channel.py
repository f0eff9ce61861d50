"""Single-consumer trigger channel.

Each trigger kind owns one channel. Messages are handled strictly one after
another by a single consumer task, so a routine never overlaps itself while
routines of different kinds may run concurrently.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from mmdb_refresh.helpers.background_task import BackgroundTasks, bg_tasks
from mmdb_refresh.log import task_logger


class TriggerChannel:
    """Queue of trigger signals drained by one consumer.

    Attributes:
        name: Trigger kind, used in log records.
    """

    def __init__(self, name: str, handler: Callable[[], Awaitable[object]]):
        self.name = name
        self._handler = handler
        self._queue: asyncio.Queue[None] = asyncio.Queue()
        self._consumer: asyncio.Task | None = None
        self._logger = task_logger(f"Trigger:{name}")

    @property
    def running(self) -> bool:
        return self._consumer is not None and not self._consumer.done()

    def post(self) -> None:
        """Signal the channel. Must be called from the event loop thread."""
        self._queue.put_nowait(None)

    def start(self, tasks: BackgroundTasks = bg_tasks) -> None:
        if self.running:
            return
        self._consumer = tasks.add_task(self._consume)

    def stop(self) -> None:
        if self._consumer is not None:
            self._consumer.cancel()
            self._consumer = None

    async def _consume(self) -> None:
        while True:
            await self._queue.get()
            try:
                await self._handler()
            except Exception:
                self._logger.exception(f"Unhandled error in {self.name} trigger")
            finally:
                self._queue.task_done()

    async def join(self) -> None:
        """Wait until every posted signal has been handled."""
        await self._queue.join()
