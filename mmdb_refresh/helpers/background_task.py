"""Background task management utilities.

Long-lived consumers (the trigger channels) and fire-and-forget work (event
listeners) run as tasks owned by a single ``BackgroundTasks`` registry so that
shutdown can cancel them in one place.
"""

import asyncio
from collections.abc import Callable
import functools
import inspect
from typing import Any, ParamSpec, TypeVar

from mmdb_refresh.log import system_logger

logger = system_logger("BackgroundTasks")

P = ParamSpec("P")
T = TypeVar("T")


def is_async_callable(obj: Any) -> bool:
    """Check if an object is an async callable, unwrapping ``functools.partial``."""
    while isinstance(obj, functools.partial):
        obj = obj.func

    return inspect.iscoroutinefunction(obj)


async def run_in_threadpool(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Run a blocking function in the default executor.

    Used for filesystem calls that have no async counterpart (existence
    checks, unlink, directory listing).
    """
    func = functools.partial(func, *args, **kwargs)
    return await asyncio.get_running_loop().run_in_executor(None, func)


class BackgroundTasks:
    """Registry of tasks started outside any awaiting caller.

    Tasks remove themselves when done. A task that ends with an exception
    other than cancellation is logged, since nobody awaits it.
    """

    def __init__(self):
        self.tasks: set[asyncio.Task] = set()

    def add_task(self, func: Callable[P, Any], *args: P.args, **kwargs: P.kwargs) -> asyncio.Task:
        """Start ``func`` as a background task.

        Args:
            func: Sync or async callable. Sync callables run in the thread pool.
            *args: Positional arguments for the function.
            **kwargs: Keyword arguments for the function.

        Returns:
            The created task.
        """
        coro = func(*args, **kwargs) if is_async_callable(func) else run_in_threadpool(func, *args, **kwargs)
        task = asyncio.create_task(coro)
        self.tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self.tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error(f"Background task {task.get_name()} failed")

    def stop(self) -> None:
        """Cancel all running tasks and clear the registry."""
        for task in self.tasks:
            task.cancel()
        self.tasks.clear()


bg_tasks = BackgroundTasks()
