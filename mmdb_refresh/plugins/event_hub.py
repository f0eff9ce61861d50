"""In-process event hub.

Consumers outside the refresh subsystem (the lookup service) learn about new
database files through this hub. Listeners declare which events they handle
through a parameter annotation and are invoked with fast_depends, so they may
also request other dependencies.

Classes:
    EventHub: Event bus for managing event subscriptions and emissions.

Functions:
    listen: Decorator to subscribe a function to the global event hub.

Variables:
    hub: Global EventHub instance.
"""

import asyncio
from collections.abc import Awaitable, Callable
import contextlib
import functools
import inspect
from typing import Annotated, Any

from mmdb_refresh.helpers.background_task import bg_tasks
from mmdb_refresh.models.events import UpdaterEvent

from fast_depends import Depends, ValidationError, inject


class EventHub:
    """Event bus for updater events.

    Attributes:
        _listeners: List of registered event listener functions.
    """

    def __init__(self):
        self._listeners: list[Callable[..., Awaitable[Any]]] = []

    def subscribe_event(self, listener: Callable[..., Awaitable[Any]]) -> None:
        """Subscribe an async listener to the event hub."""
        self._listeners.append(listener)

    def listen(self, func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        """Decorator form of ``subscribe_event``."""
        self.subscribe_event(func)
        return func

    def emit(self, event: UpdaterEvent) -> list[asyncio.Task]:
        """Emit an event to every listener that accepts its type.

        Each listener runs in its own background task. A listener accepts an
        event when one of its parameters is annotated with the event's class
        or a base class of it.

        Args:
            event: The event to emit.

        Returns:
            The tasks dispatching the event.
        """

        async def _task(listener: Callable[..., Awaitable[Any]]) -> None:
            sig = inspect.signature(listener, eval_str=True)
            params = []
            accepted = False

            for param in sig.parameters.values():
                annotation = param.annotation
                if isinstance(annotation, type) and issubclass(annotation, UpdaterEvent):
                    if not isinstance(event, annotation):
                        return
                    params.append(param.replace(annotation=Annotated[annotation, Depends(lambda: event)]))
                    accepted = True
                else:
                    params.append(param)

            if not accepted:
                return

            @functools.wraps(listener)
            async def call(*args: Any, **kwargs: Any) -> Any:
                return await listener(*args, **kwargs)

            call.__signature__ = sig.replace(parameters=params)  # pyright: ignore[reportAttributeAccessIssue]

            with contextlib.suppress(ValidationError):
                await inject(call)()

        return [bg_tasks.add_task(_task, listener) for listener in self._listeners]


hub = EventHub()


def listen(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
    """Decorator to subscribe a function to the global event hub."""
    return hub.listen(func)
