from ._base import UpdaterEvent
from .database import DatabaseUpdatedEvent

__all__ = [
    "DatabaseUpdatedEvent",
    "UpdaterEvent",
]
