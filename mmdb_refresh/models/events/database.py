from ._base import UpdaterEvent


class DatabaseUpdatedEvent(UpdaterEvent):
    """Event fired after a new database file has been published.

    The lookup service reopens its reader at ``path``. The previous file may
    already be deleted when this event is handled.
    """

    path: str
    last_modified: str | None = None
