"""Exceptions raised by the database refresh routines.

Network and filesystem failures are left as the standard ``OSError`` /
``httpx.HTTPError`` / ``tarfile.TarError`` families; only conditions with no
natural built-in counterpart get a dedicated type here.
"""


class UpdaterError(Exception):
    """Base exception for database refresh failures."""


class ArchiveEntryNotFoundError(UpdaterError):
    """The archive was read completely without finding a database member."""

    def __init__(self, suffix: str):
        self.suffix = suffix
        super().__init__(f"Can't find file *{suffix} in archive")
