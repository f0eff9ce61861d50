"""Database extraction from gzip-compressed tar archives.

MaxMind distributes databases as ``<edition>_<date>.tar.gz`` containing a
single directory with the ``.mmdb`` file plus licence and readme files. Only
the first ``.mmdb`` member is of interest; the archive is read as a stream and
reading stops as soon as that member is found.

Functions:
    find_database_entry: Return the database member bytes, or None if absent.
    extract_database: Same, raising ArchiveEntryNotFoundError when absent.
"""

from io import BytesIO
import tarfile

from mmdb_refresh.log import fetcher_logger
from mmdb_refresh.models.error import ArchiveEntryNotFoundError

DATABASE_SUFFIX = ".mmdb"

logger = fetcher_logger("Archive")


def find_database_entry(data: bytes, suffix: str = DATABASE_SUFFIX) -> bytes | None:
    """Walk the archive in order and return the first readable member ending with ``suffix``.

    Members after the match are never read. Members whose data cannot be read
    (links, devices and other non-regular entries) are logged and skipped.

    Args:
        data: Raw bytes of a gzip-compressed tar archive.
        suffix: File name suffix of the wanted member.

    Returns:
        The member's bytes, or None if the archive has no such member.

    Raises:
        tarfile.TarError: If the archive is malformed.
        OSError: If decompression fails.
        EOFError: If the compressed stream is truncated.
    """
    found: bytes | None = None
    with tarfile.open(fileobj=BytesIO(data), mode="r|gz") as tar:
        for member in tar:
            if member.isdir():
                continue
            fileobj = tar.extractfile(member) if member.isreg() else None
            if fileobj is None:
                logger.warning(f"Can't read entry {member.name}")
                continue
            logger.debug(f"Find file {member.name}")
            if member.name.endswith(suffix):
                found = fileobj.read()
                break
    return found


def extract_database(data: bytes, suffix: str = DATABASE_SUFFIX) -> bytes:
    """Extract the database member from a gzip-compressed tar archive.

    Raises:
        ArchiveEntryNotFoundError: If no readable member ends with ``suffix``.
    """
    payload = find_database_entry(data, suffix)
    if payload is None:
        raise ArchiveEntryNotFoundError(suffix)
    return payload
