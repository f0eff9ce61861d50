"""Database acquisition from a remote endpoint or a local directory.

Classes:
    RemoteFetcher: Conditional HTTP download.
    LocalLoader: Newest archive from a staging directory.
"""

from .local import LocalLoader, select_latest_archive
from .remote import RemoteFetcher, build_url

__all__ = ["LocalLoader", "RemoteFetcher", "build_url", "select_latest_archive"]
