from .database_store import FILE_SUFFIX, DatabaseStore, StoreState

__all__ = [
    "FILE_SUFFIX",
    "DatabaseStore",
    "StoreState",
]
