from __future__ import annotations

from .archive import DATABASE_SUFFIX, extract_database, find_database_entry
from .background_task import BackgroundTasks, bg_tasks, run_in_threadpool
from .time import file_timestamp, format_http_date, parse_http_date, utcnow

__all__ = [
    "DATABASE_SUFFIX",
    "BackgroundTasks",
    "bg_tasks",
    "extract_database",
    "file_timestamp",
    "find_database_entry",
    "format_http_date",
    "parse_http_date",
    "run_in_threadpool",
    "utcnow",
]
