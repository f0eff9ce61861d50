"""Trigger channels and the database refresh scheduler."""

from __future__ import annotations

from .channel import TriggerChannel
from .updater import REMOTE_JOB_ID, DatabaseUpdateScheduler

__all__ = [
    "REMOTE_JOB_ID",
    "DatabaseUpdateScheduler",
    "TriggerChannel",
]
