"""In-process publish/subscribe for updater events.

Variables:
    event_hub: Global EventHub instance.
"""

from .event_hub import (
    EventHub,
    hub as event_hub,
    listen,
)

__all__ = ["EventHub", "event_hub", "listen"]
