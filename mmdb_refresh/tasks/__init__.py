"""Startup and shutdown tasks."""

from .geoip import start_geoip_updater, stop_geoip_updater

__all__ = [
    "start_geoip_updater",
    "stop_geoip_updater",
]
