from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from io import BytesIO
import tarfile
from typing import Any

import pytest

from mmdb_refresh.config import Settings
from mmdb_refresh.helpers.background_task import BackgroundTasks
from mmdb_refresh.models.events import UpdaterEvent
from mmdb_refresh.storage import DatabaseStore


def make_archive(members: Iterable[tuple[str, bytes | None]]) -> bytes:
    """Build a .tar.gz in memory. A None payload adds a directory entry."""
    buffer = BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, payload in members:
            info = tarfile.TarInfo(name=name)
            if payload is None:
                info.type = tarfile.DIRTYPE
                tar.addfile(info)
            else:
                info.size = len(payload)
                tar.addfile(info, BytesIO(payload))
    return buffer.getvalue()


def maxmind_archive(payload: bytes = b"mmdb-payload", edition: str = "GeoLite2-City_20240102") -> bytes:
    return make_archive(
        [
            (edition, None),
            (f"{edition}/COPYRIGHT.txt", b"copyright"),
            (f"{edition}/LICENSE.txt", b"license"),
            (f"{edition}/GeoLite2-City.mmdb", payload),
        ]
    )


class FakeHub:
    def __init__(self):
        self.events: list[UpdaterEvent] = []

    def emit(self, event: UpdaterEvent) -> list:
        self.events.append(event)
        return []


@dataclass
class RecordedJob:
    func: Any
    trigger: Any
    id: str
    kwargs: dict[str, Any] = field(default_factory=dict)


class FakeScheduler:
    """Stands in for APScheduler, keeping one job per id like ``replace_existing``."""

    def __init__(self):
        self.jobs: dict[str, RecordedJob] = {}
        self.calls: list[RecordedJob] = []

    def add_job(self, func, trigger=None, id=None, **kwargs):  # noqa: A002
        job = RecordedJob(func=func, trigger=trigger, id=id, kwargs=kwargs)
        self.jobs[id] = job
        self.calls.append(job)
        return job


def make_settings(**values: Any) -> Settings:
    defaults: dict[str, Any] = {
        "remote_url": None,
        "license_key": "",
        "local_path": None,
        "user_agent": None,
        "dest_dir": None,
    }
    defaults.update(values)
    return Settings(**defaults)


@pytest.fixture
def hub() -> FakeHub:
    return FakeHub()


@pytest.fixture
def store(tmp_path, hub) -> DatabaseStore:
    return DatabaseStore(dest_dir=tmp_path / "db", hub=hub)  # type: ignore[arg-type]


@pytest.fixture
async def tasks():
    registry = BackgroundTasks()
    yield registry
    registry.stop()
