import asyncio
from pathlib import Path
from typing import Annotated

from fast_depends import Depends
import pytest

from mmdb_refresh.dependencies.geoip import GeoIPStore, get_store
from mmdb_refresh.models.events import DatabaseUpdatedEvent, UpdaterEvent
from mmdb_refresh.plugins import EventHub, event_hub, listen
from mmdb_refresh.storage import DatabaseStore


class OtherEvent(UpdaterEvent):
    value: int


def _marker() -> str:
    return "marker"


@pytest.mark.asyncio
async def test_emit_dispatches_to_matching_listener() -> None:
    hub = EventHub()
    received: list[DatabaseUpdatedEvent] = []

    @hub.listen
    async def on_update(event: DatabaseUpdatedEvent) -> None:
        received.append(event)

    event = DatabaseUpdatedEvent(path="/tmp/local_1.mmmd")
    await asyncio.gather(*hub.emit(event))

    assert received == [event]


@pytest.mark.asyncio
async def test_emit_skips_listeners_for_other_events() -> None:
    hub = EventHub()
    received: list[OtherEvent] = []

    @hub.listen
    async def on_other(event: OtherEvent) -> None:
        received.append(event)

    await asyncio.gather(*hub.emit(DatabaseUpdatedEvent(path="/tmp/local_1.mmmd")))

    assert received == []


@pytest.mark.asyncio
async def test_listener_receives_injected_dependencies() -> None:
    hub = EventHub()
    received: list[tuple[str, str | None]] = []

    @hub.listen
    async def on_update(event: DatabaseUpdatedEvent, marker: Annotated[str, Depends(_marker)]) -> None:
        received.append((marker, event.last_modified))

    await asyncio.gather(
        *hub.emit(DatabaseUpdatedEvent(path="/tmp/a.mmmd", last_modified="Tue, 02 Jan 2024 03:04:05 GMT"))
    )

    assert received == [("marker", "Tue, 02 Jan 2024 03:04:05 GMT")]


@pytest.mark.asyncio
async def test_base_event_listener_receives_all_events() -> None:
    hub = EventHub()
    received: list[UpdaterEvent] = []

    @hub.listen
    async def on_any(event: UpdaterEvent) -> None:
        received.append(event)

    await asyncio.gather(*hub.emit(OtherEvent(value=1)), *hub.emit(DatabaseUpdatedEvent(path="/tmp/a.mmmd")))

    assert len(received) == 2


@pytest.mark.asyncio
async def test_global_listener_receives_process_store(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MAXMIND_DB_DEST_DIR", str(tmp_path / "published"))
    monkeypatch.setattr(event_hub, "_listeners", [])
    get_store.cache_clear()
    received: list[tuple[str, DatabaseStore]] = []

    @listen
    async def on_update(event: DatabaseUpdatedEvent, store: GeoIPStore) -> None:
        received.append((event.path, store))

    try:
        await asyncio.gather(*event_hub.emit(DatabaseUpdatedEvent(path="/tmp/local_1.mmmd")))

        assert received == [("/tmp/local_1.mmmd", get_store())]
        assert received[0][1] is get_store()
        assert get_store().dest_dir == tmp_path / "published"
    finally:
        get_store.cache_clear()
