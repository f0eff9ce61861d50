from __future__ import annotations

from pathlib import Path

import pytest

from mmdb_refresh.fetcher import LocalLoader, select_latest_archive
from mmdb_refresh.models.error import ArchiveEntryNotFoundError
from mmdb_refresh.models.refresh import RefreshOutcome
from mmdb_refresh.storage import DatabaseStore

from .conftest import FakeHub, make_archive, make_settings, maxmind_archive


def _stage(directory: Path, archives: dict[str, bytes]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name, data in archives.items():
        (directory / name).write_bytes(data)
    return directory


def test_select_latest_archive_picks_greatest_name(tmp_path: Path) -> None:
    staging = _stage(
        tmp_path / "staging",
        {
            "2023-01-01.tar.gz": b"",
            "2023-06-01.tar.gz": b"",
            "2022-12-01.tar.gz": b"",
            "2024-01-01.txt": b"",
        },
    )

    assert select_latest_archive(staging) == staging / "2023-06-01.tar.gz"


def test_select_latest_archive_ignores_directories(tmp_path: Path) -> None:
    staging = _stage(tmp_path / "staging", {"2023-01-01.tar.gz": b""})
    (staging / "2099-01-01.tar.gz").mkdir()

    assert select_latest_archive(staging) == staging / "2023-01-01.tar.gz"


def test_select_latest_archive_empty_directory(tmp_path: Path) -> None:
    assert select_latest_archive(_stage(tmp_path / "staging", {})) is None


@pytest.mark.asyncio
async def test_load_publishes_newest_archive(tmp_path: Path, store: DatabaseStore, hub: FakeHub) -> None:
    staging = _stage(
        tmp_path / "staging",
        {
            "2023-01-01.tar.gz": maxmind_archive(b"january"),
            "2023-06-01.tar.gz": maxmind_archive(b"june"),
            "2022-12-01.tar.gz": maxmind_archive(b"december"),
        },
    )

    outcome = await LocalLoader(store).load(make_settings(local_path=str(staging)))

    assert outcome is RefreshOutcome.UPDATED
    path = store.state.current_path
    assert path is not None
    assert Path(path).read_bytes() == b"june"
    assert Path(path).name.startswith("local_")
    assert store.state.last_modified is None
    assert len(hub.events) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("local_path", [None, ""])
async def test_load_without_config_is_skipped(local_path: str | None, store: DatabaseStore, hub: FakeHub) -> None:
    outcome = await LocalLoader(store).load(make_settings(local_path=local_path))

    assert outcome is RefreshOutcome.SKIPPED
    assert hub.events == []


@pytest.mark.asyncio
async def test_load_without_archives_is_skipped(tmp_path: Path, store: DatabaseStore) -> None:
    staging = _stage(tmp_path / "staging", {"notes.txt": b""})

    outcome = await LocalLoader(store).load(make_settings(local_path=str(staging)))

    assert outcome is RefreshOutcome.SKIPPED
    assert store.state.current_path is None


@pytest.mark.asyncio
async def test_load_missing_directory_raises(tmp_path: Path, store: DatabaseStore) -> None:
    with pytest.raises(FileNotFoundError):
        await LocalLoader(store).load(make_settings(local_path=str(tmp_path / "missing")))


@pytest.mark.asyncio
async def test_load_archive_without_database_raises(tmp_path: Path, store: DatabaseStore) -> None:
    staging = _stage(tmp_path / "staging", {"2023-01-01.tar.gz": make_archive([("README.txt", b"x")])})

    with pytest.raises(ArchiveEntryNotFoundError):
        await LocalLoader(store).load(make_settings(local_path=str(staging)))

    assert store.state.current_path is None
