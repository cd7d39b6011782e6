import os
import time
from pathlib import Path

from upload_gateway.media.temp_media_store import TEMP_SUFFIX, TempMediaStore


def test_allocate_returns_unique_paths_under_root(tmp_path: Path):
    store = TempMediaStore(root=tmp_path / "tmp")

    first, second = store.allocate(), store.allocate()

    assert first != second
    assert first.parent == tmp_path / "tmp"
    assert first.suffix == TEMP_SUFFIX
    assert (tmp_path / "tmp").is_dir()


def test_remove_is_idempotent(tmp_path: Path):
    store = TempMediaStore(root=tmp_path)
    path = store.allocate()
    path.write_bytes(b"data")

    store.remove(path)
    store.remove(path)

    assert not path.exists()


def test_remove_failure_is_logged_not_raised(tmp_path: Path, caplog):
    store = TempMediaStore(root=tmp_path)
    directory = tmp_path / "not-a-file.part"
    directory.mkdir()

    store.remove(directory)

    assert directory.exists()
    assert any(r.getMessage() == "media.temp.delete_failed" for r in caplog.records)


def test_cleanup_expired_removes_only_stale_files(tmp_path: Path):
    store = TempMediaStore(root=tmp_path, temp_ttl_seconds=60)
    stale = store.allocate()
    stale.write_bytes(b"old")
    fresh = store.allocate()
    fresh.write_bytes(b"new")
    unrelated = tmp_path / "keep.txt"
    unrelated.write_bytes(b"other")

    now = time.time()
    os.utime(stale, (now - 3600, now - 3600))

    removed = store.cleanup_expired(now)

    assert removed == 1
    assert not stale.exists()
    assert fresh.exists()
    assert unrelated.exists()


def test_list_expired_on_missing_root(tmp_path: Path):
    store = TempMediaStore(root=tmp_path / "missing")

    assert store.list_expired() == []
