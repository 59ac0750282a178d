from datetime import datetime, timezone

from env import out_dir
from pipeline.models import PlaylistMetadata, PlaylistTask, SourceRef, TaskResult
from pipeline.snapshot import SnapshotStore, build_snapshot


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _task():
    return PlaylistTask(
        display_name="Launches",
        target_collection_id="PLa",
        sources=(SourceRef("UCa", "NASA"), SourceRef("UCb")),
    )


def test_build_snapshot_shape():
    snap = build_snapshot(
        [_task()],
        [TaskResult(task_name="Launches", live_items_found=3)],
        {"PLa": PlaylistMetadata("PLa", "Launches", "thumb")},
        now=NOW,
    )

    assert snap["last_sync_at"] == NOW.isoformat()
    [p] = snap["playlists"]
    assert p["playlist_id"] == "PLa"
    assert p["youtube_url"] == "https://www.youtube.com/playlist?list=PLa"
    assert p["thumbnail_url"] == "thumb"
    assert p["live_items_found"] == 3
    assert p["channels"] == [{"id": "UCa", "name": "NASA"}, {"id": "UCb", "name": None}]


def test_build_snapshot_without_metadata():
    snap = build_snapshot([_task()], [], now=NOW)

    assert snap["playlists"][0]["thumbnail_url"] is None
    assert snap["playlists"][0]["live_items_found"] == 0


def test_store_defaults_to_out_dir():
    store = SnapshotStore()

    assert store.path == out_dir() / "sync_snapshot.json"


def test_store_save_and_status(tmp_path):
    store = SnapshotStore(path=tmp_path / "snap.json")
    store.save(build_snapshot([_task()], [], now=NOW))

    status = store.status(now=NOW)

    assert status["last_sync_at"] == NOW.isoformat()
    assert status["playlists"][0]["name"] == "Launches"
    assert status["generated_at"] == NOW.isoformat()
    assert not (tmp_path / "snap.json.tmp").exists()


def test_status_before_any_sync(tmp_path):
    status = SnapshotStore(path=tmp_path / "missing.json").status()

    assert status["last_sync_at"] is None
    assert status["playlists"] == []


def test_corrupt_snapshot_reads_as_missing(tmp_path):
    path = tmp_path / "snap.json"
    path.write_text("[1, 2", encoding="utf-8")

    assert SnapshotStore(path=path).load() is None
