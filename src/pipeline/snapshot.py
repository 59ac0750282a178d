"""
snapshot.py

Read-only status snapshot written at the end of a sync run so `status`
can answer without touching the YouTube API.

Only derived / public fields are stored. Never credentials.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

import config
from env.paths import out_file
from pipeline.models import PlaylistMetadata, PlaylistTask, TaskResult


def _write_json(path: Path, obj: Any) -> None:
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False, sort_keys=True)
    tmp.replace(path)


def build_snapshot(
    tasks: Sequence[PlaylistTask],
    results: Sequence[TaskResult],
    metadata: Optional[Mapping[str, PlaylistMetadata]] = None,
    *,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Pair each task with its result (same order) into the public snapshot shape."""
    metadata = metadata or {}
    now = now or datetime.now(timezone.utc)

    playlists = []
    for i, task in enumerate(tasks):
        result = results[i] if i < len(results) else None
        meta = metadata.get(task.target_collection_id)
        playlists.append(
            {
                "name": task.display_name,
                "playlist_id": task.target_collection_id,
                "youtube_url": config.PLAYLIST_URL_TEMPLATE.format(
                    playlist_id=task.target_collection_id
                ),
                "thumbnail_url": meta.thumbnail_url if meta else None,
                "live_items_found": result.live_items_found if result else 0,
                "channels": [
                    {"id": ref.source_id, "name": ref.display_label}
                    for ref in task.sources
                ],
            }
        )

    return {
        "last_sync_at": now.isoformat(),
        "playlists": playlists,
    }


class SnapshotStore:
    """JSON file per key under the out directory."""

    def __init__(self, path: Optional[Path] = None, key: str = config.SNAPSHOT_KEY):
        self.key = key
        self._path = path

    @property
    def path(self) -> Path:
        return self._path or out_file(f"{self.key}.json")

    def save(self, snapshot: Mapping[str, Any]) -> Path:
        path = self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        _write_json(path, dict(snapshot))
        return path

    def load(self) -> Optional[Dict[str, Any]]:
        """Stored snapshot, or None when nothing (valid) has been written yet."""
        path = self.path
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError):
            return None
        return data if isinstance(data, dict) else None

    def status(self, *, now: Optional[datetime] = None) -> Dict[str, Any]:
        snapshot = self.load() or {}
        now = now or datetime.now(timezone.utc)
        return {
            "last_sync_at": snapshot.get("last_sync_at"),
            "playlists": snapshot.get("playlists") or [],
            "generated_at": now.isoformat(),
        }
