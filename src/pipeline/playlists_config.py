"""
playlists_config.py

Schema + loader for the playlists file.

Expected shape:

    {
      "playlists": [
        {
          "name": "Space launches",
          "playlistId": "PL...",
          "channels": ["UC...", {"id": "UC...", "name": "NASA"}]
        }
      ]
    }

Channel entries may be a bare id or a labelled object; both are resolved
here into a single SourceRef shape so nothing downstream sees the union.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

import config
from pipeline.errors import ConfigurationError
from pipeline.models import PlaylistTask, SourceRef


def _check_channel_id(value: str) -> str:
    if not config.CHANNEL_ID_RE.match(value):
        raise ValueError("Invalid YouTube channel ID format (must start with UC)")
    return value


class ChannelEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: Optional[str] = None

    @field_validator("id")
    @classmethod
    def _valid_id(cls, v: str) -> str:
        return _check_channel_id(v)


class PlaylistEntry(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field(min_length=1)
    playlist_id: str = Field(alias="playlistId", min_length=1)
    channels: List[Union[str, ChannelEntry]] = Field(min_length=1)

    @field_validator("playlist_id")
    @classmethod
    def _valid_playlist_id(cls, v: str) -> str:
        if not config.PLAYLIST_ID_RE.match(v):
            raise ValueError("Invalid YouTube playlist ID format (must start with PL)")
        return v

    @field_validator("channels")
    @classmethod
    def _valid_channels(
        cls, v: List[Union[str, ChannelEntry]]
    ) -> List[Union[str, ChannelEntry]]:
        for entry in v:
            if isinstance(entry, str):
                _check_channel_id(entry)
        return v

    def to_task(self) -> PlaylistTask:
        sources = []
        for entry in self.channels:
            if isinstance(entry, str):
                sources.append(SourceRef(source_id=entry))
            else:
                label = (entry.name or "").strip() or None
                sources.append(SourceRef(source_id=entry.id, display_label=label))
        return PlaylistTask(
            display_name=self.name,
            target_collection_id=self.playlist_id,
            sources=tuple(sources),
        )


class PlaylistsFile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    playlists: List[PlaylistEntry] = Field(min_length=1)


def _format_validation_error(e: ValidationError) -> List[str]:
    lines = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "(root)"
        lines.append(f"  - {loc}: {err.get('msg', 'invalid value')}")
    return lines


def parse_tasks(data: object) -> List[PlaylistTask]:
    try:
        parsed = PlaylistsFile.model_validate(data)
    except ValidationError as e:
        details = "\n".join(_format_validation_error(e))
        raise ConfigurationError(
            f"Configuration validation failed:\n{details}"
        ) from e
    return [p.to_task() for p in parsed.playlists]


def load_tasks(path: Path) -> List[PlaylistTask]:
    """Read, validate and normalise the playlists file. Raises ConfigurationError."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read playlists file {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Playlists file {path} is not valid JSON: {e}") from e

    return parse_tasks(data)
