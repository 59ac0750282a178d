"""
provider.py

YouTube Data API v3 adapter.

Every call goes through ResilientExecutor, which supplies the bearer token
per attempt and owns retry / backoff. This module only knows endpoints,
parameters and response shapes.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import requests

import config
from logger import get_logger
from pipeline.models import LiveItem, MemberItem, PlaylistMetadata
from providers.base import ContentSource
from providers.youtube.api_manager import ResilientExecutor, raise_for_response


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _best_thumbnail(snippet: Dict[str, Any]) -> Optional[str]:
    thumbs = snippet.get("thumbnails") or {}
    for size in ("maxres", "high"):
        url = (thumbs.get(size) or {}).get("url")
        if url:
            return url
    return None


class YouTubeContentSource(ContentSource):
    name = "youtube"

    def __init__(
        self,
        executor: ResilientExecutor,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = config.DEFAULT_REQUEST_TIMEOUT_SEC,
        logger: Optional[logging.Logger] = None,
    ):
        self._executor = executor
        self._session = session or requests.Session()
        self._timeout = timeout
        self._logger = logger or get_logger("providers.youtube")

    # -----------------------------------------------------------------
    # HTTP plumbing
    # -----------------------------------------------------------------

    def _call(
        self,
        method: str,
        url: str,
        label: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        def _op(token: str) -> Dict[str, Any]:
            response = self._session.request(
                method,
                url,
                params=params,
                json=body,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self._timeout,
            )
            raise_for_response(response, label)
            if response.status_code == 204 or not response.content:
                return {}
            return response.json()

        return self._executor.execute(_op, label)

    # -----------------------------------------------------------------
    # ContentSource
    # -----------------------------------------------------------------

    def discover_live(self, source_id: str) -> List[LiveItem]:
        self._logger.debug(f"Fetching live streams for channel: {source_id}")

        resp = self._call(
            "GET",
            config.SEARCH_URL,
            f"search.list channel={source_id}",
            params={
                "part": "snippet",
                "channelId": source_id,
                "eventType": "live",
                "type": "video",
                "maxResults": config.YOUTUBE_PAGE_SIZE,
            },
        )

        discovered_at = _utc_now_iso()
        items: List[LiveItem] = []
        for it in resp.get("items", []):
            video_id = (it.get("id") or {}).get("videoId")
            if not isinstance(video_id, str) or not video_id:
                continue
            snippet = it.get("snippet") or {}
            items.append(
                LiveItem(
                    item_id=video_id,
                    source_id=snippet.get("channelId") or source_id,
                    source_label=snippet.get("channelTitle") or None,
                    title=snippet.get("title", ""),
                    discovered_at=snippet.get("publishedAt") or discovered_at,
                )
            )

        self._logger.info(f"Found {len(items)} live streams for channel {source_id}")
        return items

    def list_current_members(self, collection_id: str) -> List[MemberItem]:
        self._logger.debug(f"Fetching videos from playlist: {collection_id}")

        members: List[MemberItem] = []
        page_token: Optional[str] = None

        while True:
            params: Dict[str, Any] = {
                "part": "snippet",
                "playlistId": collection_id,
                "maxResults": config.YOUTUBE_PAGE_SIZE,
            }
            if page_token:
                params["pageToken"] = page_token

            resp = self._call(
                "GET",
                config.PLAYLIST_ITEMS_URL,
                f"playlistItems.list playlist={collection_id}",
                params=params,
            )

            for it in resp.get("items", []):
                handle = it.get("id")
                resource = (it.get("snippet") or {}).get("resourceId") or {}
                video_id = resource.get("videoId")
                if isinstance(handle, str) and isinstance(video_id, str):
                    members.append(MemberItem(membership_handle=handle, item_id=video_id))

            page_token = resp.get("nextPageToken")
            if not page_token:
                break

        self._logger.info(f"Found {len(members)} videos in playlist {collection_id}")
        return members

    def add(self, collection_id: str, item_id: str) -> None:
        self._call(
            "POST",
            config.PLAYLIST_ITEMS_URL,
            f"playlistItems.insert video={item_id}",
            params={"part": "snippet"},
            body={
                "snippet": {
                    "playlistId": collection_id,
                    "resourceId": {"kind": "youtube#video", "videoId": item_id},
                }
            },
        )
        self._logger.debug(f"Added video {item_id} to playlist {collection_id}")

    def remove(self, membership_handle: str) -> None:
        self._call(
            "DELETE",
            config.PLAYLIST_ITEMS_URL,
            f"playlistItems.delete id={membership_handle}",
            params={"id": membership_handle},
        )
        self._logger.debug(f"Removed playlist item {membership_handle}")

    def playlist_metadata(
        self, collection_ids: Iterable[str]
    ) -> Dict[str, PlaylistMetadata]:
        ids = [i for i in dict.fromkeys(collection_ids) if i]
        out: Dict[str, PlaylistMetadata] = {}

        for i in range(0, len(ids), config.YOUTUBE_PAGE_SIZE):
            chunk = ids[i : i + config.YOUTUBE_PAGE_SIZE]
            resp = self._call(
                "GET",
                config.PLAYLISTS_URL,
                "playlists.list",
                params={
                    "part": "snippet",
                    "id": ",".join(chunk),
                    "maxResults": config.YOUTUBE_PAGE_SIZE,
                },
            )
            for it in resp.get("items", []):
                pid = it.get("id")
                if not isinstance(pid, str):
                    continue
                snippet = it.get("snippet") or {}
                out[pid] = PlaylistMetadata(
                    playlist_id=pid,
                    title=snippet.get("title", ""),
                    thumbnail_url=_best_thumbnail(snippet),
                )

        return out
