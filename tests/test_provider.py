import pytest

from fakes import FakeCredentials, FakeResponse
from providers.youtube.api_manager import ResilientExecutor, TerminalRequestError
from providers.youtube.provider import YouTubeContentSource


class FakeApiSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        self.calls.append(
            {"method": method, "url": url, "params": params, "json": json, "headers": headers}
        )
        return self.responses.pop(0)


def _source(responses):
    session = FakeApiSession(responses)
    executor = ResilientExecutor(FakeCredentials("abc"), sleep=lambda s: None)
    return YouTubeContentSource(executor, session=session), session


def test_discover_live_maps_search_results():
    payload = {
        "items": [
            {
                "id": {"videoId": "v1"},
                "snippet": {
                    "channelId": "UCa",
                    "channelTitle": "Channel A",
                    "title": "Launch",
                    "publishedAt": "2026-01-01T10:00:00Z",
                },
            },
            {"id": {"channelId": "UCa"}, "snippet": {"title": "not a video"}},
        ]
    }
    source, session = _source([FakeResponse(200, payload)])

    items = source.discover_live("UCa")

    assert [i.item_id for i in items] == ["v1"]
    assert items[0].title == "Launch"
    assert items[0].source_label == "Channel A"
    assert items[0].discovered_at == "2026-01-01T10:00:00Z"

    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["params"]["eventType"] == "live"
    assert call["params"]["type"] == "video"
    assert call["params"]["channelId"] == "UCa"
    assert call["headers"]["Authorization"] == "Bearer abc"


def test_list_current_members_follows_pages():
    page1 = {
        "items": [
            {"id": "h1", "snippet": {"resourceId": {"videoId": "v1"}}},
            {"id": "h2", "snippet": {"resourceId": {"videoId": "v2"}}},
        ],
        "nextPageToken": "next",
    }
    page2 = {"items": [{"id": "h3", "snippet": {"resourceId": {"videoId": "v3"}}}]}
    source, session = _source([FakeResponse(200, page1), FakeResponse(200, page2)])

    members = source.list_current_members("PLx")

    assert [(m.membership_handle, m.item_id) for m in members] == [
        ("h1", "v1"),
        ("h2", "v2"),
        ("h3", "v3"),
    ]
    assert "pageToken" not in session.calls[0]["params"]
    assert session.calls[1]["params"]["pageToken"] == "next"


def test_add_inserts_video_resource():
    source, session = _source([FakeResponse(200, {"id": "new"})])

    source.add("PLx", "v9")

    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["json"]["snippet"]["playlistId"] == "PLx"
    assert call["json"]["snippet"]["resourceId"] == {
        "kind": "youtube#video",
        "videoId": "v9",
    }


def test_remove_deletes_by_membership_handle():
    source, session = _source([FakeResponse(204)])

    source.remove("h1")

    call = session.calls[0]
    assert call["method"] == "DELETE"
    assert call["params"] == {"id": "h1"}


def test_terminal_error_surfaces_from_source():
    source, _ = _source([FakeResponse(404, {"error": {"message": "playlistNotFound"}})])

    with pytest.raises(TerminalRequestError):
        source.list_current_members("PLmissing")


def test_playlist_metadata_prefers_largest_thumbnail():
    payload = {
        "items": [
            {
                "id": "PL1",
                "snippet": {
                    "title": "One",
                    "thumbnails": {
                        "high": {"url": "high-1"},
                        "maxres": {"url": "max-1"},
                    },
                },
            },
            {
                "id": "PL2",
                "snippet": {"title": "Two", "thumbnails": {"high": {"url": "high-2"}}},
            },
        ]
    }
    source, session = _source([FakeResponse(200, payload)])

    meta = source.playlist_metadata(["PL1", "PL2", "PL1"])

    assert meta["PL1"].thumbnail_url == "max-1"
    assert meta["PL2"].thumbnail_url == "high-2"
    assert session.calls[0]["params"]["id"] == "PL1,PL2"
