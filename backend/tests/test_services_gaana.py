from __future__ import annotations

import asyncio
from typing import Any

import pytest

from gaana_api.link_decoder import HLS_CDN_ORIGIN
from gaana_api.pagination import PaginationPlanner, ResourceType
from gaana_api.services_gaana import EntityNotFoundError, GaanaService


BATCH_SIZES = {
    ResourceType.SEARCH: 20,
    ResourceType.ARTIST_TRACKS: 20,
    ResourceType.ARTIST_ALBUMS: 40,
    ResourceType.LABEL_ALBUMS: 50,
    ResourceType.TRENDING: 20,
    ResourceType.CHARTS: 20,
    ResourceType.NEW_RELEASES: 30,
}


class StubGateway:
    def __init__(self, payload: Any) -> None:
        self.payload = payload
        self.calls: list[dict[str, Any]] = []

    async def fetch(self, params: dict[str, Any]) -> Any:
        self.calls.append(params)
        return self.payload


def _service(payload: Any) -> tuple[GaanaService, StubGateway]:
    gateway = StubGateway(payload)
    service = GaanaService(gateway=gateway, planner=PaginationPlanner(BATCH_SIZES))  # type: ignore[arg-type]
    return service, gateway


def test_get_song_returns_first_track_decrypted(tiers_for) -> None:
    service, gateway = _service({"tracks": [{"seokey": "s1", "urls": tiers_for("https://x/hls/s1")}, {"seokey": "s2"}]})

    song = asyncio.run(service.get_song("s1"))

    assert gateway.calls == [{"type": "songDetail", "seokey": "s1"}]
    assert song["seokey"] == "s1"
    assert song["urls"]["high"]["message"] == f"{HLS_CDN_ORIGIN}hls/s1/high.m3u8"


@pytest.mark.parametrize("payload", [None, [], {"tracks": []}, {"tracks": "x"}, {"status": 0}])
def test_get_song_without_tracks_is_not_found(payload: Any) -> None:
    service, _ = _service(payload)
    with pytest.raises(EntityNotFoundError, match="Song not found"):
        asyncio.run(service.get_song("missing"))


def test_get_details_decrypts_whole_payload(tiers_for) -> None:
    service, gateway = _service({"album": {"title": "A"}, "tracks": [{"urls": tiers_for("https://x/hls/t")}]})

    album = asyncio.run(service.get_details("album", "thriller"))

    assert gateway.calls == [{"type": "albumDetail", "seokey": "thriller"}]
    assert album["tracks"][0]["urls"]["low"]["message"] == f"{HLS_CDN_ORIGIN}hls/t/low.m3u8"


def test_get_details_with_non_object_body_is_not_found() -> None:
    service, _ = _service("oops")
    with pytest.raises(EntityNotFoundError, match="Playlist not found"):
        asyncio.run(service.get_details("playlist", "hits"))


def test_search_fetches_one_batch_and_windows_groups() -> None:
    service, gateway = _service({"gr": [{"ty": "Track", "gd": list(range(20))}, {"ty": "Album", "gd": list(range(20))}]})

    result = asyncio.run(service.search("arijit", page="3", limit="5"))

    assert gateway.calls == [{"type": "search", "keyword": "arijit", "country": "IN", "page": 0}]
    assert result["gr"][0]["gd"] == [15, 16, 17, 18, 19]
    assert result["gr"][1]["gd"] == [15, 16, 17, 18, 19]


def test_search_section_and_country() -> None:
    service, gateway = _service({"gr": []})

    asyncio.run(service.search("thriller", section="albums", page="4", limit="10", country="US"))

    assert gateway.calls == [{"type": "search", "keyword": "thriller", "country": "US", "page": 2, "secType": "Album"}]


def test_artist_tracks_use_default_sort_and_slice_entities() -> None:
    service, gateway = _service({"entities": [{"id": n} for n in range(20)]})

    result = asyncio.run(service.list_entities(ResourceType.ARTIST_TRACKS, "123", page="5", limit="3"))

    assert gateway.calls == [{"type": "artistTrackList", "id": "123", "order": 0, "page": 0, "sortBy": "popularity"}]
    assert result["entities"] == [{"id": 15}, {"id": 16}, {"id": 17}]


def test_label_albums_use_their_own_batch_size() -> None:
    service, gateway = _service({"entities": []})

    asyncio.run(service.list_entities(ResourceType.LABEL_ALBUMS, "t-series", page="2", limit="30", sort="latest"))

    assert gateway.calls == [{"type": "labelAlbumList", "id": "t-series", "order": 0, "page": 1, "sortBy": "latest"}]


def test_listing_window_spanning_batches_is_truncated() -> None:
    service, _ = _service({"entities": list(range(20))})

    result = asyncio.run(service.list_entities(ResourceType.ARTIST_TRACKS, "1", page="1", limit="15"))

    assert result["entities"] == [15, 16, 17, 18, 19]


def test_browse_uses_resource_batch_size_and_optional_language() -> None:
    service, gateway = _service({"entities": list(range(30))})

    result = asyncio.run(service.browse(ResourceType.NEW_RELEASES, page="4", limit="10"))

    assert gateway.calls == [{"type": "miscNewRelease", "page": 1}]
    assert result["entities"] == list(range(10, 20))


def test_browse_passes_language_and_leaves_non_object_payload() -> None:
    service, gateway = _service([{"id": 1}, {"id": 2}])

    result = asyncio.run(service.browse(ResourceType.TRENDING, language="hi"))

    assert gateway.calls == [{"type": "miscTrendingSongs", "page": 0, "language": "hi"}]
    assert result == [{"id": 1}, {"id": 2}]
