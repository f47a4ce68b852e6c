from __future__ import annotations

import logging
import random
from typing import Any, Optional

import httpx

from .pagination import PageWindow, PaginationPlanner, ResourceType, RawNumber, window
from .payload_decryptor import PayloadDecryptor


logger = logging.getLogger(__name__)

USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:109.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:109.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 Edg/120.0.0.0",
)

DETAIL_TYPES = {
    "song": "songDetail",
    "album": "albumDetail",
    "playlist": "playlistDetail",
    "artist": "artistDetail",
}

LISTING_TYPES = {
    ResourceType.ARTIST_TRACKS: "artistTrackList",
    ResourceType.ARTIST_ALBUMS: "artistAlbumList",
    ResourceType.LABEL_ALBUMS: "labelAlbumList",
}

BROWSE_TYPES = {
    ResourceType.TRENDING: "miscTrendingSongs",
    ResourceType.CHARTS: "miscTopCharts",
    ResourceType.NEW_RELEASES: "miscNewRelease",
}

SEARCH_SECTIONS = {
    "songs": "Track",
    "albums": "Album",
    "playlists": "Playlist",
    "artists": "Artist",
}


class UpstreamError(RuntimeError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class EntityNotFoundError(LookupError):
    pass


def browser_headers() -> dict[str, str]:
    return {
        "User-Agent": random.choice(USER_AGENTS),
        "Accept": "application/json, text/plain, */*",
        "Accept-Language": "en-US,en;q=0.9",
        "Origin": "https://gaana.com",
        "Referer": "https://gaana.com/",
    }


class GaanaGateway:
    def __init__(
        self,
        base_url: str,
        timeout_sec: float = 5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout_sec = timeout_sec
        self.transport = transport

    async def fetch(self, params: dict[str, Any]) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout_sec, transport=self.transport) as client:
                resp = await client.post(self.base_url, params=params, headers=browser_headers())
            if resp.is_error:
                logger.warning("upstream %s answered %s", params.get("type"), resp.status_code)
            return resp.json()
        except httpx.TimeoutException as exc:
            logger.warning("upstream %s timed out after %ss", params.get("type"), self.timeout_sec)
            raise UpstreamError("UPSTREAM_TIMEOUT", "Request timeout") from exc
        except httpx.HTTPError as exc:
            logger.warning("upstream %s failed: %s", params.get("type"), exc)
            raise UpstreamError("UPSTREAM_HTTP_ERROR", f"upstream request failed: {exc}") from exc
        except ValueError as exc:
            logger.warning("upstream %s returned a non-JSON body", params.get("type"))
            raise UpstreamError("UPSTREAM_BAD_RESPONSE", "upstream returned invalid JSON") from exc


class GaanaService:
    def __init__(
        self,
        gateway: GaanaGateway,
        planner: PaginationPlanner,
        decryptor: Optional[PayloadDecryptor] = None,
        default_country: str = "IN",
        default_sort: str = "popularity",
    ) -> None:
        self.gateway = gateway
        self.planner = planner
        self.decryptor = decryptor or PayloadDecryptor()
        self.default_country = default_country
        self.default_sort = default_sort

    async def get_song(self, seokey: str) -> Any:
        result = await self.gateway.fetch({"type": DETAIL_TYPES["song"], "seokey": seokey})
        tracks = result.get("tracks") if isinstance(result, dict) else None
        if not isinstance(tracks, list) or not tracks:
            raise EntityNotFoundError("Song not found")
        return self.decryptor.decrypt(tracks[0])

    async def get_details(self, kind: str, seokey: str) -> Any:
        result = await self.gateway.fetch({"type": DETAIL_TYPES[kind], "seokey": seokey})
        if not isinstance(result, dict):
            raise EntityNotFoundError(f"{kind.capitalize()} not found")
        return self.decryptor.decrypt(result)

    async def search(
        self,
        keyword: str,
        section: Optional[str] = None,
        page: RawNumber = None,
        limit: RawNumber = None,
        country: Optional[str] = None,
    ) -> Any:
        page_window = self.planner.plan(ResourceType.SEARCH, page, limit)
        params: dict[str, Any] = {
            "type": "search",
            "keyword": keyword,
            "country": country or self.default_country,
            "page": page_window.upstream_page_index,
        }
        if section:
            params["secType"] = SEARCH_SECTIONS[section]
        return await self._fetch_window(params, page_window)

    async def list_entities(
        self,
        resource: ResourceType,
        entity_id: str,
        page: RawNumber = None,
        limit: RawNumber = None,
        sort: Optional[str] = None,
    ) -> Any:
        page_window = self.planner.plan(resource, page, limit)
        params = {
            "type": LISTING_TYPES[resource],
            "id": entity_id,
            "order": 0,
            "page": page_window.upstream_page_index,
            "sortBy": sort or self.default_sort,
        }
        return await self._fetch_window(params, page_window)

    async def browse(
        self,
        resource: ResourceType,
        page: RawNumber = None,
        limit: RawNumber = None,
        language: Optional[str] = None,
    ) -> Any:
        page_window = self.planner.plan(resource, page, limit)
        params: dict[str, Any] = {
            "type": BROWSE_TYPES[resource],
            "page": page_window.upstream_page_index,
        }
        if language:
            params["language"] = language
        return await self._fetch_window(params, page_window)

    async def _fetch_window(self, params: dict[str, Any], page_window: PageWindow) -> Any:
        if page_window.spans_batches:
            logger.debug(
                "window %s-%s exceeds upstream batch of %s, result is truncated",
                page_window.slice_start,
                page_window.slice_end,
                page_window.batch_size,
            )
        result = await self.gateway.fetch(params)
        self.decryptor.decrypt(result)
        return window(result, page_window.slice_start, page_window.slice_end)
