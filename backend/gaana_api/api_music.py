from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from .config import get_settings
from .pagination import ResourceType
from .schemas import ApiIndexResponse, HealthResponse, SearchSection
from .services_gaana import EntityNotFoundError, GaanaService
from .validation import InvalidInputError, resolve_seokey


SERVICE_NAME = "Gaana Music API"
STARTED_AT = time.monotonic()

router = APIRouter(tags=["music"])


def get_gaana_service() -> GaanaService:
    from .main import app_state

    return app_state.gaana_service


def _seokey_or_400(raw: Optional[str]) -> str:
    try:
        return resolve_seokey(raw)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


async def _details(service: GaanaService, kind: str, raw: Optional[str]) -> Any:
    seokey = _seokey_or_400(raw)
    try:
        if kind == "song":
            return await service.get_song(seokey)
        return await service.get_details(kind, seokey)
    except EntityNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.get("/", response_model=ApiIndexResponse)
async def api_index() -> ApiIndexResponse:
    prefix = get_settings().api_prefix
    return ApiIndexResponse(
        message=SERVICE_NAME,
        endpoints={
            "song": f"GET {prefix}/songs/{{seokey}} or GET {prefix}/songs?seokey=&url=",
            "album": f"GET {prefix}/albums/{{seokey}}",
            "playlist": f"GET {prefix}/playlists/{{seokey}}",
            "artist": f"GET {prefix}/artists/{{seokey}}",
            "search": f"GET {prefix}/search?q=&page=&limit= or GET {prefix}/search/{{songs|albums|playlists|artists}}",
            "artist_tracks": f"GET {prefix}/artists/{{artist_id}}/tracks?page=&limit=&sort=",
            "artist_albums": f"GET {prefix}/artists/{{artist_id}}/albums?page=&limit=&sort=",
            "label_albums": f"GET {prefix}/labels/{{label_id}}/albums?page=&limit=&sort=",
            "trending": f"GET {prefix}/trending?language=&page=&limit=",
            "charts": f"GET {prefix}/charts?page=&limit=",
            "new_releases": f"GET {prefix}/new-releases?language=&page=&limit=",
            "health": f"GET {prefix}/health",
        },
    )


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        uptime=round(time.monotonic() - STARTED_AT, 3),
        timestamp=datetime.now(timezone.utc).isoformat(),
        service=SERVICE_NAME,
    )


@router.get("/search")
async def search_all(
    q: str = Query(min_length=1, max_length=200),
    page: Optional[str] = None,
    limit: Optional[str] = None,
    country: Optional[str] = None,
    service: GaanaService = Depends(get_gaana_service),
) -> Any:
    return await service.search(q, page=page, limit=limit, country=country)


@router.get("/search/{section}")
async def search_section(
    section: SearchSection,
    q: str = Query(min_length=1, max_length=200),
    page: Optional[str] = None,
    limit: Optional[str] = None,
    country: Optional[str] = None,
    service: GaanaService = Depends(get_gaana_service),
) -> Any:
    return await service.search(q, section=section, page=page, limit=limit, country=country)


@router.get("/songs")
async def get_song_by_query(
    seokey: Optional[str] = None,
    url: Optional[str] = None,
    service: GaanaService = Depends(get_gaana_service),
) -> Any:
    return await _details(service, "song", url or seokey)


@router.get("/songs/{seokey}")
async def get_song(seokey: str, service: GaanaService = Depends(get_gaana_service)) -> Any:
    return await _details(service, "song", seokey)


@router.get("/albums")
async def get_album_by_query(
    seokey: Optional[str] = None,
    url: Optional[str] = None,
    service: GaanaService = Depends(get_gaana_service),
) -> Any:
    return await _details(service, "album", url or seokey)


@router.get("/albums/{seokey}")
async def get_album(seokey: str, service: GaanaService = Depends(get_gaana_service)) -> Any:
    return await _details(service, "album", seokey)


@router.get("/playlists")
async def get_playlist_by_query(
    seokey: Optional[str] = None,
    url: Optional[str] = None,
    service: GaanaService = Depends(get_gaana_service),
) -> Any:
    return await _details(service, "playlist", url or seokey)


@router.get("/playlists/{seokey}")
async def get_playlist(seokey: str, service: GaanaService = Depends(get_gaana_service)) -> Any:
    return await _details(service, "playlist", seokey)


@router.get("/artists")
async def get_artist_by_query(
    seokey: Optional[str] = None,
    url: Optional[str] = None,
    service: GaanaService = Depends(get_gaana_service),
) -> Any:
    return await _details(service, "artist", url or seokey)


@router.get("/artists/{seokey}")
async def get_artist(seokey: str, service: GaanaService = Depends(get_gaana_service)) -> Any:
    return await _details(service, "artist", seokey)


@router.get("/artists/{artist_id}/tracks")
async def get_artist_tracks(
    artist_id: str = Path(min_length=1, max_length=100),
    page: Optional[str] = None,
    limit: Optional[str] = None,
    sort: Optional[str] = None,
    service: GaanaService = Depends(get_gaana_service),
) -> Any:
    return await service.list_entities(ResourceType.ARTIST_TRACKS, artist_id, page=page, limit=limit, sort=sort)


@router.get("/artists/{artist_id}/albums")
async def get_artist_albums(
    artist_id: str = Path(min_length=1, max_length=100),
    page: Optional[str] = None,
    limit: Optional[str] = None,
    sort: Optional[str] = None,
    service: GaanaService = Depends(get_gaana_service),
) -> Any:
    return await service.list_entities(ResourceType.ARTIST_ALBUMS, artist_id, page=page, limit=limit, sort=sort)


@router.get("/labels/{label_id}/albums")
async def get_label_albums(
    label_id: str = Path(min_length=1, max_length=100),
    page: Optional[str] = None,
    limit: Optional[str] = None,
    sort: Optional[str] = None,
    service: GaanaService = Depends(get_gaana_service),
) -> Any:
    return await service.list_entities(ResourceType.LABEL_ALBUMS, label_id, page=page, limit=limit, sort=sort)


@router.get("/trending")
async def get_trending(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    language: Optional[str] = None,
    service: GaanaService = Depends(get_gaana_service),
) -> Any:
    return await service.browse(ResourceType.TRENDING, page=page, limit=limit, language=language)


@router.get("/charts")
async def get_charts(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    service: GaanaService = Depends(get_gaana_service),
) -> Any:
    return await service.browse(ResourceType.CHARTS, page=page, limit=limit)


@router.get("/new-releases")
async def get_new_releases(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    language: Optional[str] = None,
    service: GaanaService = Depends(get_gaana_service),
) -> Any:
    return await service.browse(ResourceType.NEW_RELEASES, page=page, limit=limit, language=language)
