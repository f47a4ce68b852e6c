from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

from .pagination import ResourceType


@dataclass(frozen=True)
class Settings:
    project_root: Path
    api_prefix: str
    upstream_base_url: str
    upstream_timeout_sec: float
    default_country: str
    default_sort: str
    batch_sizes: Mapping[ResourceType, int]
    cors_origins: tuple[str, ...]
    log_level: str
    host: str
    port: int


def _parse_origins(raw: str) -> tuple[str, ...]:
    if raw.strip() == "*":
        return ("*",)
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    project_root = Path(__file__).resolve().parents[2]
    env_path = project_root / ".env"

    if env_path.exists():
        load_dotenv(env_path, override=False)

    return Settings(
        project_root=project_root,
        api_prefix=os.getenv("API_PREFIX", "/api").rstrip("/"),
        upstream_base_url=os.getenv("UPSTREAM_BASE_URL", "https://gaana.com/apiv2"),
        upstream_timeout_sec=float(os.getenv("UPSTREAM_TIMEOUT_SEC", "5")),
        default_country=os.getenv("DEFAULT_COUNTRY", "IN"),
        default_sort=os.getenv("DEFAULT_SORT", "popularity"),
        batch_sizes={
            ResourceType.SEARCH: int(os.getenv("SEARCH_BATCH_SIZE", "20")),
            ResourceType.ARTIST_TRACKS: int(os.getenv("ARTIST_TRACKS_BATCH_SIZE", "20")),
            ResourceType.ARTIST_ALBUMS: int(os.getenv("ARTIST_ALBUMS_BATCH_SIZE", "40")),
            ResourceType.LABEL_ALBUMS: int(os.getenv("LABEL_ALBUMS_BATCH_SIZE", "40")),
            ResourceType.TRENDING: int(os.getenv("TRENDING_BATCH_SIZE", "20")),
            ResourceType.CHARTS: int(os.getenv("CHARTS_BATCH_SIZE", "20")),
            ResourceType.NEW_RELEASES: int(os.getenv("NEW_RELEASES_BATCH_SIZE", "20")),
        },
        cors_origins=_parse_origins(os.getenv("CORS_ORIGINS", "*")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
    )
