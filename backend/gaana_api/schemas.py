from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


SearchSection = Literal["songs", "albums", "playlists", "artists"]


class HealthResponse(BaseModel):
    status: str
    uptime: float
    timestamp: str
    service: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class ApiIndexResponse(BaseModel):
    message: str
    endpoints: dict[str, str]


class RootResponse(BaseModel):
    message: str
    status: str
    usage: str
