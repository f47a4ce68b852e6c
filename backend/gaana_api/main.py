from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api_music import SERVICE_NAME
from .api_music import router as music_router
from .config import get_settings
from .pagination import PaginationPlanner
from .payload_decryptor import PayloadDecryptor
from .schemas import ErrorResponse, RootResponse
from .services_gaana import GaanaGateway, GaanaService, UpstreamError


settings = get_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@dataclass
class AppState:
    gateway: GaanaGateway
    gaana_service: GaanaService


gateway = GaanaGateway(
    base_url=settings.upstream_base_url,
    timeout_sec=settings.upstream_timeout_sec,
)
gaana_service = GaanaService(
    gateway=gateway,
    planner=PaginationPlanner(settings.batch_sizes),
    decryptor=PayloadDecryptor(),
    default_country=settings.default_country,
    default_sort=settings.default_sort,
)

app_state = AppState(gateway=gateway, gaana_service=gaana_service)

app = FastAPI(title=SERVICE_NAME, version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)


def _log_request(request: Request, status_code: int, started: float) -> None:
    duration_ms = int((time.perf_counter() - started) * 1000)
    logger.info("%s %s - %s - %sms", request.method, request.url.path, status_code, duration_ms)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        _log_request(request, 500, started)
        raise
    _log_request(request, response.status_code, started)
    return response


def _internal_error() -> JSONResponse:
    return JSONResponse(status_code=500, content=ErrorResponse(error="Internal server error").model_dump())


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.warning("%s %s failed upstream [%s]: %s", request.method, request.url.path, exc.code, exc.message)
    return _internal_error()


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _internal_error()


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        return JSONResponse(status_code=404, content=ErrorResponse(error="Not found").model_dump())
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


app.include_router(music_router, prefix=settings.api_prefix)


@app.get("/", response_model=RootResponse)
async def root() -> RootResponse:
    return RootResponse(
        message=SERVICE_NAME,
        status="running",
        usage=f"GET {settings.api_prefix}/songs?seokey=your-song-seokey",
    )


def run() -> None:
    uvicorn.run("gaana_api.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
