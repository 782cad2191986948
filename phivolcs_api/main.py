# phivolcs_api/main.py
from __future__ import annotations
import logging
import math
import re
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

from phivolcs_api.cache import CacheManager
from phivolcs_api.config import MAX_COUNT, Settings
from phivolcs_api.errors import DataUnavailableError, EmptyDatasetError, ValidationError
from phivolcs_api.events import CacheEventLog
from phivolcs_api.fetch import Fetcher
from phivolcs_api.logging_setup import setup_logging
from phivolcs_api.query import (
    compute_stats, filter_by_location, filter_by_magnitude, most_recent, top_by_magnitude,
)

logger = logging.getLogger(__name__)

API_NAME = "PHIVOLCS Earthquake API"
API_VERSION = "2.0.0"

ENDPOINTS = {
    "/": "API documentation",
    "/earthquakes": "Get all recent earthquakes",
    "/earthquakes/top/:count": "Get top N earthquakes by magnitude",
    "/earthquakes/recent/:count": "Get N most recent earthquakes",
    "/earthquakes/filter": "Filter earthquakes by magnitude or location",
    "/earthquakes/stats": "Get earthquake statistics",
    "/refresh": "Force a refresh from PHIVOLCS (POST)",
    "/events/tail": "Recent cache refresh events",
    "/metrics": "Prometheus metrics",
    "/health": "API health check",
}

_DIGITS = re.compile(r"^\d+$")


def iso(ts: float) -> str:
    return (datetime.fromtimestamp(ts, tz=timezone.utc)
            .isoformat(timespec="milliseconds").replace("+00:00", "Z"))


def now_iso() -> str:
    return iso(time.time())


def parse_count(raw: str) -> int:
    if not _DIGITS.match(raw):
        raise ValidationError("Count must be a positive number")
    count = int(raw)
    if not 1 <= count <= MAX_COUNT:
        raise ValidationError(f"Count must be between 1 and {MAX_COUNT}")
    return count


def parse_bound(name: str, value: Optional[float]) -> Optional[float]:
    if value is not None and not math.isfinite(value):
        raise ValidationError(f"{name} must be a finite number")
    return value


def get_cache(request: Request) -> CacheManager:
    return request.app.state.cache


def failure(error: str, exc: Exception) -> JSONResponse:
    logger.error("%s: %s", error, exc)
    return JSONResponse({"error": error, "message": str(exc)}, status_code=500)


def build_cache(settings: Settings) -> CacheManager:
    return CacheManager(
        Fetcher.from_settings(settings),
        ttl_seconds=settings.cache_ttl_seconds,
        events=CacheEventLog(settings.event_log_size),
    )


def create_app(settings: Optional[Settings] = None, cache: Optional[CacheManager] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)

    app = FastAPI(title=API_NAME, version=API_VERSION)
    app.state.settings = settings
    app.state.cache = cache or build_cache(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
        max_age=86400,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        logger.info("%s %s %d %.1fms", request.method, request.url.path,
                    response.status_code, (time.perf_counter() - start) * 1000)
        return response

    # ---------- errors ----------
    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse({"error": "Validation Error", "message": str(exc)}, status_code=400)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        messages = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
        )
        return JSONResponse({"error": "Validation Error", "message": messages}, status_code=400)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(
                {
                    "error": "Not Found",
                    "message": "The requested endpoint does not exist",
                    "available_endpoints": list(ENDPOINTS),
                },
                status_code=404,
            )
        return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("unhandled error on %s", request.url.path)
        return JSONResponse({"error": "Internal Server Error", "message": str(exc)}, status_code=500)

    # ---------- routes ----------
    @app.get("/")
    def index():
        return {
            "name": API_NAME,
            "version": API_VERSION,
            "description": "RESTful API for Philippine earthquake data from PHIVOLCS",
            "endpoints": ENDPOINTS,
            "cache_ttl": f"{settings.cache_ttl_seconds:g}s",
            "source": settings.source_url,
        }

    @app.get("/health")
    def health(cache: CacheManager = Depends(get_cache)):
        try:
            snapshot = cache.get_snapshot()
        except DataUnavailableError as exc:
            return JSONResponse({"status": "unhealthy", "error": str(exc)}, status_code=503)
        return {
            "status": "healthy",
            "cache_valid": cache.is_valid(),
            "cache_state": cache.state.value,
            "last_update": iso(snapshot.fetched_at),
            "data_count": len(snapshot),
        }

    @app.get("/earthquakes")
    def list_earthquakes(cache: CacheManager = Depends(get_cache)):
        try:
            snapshot = cache.get_snapshot()
        except DataUnavailableError as exc:
            return failure("Failed to fetch earthquake data", exc)
        return {
            "meta": {
                "timestamp": now_iso(),
                "count": len(snapshot),
                "cache_age_seconds": int(snapshot.age(cache.clock())),
            },
            "data": [r.to_dict() for r in snapshot.records],
        }

    @app.get("/earthquakes/top/{count}")
    def top_earthquakes(count: str, cache: CacheManager = Depends(get_cache)):
        n = parse_count(count)
        try:
            snapshot = cache.get_snapshot()
        except DataUnavailableError as exc:
            return failure("Failed to fetch top earthquakes", exc)
        top = top_by_magnitude(snapshot.records, n)
        return {
            "meta": {
                "timestamp": now_iso(),
                "count": len(top),
                "requested": n,
                "total_available": len(snapshot),
            },
            "data": [r.to_dict() for r in top],
        }

    @app.get("/earthquakes/recent/{count}")
    def recent_earthquakes(count: str, cache: CacheManager = Depends(get_cache)):
        n = parse_count(count)
        try:
            snapshot = cache.get_snapshot()
        except DataUnavailableError as exc:
            return failure("Failed to fetch recent earthquakes", exc)
        recent = most_recent(snapshot.records, n)
        return {
            "meta": {"timestamp": now_iso(), "count": len(recent), "requested": n},
            "data": [r.to_dict() for r in recent],
        }

    @app.get("/earthquakes/filter")
    def filter_earthquakes(min_magnitude: Optional[float] = None,
                           max_magnitude: Optional[float] = None,
                           location: Optional[str] = None,
                           cache: CacheManager = Depends(get_cache)):
        min_magnitude = parse_bound("min_magnitude", min_magnitude)
        max_magnitude = parse_bound("max_magnitude", max_magnitude)
        try:
            snapshot = cache.get_snapshot()
        except DataUnavailableError as exc:
            return failure("Failed to filter earthquakes", exc)

        records = list(snapshot.records)
        if min_magnitude is not None or max_magnitude is not None:
            lower = min_magnitude if min_magnitude is not None else float("-inf")
            records = filter_by_magnitude(records, lower, max_magnitude)
        if location:
            records = filter_by_location(records, location)

        return {
            "meta": {
                "timestamp": now_iso(),
                "count": len(records),
                "filters": {
                    "min_magnitude": min_magnitude,
                    "max_magnitude": max_magnitude,
                    "location": location,
                },
            },
            "data": [r.to_dict() for r in records],
        }

    @app.get("/earthquakes/stats")
    def earthquake_stats(cache: CacheManager = Depends(get_cache)):
        try:
            stats = compute_stats(cache.get_snapshot().records)
        except (DataUnavailableError, EmptyDatasetError) as exc:
            return failure("Failed to calculate earthquake statistics", exc)
        return {"meta": {"timestamp": now_iso()}, "data": stats.to_dict()}

    @app.post("/refresh")
    def refresh(cache: CacheManager = Depends(get_cache)):
        before = cache.snapshot
        try:
            snapshot = cache.get_snapshot(force_refresh=True)
        except DataUnavailableError as exc:
            return JSONResponse({"status": "unavailable", "error": str(exc)}, status_code=503)
        return {
            "status": "refreshed" if snapshot is not before else "stale",
            "data_count": len(snapshot),
            "last_update": iso(snapshot.fetched_at),
        }

    # ---------- events ----------
    @app.get("/events/tail")
    def events_tail(n: int = 50, cache: CacheManager = Depends(get_cache)):
        return cache.events.tail(n)

    # ---------- metrics ----------
    @app.get("/metrics")
    def metrics():
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()
