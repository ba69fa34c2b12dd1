# file: finedust/main.py

import logging
import time
import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Dict, List, Optional

from finedust.airkorea_api import get_measurement, get_station_list
from finedust.cache import RateLimiter, TTLCache, cache_key
from finedust.classifier import classify
from finedust.config import DEFAULT_STATIONS, Settings
from finedust.formatter import error_response, format_status, frame_response
from finedust.models import FrameResponse
from finedust.scheduler import run_schedule
from finedust.utils import get_current_time

VERSION = "1.0.0"

# Every built-in station is a Seoul district
STATION_REGIONS = {name: "서울" for name in DEFAULT_STATIONS}

ENDPOINTS = ["/api/air-quality", "/api/air-quality/{station}", "/api/stations", "/api/stations/lookup", "/health"]

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


def create_app(settings: Settings) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Report configuration problems and start the refresh scheduler."""
        for warning in settings.validate_config():
            logging.warning(warning)
        if settings.scheduler_enabled:
            run_schedule(settings)
        yield

    app = FastAPI(
        title="LaMetric Fine Dust - Air Korea",
        description="Air Korea fine dust status rendered as LaMetric frames.",
        version=VERSION,
        lifespan=lifespan,
    )
    app.add_middleware(CORSMiddleware, allow_origins=settings.allowed_origins, allow_methods=["GET"], allow_headers=["*"])

    app.state.settings = settings
    app.state.cache = TTLCache(settings.cache_ttl)
    app.state.rate_limiter = RateLimiter(settings.min_poll_interval)
    app.state.started_at = time.monotonic()

    async def air_quality_frames(request: Request, station_name: str, detailed: bool):
        client_id = request.client.host if request.client else "default"
        logging.info(f"Air quality request: {station_name}, detailed: {detailed}")

        if settings.is_production and not app.state.rate_limiter.allow(client_id):
            logging.info(f"Rate limit exceeded: {client_id}")
            return JSONResponse(status_code=429, content={"error": "너무 자주 요청하고 있습니다. 잠시 후 다시 시도해주세요."})

        key = cache_key(station_name, detailed)
        cached = app.state.cache.get(key)
        if cached is not None:
            logging.info(f"Returning cached frames for {key}")
            return cached

        try:
            record = await get_measurement(settings, station_name)
        except Exception as e:
            # LaMetric only renders 200 responses
            logging.error(f"Error fetching air quality for {station_name}: {e}")
            return error_response()

        status = classify(record)
        response = frame_response(format_status(status, station_name, detailed))
        app.state.cache.set(key, response)
        logging.info(f"{station_name}: {response.frames[0].text} ({status.explanation})")
        return response

    @app.get("/api/air-quality", response_model=FrameResponse)
    async def air_quality(
        request: Request,
        station: Optional[str] = Query(None, description="Air Korea station name, e.g. 종로구"),
        detailed: bool = Query(True, description="Include the station name in the frame text"),
    ):
        """Current air quality for a station as LaMetric frames."""
        return await air_quality_frames(request, station or settings.default_station, detailed)

    @app.get("/api/air-quality/{station}", response_model=FrameResponse)
    async def air_quality_for_station(request: Request, station: str, detailed: bool = Query(True)):
        return await air_quality_frames(request, station, detailed)

    @app.get("/api/stations", response_model=List[Dict[str, str]])
    async def stations():
        """Stations this server exports and refreshes."""
        return [{"name": name, "region": STATION_REGIONS.get(name, "")} for name in settings.stations]

    @app.get("/api/stations/lookup", response_model=List[Dict[str, Any]])
    async def station_lookup(addr: str = Query("서울", description="Address prefix, e.g. 서울")):
        """Look up Air Korea stations by address."""
        return await get_station_list(settings, addr)

    @app.get("/health")
    async def health():
        return {
            "status": "OK",
            "timestamp": get_current_time(),
            "uptime": round(time.monotonic() - app.state.started_at, 3),
            "environment": settings.environment,
            "version": VERSION,
        }

    @app.get("/")
    async def root(request: Request):
        base = str(request.base_url).rstrip("/")
        return {
            "name": "LaMetric 미세먼지 서버",
            "version": VERSION,
            "endpoints": {
                "/api/air-quality": "기본 대기질 데이터 (쿼리: station, detailed)",
                "/api/air-quality/{station}": "특정 측정소 대기질 데이터",
                "/api/stations": "지원되는 측정소 목록",
                "/api/stations/lookup": "주소로 측정소 검색 (쿼리: addr)",
                "/health": "서버 상태 확인",
            },
            "usage": {
                "lametric_url": f"{base}/api/air-quality?station={settings.default_station}&detailed=true",
                "examples": [
                    f"{base}/api/air-quality?station=강남구",
                    f"{base}/api/air-quality/{settings.default_station}?detailed=false",
                ],
            },
        }

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content={"error": "엔드포인트를 찾을 수 없습니다.", "available_endpoints": ENDPOINTS},
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    return app


app = create_app(Settings.from_env())

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port, log_level="info")
