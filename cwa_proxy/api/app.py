"""FastAPI app re-serving CWA forecasts as flat per-city JSON."""

import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Callable

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cwa_proxy.config.defaults import KAOHSIUNG
from cwa_proxy.config.schema import ProxyConfig
from cwa_proxy.errors import (
    CityNotFoundError,
    ConfigurationError,
    UpstreamError,
    WeatherProxyError,
)
from cwa_proxy.ingest.cwa_client import DEFAULT_ERROR_MESSAGE, CwaClient
from cwa_proxy.models.common import utc_now_iso
from cwa_proxy.service.weather_service import WeatherService

log = logging.getLogger(__name__)

SERVER_ERROR = "Server error"
RETRY_LATER_MESSAGE = "Unable to fetch weather data, please try again later"


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"error": error, "message": message}
    )


def _build_service(
    config: ProxyConfig, http_client: httpx.AsyncClient | None = None
) -> WeatherService:
    client = CwaClient.from_config(config.upstream, http_client=http_client)
    return WeatherService(client, config.cities)


def get_service(request: Request) -> WeatherService:
    return request.app.state.service


def create_app(config: ProxyConfig) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # One connection pool shared by all upstream calls while serving.
        async with httpx.AsyncClient(
            timeout=config.upstream.timeout_seconds
        ) as http:
            app.state.service = _build_service(config, http)
            log.info(
                "Serving CWA forecasts env=%s cities=%d api_key=%s",
                config.server.environment,
                len(config.cities),
                "set" if config.has_api_key else "MISSING",
            )
            yield
        app.state.service = _build_service(config)

    app = FastAPI(
        title="CWA Weather Forecast Proxy", version="0.1.0", lifespan=lifespan
    )
    app.state.config = config
    app.state.service = _build_service(config)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_middleware(app)
    _register_error_handlers(app)
    _register_routes(app)
    return app


# ── Middleware ──────────────────────────────────────────────────


def _register_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def log_requests(request: Request, call_next: Callable):
        req_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        log.info(
            "req=%s %s %s -> %d t=%.3fs",
            req_id,
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
        )
        response.headers["x-request-id"] = req_id
        return response


# ── Error handlers ──────────────────────────────────────────────


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ConfigurationError)
    async def configuration_error(request: Request, exc: ConfigurationError):
        return _error(
            500,
            "Server configuration error",
            "Set CWA_API_KEY in the .env file or environment",
        )

    @app.exception_handler(CityNotFoundError)
    async def city_not_found(request: Request, exc: CityNotFoundError):
        return _error(404, "Not found", str(exc))

    @app.exception_handler(UpstreamError)
    async def upstream_error(request: Request, exc: UpstreamError):
        if exc.status_code is None:
            return _error(500, SERVER_ERROR, RETRY_LATER_MESSAGE)
        return _error(exc.status_code, "CWA API error", str(exc) or DEFAULT_ERROR_MESSAGE)

    @app.exception_handler(WeatherProxyError)
    async def weather_proxy_error(request: Request, exc: WeatherProxyError):
        return _error(500, SERVER_ERROR, RETRY_LATER_MESSAGE)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        # A wrong method on a known path reads as an unknown route
        if exc.status_code in (404, 405):
            return _error(404, "Route not found", f"{request.method} {request.url.path}")
        return _error(exc.status_code, "Request error", str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(500, SERVER_ERROR, str(exc))


# ── Routes ──────────────────────────────────────────────────────


def _register_routes(app: FastAPI) -> None:
    @app.get("/")
    def index():
        return {
            "message": "Welcome to the CWA weather forecast API",
            "endpoints": {
                "allCities": "/api/weather/all",
                "kaohsiung": "/api/weather/kaohsiung",
                "city": "/api/weather/:city",
                "health": "/api/health",
            },
        }

    @app.get("/api/health")
    def health():
        return {"status": "OK", "timestamp": utc_now_iso()}

    @app.get("/api/weather/all")
    async def all_cities_weather(service: WeatherService = Depends(get_service)):
        try:
            reports = await service.get_all_cities_weather()
        except ConfigurationError:
            raise
        except Exception:
            log.exception("Failed to fetch weather for all cities")
            return _error(500, SERVER_ERROR, RETRY_LATER_MESSAGE)
        return {
            "success": True,
            "count": len(reports),
            "data": [r.to_dict() for r in reports],
        }

    @app.get("/api/weather/kaohsiung")
    async def kaohsiung_weather(service: WeatherService = Depends(get_service)):
        return await city_weather(KAOHSIUNG, service)

    @app.get("/api/weather/{city}")
    async def city_weather(city: str, service: WeatherService = Depends(get_service)):
        try:
            report = await service.get_city_weather(city)
        except WeatherProxyError:
            raise
        except Exception as e:
            log.error("Failed to fetch weather for %s: %s", city, e)
            return _error(500, SERVER_ERROR, RETRY_LATER_MESSAGE)
        return {"success": True, "data": report.to_dict()}
