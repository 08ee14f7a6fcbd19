"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field, field_validator

from cwa_proxy.config.defaults import (
    CWA_API_BASE_URL,
    DEFAULT_CITIES,
    FORECAST_DATASET_ID,
)


class UpstreamConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api_key: str = ""
    base_url: str = CWA_API_BASE_URL
    dataset_id: str = FORECAST_DATASET_ID
    timeout_seconds: float = Field(default=30.0, gt=0.0)


class ServerConfig(BaseModel):
    model_config = {"extra": "forbid"}

    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    environment: str = "development"
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]


class ProxyConfig(BaseModel):
    model_config = {"extra": "forbid", "frozen": True}

    upstream: UpstreamConfig = UpstreamConfig()
    server: ServerConfig = ServerConfig()
    cities: list[str] = []

    @field_validator("cities")
    @classmethod
    def cities_in_registry(cls, cities: list[str]) -> list[str]:
        """Only a subset of the 22 administrative regions may be configured."""
        unknown = [c for c in cities if c not in DEFAULT_CITIES]
        if unknown:
            raise ValueError(f"Not in the city registry: {', '.join(unknown)}")
        if len(set(cities)) != len(cities):
            raise ValueError("Duplicate cities in registry")
        return cities

    @property
    def has_api_key(self) -> bool:
        return bool(self.upstream.api_key)
