"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from cwa_proxy.config.defaults import DEFAULT_CITIES
from cwa_proxy.config.schema import ProxyConfig, UpstreamConfig

TEST_BASE_URL = "https://test-cwa.example.com/api"
FORECAST_URL = f"{TEST_BASE_URL}/v1/rest/datastore/F-C0032-001"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def taipei_payload(fixtures_dir: Path) -> dict:
    with open(fixtures_dir / "cwa_forecast_taipei.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def empty_payload(fixtures_dir: Path) -> dict:
    with open(fixtures_dir / "cwa_forecast_empty.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def proxy_config() -> ProxyConfig:
    """Config pointing at the test base URL with an API key set."""
    return ProxyConfig(
        upstream=UpstreamConfig(api_key="test-key-123", base_url=TEST_BASE_URL),
        cities=list(DEFAULT_CITIES),
    )


@pytest.fixture
def keyless_config() -> ProxyConfig:
    return ProxyConfig(
        upstream=UpstreamConfig(api_key="", base_url=TEST_BASE_URL),
        cities=list(DEFAULT_CITIES),
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment variables out of config loading."""
    for var in ("CWA_API_KEY", "CWA_API_BASE_URL", "HOST", "PORT", "APP_ENV", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
