"""YAML + environment config loader and dotted-key lookup."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from cwa_proxy.config.defaults import DEFAULT_CITIES
from cwa_proxy.config.schema import ProxyConfig

# Environment variable -> (section, field)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "CWA_API_KEY": ("upstream", "api_key"),
    "CWA_API_BASE_URL": ("upstream", "base_url"),
    "HOST": ("server", "host"),
    "PORT": ("server", "port"),
    "APP_ENV": ("server", "environment"),
    "LOG_LEVEL": ("server", "log_level"),
}


def load_config(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> ProxyConfig:
    """Load and validate config from an optional YAML file plus environment.

    If no cities are specified in the YAML, injects DEFAULT_CITIES.
    Environment variables in ENV_OVERRIDES take precedence over the file.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        with open(Path(path), encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

    if not raw.get("cities"):
        raw["cities"] = list(DEFAULT_CITIES)

    env = os.environ if env is None else env
    for var, (section, key) in ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            raw.setdefault(section, {})[key] = value

    return ProxyConfig(**raw)


def get_config_value(config: ProxyConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'server.port'."""
    obj: Any = config
    for part in dotted_key.split("."):
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def redacted(config: ProxyConfig) -> ProxyConfig:
    """Return a copy of the config with the API key masked for display."""
    if not config.has_api_key:
        return config
    upstream = config.upstream.model_copy(update={"api_key": "***"})
    return config.model_copy(update={"upstream": upstream})
