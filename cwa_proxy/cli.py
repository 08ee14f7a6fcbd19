"""CLI entry point for the CWA weather forecast proxy."""

import argparse
import asyncio
import json
import logging

from dotenv import load_dotenv

from cwa_proxy.config.loader import get_config_value, load_config, redacted
from cwa_proxy.config.schema import ProxyConfig
from cwa_proxy.errors import WeatherProxyError
from cwa_proxy.ingest.cwa_client import CwaClient
from cwa_proxy.service.weather_service import WeatherService

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="cwa-proxy",
        description="CWA weather forecast proxy",
    )
    parser.add_argument("--config", default=None, help="Config YAML path")
    parser.add_argument(
        "--env-file", default=".env", help="dotenv file loaded before config"
    )

    sub = parser.add_subparsers(dest="command")

    # serve
    serve_p = sub.add_parser("serve", help="Run the HTTP server")
    serve_p.add_argument("--host", default=None, help="Bind address")
    serve_p.add_argument("--port", type=int, default=None, help="Listen port")

    # fetch
    fetch_p = sub.add_parser("fetch", help="Fetch one city's forecast")
    fetch_p.add_argument("city", help="Administrative region name, e.g. 臺北市")

    # cities
    sub.add_parser("cities", help="List the city registry")

    # config show
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    show_p = config_sub.add_parser("show", help="Display effective config")
    show_p.add_argument("key", nargs="?", help="Optional dotted key")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    load_dotenv(args.env_file)
    config = load_config(args.config)

    logging.basicConfig(
        level=getattr(logging, config.server.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        return _cmd_serve(config, args)
    elif args.command == "fetch":
        return _cmd_fetch(config, args)
    elif args.command == "cities":
        return _cmd_cities(config)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _cmd_serve(config: ProxyConfig, args) -> int:
    import uvicorn

    from cwa_proxy.api.app import create_app

    host = args.host or config.server.host
    port = args.port or config.server.port
    if not config.has_api_key:
        logger.warning("CWA_API_KEY is not set; weather endpoints will return 500")
    logger.info("Server starting on %s:%d (env: %s)", host, port, config.server.environment)
    uvicorn.run(create_app(config), host=host, port=port, log_level=config.server.log_level.lower())
    return 0


def _cmd_fetch(config: ProxyConfig, args) -> int:
    service = WeatherService(CwaClient.from_config(config.upstream), config.cities)
    try:
        report = asyncio.run(service.get_city_weather(args.city))
    except WeatherProxyError as e:
        print(f"Error ({type(e).__name__}): {e}")
        return 1
    print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    return 0


def _cmd_cities(config: ProxyConfig) -> int:
    for i, city in enumerate(config.cities, start=1):
        print(f"{i:2d}. {city}")
    return 0


def _cmd_config(config: ProxyConfig, args) -> int:
    if args.config_command != "show":
        print("Error: use 'config show [key]'")
        return 1
    shown = redacted(config)
    if args.key:
        try:
            value = get_config_value(shown, args.key)
        except (KeyError, IndexError, ValueError):
            print(f"Error: unknown config key {args.key}")
            return 1
        print(value)
        return 0
    print(shown.model_dump_json(indent=2))
    return 0
