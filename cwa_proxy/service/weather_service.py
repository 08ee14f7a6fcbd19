"""Single-city and all-cities forecast lookups."""

import asyncio
import logging

from cwa_proxy.errors import CityNotFoundError, ConfigurationError
from cwa_proxy.ingest.cwa_client import CwaClient
from cwa_proxy.ingest.forecast_parser import build_city_report
from cwa_proxy.models.forecast import CityWeatherReport

logger = logging.getLogger(__name__)


class WeatherService:
    def __init__(self, client: CwaClient, cities: list[str]):
        self.client = client
        self.cities = tuple(cities)

    def _require_api_key(self) -> None:
        if not self.client.api_key:
            raise ConfigurationError("CWA_API_KEY is not configured")

    async def get_city_weather(self, city: str) -> CityWeatherReport:
        """Fetch and reshape the forecast for one city.

        Raises CityNotFoundError when the CWA API has no record for ``city``.
        """
        self._require_api_key()
        payload = await self.client.get_forecast(city)
        report = build_city_report(payload)
        if report is None:
            raise CityNotFoundError(city)
        return report

    async def get_all_cities_weather(self) -> list[CityWeatherReport]:
        """Fetch every registry city concurrently.

        Cities that fail or have no record are logged and left out; the
        rest keep registry order.
        """
        self._require_api_key()
        results = await asyncio.gather(
            *(self._try_city(city) for city in self.cities)
        )
        reports = [r for r in results if r is not None]
        logger.info("Fetched %d/%d cities", len(reports), len(self.cities))
        return reports

    async def _try_city(self, city: str) -> CityWeatherReport | None:
        try:
            return await self.get_city_weather(city)
        except CityNotFoundError:
            logger.warning("No forecast record for %s, skipping", city)
            return None
        except Exception as e:
            logger.warning("Failed to fetch weather for %s: %s", city, e)
            return None
