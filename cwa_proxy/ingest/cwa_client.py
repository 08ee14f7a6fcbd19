"""CWA open-data forecast API client."""

import logging

import httpx

from cwa_proxy.config.defaults import CWA_API_BASE_URL, FORECAST_DATASET_ID
from cwa_proxy.config.schema import UpstreamConfig
from cwa_proxy.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Unable to fetch weather data"


class CwaClient:
    """Thin async wrapper around the CWA datastore REST API.

    Every request is authenticated with the ``Authorization`` query
    parameter. A shared ``httpx.AsyncClient`` may be passed in so that
    concurrent calls reuse one connection pool.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = CWA_API_BASE_URL,
        dataset_id: str = FORECAST_DATASET_ID,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.dataset_id = dataset_id
        self.timeout = timeout
        self._http = http_client

    @classmethod
    def from_config(
        cls, config: UpstreamConfig, http_client: httpx.AsyncClient | None = None
    ) -> "CwaClient":
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            dataset_id=config.dataset_id,
            timeout=config.timeout_seconds,
            http_client=http_client,
        )

    @property
    def forecast_url(self) -> str:
        return f"{self.base_url}/v1/rest/datastore/{self.dataset_id}"

    async def get_forecast(self, location_name: str) -> dict:
        """Fetch the raw forecast payload for one location name.

        Raises ConfigurationError before any network I/O when no API key
        is configured, and UpstreamError for HTTP or transport failures.
        """
        if not self.api_key:
            raise ConfigurationError("CWA_API_KEY is not configured")

        params = {"Authorization": self.api_key, "locationName": location_name}
        try:
            if self._http is not None:
                resp = await self._http.get(
                    self.forecast_url,
                    params=params,
                    timeout=self.timeout,
                    follow_redirects=True,
                )
            else:
                async with httpx.AsyncClient(
                    timeout=self.timeout, follow_redirects=True
                ) as http:
                    resp = await http.get(self.forecast_url, params=params)
        except httpx.RequestError as e:
            logger.error("CWA request failed for %s: %s", location_name, e)
            raise UpstreamError(f"Request failed: {e}") from e

        if not resp.is_success:
            message = _error_message(resp)
            logger.error(
                "CWA API %d for %s: %s", resp.status_code, location_name, message
            )
            raise UpstreamError(message, resp.status_code)

        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON from CWA API: {e}") from e


def _error_message(resp: httpx.Response) -> str:
    """Pull the upstream ``message`` field out of an error body, if any."""
    try:
        body = resp.json()
    except ValueError:
        return DEFAULT_ERROR_MESSAGE
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return DEFAULT_ERROR_MESSAGE
