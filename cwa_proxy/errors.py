"""Error taxonomy for the weather proxy."""


class WeatherProxyError(Exception):
    """Base class for errors translated into JSON error responses."""


class ConfigurationError(WeatherProxyError):
    """Raised when required configuration (the CWA API key) is missing."""


class CityNotFoundError(WeatherProxyError):
    """Raised when the CWA API has no location record for a city."""

    def __init__(self, city: str):
        super().__init__(f"Unable to fetch weather data for {city}")
        self.city = city


class UpstreamError(WeatherProxyError):
    """Raised when the CWA API call fails.

    ``status_code`` is None for transport failures, where no HTTP status
    was received.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedForecastError(WeatherProxyError):
    """Raised when a location record has no usable time axis."""
