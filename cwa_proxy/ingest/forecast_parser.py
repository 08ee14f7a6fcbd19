"""Reshape CWA location records into flat per-interval forecasts."""

import logging

from cwa_proxy.errors import MalformedForecastError
from cwa_proxy.models.forecast import CityWeatherReport, ForecastInterval

logger = logging.getLogger(__name__)

# elementName -> (ForecastInterval field, unit suffix)
ELEMENT_FIELDS: dict[str, tuple[str, str]] = {
    "Wx": ("weather", ""),
    "PoP": ("rain", "%"),
    "MinT": ("min_temp", "°C"),
    "MaxT": ("max_temp", "°C"),
    "CI": ("comfort", ""),
    "WS": ("wind_speed", ""),
}


def parse_weather_elements(location: dict) -> list[ForecastInterval]:
    """Merge a location's weather elements into one entry per time slot.

    The first element's time array is the authoritative time axis; the
    other elements are assumed to be aligned with it by index.
    """
    elements = location.get("weatherElement") or []
    if not elements:
        raise MalformedForecastError(
            f"No weather elements for {location.get('locationName', '?')}"
        )

    axis = elements[0].get("time") or []
    forecasts: list[ForecastInterval] = []
    for i, slot in enumerate(axis):
        values: dict[str, str] = {
            "start_time": slot.get("startTime", ""),
            "end_time": slot.get("endTime", ""),
        }
        for element in elements:
            mapping = ELEMENT_FIELDS.get(element.get("elementName", ""))
            if mapping is None:
                continue
            field_name, suffix = mapping
            value = _parameter_name(element, i)
            values[field_name] = value + suffix if value else ""
        forecasts.append(ForecastInterval(**values))
    return forecasts


def _parameter_name(element: dict, index: int) -> str:
    try:
        parameter = element["time"][index]["parameter"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedForecastError(
            f"Element {element.get('elementName')} has no value at slot {index}"
        ) from e
    value = parameter.get("parameterName")
    return "" if value is None else str(value)


def build_city_report(payload: dict) -> CityWeatherReport | None:
    """Build a report from a datastore payload.

    Returns None when the payload holds no location record.
    """
    records = payload.get("records") or {}
    locations = records.get("location") or []
    if not locations:
        return None

    location = locations[0]
    return CityWeatherReport(
        city=location.get("locationName", ""),
        update_time=records.get("datasetDescription", ""),
        forecasts=parse_weather_elements(location),
    )
