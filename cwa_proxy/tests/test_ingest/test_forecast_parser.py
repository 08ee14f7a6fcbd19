"""Tests for reshaping CWA location records."""

import pytest

from cwa_proxy.errors import MalformedForecastError
from cwa_proxy.ingest.forecast_parser import build_city_report, parse_weather_elements


def _element(name: str, values: list[str]) -> dict:
    return {
        "elementName": name,
        "time": [
            {
                "startTime": f"t{i}",
                "endTime": f"t{i + 1}",
                "parameter": {"parameterName": v},
            }
            for i, v in enumerate(values)
        ],
    }


class TestParseWeatherElements:
    def test_taipei_fixture(self, taipei_payload: dict):
        location = taipei_payload["records"]["location"][0]
        forecasts = parse_weather_elements(location)

        assert len(forecasts) == 3
        first = forecasts[0]
        assert first.start_time == "2026-10-19 18:00:00"
        assert first.end_time == "2026-10-20 06:00:00"
        assert first.weather == "多雲時晴"
        assert first.rain == "10%"
        assert first.min_temp == "22°C"
        assert first.max_temp == "25°C"
        assert first.comfort == "舒適"
        # F-C0032-001 has no WS element
        assert first.wind_speed == ""

    def test_preserves_time_order(self, taipei_payload: dict):
        location = taipei_payload["records"]["location"][0]
        starts = [f.start_time for f in parse_weather_elements(location)]
        assert starts == sorted(starts)
        assert starts[-1] == "2026-10-20 18:00:00"

    def test_all_six_elements(self):
        location = {
            "weatherElement": [
                _element("Wx", ["晴", "雨"]),
                _element("PoP", ["0", "80"]),
                _element("MinT", ["18", "17"]),
                _element("MaxT", ["26", "20"]),
                _element("CI", ["舒適", "寒冷"]),
                _element("WS", ["<= 1 級", "3 級"]),
            ]
        }
        forecasts = parse_weather_elements(location)

        assert [f.to_dict() for f in forecasts][1] == {
            "startTime": "t1",
            "endTime": "t2",
            "weather": "雨",
            "rain": "80%",
            "minTemp": "17°C",
            "maxTemp": "20°C",
            "comfort": "寒冷",
            "windSpeed": "3 級",
        }

    def test_null_parameter_name_is_empty(self):
        location = {
            "weatherElement": [
                _element("Wx", ["晴"]),
                _element("PoP", ["10"]),
                _element("MinT", ["18"]),
            ]
        }
        location["weatherElement"][1]["time"][0]["parameter"]["parameterName"] = None
        location["weatherElement"][2]["time"][0]["parameter"] = {}

        forecast = parse_weather_elements(location)[0]
        assert forecast.rain == ""
        assert forecast.min_temp == ""
        assert forecast.weather == "晴"

    def test_unknown_element_ignored(self):
        location = {
            "weatherElement": [_element("Wx", ["晴"]), _element("UVI", ["9"])]
        }
        forecasts = parse_weather_elements(location)
        assert forecasts[0].weather == "晴"
        assert forecasts[0].rain == ""

    def test_first_element_sets_time_axis(self):
        location = {
            "weatherElement": [
                _element("MinT", ["10"]),
                _element("Wx", ["晴", "陰"]),
            ]
        }
        forecasts = parse_weather_elements(location)
        assert len(forecasts) == 1
        assert forecasts[0].weather == "晴"

    def test_empty_elements_raises(self):
        with pytest.raises(MalformedForecastError):
            parse_weather_elements({"locationName": "臺北市", "weatherElement": []})

    def test_missing_elements_raises(self):
        with pytest.raises(MalformedForecastError):
            parse_weather_elements({"locationName": "臺北市"})

    def test_short_element_raises(self):
        location = {
            "weatherElement": [_element("Wx", ["晴", "陰"]), _element("PoP", ["10"])]
        }
        with pytest.raises(MalformedForecastError):
            parse_weather_elements(location)


class TestBuildCityReport:
    def test_report_fields(self, taipei_payload: dict):
        report = build_city_report(taipei_payload)

        assert report is not None
        assert report.city == "臺北市"
        assert report.update_time == "三十六小時天氣預報"
        assert len(report.forecasts) == 3

    def test_to_dict_shape(self, taipei_payload: dict):
        data = build_city_report(taipei_payload).to_dict()
        assert set(data) == {"city", "updateTime", "forecasts"}
        assert set(data["forecasts"][0]) == {
            "startTime", "endTime", "weather", "rain",
            "minTemp", "maxTemp", "comfort", "windSpeed",
        }

    def test_no_location_returns_none(self, empty_payload: dict):
        assert build_city_report(empty_payload) is None

    def test_missing_records_returns_none(self):
        assert build_city_report({"success": "true"}) is None
