from __future__ import annotations

import random
from datetime import datetime

import pytest

from kissan.schemas.diagnosis import PlantStatus, Severity
from kissan.schemas.weather import WeatherLocation
from kissan.services.catalog_service import MARKET_DATA
from kissan.services.errors import MalformedResponseError, UpstreamError
from kissan.services.normalizers import (
	DEMO_DIAGNOSES,
	coerce_diagnosis,
	describe_weather_code,
	diagnosis_from_label,
	extract_json_object,
	filter_quotes,
	first_geocode_match,
	group_hourly,
	hour_label,
	normalize_weather,
	pick_demo_diagnosis,
	round_half_up,
)

DELHI = WeatherLocation(name="New Delhi", lat=28.6139, lon=77.2090)


def _forecast_payload() -> dict:
	return {
		"current": {
			"temperature_2m": 31.5,
			"relative_humidity_2m": 40,
			"wind_speed_10m": 12.3,
			"precipitation": 0.0,
			"weather_code": 2,
		},
		"daily": {
			"time": ["2024-03-15", "2024-03-16"],
			"weather_code": [61, 999],
			"temperature_2m_max": [33.4, 30.5],
			"temperature_2m_min": [18.6, 17.2],
			"precipitation_probability_max": [70, None],
		},
		"hourly": {
			"time": ["2024-03-15T15:00", "2024-03-15T00:00", "2024-03-16T12:00"],
			"temperature_2m": [30.2, 19.5, 28.0],
			"precipitation_probability": [10, 0, None],
		},
	}


@pytest.mark.parametrize(
	("code", "expected"),
	[
		(0, ("Clear sky", "Sun")),
		(3, ("Overcast", "Cloud")),
		(65, ("Heavy rain", "CloudRain")),
		(75, ("Heavy snow", "Snowflake")),
		(95, ("Thunderstorm", "CloudRain")),
	],
)
def test_known_weather_codes(code: int, expected: tuple[str, str]) -> None:
	assert describe_weather_code(code) == expected


@pytest.mark.parametrize("code", [4, 99, 999, None, "abc"])
def test_unknown_weather_code_is_generic(code: object) -> None:
	assert describe_weather_code(code) == ("Unknown", "Cloud")


def test_round_half_up() -> None:
	assert round_half_up(31.5) == 32
	assert round_half_up(30.49) == 30
	assert round_half_up(-2.5) == -2
	assert round_half_up(-2.6) == -3


def test_hour_label() -> None:
	assert hour_label(datetime(2024, 3, 15, 0)) == "12 AM"
	assert hour_label(datetime(2024, 3, 15, 12)) == "12 PM"
	assert hour_label(datetime(2024, 3, 15, 15)) == "3 PM"


def test_normalize_weather_shapes_payload() -> None:
	snapshot = normalize_weather(_forecast_payload(), DELHI)

	assert snapshot.current.temp == 32
	assert snapshot.current.desc == "Partly cloudy"
	assert snapshot.current.icon == "CloudSun"
	assert [day.day for day in snapshot.daily] == ["Fri", "Sat"]
	assert snapshot.daily[0].max_temp == 33
	assert snapshot.daily[0].min_temp == 19
	assert snapshot.daily[0].rain_chance == 70
	assert snapshot.daily[1].rain_chance == 0
	assert snapshot.daily[1].desc == "Unknown"
	assert snapshot.location == DELHI


def test_daily_forecast_serializes_camel_case() -> None:
	body = normalize_weather(_forecast_payload(), DELHI).model_dump(by_alias=True)
	assert {"maxTemp", "minTemp", "rainChance"} <= set(body["daily"][0])


def test_hourly_grouped_by_weekday_in_order() -> None:
	grouped = group_hourly(
		["2024-03-15T15:00", "2024-03-15T00:00", "2024-03-16T12:00"],
		[30.2, 19.5, 28.0],
		[10, 0, None],
	)

	assert list(grouped) == ["Fri", "Sat"]
	assert [point.time for point in grouped["Fri"]] == ["12 AM", "3 PM"]
	assert [point.temp for point in grouped["Fri"]] == [20, 30]
	assert grouped["Sat"][0].rain == 0


@pytest.mark.parametrize("missing", ["current", "daily", "hourly"])
def test_malformed_weather_fails_closed(missing: str) -> None:
	payload = _forecast_payload()
	del payload[missing]

	with pytest.raises(MalformedResponseError) as excinfo:
		normalize_weather(payload, DELHI)
	assert isinstance(excinfo.value, UpstreamError)


def test_first_geocode_match_joins_region() -> None:
	match = first_geocode_match(
		{"results": [{"name": "Khanna", "admin1": "Punjab", "latitude": 30.7, "longitude": 76.2}]}
	)
	assert match == WeatherLocation(name="Khanna, Punjab", lat=30.7, lon=76.2)
	assert first_geocode_match({"results": []}) is None
	assert first_geocode_match({}) is None


def test_market_filter_by_state_and_commodity() -> None:
	rows = filter_quotes(MARKET_DATA, state="Punjab", commodity="Wheat")
	assert [(row.id, row.modal_price) for row in rows] == [(1, 2275)]


def test_market_all_sentinel_is_identity() -> None:
	assert filter_quotes(MARKET_DATA, state="All", commodity="All") == list(MARKET_DATA)
	assert filter_quotes(MARKET_DATA, state="", commodity=None, search="  ") == list(MARKET_DATA)


def test_market_state_filter_is_exact() -> None:
	rows = filter_quotes(MARKET_DATA, state="Haryana")
	assert {row.state for row in rows} == {"Haryana"}
	assert filter_quotes(MARKET_DATA, state="haryana") == []


def test_market_search_ignores_case() -> None:
	upper = filter_quotes(MARKET_DATA, search="WHEAT")
	lower = filter_quotes(MARKET_DATA, search="wheat")
	assert upper == lower
	assert [row.id for row in upper] == [1, 3]
	assert [row.id for row in filter_quotes(MARKET_DATA, search="nash")] == [6]


def test_extract_json_from_fenced_text() -> None:
	text = 'Here you go:\n```json\n{"plant": "Wheat", "note": "braces } inside { strings"}\n```\nThanks'
	assert extract_json_object(text) == {"plant": "Wheat", "note": "braces } inside { strings"}


def test_extract_json_takes_first_balanced_span() -> None:
	assert extract_json_object('{"a": {"b": 1}} trailing {"c": 2}') == {"a": {"b": 1}}


@pytest.mark.parametrize(
	"text",
	[
		"no json at all",
		'{"plant": "Wheat"',
		"{plant: Wheat}",
	],
)
def test_extract_json_failures_are_typed(text: str) -> None:
	with pytest.raises(MalformedResponseError):
		extract_json_object(text)


def test_coerce_diagnosis_normalizes_fields() -> None:
	result = coerce_diagnosis(
		{
			"plant": "Wheat",
			"status": "diseased",
			"disease": "null",
			"severity": "moderate",
			"confidence": 104.6,
			"treatment": "Spray",
			"prevention": "Rotate",
		}
	)
	assert result.status == PlantStatus.diseased
	assert result.severity == Severity.moderate
	assert result.disease is None
	assert result.confidence == 100


def test_coerce_diagnosis_rejects_unknown_status() -> None:
	with pytest.raises(MalformedResponseError):
		coerce_diagnosis({"plant": "Wheat", "status": "Sad", "severity": "Low", "confidence": 50})


def test_label_mapping_healthy() -> None:
	result = diagnosis_from_label("Tomato___healthy", 0.91)
	assert result.plant == "Tomato"
	assert result.status == PlantStatus.healthy
	assert result.severity == Severity.none
	assert result.disease is None
	assert result.confidence == 91


def test_label_mapping_rust() -> None:
	result = diagnosis_from_label("Corn_(maize)___Common_rust_", 0.8)
	assert result.status == PlantStatus.diseased
	assert result.disease == "Rust (fungal)"
	assert result.severity == Severity.moderate


def test_label_mapping_generic_disease() -> None:
	result = diagnosis_from_label("Potato___Late_blight", 0.66)
	assert result.plant == "Potato"
	assert result.status == PlantStatus.diseased
	assert result.disease == "Late blight"


def test_demo_diagnosis_strategies() -> None:
	assert pick_demo_diagnosis("fixed") == DEMO_DIAGNOSES[0]
	assert pick_demo_diagnosis("random", random.Random(7)) in DEMO_DIAGNOSES
	assert {result.status for result in DEMO_DIAGNOSES} == set(PlantStatus)
