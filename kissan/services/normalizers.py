"""Pure shaping of provider payloads into the dashboard data model.

Nothing in this module performs I/O or keeps state; every function maps its
input to an output (or raises a typed ``UpstreamError``) so the shaping rules
can be exercised without touching the network.
"""

from __future__ import annotations

import json
import math
import random
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime
from typing import Any

from pydantic import ValidationError

from kissan.schemas.diagnosis import DiagnosisResult, PlantStatus, Severity
from kissan.schemas.market import ALL_FILTER, MarketMeta, MarketQuote, Scheme
from kissan.schemas.weather import (
	CurrentConditions,
	DailyForecast,
	HourlyPoint,
	WeatherLocation,
	WeatherSnapshot,
)
from kissan.services.errors import MalformedResponseError

# ── Weather ────────────────────────────────────────────────────────────────

WEATHER_CODES: dict[int, tuple[str, str]] = {
	0: ("Clear sky", "Sun"),
	1: ("Mainly clear", "CloudSun"),
	2: ("Partly cloudy", "CloudSun"),
	3: ("Overcast", "Cloud"),
	45: ("Fog", "Cloud"),
	48: ("Fog", "Cloud"),
	51: ("Drizzle", "CloudRain"),
	53: ("Drizzle", "CloudRain"),
	55: ("Drizzle", "CloudRain"),
	61: ("Rain", "CloudRain"),
	63: ("Rain", "CloudRain"),
	65: ("Heavy rain", "CloudRain"),
	71: ("Snow", "Snowflake"),
	73: ("Snow", "Snowflake"),
	75: ("Heavy snow", "Snowflake"),
	80: ("Rain showers", "CloudRain"),
	81: ("Rain showers", "CloudRain"),
	82: ("Heavy showers", "CloudRain"),
	95: ("Thunderstorm", "CloudRain"),
}
UNKNOWN_WEATHER: tuple[str, str] = ("Unknown", "Cloud")


def describe_weather_code(code: Any) -> tuple[str, str]:
	try:
		return WEATHER_CODES.get(int(code), UNKNOWN_WEATHER)
	except (TypeError, ValueError):
		return UNKNOWN_WEATHER


def round_half_up(value: float) -> int:
	"""Round like the dashboard does: halves go up, also for negatives (-2.5 -> -2)."""
	return int(math.floor(float(value) + 0.5))


def weekday_label(value: str | date) -> str:
	if isinstance(value, str):
		value = datetime.fromisoformat(value)
	return value.strftime("%a")


def hour_label(moment: datetime) -> str:
	hour = moment.hour % 12 or 12
	return f"{hour} {'AM' if moment.hour < 12 else 'PM'}"


def _or_zero(values: Sequence[Any] | None, index: int) -> float:
	if not values or index >= len(values) or values[index] is None:
		return 0
	return values[index]


def normalize_weather(payload: Mapping[str, Any], location: WeatherLocation) -> WeatherSnapshot:
	"""Shape an Open-Meteo forecast payload (current + daily + hourly)."""
	try:
		current_raw = payload["current"]
		desc, icon = describe_weather_code(current_raw.get("weather_code"))
		current = CurrentConditions(
			temp=round_half_up(current_raw["temperature_2m"]),
			humidity=current_raw.get("relative_humidity_2m"),
			wind=current_raw.get("wind_speed_10m"),
			precip=current_raw.get("precipitation"),
			desc=desc,
			icon=icon,
		)

		daily_raw = payload["daily"]
		rain_max = daily_raw.get("precipitation_probability_max")
		daily: list[DailyForecast] = []
		for index, day in enumerate(daily_raw["time"]):
			desc, icon = describe_weather_code(daily_raw["weather_code"][index])
			daily.append(
				DailyForecast(
					day=weekday_label(date.fromisoformat(day)),
					max_temp=round_half_up(daily_raw["temperature_2m_max"][index]),
					min_temp=round_half_up(daily_raw["temperature_2m_min"][index]),
					rain_chance=_or_zero(rain_max, index),
					desc=desc,
					icon=icon,
				)
			)

		hourly_raw = payload["hourly"]
		hourly = group_hourly(
			hourly_raw["time"],
			hourly_raw["temperature_2m"],
			hourly_raw.get("precipitation_probability"),
		)
	except (KeyError, IndexError, TypeError, ValueError, AttributeError, ValidationError) as exc:
		raise MalformedResponseError(detail=f"Weather payload malformed: {exc}") from exc

	return WeatherSnapshot(current=current, daily=daily, hourly=hourly, location=location)


def group_hourly(
	times: Sequence[str],
	temperatures: Sequence[float],
	rain: Sequence[float | None] | None,
) -> dict[str, list[HourlyPoint]]:
	"""Bucket hourly points by short weekday name, chronological within each bucket."""
	stamped = sorted(
		((datetime.fromisoformat(stamp), index) for index, stamp in enumerate(times)),
		key=lambda item: item[0],
	)
	grouped: dict[str, list[HourlyPoint]] = {}
	for moment, index in stamped:
		grouped.setdefault(weekday_label(moment), []).append(
			HourlyPoint(
				time=hour_label(moment),
				temp=round_half_up(temperatures[index]),
				rain=_or_zero(rain, index),
			)
		)
	return grouped


def first_geocode_match(payload: Mapping[str, Any]) -> WeatherLocation | None:
	results = payload.get("results") if isinstance(payload, Mapping) else None
	if not results:
		return None
	top = results[0]
	try:
		name = str(top["name"])
		if top.get("admin1"):
			name = f"{name}, {top['admin1']}"
		return WeatherLocation(name=name, lat=float(top["latitude"]), lon=float(top["longitude"]))
	except (KeyError, TypeError, ValueError) as exc:
		raise MalformedResponseError(detail=f"Geocoding payload malformed: {exc}") from exc


# ── Market ─────────────────────────────────────────────────────────────────


def _is_all(value: str | None) -> bool:
	return value is None or not value.strip() or value.strip().lower() == ALL_FILTER.lower()


def filter_quotes(
	rows: Iterable[MarketQuote],
	*,
	state: str | None = None,
	commodity: str | None = None,
	search: str | None = None,
) -> list[MarketQuote]:
	"""Conjunctive filter; ``"All"``/empty disables a filter, search ignores case."""
	filtered = list(rows)
	if not _is_all(state):
		filtered = [row for row in filtered if row.state == state]
	if not _is_all(commodity):
		filtered = [row for row in filtered if row.commodity == commodity]
	if search and search.strip():
		term = search.strip().lower()
		filtered = [
			row
			for row in filtered
			if term in row.market.lower() or term in row.commodity.lower()
		]
	return filtered


def market_meta(dataset: Sequence[MarketQuote], filtered_total: int) -> MarketMeta:
	return MarketMeta(
		states=list(dict.fromkeys(row.state for row in dataset)),
		commodities=list(dict.fromkeys(row.commodity for row in dataset)),
		total=filtered_total,
	)


def filter_schemes(
	rows: Iterable[Scheme],
	*,
	category: str | None = None,
	search: str | None = None,
) -> list[Scheme]:
	filtered = list(rows)
	if not _is_all(category):
		filtered = [row for row in filtered if row.category == category]
	if search and search.strip():
		term = search.strip().lower()
		filtered = [
			row
			for row in filtered
			if term in row.title.lower() or term in row.description.lower()
		]
	return filtered


# ── Diagnosis ──────────────────────────────────────────────────────────────


def extract_json_object(text: str) -> dict[str, Any]:
	"""Parse the first balanced ``{...}`` span found in free text.

	Braces inside JSON string literals do not count towards the balance.
	No span, an unbalanced span, or unparseable JSON raises
	``MalformedResponseError``; a partial object is never returned.
	"""
	start = text.find("{")
	if start < 0:
		raise MalformedResponseError(detail="No JSON object found in model output")

	depth = 0
	in_string = False
	escaped = False
	end = -1
	for index in range(start, len(text)):
		char = text[index]
		if in_string:
			if escaped:
				escaped = False
			elif char == "\\":
				escaped = True
			elif char == '"':
				in_string = False
			continue
		if char == '"':
			in_string = True
		elif char == "{":
			depth += 1
		elif char == "}":
			depth -= 1
			if depth == 0:
				end = index
				break

	if end < 0:
		raise MalformedResponseError(detail="Unbalanced JSON object in model output")
	try:
		parsed = json.loads(text[start : end + 1])
	except json.JSONDecodeError as exc:
		raise MalformedResponseError(detail=f"Model output is not valid JSON: {exc.msg}") from exc
	if not isinstance(parsed, dict):
		raise MalformedResponseError(detail="Model output JSON is not an object")
	return parsed


def _match_enum(raw: Any, enum_cls: type[PlantStatus] | type[Severity]) -> Any:
	token = str(raw or "").strip().lower()
	for member in enum_cls:
		if member.value.lower() == token:
			return member
	raise MalformedResponseError(detail=f"Unexpected {enum_cls.__name__} value: {raw!r}")


def coerce_diagnosis(payload: Mapping[str, Any]) -> DiagnosisResult:
	"""Coerce a model JSON object into ``DiagnosisResult``; unknown shapes fail."""
	try:
		confidence = round_half_up(float(payload.get("confidence", 0)))
	except (TypeError, ValueError) as exc:
		raise MalformedResponseError(detail="Diagnosis confidence is not numeric") from exc

	disease = payload.get("disease")
	if isinstance(disease, str) and disease.strip().lower() in {"", "null", "none"}:
		disease = None

	try:
		return DiagnosisResult(
			plant=str(payload.get("plant") or "Unknown"),
			status=_match_enum(payload.get("status"), PlantStatus),
			disease=None if disease is None else str(disease),
			severity=_match_enum(payload.get("severity") or "None", Severity),
			confidence=max(0, min(100, confidence)),
			treatment=str(payload.get("treatment") or ""),
			prevention=str(payload.get("prevention") or ""),
		)
	except ValidationError as exc:
		raise MalformedResponseError(detail=f"Diagnosis failed validation: {exc}") from exc


def _plant_from_label(label: str) -> str:
	head = label.split("___", 1)[0] if "___" in label else "Unknown"
	return head.replace("_", " ").strip() or "Unknown"


def diagnosis_from_label(label: str, score: float) -> DiagnosisResult:
	"""Map an image-classifier label + score onto the diagnosis shape."""
	lowered = label.lower()
	confidence = max(0, min(100, round_half_up(float(score) * 100)))
	plant = _plant_from_label(label)

	if "healthy" in lowered:
		return DiagnosisResult(
			plant=plant,
			status=PlantStatus.healthy,
			disease=None,
			severity=Severity.none,
			confidence=confidence,
			treatment="No treatment needed. Continue regular watering and balanced fertilization.",
			prevention="Keep monitoring leaves weekly and maintain field hygiene.",
		)
	if "rust" in lowered:
		return DiagnosisResult(
			plant=plant,
			status=PlantStatus.diseased,
			disease="Rust (fungal)",
			severity=Severity.moderate,
			confidence=confidence,
			treatment="Spray Propiconazole 25 EC (0.1%) or Mancozeb (0.25%); repeat after 10-15 days if stripes spread.",
			prevention="Sow resistant varieties, avoid late sowing and excess nitrogen, and remove volunteer plants.",
		)
	disease = label.split("___", 1)[-1].replace("_", " ").strip() or None
	return DiagnosisResult(
		plant=plant,
		status=PlantStatus.diseased,
		disease=disease,
		severity=Severity.moderate,
		confidence=confidence,
		treatment="Remove affected leaves and consult your local Krishi Vigyan Kendra for a suitable fungicide or pesticide.",
		prevention="Practice crop rotation, use certified seed, and avoid overhead irrigation late in the day.",
	)


DEMO_DIAGNOSES: tuple[DiagnosisResult, ...] = (
	DiagnosisResult(
		plant="Wheat",
		status=PlantStatus.diseased,
		disease="Yellow Rust",
		severity=Severity.moderate,
		confidence=87,
		treatment="Spray Propiconazole 25 EC at 1 ml per litre of water. Repeat after 15 days if symptoms persist.",
		prevention="Use resistant varieties such as HD 2967 and avoid excess nitrogen fertilizer.",
	),
	DiagnosisResult(
		plant="Tomato",
		status=PlantStatus.healthy,
		disease=None,
		severity=Severity.none,
		confidence=94,
		treatment="No treatment needed. The plant looks healthy.",
		prevention="Keep up regular watering, staking and weekly leaf inspection.",
	),
	DiagnosisResult(
		plant="Cotton",
		status=PlantStatus.pest_affected,
		disease="Pink Bollworm",
		severity=Severity.high,
		confidence=78,
		treatment="Install pheromone traps (5 per acre) and spray Emamectin Benzoate 5 SG at 0.4 g per litre.",
		prevention="Destroy crop residue after harvest and avoid extending the cropping season.",
	),
)


def pick_demo_diagnosis(strategy: str, rng: random.Random | None = None) -> DiagnosisResult:
	"""Canned diagnosis used only when every upstream model call has failed."""
	if strategy == "random":
		return (rng or random.Random()).choice(DEMO_DIAGNOSES)
	return DEMO_DIAGNOSES[0]
