"""Open-Meteo forecast + geocoding client."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from kissan.config import get_settings
from kissan.schemas.weather import WeatherLocation, WeatherSnapshot
from kissan.services.errors import MalformedResponseError, UpstreamError
from kissan.services.normalizers import first_geocode_match, normalize_weather

logger = structlog.get_logger("kissan.weather")

_CURRENT_FIELDS = "temperature_2m,relative_humidity_2m,weather_code,wind_speed_10m,precipitation"
_DAILY_FIELDS = "weather_code,temperature_2m_max,temperature_2m_min,precipitation_probability_max"
_HOURLY_FIELDS = "temperature_2m,precipitation_probability"


class WeatherService:
	def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
		self.settings = get_settings()
		self.transport = transport

	def _client(self) -> httpx.AsyncClient:
		return httpx.AsyncClient(
			timeout=self.settings.weather_timeout_seconds,
			transport=self.transport,
		)

	async def get_snapshot(
		self,
		*,
		lat: float | None = None,
		lon: float | None = None,
		location: str | None = None,
	) -> WeatherSnapshot:
		async with self._client() as client:
			resolved = await self.resolve_location(client, lat=lat, lon=lon, location=location)
			payload = await self._get_json(
				client,
				self.settings.weather_api_url,
				{
					"latitude": resolved.lat,
					"longitude": resolved.lon,
					"current": _CURRENT_FIELDS,
					"daily": _DAILY_FIELDS,
					"hourly": _HOURLY_FIELDS,
					"forecast_days": 7,
					"timezone": "auto",
				},
			)
		return normalize_weather(payload, resolved)

	async def resolve_location(
		self,
		client: httpx.AsyncClient,
		*,
		lat: float | None,
		lon: float | None,
		location: str | None,
	) -> WeatherLocation:
		"""Explicit coordinates win; otherwise geocode the place name; otherwise the default."""
		name = location.strip() if location and location.strip() else None
		if lat is not None and lon is not None:
			return WeatherLocation(name=name or f"{lat:.4f}, {lon:.4f}", lat=lat, lon=lon)

		if name is not None:
			payload = await self._get_json(
				client,
				self.settings.geocode_api_url,
				{"name": name, "count": 1},
			)
			match = first_geocode_match(payload)
			if match is not None:
				return match
			logger.info("geocode_no_match", location=name)

		return WeatherLocation(
			name=name or self.settings.default_location_name,
			lat=self.settings.default_latitude,
			lon=self.settings.default_longitude,
		)

	@staticmethod
	async def _get_json(client: httpx.AsyncClient, url: str, params: dict[str, Any]) -> Any:
		try:
			response = await client.get(url, params=params)
			response.raise_for_status()
		except httpx.HTTPStatusError as exc:
			logger.warning("weather_upstream_status", url=url, status_code=exc.response.status_code)
			raise UpstreamError(code="weather_unavailable", detail="Failed to fetch weather") from exc
		except httpx.HTTPError as exc:
			logger.warning("weather_upstream_error", url=url, error=str(exc))
			raise UpstreamError(code="weather_unavailable", detail="Failed to fetch weather") from exc
		try:
			return response.json()
		except ValueError as exc:
			raise MalformedResponseError(detail="Weather provider returned non-JSON body") from exc
