from __future__ import annotations

import httpx
import pytest
from httpx import AsyncClient

from kissan.services.errors import MalformedResponseError, UpstreamError
from kissan.services.weather_service import WeatherService

FORECAST = {
	"current": {
		"temperature_2m": 24.4,
		"relative_humidity_2m": 55,
		"wind_speed_10m": 8.0,
		"precipitation": 0.2,
		"weather_code": 80,
	},
	"daily": {
		"time": ["2024-03-15"],
		"weather_code": [80],
		"temperature_2m_max": [27.5],
		"temperature_2m_min": [15.0],
		"precipitation_probability_max": [60],
	},
	"hourly": {
		"time": ["2024-03-15T09:00"],
		"temperature_2m": [21.0],
		"precipitation_probability": [35],
	},
}


def _transport(calls: list[httpx.Request], geocode: dict | None = None) -> httpx.MockTransport:
	def handler(request: httpx.Request) -> httpx.Response:
		calls.append(request)
		if "geocoding" in request.url.host:
			return httpx.Response(200, json=geocode or {"results": []})
		return httpx.Response(200, json=FORECAST)

	return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_explicit_coordinates_skip_geocoding() -> None:
	calls: list[httpx.Request] = []
	service = WeatherService(transport=_transport(calls))

	snapshot = await service.get_snapshot(lat=30.7, lon=76.2)

	assert len(calls) == 1
	assert calls[0].url.params["latitude"] == "30.7"
	assert calls[0].url.params["forecast_days"] == "7"
	assert snapshot.current.desc == "Rain showers"
	assert snapshot.location.lat == 30.7


@pytest.mark.asyncio
async def test_place_name_is_geocoded() -> None:
	calls: list[httpx.Request] = []
	geocode = {"results": [{"name": "Karnal", "admin1": "Haryana", "latitude": 29.69, "longitude": 76.99}]}
	service = WeatherService(transport=_transport(calls, geocode))

	snapshot = await service.get_snapshot(location="Karnal")

	assert calls[0].url.params["name"] == "Karnal"
	assert calls[1].url.params["latitude"] == "29.69"
	assert snapshot.location.name == "Karnal, Haryana"


@pytest.mark.asyncio
async def test_unknown_place_uses_default_coordinates(settings: object) -> None:
	calls: list[httpx.Request] = []
	service = WeatherService(transport=_transport(calls))

	snapshot = await service.get_snapshot(location="Atlantis")

	assert snapshot.location.name == "Atlantis"
	assert snapshot.location.lat == settings.default_latitude
	assert snapshot.location.lon == settings.default_longitude


@pytest.mark.asyncio
async def test_no_location_uses_default_place(settings: object) -> None:
	service = WeatherService(transport=_transport([]))
	snapshot = await service.get_snapshot()
	assert snapshot.location.name == settings.default_location_name


@pytest.mark.asyncio
async def test_upstream_error_status_is_typed() -> None:
	service = WeatherService(transport=httpx.MockTransport(lambda request: httpx.Response(503)))

	with pytest.raises(UpstreamError) as excinfo:
		await service.get_snapshot(lat=1.0, lon=1.0)
	assert excinfo.value.code == "weather_unavailable"


@pytest.mark.asyncio
async def test_network_failure_is_typed() -> None:
	def handler(request: httpx.Request) -> httpx.Response:
		raise httpx.ConnectTimeout("timed out", request=request)

	service = WeatherService(transport=httpx.MockTransport(handler))

	with pytest.raises(UpstreamError):
		await service.get_snapshot(lat=1.0, lon=1.0)


@pytest.mark.asyncio
async def test_unexpected_shape_is_malformed() -> None:
	service = WeatherService(
		transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"current": {}}))
	)

	with pytest.raises(MalformedResponseError):
		await service.get_snapshot(lat=1.0, lon=1.0)


@pytest.mark.asyncio
async def test_weather_route_returns_snapshot(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
	original_init = WeatherService.__init__

	def init_with_mock(self: WeatherService, transport: httpx.AsyncBaseTransport | None = None) -> None:
		original_init(self, transport=_transport([]))

	monkeypatch.setattr(WeatherService, "__init__", init_with_mock)

	response = await client.get("/api/weather", params={"lat": 28.6, "lon": 77.2})

	assert response.status_code == 200
	body = response.json()
	assert body["current"]["temp"] == 24
	assert body["daily"][0]["maxTemp"] == 28
	assert body["hourly"]["Fri"][0] == {"time": "9 AM", "temp": 21, "rain": 35}


@pytest.mark.asyncio
async def test_weather_route_surfaces_upstream_failure(
	client: AsyncClient,
	monkeypatch: pytest.MonkeyPatch,
) -> None:
	async def failing(self: WeatherService, **_: object) -> None:
		raise UpstreamError(code="weather_unavailable", detail="Failed to fetch weather")

	monkeypatch.setattr(WeatherService, "get_snapshot", failing)

	response = await client.get("/api/weather")

	assert response.status_code == 502
	assert response.json()["detail"] == {
		"error": "weather_unavailable",
		"message": "Failed to fetch weather",
	}


@pytest.mark.asyncio
async def test_weather_route_rejects_out_of_range_latitude(client: AsyncClient) -> None:
	response = await client.get("/api/weather", params={"lat": 120, "lon": 0})
	assert response.status_code == 422
