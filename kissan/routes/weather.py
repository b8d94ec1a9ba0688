"""Weather dashboard route."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from kissan.schemas.weather import WeatherSnapshot
from kissan.services.errors import UpstreamError
from kissan.services.weather_service import WeatherService

router = APIRouter(prefix="/weather", tags=["weather"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, UpstreamError):
		return HTTPException(
			status_code=exc.status_code,
			detail={"error": exc.code, "message": exc.detail},
		)
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch weather")


@router.get("", response_model=WeatherSnapshot)
async def get_weather(
	lat: float | None = Query(default=None, ge=-90, le=90),
	lon: float | None = Query(default=None, ge=-180, le=180),
	location: str | None = Query(default=None, max_length=200),
) -> WeatherSnapshot:
	service = WeatherService()
	try:
		return await service.get_snapshot(lat=lat, lon=lon, location=location)
	except Exception as exc:
		raise _map_error(exc) from exc
