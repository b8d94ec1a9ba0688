"""Pydantic schemas for the /weather endpoint.

Wire keys keep the camelCase names the dashboard already binds to.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
	model_config = ConfigDict(populate_by_name=True)


class CurrentConditions(_WireModel):
	temp: int
	humidity: float | None = None
	wind: float | None = None
	precip: float | None = None
	desc: str
	icon: str


class DailyForecast(_WireModel):
	day: str
	max_temp: int = Field(alias="maxTemp")
	min_temp: int = Field(alias="minTemp")
	rain_chance: float = Field(default=0, alias="rainChance")
	desc: str
	icon: str


class HourlyPoint(_WireModel):
	time: str
	temp: int
	rain: float = 0


class WeatherLocation(_WireModel):
	name: str
	lat: float
	lon: float


class WeatherSnapshot(_WireModel):
	current: CurrentConditions
	daily: list[DailyForecast] = Field(default_factory=list)
	hourly: dict[str, list[HourlyPoint]] = Field(default_factory=dict)
	location: WeatherLocation
