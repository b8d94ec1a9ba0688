"""Pydantic schemas for mandi market quotes and government schemes."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, model_validator

ALL_FILTER = "All"


class PriceTrend(StrEnum):
	up = "up"
	down = "down"
	stable = "stable"


class MarketQuote(BaseModel):
	id: int
	state: str
	market: str
	commodity: str
	min_price: int = Field(ge=0)
	max_price: int = Field(ge=0)
	modal_price: int = Field(ge=0)
	date: str
	trend: PriceTrend

	@model_validator(mode="after")
	def _check_price_band(self) -> MarketQuote:
		if not self.min_price <= self.modal_price <= self.max_price:
			raise ValueError("expected min_price <= modal_price <= max_price")
		return self


class MarketMeta(BaseModel):
	states: list[str]
	commodities: list[str]
	total: int


class MarketResponse(BaseModel):
	data: list[MarketQuote]
	meta: MarketMeta


class Scheme(BaseModel):
	id: int
	title: str
	description: str
	category: str
	deadline: str
	status: str
	link: str
	tags: list[str] = Field(default_factory=list)


class SchemeMeta(BaseModel):
	categories: list[str]
	total: int


class SchemeResponse(BaseModel):
	data: list[Scheme]
	meta: SchemeMeta
