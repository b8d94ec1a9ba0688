"""Pydantic schemas for profile and plot CRUD."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kissan.models.enums import PlotStatusEnum


class ProfileUpdate(BaseModel):
	full_name: str | None = Field(default=None, max_length=255)
	farm_name: str | None = Field(default=None, max_length=255)
	location: str | None = Field(default=None, max_length=255)
	farming_type: str | None = Field(default=None, max_length=100)
	land_size: str | None = Field(default=None, max_length=50)
	primary_crop: str | None = Field(default=None, max_length=100)


class ProfileRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: uuid.UUID
	email: str | None = None
	full_name: str | None = None
	farm_name: str | None = None
	location: str | None = None
	farming_type: str | None = None
	land_size: str | None = None
	primary_crop: str | None = None
	updated_at: datetime | None = None
	is_complete: bool


class PlotCreate(BaseModel):
	name: str = Field(min_length=1, max_length=255)
	crop: str = Field(min_length=1, max_length=100)
	area: float = Field(gt=0, allow_inf_nan=False)
	location: str | None = Field(default=None, max_length=255)
	status: PlotStatusEnum = PlotStatusEnum.preparation

	@field_validator("name", "crop")
	@classmethod
	def _not_blank(cls, value: str) -> str:
		stripped = value.strip()
		if not stripped:
			raise ValueError("must not be blank")
		return stripped


class PlotUpdate(BaseModel):
	name: str | None = Field(default=None, min_length=1, max_length=255)
	crop: str | None = Field(default=None, min_length=1, max_length=100)
	area: float | None = Field(default=None, gt=0, allow_inf_nan=False)
	location: str | None = Field(default=None, max_length=255)
	status: PlotStatusEnum | None = None

	@field_validator("name", "crop")
	@classmethod
	def _not_blank(cls, value: str | None) -> str | None:
		if value is None:
			return None
		stripped = value.strip()
		if not stripped:
			raise ValueError("must not be blank")
		return stripped


class PlotRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: uuid.UUID
	user_id: uuid.UUID
	name: str
	crop: str
	area: float
	location: str | None = None
	status: PlotStatusEnum
	created_at: datetime


class PlotListRead(BaseModel):
	items: list[PlotRead]
