"""Pydantic schemas for crop-health photo diagnosis."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class PlantStatus(StrEnum):
	healthy = "Healthy"
	diseased = "Diseased"
	pest_affected = "Pest Affected"


class Severity(StrEnum):
	none = "None"
	low = "Low"
	moderate = "Moderate"
	high = "High"


class DiagnosisSource(StrEnum):
	model = "model"
	classifier = "classifier"
	simulated = "simulated"


class DiagnosisResult(BaseModel):
	plant: str = Field(min_length=1, max_length=200)
	status: PlantStatus
	disease: str | None = None
	severity: Severity
	confidence: int = Field(ge=0, le=100)
	treatment: str = ""
	prevention: str = ""


class DiagnosisOutcome(DiagnosisResult):
	"""A diagnosis plus where it came from; ``simulated`` results are canned."""

	success: bool = True
	source: DiagnosisSource
	simulated: bool = False
