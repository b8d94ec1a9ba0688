"""Crop-health photo diagnosis: model first, classifier second, canned demo last."""

from __future__ import annotations

import random

import structlog

from kissan.config import get_settings
from kissan.schemas.diagnosis import DiagnosisOutcome, DiagnosisResult, DiagnosisSource
from kissan.services.errors import UpstreamError
from kissan.services.llm_service import ClassifierService, LLMService
from kissan.services.normalizers import (
	coerce_diagnosis,
	diagnosis_from_label,
	extract_json_object,
	pick_demo_diagnosis,
)

logger = structlog.get_logger("kissan.diagnosis")


class DiagnosisService:
	def __init__(
		self,
		llm: LLMService | None = None,
		classifier: ClassifierService | None = None,
		rng: random.Random | None = None,
	):
		self.settings = get_settings()
		self.llm = llm or LLMService()
		self.classifier = classifier or ClassifierService()
		self.rng = rng

	async def diagnose(self, image: bytes, mime_type: str) -> DiagnosisOutcome:
		if not image:
			raise ValueError("image body is empty")
		if not mime_type.startswith("image/"):
			raise ValueError("content-type must be an image type")

		try:
			return self._outcome(await self.from_model(image, mime_type), DiagnosisSource.model)
		except UpstreamError as exc:
			logger.warning("diagnosis_model_failed", error=exc.code, detail=exc.detail)

		if self.classifier.configured:
			try:
				label, score = await self.classifier.classify(image, mime_type)
				return self._outcome(diagnosis_from_label(label, score), DiagnosisSource.classifier)
			except UpstreamError as exc:
				logger.warning("diagnosis_classifier_failed", error=exc.code, detail=exc.detail)

		demo = pick_demo_diagnosis(self.settings.diagnosis_demo_strategy.value, self.rng)
		logger.info("diagnosis_simulated", plant=demo.plant, status=demo.status.value)
		return self._outcome(demo, DiagnosisSource.simulated)

	async def from_model(self, image: bytes, mime_type: str) -> DiagnosisResult:
		text = await self.llm.describe_image(image, mime_type)
		return coerce_diagnosis(extract_json_object(text))

	@staticmethod
	def _outcome(result: DiagnosisResult, source: DiagnosisSource) -> DiagnosisOutcome:
		return DiagnosisOutcome(
			**result.model_dump(),
			source=source,
			simulated=source == DiagnosisSource.simulated,
		)
