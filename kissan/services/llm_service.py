"""Generative-model and image-classifier clients (single round trip each, no retries)."""

from __future__ import annotations

import base64
from typing import Any

import httpx
import structlog

from kissan.config import get_settings
from kissan.services.errors import MalformedResponseError, UpstreamError

logger = structlog.get_logger("kissan.llm")

CHAT_PROMPT = (
	"You are an agricultural expert for Indian farmers. Keep answers short and practical. "
	"Answer in same language as question.\nQuestion: {message}"
)

DIAGNOSIS_PROMPT = """Analyze this crop/plant image. Return ONLY valid JSON (no markdown):
{
  "plant": "plant name or Unknown",
  "status": "Healthy" or "Diseased" or "Pest Affected",
  "disease": "disease name or null",
  "severity": "None" or "Low" or "Moderate" or "High",
  "confidence": 0-100,
  "treatment": "treatment steps as string",
  "prevention": "prevention tips as string"
}"""


class LLMService:
	"""Thin Gemini ``generateContent`` client."""

	def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
		self.settings = get_settings()
		self.transport = transport

	async def generate(self, parts: list[dict[str, Any]]) -> str:
		if not self.settings.gemini_api_key.strip():
			raise UpstreamError(code="ai_unconfigured", detail="GEMINI_API_KEY not configured", status_code=503)

		url = f"{self.settings.gemini_base_url}/models/{self.settings.gemini_model}:generateContent"
		headers = {
			"x-goog-api-key": self.settings.gemini_api_key.strip(),
			"content-type": "application/json",
		}
		body = {"contents": [{"role": "user", "parts": parts}]}

		try:
			async with httpx.AsyncClient(
				timeout=self.settings.ai_timeout_seconds,
				transport=self.transport,
			) as client:
				response = await client.post(url, headers=headers, json=body)
				response.raise_for_status()
				payload = response.json()
		except httpx.HTTPStatusError as exc:
			logger.warning("llm_upstream_status", status_code=exc.response.status_code)
			raise UpstreamError(code="ai_unavailable", detail="AI unavailable") from exc
		except httpx.HTTPError as exc:
			logger.warning("llm_upstream_error", error=str(exc))
			raise UpstreamError(code="ai_unavailable", detail="AI unavailable") from exc
		except ValueError as exc:
			raise MalformedResponseError(detail="AI returned non-JSON body") from exc

		return self.extract_text(payload)

	@staticmethod
	def extract_text(payload: Any) -> str:
		try:
			parts = payload["candidates"][0]["content"]["parts"]
			text = "".join(str(part.get("text") or "") for part in parts).strip()
		except (KeyError, IndexError, TypeError, AttributeError) as exc:
			raise MalformedResponseError(detail="AI response missing candidates") from exc
		if not text:
			raise MalformedResponseError(detail="AI response was empty")
		return text

	async def chat(self, message: str) -> str:
		return await self.generate([{"text": CHAT_PROMPT.format(message=message)}])

	async def describe_image(self, image: bytes, mime_type: str) -> str:
		return await self.generate(
			[
				{"text": DIAGNOSIS_PROMPT},
				{
					"inline_data": {
						"mime_type": mime_type,
						"data": base64.b64encode(image).decode("ascii"),
					}
				},
			]
		)


class ClassifierService:
	"""Hosted image-classification endpoint answering ``[{label, score}, ...]``."""

	def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
		self.settings = get_settings()
		self.transport = transport

	@property
	def configured(self) -> bool:
		return bool(self.settings.classifier_url.strip())

	async def classify(self, image: bytes, mime_type: str) -> tuple[str, float]:
		if not self.configured:
			raise UpstreamError(code="classifier_unconfigured", detail="Classifier not configured", status_code=503)

		headers = {"content-type": mime_type}
		if self.settings.classifier_token:
			headers["authorization"] = f"Bearer {self.settings.classifier_token}"

		try:
			async with httpx.AsyncClient(
				timeout=self.settings.ai_timeout_seconds,
				transport=self.transport,
			) as client:
				response = await client.post(self.settings.classifier_url, headers=headers, content=image)
				response.raise_for_status()
				payload = response.json()
		except httpx.HTTPError as exc:
			logger.warning("classifier_upstream_error", error=str(exc))
			raise UpstreamError(code="classifier_unavailable", detail="Classifier unavailable") from exc
		except ValueError as exc:
			raise MalformedResponseError(detail="Classifier returned non-JSON body") from exc

		try:
			top = max(payload, key=lambda item: float(item["score"]))
			return str(top["label"]), float(top["score"])
		except (KeyError, TypeError, ValueError) as exc:
			raise MalformedResponseError(detail="Classifier response malformed") from exc
