"""Generative-AI routes — chat answers and crop-health photo diagnosis."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, status

from kissan.config import get_settings
from kissan.schemas.chat import ChatReply, ChatRequest
from kissan.schemas.diagnosis import DiagnosisOutcome
from kissan.services.chat_service import ChatService
from kissan.services.diagnosis_service import DiagnosisService
from kissan.services.errors import UpstreamError

router = APIRouter(prefix="/ai", tags=["ai"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, UpstreamError):
		return HTTPException(
			status_code=exc.status_code,
			detail={"error": exc.code, "message": exc.detail},
		)
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="AI unavailable")


def _too_large(limit: int) -> HTTPException:
	return HTTPException(
		status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
		detail=f"Image exceeds {limit} bytes",
	)


async def _read_upload(request: Request, limit: int) -> bytes:
	declared = request.headers.get("content-length")
	if declared is not None and declared.isdigit() and int(declared) > limit:
		raise _too_large(limit)

	chunks: list[bytes] = []
	received = 0
	async for chunk in request.stream():
		received += len(chunk)
		if received > limit:
			raise _too_large(limit)
		chunks.append(chunk)
	return b"".join(chunks)


@router.post("/chat", response_model=ChatReply)
async def chat(payload: ChatRequest) -> ChatReply:
	service = ChatService()
	try:
		return await service.reply(payload.message)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.post(
	"/crop-health",
	response_model=DiagnosisOutcome,
	openapi_extra={
		"requestBody": {
			"required": True,
			"content": {"image/*": {"schema": {"type": "string", "format": "binary"}}},
		}
	},
)
async def crop_health(request: Request) -> DiagnosisOutcome:
	settings = get_settings()
	content_type = request.headers.get("content-type", "image/jpeg").split(";", 1)[0].strip()
	image = await _read_upload(request, settings.max_upload_bytes)

	service = DiagnosisService()
	try:
		return await service.diagnose(image, content_type)
	except Exception as exc:
		raise _map_error(exc) from exc
