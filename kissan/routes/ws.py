"""WebSocket chat route — one ephemeral ``ChatSession`` per connection."""

from __future__ import annotations

import json

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from kissan.auth.dependencies import extract_identity_hint
from kissan.config import get_settings
from kissan.middleware.rate_limit import consume_ai_quota, quota_exceeded_detail
from kissan.services.chat_service import ChatService, ChatSession

router = APIRouter(tags=["websocket"])
logger = structlog.get_logger("kissan.ws")


def _message_text(raw: str) -> str | None:
	try:
		payload = json.loads(raw)
	except json.JSONDecodeError:
		return None
	if not isinstance(payload, dict):
		return None
	text = payload.get("message")
	return text if isinstance(text, str) else None


@router.websocket("/ws/chat")
async def ws_chat(websocket: WebSocket) -> None:
	await websocket.accept()
	session = ChatSession(ChatService())
	caller = extract_identity_hint(websocket)
	for message in session.messages:
		await websocket.send_json(message.model_dump(mode="json"))

	try:
		while True:
			text = _message_text(await websocket.receive_text())
			if text is None:
				await websocket.send_json({"error": "invalid_message"})
				continue
			if not text.strip():
				await websocket.send_json({"error": "empty_message"})
				continue

			redis_client = getattr(websocket.app.state, "redis", None)
			if redis_client is not None and not await consume_ai_quota(redis_client, caller):
				logger.info("ws_chat_rate_limited", caller=caller)
				await websocket.send_json(quota_exceeded_detail(get_settings().rate_limit_ai_per_minute))
				continue

			reply = await session.send(text)
			await websocket.send_json(reply.model_dump(mode="json"))
	except WebSocketDisconnect:
		logger.info("ws_chat_closed", messages=len(session.messages))
		return
