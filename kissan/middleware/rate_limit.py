"""Redis-backed per-caller quota on the AI-backed endpoints."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from kissan.auth.dependencies import extract_identity_hint
from kissan.config import get_settings

LIMITED_PREFIXES = ("/api/ai/", "/api/assistant/")


def quota_exceeded_detail(quota: int) -> dict[str, Any]:
	return {
		"error": "rate_limited",
		"message": "AI request quota exceeded, try again in a minute",
		"quota": quota,
	}


async def consume_ai_quota(redis_client: Any, caller: str) -> bool:
	"""Count one AI call for ``caller``; False once the minute's quota is spent.

	HTTP requests and websocket chat messages draw from the same bucket.
	"""
	quota = get_settings().rate_limit_ai_per_minute
	window = datetime.now(UTC).strftime("%Y%m%d%H%M")
	key = f"ratelimit:ai:{caller}:{window}"
	current = await redis_client.incr(key)
	if current == 1:
		await redis_client.expire(key, 65)
	return current <= quota


class RateLimitMiddleware(BaseHTTPMiddleware):
	"""Fixed one-minute window counters; a missing Redis client disables limiting.

	Websocket traffic never reaches this middleware; ``/ws/chat`` calls
	``consume_ai_quota`` per message instead.
	"""

	async def dispatch(self, request: Request, call_next):  # type: ignore[override]
		if not request.url.path.startswith(LIMITED_PREFIXES):
			return await call_next(request)

		redis_client = getattr(request.app.state, "redis", None)
		if redis_client is None:
			return await call_next(request)

		if not await consume_ai_quota(redis_client, extract_identity_hint(request)):
			return JSONResponse(
				status_code=429,
				content={"detail": quota_exceeded_detail(get_settings().rate_limit_ai_per_minute)},
			)
		return await call_next(request)
