"""Authentication dependencies — get_current_user, get_optional_user."""

from __future__ import annotations

import uuid

import structlog
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import HTTPConnection

from kissan.auth.jwt import AuthError, decode_token
from kissan.database import get_db
from kissan.models import User

bearer_scheme = HTTPBearer(auto_error=False)
logger = structlog.get_logger("kissan.auth")


def _raise_auth(exc: AuthError) -> HTTPException:
	return HTTPException(
		status_code=exc.status_code,
		detail={"error": exc.code, "message": exc.detail},
	)


def extract_identity_hint(request: HTTPConnection) -> str:
	"""Cheap, unverified caller key used for rate limiting buckets."""
	auth_header = request.headers.get("authorization", "")
	if auth_header.lower().startswith("bearer "):
		try:
			return f"user:{decode_token(auth_header[7:].strip())['sub']}"
		except AuthError:
			pass
	client = request.client.host if request.client is not None else "unknown"
	return f"ip:{client}"


async def resolve_user_from_token(db: AsyncSession, token: str) -> User:
	payload = decode_token(token, expected_type="access")
	try:
		user_id = uuid.UUID(str(payload["sub"]))
	except (ValueError, KeyError) as exc:
		raise AuthError(code="token_invalid", detail="Token subject is invalid") from exc

	row = await db.execute(select(User).where(User.id == user_id))
	user = row.scalar_one_or_none()
	if user is None or not user.is_active:
		raise AuthError(code="user_invalid", detail="User is not active")
	return user


async def get_current_user(
	request: Request,
	db: AsyncSession = Depends(get_db),
) -> User:
	credentials: HTTPAuthorizationCredentials | None = await bearer_scheme(request)
	if credentials is None or credentials.scheme.lower() != "bearer":
		raise _raise_auth(AuthError(code="auth_required", detail="Bearer token is required"))
	try:
		return await resolve_user_from_token(db, credentials.credentials)
	except AuthError as exc:
		raise _raise_auth(exc) from exc


async def get_optional_user(
	request: Request,
	db: AsyncSession = Depends(get_db),
) -> User | None:
	"""Current identity or ``None``; provider failures never escape."""
	credentials = await bearer_scheme(request)
	if credentials is None:
		return None
	try:
		return await resolve_user_from_token(db, credentials.credentials)
	except AuthError as exc:
		logger.info("session_unresolved", error=exc.code)
		return None
	except Exception as exc:
		logger.warning("session_lookup_failed", error=str(exc))
		return None
