"""Account operations — sign up, sign in, token refresh, OAuth redirect."""

from __future__ import annotations

import uuid
from urllib.parse import urlencode

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kissan.auth.jwt import AuthError, TokenPair, decode_token, issue_token_pair
from kissan.config import get_settings
from kissan.models import User

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

_OAUTH_PROVIDERS = {"google"}


class AuthService:
	def __init__(self, db: AsyncSession):
		self.db = db

	async def sign_up(self, email: str, password: str) -> tuple[User, TokenPair]:
		normalized = email.strip().lower()
		existing = await self.db.execute(select(User).where(User.email == normalized))
		if existing.scalar_one_or_none() is not None:
			raise AuthError(code="email_taken", detail="User already registered", status_code=409)

		user = User(email=normalized, hashed_password=pwd_context.hash(password))
		self.db.add(user)
		await self.db.flush()
		await self.db.refresh(user)
		return user, issue_token_pair(str(user.id), user.email)

	async def sign_in(self, email: str, password: str) -> tuple[User, TokenPair]:
		row = await self.db.execute(select(User).where(User.email == email.strip().lower()))
		user = row.scalar_one_or_none()
		if user is None or not pwd_context.verify(password, user.hashed_password):
			raise AuthError(code="invalid_credentials", detail="Invalid login credentials")
		if not user.is_active:
			raise AuthError(code="user_invalid", detail="User is not active")
		return user, issue_token_pair(str(user.id), user.email)

	async def refresh(self, refresh_token: str) -> tuple[User, TokenPair]:
		payload = decode_token(refresh_token, expected_type="refresh")
		try:
			user_id = uuid.UUID(str(payload["sub"]))
		except ValueError as exc:
			raise AuthError(code="token_invalid", detail="Token subject is invalid") from exc
		row = await self.db.execute(select(User).where(User.id == user_id))
		user = row.scalar_one_or_none()
		if user is None or not user.is_active:
			raise AuthError(code="user_invalid", detail="User is not active")
		return user, issue_token_pair(str(user.id), user.email)

	@staticmethod
	def oauth_authorize_url(provider: str, redirect_to: str | None = None) -> str:
		if provider not in _OAUTH_PROVIDERS:
			raise ValueError(f"Unsupported OAuth provider: {provider}")
		settings = get_settings()
		if not settings.google_client_id:
			raise AuthError(
				code="oauth_unconfigured",
				detail="OAuth provider is not configured",
				status_code=503,
			)
		query = urlencode(
			{
				"client_id": settings.google_client_id,
				"redirect_uri": redirect_to or settings.oauth_redirect_url,
				"response_type": "code",
				"scope": "openid email profile",
				"prompt": "select_account",
			}
		)
		return f"{settings.google_authorize_url}?{query}"
