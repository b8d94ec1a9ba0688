"""Account routes — sign up/in/out, refresh, session lookup, OAuth redirect."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from kissan.auth.dependencies import get_optional_user
from kissan.auth.jwt import AuthError, TokenPair
from kissan.auth.service import AuthService
from kissan.database import get_db
from kissan.models import User
from kissan.schemas.session import (
	AuthTokens,
	Credentials,
	IdentityRead,
	OAuthRedirect,
	RefreshRequest,
	SessionRead,
)

router = APIRouter(prefix="/auth", tags=["auth"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, AuthError):
		return HTTPException(
			status_code=exc.status_code,
			detail={"error": exc.code, "message": exc.detail},
		)
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="auth failure")


def _to_tokens(user: User, tokens: TokenPair) -> AuthTokens:
	return AuthTokens(
		access_token=tokens.access_token,
		refresh_token=tokens.refresh_token,
		expires_in=tokens.expires_in,
		user=IdentityRead(id=user.id, email=user.email),
	)


@router.post("/signup", response_model=AuthTokens, status_code=status.HTTP_201_CREATED)
async def sign_up(payload: Credentials, db: AsyncSession = Depends(get_db)) -> AuthTokens:
	try:
		user, tokens = await AuthService(db).sign_up(payload.email, payload.password)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _to_tokens(user, tokens)


@router.post("/signin", response_model=AuthTokens)
async def sign_in(payload: Credentials, db: AsyncSession = Depends(get_db)) -> AuthTokens:
	try:
		user, tokens = await AuthService(db).sign_in(payload.email, payload.password)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _to_tokens(user, tokens)


@router.post("/refresh", response_model=AuthTokens)
async def refresh(payload: RefreshRequest, db: AsyncSession = Depends(get_db)) -> AuthTokens:
	try:
		user, tokens = await AuthService(db).refresh(payload.refresh_token)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _to_tokens(user, tokens)


@router.post("/signout", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out() -> Response:
	# tokens are stateless; the client drops them
	return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/session", response_model=SessionRead)
async def current_session(user: User | None = Depends(get_optional_user)) -> SessionRead:
	if user is None:
		return SessionRead(user=None)
	return SessionRead(user=IdentityRead(id=user.id, email=user.email))


@router.get("/oauth/{provider}", response_model=OAuthRedirect)
async def oauth_redirect(
	provider: str,
	redirect_to: str | None = Query(default=None, max_length=500),
) -> OAuthRedirect:
	try:
		url = AuthService.oauth_authorize_url(provider, redirect_to)
	except Exception as exc:
		raise _map_error(exc) from exc
	return OAuthRedirect(provider=provider, url=url)
