"""Pydantic schemas for accounts, sessions and navigation gating."""

from __future__ import annotations

import uuid

from pydantic import BaseModel, Field

from kissan.session.guard import GuardState, NavigationKind


class Credentials(BaseModel):
	email: str = Field(min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
	password: str = Field(min_length=6, max_length=128)


class RefreshRequest(BaseModel):
	refresh_token: str = Field(min_length=1)


class IdentityRead(BaseModel):
	id: uuid.UUID
	email: str


class SessionRead(BaseModel):
	user: IdentityRead | None = None


class AuthTokens(BaseModel):
	access_token: str
	refresh_token: str
	token_type: str = "bearer"
	expires_in: int
	user: IdentityRead


class OAuthRedirect(BaseModel):
	provider: str
	url: str


class GateDecision(BaseModel):
	state: GuardState
	kind: NavigationKind
	path: str
	redirect_to: str | None = None
	from_path: str | None = None
	show_profile_banner: bool = False
