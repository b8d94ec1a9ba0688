"""Current identity, auth-change subscriptions, and the profile-completeness check.

A ``SessionState`` is created once per client session and owns the identity
value; everything else reads it and subscribes to changes through
``on_auth_change``.  Teardown is ``close()``.
"""

from __future__ import annotations

import inspect
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol

import structlog

logger = structlog.get_logger("kissan.session")


@dataclass(frozen=True, slots=True)
class Identity:
	id: uuid.UUID
	email: str


class AuthEvent(StrEnum):
	initial_session = "INITIAL_SESSION"
	signed_in = "SIGNED_IN"
	signed_out = "SIGNED_OUT"
	token_refreshed = "TOKEN_REFRESHED"


class SessionProvider(Protocol):
	async def fetch_session(self) -> Identity | None: ...


class ProfileReader(Protocol):
	async def read_profile(self, user_id: uuid.UUID) -> Any | None: ...


AuthChangeHandler = Callable[[AuthEvent, Identity | None], Awaitable[None] | None]


def location_is_set(profile: Any | None) -> bool:
	if profile is None:
		return False
	location = profile.get("location") if isinstance(profile, dict) else getattr(profile, "location", None)
	return isinstance(location, str) and bool(location.strip())


class SessionState:
	def __init__(self, provider: SessionProvider, profiles: ProfileReader):
		self.provider = provider
		self.profiles = profiles
		self._identity: Identity | None = None
		self._handlers: list[AuthChangeHandler] = []

	@property
	def identity(self) -> Identity | None:
		return self._identity

	async def get_session(self) -> Identity | None:
		"""Resolve the current identity; provider errors resolve to ``None``."""
		try:
			self._identity = await self.provider.fetch_session()
		except Exception as exc:
			logger.warning("session_fetch_failed", error=str(exc))
			self._identity = None
		return self._identity

	def on_auth_change(self, handler: AuthChangeHandler) -> Callable[[], None]:
		"""Register ``handler``; the returned callable unregisters it."""
		self._handlers.append(handler)

		def unsubscribe() -> None:
			if handler in self._handlers:
				self._handlers.remove(handler)

		return unsubscribe

	@property
	def subscriber_count(self) -> int:
		return len(self._handlers)

	async def notify(self, event: AuthEvent, identity: Identity | None) -> None:
		"""Record an identity transition and fan it out to every subscriber."""
		self._identity = identity
		logger.info("auth_change", auth_event=event.value, user_id=str(identity.id) if identity else None)
		for handler in list(self._handlers):
			result = handler(event, identity)
			if inspect.isawaitable(result):
				await result

	async def is_profile_complete(self, identity: Identity) -> bool:
		"""One profile read; a read failure counts as incomplete."""
		try:
			profile = await self.profiles.read_profile(identity.id)
		except Exception as exc:
			logger.warning("profile_read_failed", user_id=str(identity.id), error=str(exc))
			return False
		return location_is_set(profile)

	def close(self) -> None:
		self._handlers.clear()
		self._identity = None
