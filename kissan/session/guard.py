"""Navigation gate driven by session + profile completeness.

States::

    Loading ──none──────────────► Unauthenticated
    Loading ──identity──────────► AuthenticatedIncomplete | AuthenticatedComplete
    any     ──auth change───────► Loading
    Incomplete ──location saved─► Complete   (and back when it is cleared)

There is no terminal state; a new guard always starts in ``Loading``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import structlog

from kissan.session.state import AuthEvent, Identity, SessionState, location_is_set

logger = structlog.get_logger("kissan.session.guard")

SIGN_IN_PATH = "/auth"
HOME_PATH = "/"
PUBLIC_PATHS = frozenset({SIGN_IN_PATH})
PROTECTED_PATHS = frozenset(
	{
		"/",
		"/weather",
		"/crop-health",
		"/market",
		"/plots",
		"/expert-chat",
		"/schemes",
		"/profile",
		"/settings",
		"/onboarding",
	}
)


class GuardState(StrEnum):
	loading = "Loading"
	unauthenticated = "Unauthenticated"
	authenticated_incomplete = "AuthenticatedIncomplete"
	authenticated_complete = "AuthenticatedComplete"


class NavigationKind(StrEnum):
	defer = "defer"
	render = "render"
	redirect = "redirect"
	not_found = "not_found"


@dataclass(frozen=True, slots=True)
class NavigationDecision:
	kind: NavigationKind
	path: str
	redirect_to: str | None = None
	from_path: str | None = None
	show_profile_banner: bool = False


def normalize_path(path: str) -> str:
	path = path.split("?", 1)[0].split("#", 1)[0].strip() or HOME_PATH
	if not path.startswith("/"):
		path = f"/{path}"
	if len(path) > 1:
		path = path.rstrip("/") or HOME_PATH
	return path


class RouteGuard:
	def __init__(self, session: SessionState):
		self.session = session
		self.state = GuardState.loading
		self._return_to: str | None = None
		self._unsubscribe = session.on_auth_change(self._on_auth_change)

	async def start(self) -> GuardState:
		"""Resolve the initial session; the guard sits in ``Loading`` until this completes."""
		identity = await self.session.get_session()
		await self._resolve(identity)
		return self.state

	async def _on_auth_change(self, event: AuthEvent, identity: Identity | None) -> None:
		self._set_state(GuardState.loading)
		await self._resolve(identity)

	async def _resolve(self, identity: Identity | None) -> None:
		if identity is None:
			self._set_state(GuardState.unauthenticated)
			return
		complete = await self.session.is_profile_complete(identity)
		if self.session.identity != identity:
			# identity changed while the read was in flight
			logger.info("stale_profile_check_discarded", user_id=str(identity.id))
			return
		self._set_state(
			GuardState.authenticated_complete if complete else GuardState.authenticated_incomplete
		)

	def profile_saved(self, profile: Any) -> GuardState:
		"""Re-evaluate completeness from a freshly persisted profile."""
		if self.state in (GuardState.authenticated_incomplete, GuardState.authenticated_complete):
			self._set_state(
				GuardState.authenticated_complete
				if location_is_set(profile)
				else GuardState.authenticated_incomplete
			)
		return self.state

	def decide(self, path: str) -> NavigationDecision:
		target = normalize_path(path)
		if self.state == GuardState.loading:
			return NavigationDecision(kind=NavigationKind.defer, path=target)
		if target not in PROTECTED_PATHS and target not in PUBLIC_PATHS:
			return NavigationDecision(kind=NavigationKind.not_found, path=target)
		if target in PUBLIC_PATHS:
			return NavigationDecision(kind=NavigationKind.render, path=target)
		if self.state == GuardState.unauthenticated:
			self._return_to = target
			return NavigationDecision(
				kind=NavigationKind.redirect,
				path=target,
				redirect_to=SIGN_IN_PATH,
				from_path=target,
			)
		return NavigationDecision(
			kind=NavigationKind.render,
			path=target,
			show_profile_banner=self.state == GuardState.authenticated_incomplete,
		)

	def post_login_target(self) -> str:
		"""Path remembered by the last sign-in redirect (consumed), or home."""
		target, self._return_to = self._return_to or HOME_PATH, None
		return target

	def close(self) -> None:
		self._unsubscribe()

	def _set_state(self, state: GuardState) -> None:
		if state != self.state:
			logger.debug("guard_transition", from_state=self.state.value, to_state=state.value)
		self.state = state
