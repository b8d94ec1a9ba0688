"""Navigation gate — evaluates the route guard for the calling session."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from kissan.auth.dependencies import get_optional_user
from kissan.database import get_db
from kissan.models import User
from kissan.schemas.session import GateDecision
from kissan.session.guard import RouteGuard
from kissan.session.providers import DatabaseProfileReader, RequestSessionProvider
from kissan.session.state import SessionState

router = APIRouter(prefix="/session", tags=["session"])


@router.get("/gate", response_model=GateDecision)
async def gate(
	path: str = Query(default="/", max_length=500),
	user: User | None = Depends(get_optional_user),
	db: AsyncSession = Depends(get_db),
) -> GateDecision:
	session = SessionState(RequestSessionProvider(user), DatabaseProfileReader(db))
	guard = RouteGuard(session)
	try:
		await guard.start()
		decision = guard.decide(path)
	finally:
		guard.close()
		session.close()
	return GateDecision(
		state=guard.state,
		kind=decision.kind,
		path=decision.path,
		redirect_to=decision.redirect_to,
		from_path=decision.from_path,
		show_profile_banner=decision.show_profile_banner,
	)
