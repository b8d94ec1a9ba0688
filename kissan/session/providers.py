"""Adapters binding ``SessionState`` to the request's user and the profile table."""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from kissan.models import Profile, User
from kissan.services.farm_service import FarmService
from kissan.session.state import Identity


def identity_of(user: User | None) -> Identity | None:
	return None if user is None else Identity(id=user.id, email=user.email)


class RequestSessionProvider:
	"""Session already resolved from the bearer token by the auth dependency."""

	def __init__(self, user: User | None):
		self.user = user

	async def fetch_session(self) -> Identity | None:
		return identity_of(self.user)


class DatabaseProfileReader:
	def __init__(self, db: AsyncSession):
		self.service = FarmService(db)

	async def read_profile(self, user_id: uuid.UUID) -> Profile | None:
		return await self.service.get_profile(user_id)
