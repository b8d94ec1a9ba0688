"""Profile and plot persistence for one owning identity."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kissan.models import Plot, Profile
from kissan.schemas.farm import PlotCreate, PlotUpdate, ProfileUpdate


class FarmService:
	"""Owner-scoped CRUD over ``profiles`` and ``plots``."""

	def __init__(self, db: AsyncSession):
		self.db = db

	async def get_profile(self, user_id: uuid.UUID) -> Profile | None:
		row = await self.db.execute(select(Profile).where(Profile.id == user_id))
		return row.scalar_one_or_none()

	async def require_profile(self, user_id: uuid.UUID) -> Profile:
		profile = await self.get_profile(user_id)
		if profile is None:
			raise LookupError(f"Profile {user_id} not found")
		return profile

	async def save_profile(self, user_id: uuid.UUID, payload: ProfileUpdate) -> Profile:
		"""Create the profile on first save, otherwise apply only the submitted fields."""
		updates = payload.model_dump(exclude_unset=True)
		profile = await self.get_profile(user_id)
		if profile is None:
			profile = Profile(id=user_id, **updates)
			self.db.add(profile)
		else:
			for key, value in updates.items():
				setattr(profile, key, value)
		await self.db.flush()
		await self.db.refresh(profile)
		return profile

	async def list_plots(self, user_id: uuid.UUID) -> list[Plot]:
		stmt = select(Plot).where(Plot.user_id == user_id).order_by(Plot.created_at.desc())
		rows = await self.db.execute(stmt)
		return list(rows.scalars().all())

	async def create_plot(self, user_id: uuid.UUID, payload: PlotCreate) -> Plot:
		plot = Plot(
			user_id=user_id,
			name=payload.name,
			crop=payload.crop,
			area=float(payload.area),
			location=payload.location or None,
			status=payload.status,
		)
		self.db.add(plot)
		await self.db.flush()
		await self.db.refresh(plot)
		return plot

	async def update_plot(self, user_id: uuid.UUID, plot_id: uuid.UUID, payload: PlotUpdate) -> Plot:
		plot = await self._get_owned_plot(user_id, plot_id)
		for key, value in payload.model_dump(exclude_unset=True).items():
			if value is None and key != "location":
				raise ValueError(f"{key} cannot be null")
			setattr(plot, key, value)
		await self.db.flush()
		await self.db.refresh(plot)
		return plot

	async def delete_plot(self, user_id: uuid.UUID, plot_id: uuid.UUID) -> None:
		plot = await self._get_owned_plot(user_id, plot_id)
		await self.db.delete(plot)
		await self.db.flush()

	async def _get_owned_plot(self, user_id: uuid.UUID, plot_id: uuid.UUID) -> Plot:
		row = await self.db.execute(
			select(Plot).where(Plot.id == plot_id, Plot.user_id == user_id)
		)
		plot = row.scalar_one_or_none()
		if plot is None:
			raise LookupError(f"Plot {plot_id} not found")
		return plot
