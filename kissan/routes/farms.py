"""Profile and plot routes for the signed-in farmer."""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from kissan.auth.dependencies import get_current_user
from kissan.database import get_db
from kissan.models import User
from kissan.schemas.farm import (
	PlotCreate,
	PlotListRead,
	PlotRead,
	PlotUpdate,
	ProfileRead,
	ProfileUpdate,
)
from kissan.services.farm_service import FarmService
from kissan.session.state import location_is_set

router = APIRouter(tags=["farm"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		detail="Unexpected farm record failure",
	)


def _to_profile_read(profile: Any, user: User) -> ProfileRead:
	return ProfileRead(
		id=profile.id,
		email=user.email,
		full_name=profile.full_name,
		farm_name=profile.farm_name,
		location=profile.location,
		farming_type=profile.farming_type,
		land_size=profile.land_size,
		primary_crop=profile.primary_crop,
		updated_at=profile.updated_at,
		is_complete=location_is_set(profile),
	)


def _to_plot_read(plot: Any) -> PlotRead:
	return PlotRead(
		id=plot.id,
		user_id=plot.user_id,
		name=plot.name,
		crop=plot.crop,
		area=float(plot.area),
		location=plot.location,
		status=plot.status,
		created_at=plot.created_at,
	)


# ── Profile ─────────────────────────────────────────────────────────────────


@router.get("/profile", response_model=ProfileRead)
async def get_profile(
	db: AsyncSession = Depends(get_db),
	user: User = Depends(get_current_user),
) -> ProfileRead:
	service = FarmService(db)
	try:
		profile = await service.require_profile(user.id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _to_profile_read(profile, user)


@router.put("/profile", response_model=ProfileRead)
async def save_profile(
	payload: ProfileUpdate,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(get_current_user),
) -> ProfileRead:
	service = FarmService(db)
	try:
		profile = await service.save_profile(user.id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _to_profile_read(profile, user)


# ── Plots ───────────────────────────────────────────────────────────────────


@router.get("/plots", response_model=PlotListRead)
async def list_plots(
	db: AsyncSession = Depends(get_db),
	user: User = Depends(get_current_user),
) -> PlotListRead:
	service = FarmService(db)
	try:
		plots = await service.list_plots(user.id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return PlotListRead(items=[_to_plot_read(plot) for plot in plots])


@router.post("/plots", response_model=PlotRead, status_code=status.HTTP_201_CREATED)
async def create_plot(
	payload: PlotCreate,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(get_current_user),
) -> PlotRead:
	service = FarmService(db)
	try:
		plot = await service.create_plot(user.id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _to_plot_read(plot)


@router.put("/plots/{plot_id}", response_model=PlotRead)
async def update_plot(
	plot_id: uuid.UUID,
	payload: PlotUpdate,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(get_current_user),
) -> PlotRead:
	service = FarmService(db)
	try:
		plot = await service.update_plot(user.id, plot_id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _to_plot_read(plot)


@router.delete("/plots/{plot_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_plot(
	plot_id: uuid.UUID,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(get_current_user),
) -> Response:
	service = FarmService(db)
	try:
		await service.delete_plot(user.id, plot_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return Response(status_code=status.HTTP_204_NO_CONTENT)
