"""Mandi price and government scheme listings (static datasets)."""

from __future__ import annotations

from fastapi import APIRouter, Query

from kissan.schemas.market import MarketResponse, SchemeResponse
from kissan.services.catalog_service import CatalogService

router = APIRouter(tags=["market"])


@router.api_route("/market", methods=["GET", "POST"], response_model=MarketResponse)
async def list_market_prices(
	state: str | None = Query(default=None, max_length=100),
	commodity: str | None = Query(default=None, max_length=100),
	search: str | None = Query(default=None, max_length=100),
) -> MarketResponse:
	return CatalogService().market(state=state, commodity=commodity, search=search)


@router.get("/schemes", response_model=SchemeResponse)
async def list_schemes(
	category: str | None = Query(default=None, max_length=50),
	search: str | None = Query(default=None, max_length=100),
) -> SchemeResponse:
	return CatalogService().schemes_view(category=category, search=search)
