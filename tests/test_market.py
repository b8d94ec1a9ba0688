from __future__ import annotations

import pytest
from httpx import AsyncClient

from kissan.services.catalog_service import MARKET_DATA, SCHEMES_DATA, CatalogService


@pytest.mark.asyncio
async def test_post_market_punjab_wheat_returns_khanna_row(client: AsyncClient) -> None:
    response = await client.post("/api/market", params={"state": "Punjab", "commodity": "Wheat"})

    assert response.status_code == 200
    body = response.json()
    assert len(body["data"]) == 1
    row = body["data"][0]
    assert row["id"] == 1
    assert row["market"] == "Khanna"
    assert row["modal_price"] == 2275
    assert body["meta"]["total"] == 1


@pytest.mark.asyncio
async def test_get_market_meta_lists_full_dataset(client: AsyncClient) -> None:
    response = await client.get("/api/market", params={"state": "Gujarat"})

    assert response.status_code == 200
    meta = response.json()["meta"]
    assert meta["total"] == 1
    assert meta["states"][0] == "Punjab"
    assert len(meta["states"]) == len({row.state for row in MARKET_DATA})
    assert "Cotton" in meta["commodities"]


@pytest.mark.asyncio
async def test_market_all_filters_return_everything(client: AsyncClient) -> None:
    response = await client.get("/api/market", params={"state": "All", "commodity": "All"})

    assert response.status_code == 200
    assert len(response.json()["data"]) == len(MARKET_DATA)


@pytest.mark.asyncio
async def test_market_search_is_case_insensitive(client: AsyncClient) -> None:
    upper = await client.get("/api/market", params={"search": "POTATO"})
    lower = await client.get("/api/market", params={"search": "potato"})

    assert upper.json()["data"] == lower.json()["data"]
    assert [row["market"] for row in upper.json()["data"]] == ["Ambala", "Agra"]


@pytest.mark.asyncio
async def test_schemes_category_filter(client: AsyncClient) -> None:
    response = await client.get("/api/schemes", params={"category": "Insurance"})

    assert response.status_code == 200
    body = response.json()
    assert [scheme["id"] for scheme in body["data"]] == [2]
    assert body["meta"]["categories"][0] == "All"
    assert len(body["meta"]["categories"]) == len(SCHEMES_DATA) + 1


def test_scheme_search_covers_description() -> None:
    view = CatalogService().schemes_view(search="DRIP")
    assert [scheme.title for scheme in view.data] == ["PM Krishi Sinchai Yojana (PMKSY)"]


def test_catalog_accepts_custom_dataset() -> None:
    service = CatalogService(quotes=MARKET_DATA[:2], schemes=())
    view = service.market(state="Punjab")
    assert view.meta.total == 2
    assert view.meta.states == ["Punjab"]
    assert service.schemes_view().meta.categories == ["All"]
