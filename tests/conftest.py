"""Shared pytest fixtures — async test client, fake DB session, fake Redis, settings."""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from kissan.auth.dependencies import get_current_user, get_optional_user
from kissan.auth.jwt import create_access_token
from kissan.config import Settings, get_settings
from kissan.database import get_db
from kissan.main import app


class FakeAsyncSession:
	def __init__(self) -> None:
		self.commit = AsyncMock()
		self.rollback = AsyncMock()
		self.close = AsyncMock()
		self.execute = AsyncMock()
		self.flush = AsyncMock()
		self.refresh = AsyncMock()
		self.delete = AsyncMock()
		self.added: list[Any] = []

	def add(self, instance: Any) -> None:
		self.added.append(instance)


class FakeRedis:
	def __init__(self) -> None:
		self._counter: dict[str, int] = {}
		self.incr = AsyncMock(side_effect=self._incr)
		self.expire = AsyncMock(return_value=True)

	async def _incr(self, key: str) -> int:
		value = self._counter.get(key, 0) + 1
		self._counter[key] = value
		return value

	def reset_counters(self) -> None:
		self._counter.clear()


@asynccontextmanager
async def noop_lifespan(_: Any) -> AsyncGenerator[None, None]:
	yield


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
	"""Cached settings with every upstream credential blanked for the test."""
	current = get_settings()
	monkeypatch.setattr(current, "gemini_api_key", "")
	monkeypatch.setattr(current, "classifier_url", "")
	monkeypatch.setattr(current, "google_client_id", "")
	return current


@pytest.fixture
def fake_db_session() -> FakeAsyncSession:
	"""A lightweight async-session stub for dependency overrides in API tests."""
	return FakeAsyncSession()


@pytest.fixture
def fake_redis() -> FakeRedis:
	return FakeRedis()


@pytest.fixture
def user_stub() -> SimpleNamespace:
	return SimpleNamespace(
		id=uuid.UUID("11111111-1111-1111-1111-111111111111"),
		email="farmer@test.local",
		is_active=True,
	)


@pytest.fixture
async def client(
	fake_db_session: FakeAsyncSession,
	user_stub: SimpleNamespace,
	settings: Settings,
) -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with lifespan disabled, DB mocked and a signed-in user."""

	async def override_get_db() -> AsyncGenerator[Any, None]:
		yield fake_db_session

	async def override_current_user() -> Any:
		return user_stub

	app.dependency_overrides[get_db] = override_get_db
	app.dependency_overrides[get_current_user] = override_current_user
	app.dependency_overrides[get_optional_user] = override_current_user
	original_lifespan = app.router.lifespan_context
	app.router.lifespan_context = noop_lifespan
	app.state.redis = None

	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://test") as test_client:
		yield test_client

	app.router.lifespan_context = original_lifespan
	app.dependency_overrides.clear()


@pytest.fixture
async def auth_client(
	fake_db_session: FakeAsyncSession,
	settings: Settings,
) -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with DB override only (real auth dependencies active)."""

	async def override_get_db() -> AsyncGenerator[Any, None]:
		yield fake_db_session

	app.dependency_overrides[get_db] = override_get_db
	original_lifespan = app.router.lifespan_context
	app.router.lifespan_context = noop_lifespan
	app.state.redis = None

	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://test") as test_client:
		yield test_client

	app.router.lifespan_context = original_lifespan
	app.dependency_overrides.clear()


@pytest.fixture
def access_token(user_stub: SimpleNamespace) -> str:
	return create_access_token(str(user_stub.id), user_stub.email, expires_minutes=30)
