"""Shared pytest fixtures — offline store tiers, fake Redis, async API client."""

from __future__ import annotations

import fnmatch
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from soilsense.database import build_engine, build_session_factory, create_schema
from soilsense.dependencies import get_connectivity_probe, get_offline_store
from soilsense.main import app
from soilsense.schemas.offline import OfflineEnvelope
from soilsense.services.offline_store import (
	DurableKeyValueStore,
	OfflineStore,
	RedisKeyValueStore,
	SqlKeyValueStore,
)
from soilsense.services.sync_service import StaticConnectivity


class FakeRedis:
	"""In-memory stand-in for the handful of redis.asyncio calls the fallback tier makes."""

	def __init__(self) -> None:
		self.data: dict[str, str] = {}
		self.fail = False

	def _check(self) -> None:
		if self.fail:
			raise ConnectionError("redis unavailable")

	async def set(self, key: str, value: str) -> bool:
		self._check()
		self.data[key] = value
		return True

	async def get(self, key: str) -> str | None:
		self._check()
		return self.data.get(key)

	async def delete(self, key: str) -> int:
		self._check()
		return 1 if self.data.pop(key, None) is not None else 0

	async def scan_iter(self, match: str | None = None) -> AsyncIterator[str]:
		self._check()
		for key in list(self.data):
			if match is None or fnmatch.fnmatchcase(key, match):
				yield key


class BrokenTier(DurableKeyValueStore):
	"""A tier whose every call fails, for exercising the fallback path."""

	name = "broken"

	async def put(self, key: str, envelope: OfflineEnvelope) -> None:
		raise RuntimeError("primary tier down")

	async def get(self, key: str) -> OfflineEnvelope | None:
		raise RuntimeError("primary tier down")

	async def delete(self, key: str) -> None:
		raise RuntimeError("primary tier down")

	async def list_keys(self) -> set[str]:
		raise RuntimeError("primary tier down")


class FakeClock:
	def __init__(self, start: int = 1_700_000_000_000) -> None:
		self.value = start

	def __call__(self) -> int:
		return self.value

	def advance(self, millis: int = 1000) -> None:
		self.value += millis


@pytest.fixture
async def sql_tier(tmp_path: Path) -> AsyncGenerator[SqlKeyValueStore, None]:
	"""Primary tier on a throwaway SQLite file."""
	engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'offline.db'}")
	await create_schema(engine)
	yield SqlKeyValueStore(build_session_factory(engine))
	await engine.dispose()


@pytest.fixture
def fake_redis() -> FakeRedis:
	return FakeRedis()


@pytest.fixture
def redis_tier(fake_redis: FakeRedis) -> RedisKeyValueStore:
	return RedisKeyValueStore(fake_redis, prefix="offline:")  # type: ignore[arg-type]


@pytest.fixture
def broken_tier() -> BrokenTier:
	return BrokenTier()


@pytest.fixture
def clock() -> FakeClock:
	return FakeClock()


@pytest.fixture
def offline_store(sql_tier: SqlKeyValueStore, redis_tier: RedisKeyValueStore, clock: FakeClock) -> OfflineStore:
	return OfflineStore(primary=sql_tier, fallback=redis_tier, clock=clock)


@pytest.fixture
def healthy_soil() -> dict[str, Any]:
	return {
		"fieldName": "North plot",
		"ph": "6.5",
		"nitrogen": "220",
		"phosphorus": "25",
		"potassium": "160",
		"moisture": "65",
		"organicMatter": "3",
		"temperature": "27",
	}


@pytest.fixture
def connectivity() -> StaticConnectivity:
	return StaticConnectivity(online=False)


@pytest.fixture
async def client(
	offline_store: OfflineStore,
	connectivity: StaticConnectivity,
) -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with lifespan disabled and the offline store overridden."""

	app.dependency_overrides[get_offline_store] = lambda: offline_store
	app.dependency_overrides[get_connectivity_probe] = lambda: connectivity
	original_lifespan = app.router.lifespan_context

	@asynccontextmanager
	async def noop_lifespan(_: Any) -> AsyncGenerator[None, None]:
		yield

	app.router.lifespan_context = noop_lifespan

	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://test") as test_client:
		yield test_client

	app.router.lifespan_context = original_lifespan
	app.dependency_overrides.clear()
