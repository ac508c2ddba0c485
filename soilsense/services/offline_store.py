"""Two-tier offline store: a SQL table first, flat Redis string keys as fallback."""

from __future__ import annotations

import json
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import structlog
from redis.asyncio import Redis
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from soilsense.errors import StorageError
from soilsense.models.offline import OfflineRecord
from soilsense.schemas.offline import OfflineEnvelope

logger = structlog.get_logger("soilsense.offline_store")


def now_ms() -> int:
	return int(time.time() * 1000)


class DurableKeyValueStore(ABC):
	"""One persistence tier. Implementations raise on failure; the facade decides what to do."""

	name: str = "store"

	@abstractmethod
	async def put(self, key: str, envelope: OfflineEnvelope) -> None: ...

	@abstractmethod
	async def get(self, key: str) -> OfflineEnvelope | None: ...

	@abstractmethod
	async def delete(self, key: str) -> None: ...

	@abstractmethod
	async def list_keys(self) -> set[str]: ...


class SqlKeyValueStore(DurableKeyValueStore):
	"""Structured tier backed by the ``offline_records`` table."""

	name = "sql"

	def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
		self.session_factory = session_factory

	async def put(self, key: str, envelope: OfflineEnvelope) -> None:
		async with self.session_factory() as session:
			await session.merge(
				OfflineRecord(
					key=key,
					payload=envelope.data,
					timestamp=envelope.timestamp,
					captured_at=envelope.captured_at or envelope.timestamp,
					synced=envelope.synced,
				)
			)
			await session.commit()

	async def get(self, key: str) -> OfflineEnvelope | None:
		async with self.session_factory() as session:
			record = await session.get(OfflineRecord, key)
			if record is None:
				return None
			return OfflineEnvelope(
				key=record.key,
				data=record.payload,
				timestamp=record.timestamp,
				synced=record.synced,
				captured_at=record.captured_at,
			)

	async def delete(self, key: str) -> None:
		async with self.session_factory() as session:
			await session.execute(delete(OfflineRecord).where(OfflineRecord.key == key))
			await session.commit()

	async def list_keys(self) -> set[str]:
		async with self.session_factory() as session:
			rows = await session.execute(select(OfflineRecord.key))
			return set(rows.scalars().all())


class RedisKeyValueStore(DurableKeyValueStore):
	"""Flat tier: one JSON string per envelope under ``prefix + key``."""

	name = "redis"

	def __init__(self, redis_client: Redis, prefix: str = "offline:"):
		self.redis_client = redis_client
		self.prefix = prefix

	def _redis_key(self, key: str) -> str:
		return f"{self.prefix}{key}"

	async def put(self, key: str, envelope: OfflineEnvelope) -> None:
		await self.redis_client.set(self._redis_key(key), json.dumps(envelope.to_json_dict()))

	async def get(self, key: str) -> OfflineEnvelope | None:
		value = await self.redis_client.get(self._redis_key(key))
		if value is None:
			return None
		return OfflineEnvelope.model_validate(json.loads(value))

	async def delete(self, key: str) -> None:
		await self.redis_client.delete(self._redis_key(key))

	async def list_keys(self) -> set[str]:
		keys: set[str] = set()
		async for raw_key in self.redis_client.scan_iter(match=f"{self.prefix}*"):
			token = raw_key.decode("utf-8") if isinstance(raw_key, bytes) else str(raw_key)
			keys.add(token[len(self.prefix) :])
		return keys


class OfflineStore:
	"""Envelope-stamping facade over a primary and a fallback tier.

	Every operation tries the primary tier first. Any primary failure sends the
	same operation to the fallback; a fallback failure is logged as a
	StorageError and reported through the return value.
	"""

	def __init__(
		self,
		primary: DurableKeyValueStore,
		fallback: DurableKeyValueStore,
		clock: Callable[[], int] = now_ms,
	):
		self.primary = primary
		self.fallback = fallback
		self.clock = clock

	async def put(self, key: str, value: Any) -> bool:
		timestamp = self.clock()
		envelope = OfflineEnvelope(
			key=key,
			data=value,
			timestamp=timestamp,
			synced=False,
			captured_at=timestamp,
		)
		return await self._write(envelope)

	async def mark_synced(self, envelope: OfflineEnvelope) -> bool:
		"""Rewrite an envelope as synced. ``timestamp`` becomes the sync time."""
		synced = envelope.model_copy(
			update={
				"timestamp": self.clock(),
				"synced": True,
				"captured_at": envelope.captured_at or envelope.timestamp,
			}
		)
		return await self._write(synced)

	async def get(self, key: str) -> OfflineEnvelope | None:
		try:
			envelope = await self.primary.get(key)
			if envelope is not None:
				return envelope
		except Exception as exc:
			self._log_tier_failure("get", key, self.primary, exc)

		try:
			return await self.fallback.get(key)
		except Exception as exc:
			self._log_storage_error("get", key, exc)
			return None

	async def delete(self, key: str) -> bool:
		deleted = False
		for tier in (self.primary, self.fallback):
			try:
				await tier.delete(key)
				deleted = True
			except Exception as exc:
				self._log_tier_failure("delete", key, tier, exc)

		if not deleted:
			logger.error("offline_store_failed", op="delete", key=key, error="all tiers failed")
		return deleted

	async def list_keys(self) -> set[str]:
		keys: set[str] = set()
		reachable = 0
		for tier in (self.primary, self.fallback):
			try:
				keys |= await tier.list_keys()
				reachable += 1
			except Exception as exc:
				self._log_tier_failure("list_keys", None, tier, exc)

		if reachable == 0:
			raise StorageError("Failed to list offline keys: all tiers failed")
		return keys

	async def _write(self, envelope: OfflineEnvelope) -> bool:
		try:
			await self.primary.put(envelope.key, envelope)
			return True
		except Exception as exc:
			self._log_tier_failure("put", envelope.key, self.primary, exc)

		try:
			await self.fallback.put(envelope.key, envelope)
			return True
		except Exception as exc:
			self._log_storage_error("put", envelope.key, exc)
			return False

	@staticmethod
	def _log_tier_failure(op: str, key: str | None, tier: DurableKeyValueStore, exc: Exception) -> None:
		logger.warning("offline_store_tier_failed", op=op, key=key, tier=tier.name, error=str(exc))

	@staticmethod
	def _log_storage_error(op: str, key: str, exc: Exception) -> None:
		error = StorageError(f"{op} failed for {key}: {exc}")
		logger.error("offline_store_failed", op=op, key=key, error=str(error))
