"""Offline sync — pushes unsynced envelopes to a remote endpoint and flags them synced."""

from __future__ import annotations

import asyncio
import json
from typing import Protocol

import httpx
import structlog

from soilsense.config import SyncMethod
from soilsense.errors import OfflineUnavailable, StorageError, SyncItemError
from soilsense.schemas.offline import OfflineEnvelope
from soilsense.schemas.sync import SyncItemResult, SyncResult
from soilsense.services.offline_store import OfflineStore

logger = structlog.get_logger("soilsense.sync")


class ConnectivityProbe(Protocol):
	async def is_online(self, endpoint: str) -> bool: ...


class StaticConnectivity:
	"""Fixed answer; used for manual overrides and tests."""

	def __init__(self, online: bool = True):
		self.online = online

	async def is_online(self, endpoint: str) -> bool:
		return self.online


class HttpConnectivityProbe:
	"""Online means the probe URL (or the sync endpoint) answers at all, whatever the status."""

	def __init__(
		self,
		probe_url: str = "",
		timeout_seconds: float = 3.0,
		transport: httpx.AsyncBaseTransport | None = None,
	):
		self.probe_url = probe_url
		self.timeout_seconds = timeout_seconds
		self.transport = transport

	async def is_online(self, endpoint: str) -> bool:
		url = self.probe_url or endpoint
		try:
			async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
				await client.head(url)
		except (httpx.HTTPError, httpx.InvalidURL) as exc:
			logger.info("connectivity_probe_failed", url=url, error=str(exc))
			return False
		return True


class SyncReconciler:
	def __init__(
		self,
		store: OfflineStore,
		connectivity: ConnectivityProbe,
		*,
		timeout_seconds: float = 10.0,
		transport: httpx.AsyncBaseTransport | None = None,
	):
		self.store = store
		self.connectivity = connectivity
		self.timeout_seconds = timeout_seconds
		self.transport = transport

	async def sync(self, endpoint: str, method: SyncMethod | str = SyncMethod.post) -> SyncResult:
		"""Push every unsynced record once, concurrently.

		Connectivity is checked only here at the start. Per-item failures land in
		``results``; only an offline device or a failed key listing makes the
		whole result unsuccessful.
		"""
		sync_method = SyncMethod(str(method).upper())
		try:
			await self._ensure_online(endpoint)
		except OfflineUnavailable as exc:
			logger.info("sync_skipped_offline", endpoint=endpoint)
			return SyncResult(success=False, error=str(exc))

		try:
			pending = await self._collect_unsynced()
		except StorageError as exc:
			logger.error("sync_listing_failed", endpoint=endpoint, error=str(exc))
			return SyncResult(success=False, error=str(exc))

		logger.info("sync_started", endpoint=endpoint, method=sync_method.value, pending=len(pending))
		async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
			results = await asyncio.gather(
				*(self._push(client, endpoint, sync_method, envelope) for envelope in pending)
			)

		logger.info(
			"sync_completed",
			endpoint=endpoint,
			pushed=len(results),
			succeeded=sum(1 for item in results if item.success),
		)
		return SyncResult(success=True, results=list(results))

	async def _ensure_online(self, endpoint: str) -> None:
		if not await self.connectivity.is_online(endpoint):
			raise OfflineUnavailable()

	async def _collect_unsynced(self) -> list[OfflineEnvelope]:
		keys = await self.store.list_keys()
		pending: list[OfflineEnvelope] = []
		for key in sorted(keys):
			envelope = await self.store.get(key)
			if envelope is not None and not envelope.synced:
				pending.append(envelope)
		return pending

	async def _push(
		self,
		client: httpx.AsyncClient,
		endpoint: str,
		method: SyncMethod,
		envelope: OfflineEnvelope,
	) -> SyncItemResult:
		try:
			response = await client.request(
				method.value,
				endpoint,
				content=json.dumps(envelope.data),
				headers={"Content-Type": "application/json"},
			)
			if not response.is_success:
				raise SyncItemError(envelope.key)
			if not await self.store.mark_synced(envelope):
				raise SyncItemError(envelope.key, "Failed to record sync state")
		except SyncItemError as exc:
			logger.warning("sync_item_failed", key=exc.key, error=str(exc))
			return SyncItemResult(key=envelope.key, success=False, error=str(exc))
		except httpx.HTTPError as exc:
			logger.warning("sync_item_failed", key=envelope.key, error=str(exc))
			return SyncItemResult(key=envelope.key, success=False, error=str(exc) or exc.__class__.__name__)
		except Exception as exc:
			logger.exception("sync_item_failed", key=envelope.key, error=str(exc))
			return SyncItemResult(key=envelope.key, success=False, error=str(exc) or exc.__class__.__name__)
		return SyncItemResult(key=envelope.key, success=True)
