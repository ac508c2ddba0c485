from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from soilsense.config import SyncMethod
from soilsense.errors import StorageError
from soilsense.services.offline_store import OfflineStore
from soilsense.services.sync_service import HttpConnectivityProbe, StaticConnectivity, SyncReconciler

ENDPOINT = "https://sync.example.test/api/soil"


class RecordingRemote:
	"""MockTransport handler that remembers every request and can fail chosen ids."""

	def __init__(self, failing_ids: set[str] | None = None, status_code: int = 200):
		self.requests: list[httpx.Request] = []
		self.failing_ids = failing_ids or set()
		self.status_code = status_code

	def __call__(self, request: httpx.Request) -> httpx.Response:
		self.requests.append(request)
		body = json.loads(request.content)
		if body.get("id") in self.failing_ids:
			return httpx.Response(500, json={"error": "boom"})
		return httpx.Response(self.status_code, json={"ok": True})

	@property
	def bodies(self) -> list[dict[str, Any]]:
		return [json.loads(request.content) for request in self.requests]


def _reconciler(store: OfflineStore, remote: RecordingRemote, online: bool = True) -> SyncReconciler:
	return SyncReconciler(
		store,
		StaticConnectivity(online=online),
		transport=httpx.MockTransport(remote),
	)


@pytest.mark.asyncio
async def test_sync_offline_sends_nothing(offline_store: OfflineStore) -> None:
	await offline_store.put("soil_a", {"id": "a"})
	remote = RecordingRemote()

	result = await _reconciler(offline_store, remote, online=False).sync(ENDPOINT)

	assert result.success is False
	assert result.error == "Device is offline"
	assert result.results == []
	assert remote.requests == []
	envelope = await offline_store.get("soil_a")
	assert envelope is not None and envelope.synced is False


@pytest.mark.asyncio
async def test_sync_pushes_bare_data_and_marks_synced(offline_store: OfflineStore, clock: Any) -> None:
	await offline_store.put("soil_a", {"id": "a", "ph": 6.5})
	await offline_store.put("soil_b", {"id": "b", "ph": 7.1})
	captured = clock.value
	clock.advance(10_000)
	remote = RecordingRemote()

	result = await _reconciler(offline_store, remote).sync(ENDPOINT)

	assert result.success is True
	assert result.error is None
	assert sorted(item.key for item in result.results) == ["soil_a", "soil_b"]
	assert all(item.success for item in result.results)
	assert sorted(remote.bodies, key=lambda body: body["id"]) == [
		{"id": "a", "ph": 6.5},
		{"id": "b", "ph": 7.1},
	]
	assert all(request.method == "POST" for request in remote.requests)
	assert all(request.headers["content-type"] == "application/json" for request in remote.requests)

	envelope = await offline_store.get("soil_a")
	assert envelope is not None
	assert envelope.synced is True
	assert envelope.timestamp == captured + 10_000
	assert envelope.captured_at == captured


@pytest.mark.asyncio
async def test_second_sync_has_nothing_to_push(offline_store: OfflineStore) -> None:
	await offline_store.put("soil_a", {"id": "a"})
	remote = RecordingRemote()
	reconciler = _reconciler(offline_store, remote)

	await reconciler.sync(ENDPOINT)
	second = await reconciler.sync(ENDPOINT)

	assert second.success is True
	assert second.results == []
	assert len(remote.requests) == 1


@pytest.mark.asyncio
async def test_sync_honours_put_method(offline_store: OfflineStore) -> None:
	await offline_store.put("soil_a", {"id": "a"})
	remote = RecordingRemote()

	result = await _reconciler(offline_store, remote).sync(ENDPOINT, SyncMethod.put)

	assert result.success is True
	assert [request.method for request in remote.requests] == ["PUT"]


@pytest.mark.asyncio
async def test_sync_isolates_per_item_failures(offline_store: OfflineStore) -> None:
	await offline_store.put("soil_a", {"id": "a"})
	await offline_store.put("soil_b", {"id": "b"})
	remote = RecordingRemote(failing_ids={"b"})

	result = await _reconciler(offline_store, remote).sync(ENDPOINT)

	assert result.success is True
	by_key = {item.key: item for item in result.results}
	assert by_key["soil_a"].success is True
	assert by_key["soil_b"].success is False
	assert by_key["soil_b"].error == "Sync failed"

	failed = await offline_store.get("soil_b")
	assert failed is not None and failed.synced is False

	retry = await _reconciler(offline_store, RecordingRemote()).sync(ENDPOINT)
	assert [item.key for item in retry.results] == ["soil_b"]


@pytest.mark.asyncio
async def test_sync_reports_transport_errors_per_item(offline_store: OfflineStore) -> None:
	await offline_store.put("soil_a", {"id": "a"})

	def refuse(request: httpx.Request) -> httpx.Response:
		raise httpx.ConnectError("connection refused", request=request)

	reconciler = SyncReconciler(
		offline_store,
		StaticConnectivity(online=True),
		transport=httpx.MockTransport(refuse),
	)
	result = await reconciler.sync(ENDPOINT)

	assert result.success is True
	assert len(result.results) == 1
	assert result.results[0].success is False
	assert "connection refused" in (result.results[0].error or "")


@pytest.mark.asyncio
async def test_sync_fails_whole_when_keys_cannot_be_listed(
	offline_store: OfflineStore,
	monkeypatch: pytest.MonkeyPatch,
) -> None:
	async def fail_listing(self: OfflineStore) -> set[str]:
		raise StorageError("Failed to list offline keys: all tiers failed")

	monkeypatch.setattr(OfflineStore, "list_keys", fail_listing)
	remote = RecordingRemote()

	result = await _reconciler(offline_store, remote).sync(ENDPOINT)

	assert result.success is False
	assert result.error == "Failed to list offline keys: all tiers failed"
	assert remote.requests == []


@pytest.mark.asyncio
async def test_sync_reports_item_when_sync_state_cannot_be_saved(
	offline_store: OfflineStore,
	monkeypatch: pytest.MonkeyPatch,
) -> None:
	await offline_store.put("soil_a", {"id": "a"})

	async def refuse_mark(self: OfflineStore, envelope: object) -> bool:
		return False

	monkeypatch.setattr(OfflineStore, "mark_synced", refuse_mark)

	result = await _reconciler(offline_store, RecordingRemote()).sync(ENDPOINT)

	assert result.results[0].success is False
	assert result.results[0].error == "Failed to record sync state"


@pytest.mark.asyncio
async def test_sync_result_serializes_camel_case(offline_store: OfflineStore) -> None:
	result = await _reconciler(offline_store, RecordingRemote(), online=False).sync(ENDPOINT)
	assert result.model_dump(by_alias=True) == {
		"success": False,
		"results": [],
		"error": "Device is offline",
	}


@pytest.mark.asyncio
async def test_http_probe_treats_any_response_as_online() -> None:
	seen: list[str] = []

	def answer(request: httpx.Request) -> httpx.Response:
		seen.append(request.method)
		return httpx.Response(405)

	probe = HttpConnectivityProbe(transport=httpx.MockTransport(answer))

	assert await probe.is_online(ENDPOINT) is True
	assert seen == ["HEAD"]


@pytest.mark.asyncio
async def test_http_probe_prefers_probe_url() -> None:
	seen: list[str] = []

	def answer(request: httpx.Request) -> httpx.Response:
		seen.append(str(request.url))
		return httpx.Response(204)

	probe = HttpConnectivityProbe(
		probe_url="https://probe.example.test/ping",
		transport=httpx.MockTransport(answer),
	)
	await probe.is_online(ENDPOINT)

	assert seen == ["https://probe.example.test/ping"]


@pytest.mark.asyncio
async def test_http_probe_offline_on_transport_error() -> None:
	def refuse(request: httpx.Request) -> httpx.Response:
		raise httpx.ConnectError("no route to host", request=request)

	probe = HttpConnectivityProbe(transport=httpx.MockTransport(refuse))
	assert await probe.is_online(ENDPOINT) is False


@pytest.mark.asyncio
async def test_sync_reports_malformed_endpoint_per_item(offline_store: OfflineStore) -> None:
	await offline_store.put("soil_a", {"id": "a"})
	reconciler = SyncReconciler(offline_store, StaticConnectivity(online=True))

	result = await reconciler.sync("http://[::1")

	assert result.success is True
	assert [item.key for item in result.results] == ["soil_a"]
	assert result.results[0].success is False
	assert result.results[0].error

	envelope = await offline_store.get("soil_a")
	assert envelope is not None and envelope.synced is False


@pytest.mark.asyncio
async def test_sync_reports_unexpected_push_errors_per_item(
	offline_store: OfflineStore,
	monkeypatch: pytest.MonkeyPatch,
) -> None:
	await offline_store.put("soil_a", {"id": "a"})

	async def explode(self: OfflineStore, envelope: object) -> bool:
		raise RuntimeError("disk full")

	monkeypatch.setattr(OfflineStore, "mark_synced", explode)

	result = await _reconciler(offline_store, RecordingRemote()).sync(ENDPOINT)

	assert result.success is True
	assert result.results[0].success is False
	assert result.results[0].error == "disk full"


@pytest.mark.asyncio
async def test_http_probe_offline_on_malformed_url() -> None:
	probe = HttpConnectivityProbe()
	assert await probe.is_online("http://[::1") is False
