"""FastAPI dependencies resolving the offline store and sync collaborators from app state."""

from __future__ import annotations

from fastapi import Request

from soilsense.config import get_settings
from soilsense.services.offline_store import OfflineStore
from soilsense.services.sync_service import ConnectivityProbe, HttpConnectivityProbe


def get_offline_store(request: Request) -> OfflineStore:
	store = getattr(request.app.state, "offline_store", None)
	if store is None:
		raise RuntimeError("offline store is not initialized")
	return store


def get_connectivity_probe(request: Request) -> ConnectivityProbe:
	probe = getattr(request.app.state, "connectivity_probe", None)
	if probe is not None:
		return probe
	settings = get_settings()
	return HttpConnectivityProbe(
		probe_url=settings.connectivity_probe_url,
		timeout_seconds=settings.connectivity_timeout_seconds,
	)
