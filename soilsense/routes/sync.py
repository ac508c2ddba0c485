"""Offline sync route — drains unsynced envelopes to the remote endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from soilsense.config import get_settings
from soilsense.dependencies import get_connectivity_probe, get_offline_store
from soilsense.schemas.sync import SyncRequest, SyncResult
from soilsense.services.offline_store import OfflineStore
from soilsense.services.sync_service import ConnectivityProbe, SyncReconciler

router = APIRouter(prefix="/sync", tags=["sync"])


@router.post("", response_model=SyncResult)
async def run_sync(
	payload: SyncRequest,
	store: OfflineStore = Depends(get_offline_store),
	connectivity: ConnectivityProbe = Depends(get_connectivity_probe),
) -> SyncResult:
	settings = get_settings()
	endpoint = payload.endpoint or settings.sync_endpoint
	if not endpoint:
		raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="sync endpoint is not configured")

	reconciler = SyncReconciler(store, connectivity, timeout_seconds=settings.sync_timeout_seconds)
	return await reconciler.sync(endpoint, payload.method or settings.sync_method)
