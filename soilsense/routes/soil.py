"""Soil measurement routes — record, replace and list measurements."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from soilsense.config import get_settings
from soilsense.dependencies import get_offline_store
from soilsense.schemas.advisory import AdvisoryReport, MeasurementListRead
from soilsense.schemas.soil import SoilMeasurement
from soilsense.services.advisory_service import AdvisoryService
from soilsense.services.offline_store import OfflineStore

router = APIRouter(prefix="/soil", tags=["soil"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="soil service failure")


def _language(language: str | None) -> str:
	return language or get_settings().default_locale


@router.post("/measurements", response_model=AdvisoryReport, status_code=status.HTTP_201_CREATED)
async def record_measurement(
	payload: dict[str, Any] = Body(...),
	language: str | None = Query(default=None, max_length=8),
	store: OfflineStore = Depends(get_offline_store),
) -> AdvisoryReport:
	service = AdvisoryService(store)
	try:
		return await service.record(payload, _language(language))
	except Exception as exc:
		raise _map_error(exc) from exc


@router.get("/measurements", response_model=MeasurementListRead)
async def list_measurements(store: OfflineStore = Depends(get_offline_store)) -> MeasurementListRead:
	service = AdvisoryService(store)
	try:
		items = await service.history()
	except Exception as exc:
		raise _map_error(exc) from exc
	return MeasurementListRead(items=items)


@router.get("/measurements/current", response_model=SoilMeasurement)
async def current_measurement(store: OfflineStore = Depends(get_offline_store)) -> SoilMeasurement:
	service = AdvisoryService(store)
	try:
		measurement = await service.current()
	except Exception as exc:
		raise _map_error(exc) from exc
	if measurement is None:
		raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No measurements recorded")
	return measurement


@router.put("/measurements/{measurement_id}", response_model=AdvisoryReport)
async def replace_measurement(
	measurement_id: str,
	payload: dict[str, Any] = Body(...),
	language: str | None = Query(default=None, max_length=8),
	store: OfflineStore = Depends(get_offline_store),
) -> AdvisoryReport:
	service = AdvisoryService(store)
	try:
		return await service.replace(measurement_id, payload, _language(language))
	except Exception as exc:
		raise _map_error(exc) from exc
