"""Crop catalog and suitability ranking routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, HTTPException, Query, status

from soilsense.models.enums import MarketDemandEnum, WaterRequirementEnum
from soilsense.schemas.crops import CropCatalogResponse, CropProfile, CropSuggestion
from soilsense.services.crop_catalog import CROP_CATALOG, get_crop
from soilsense.services.ranking_service import filter_suggestions, rank_crops
from soilsense.services.validator import validate_measurement

router = APIRouter(prefix="/crops", tags=["crops"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="crop service failure")


@router.get("/catalog", response_model=CropCatalogResponse)
async def list_catalog() -> CropCatalogResponse:
	return CropCatalogResponse(items=list(CROP_CATALOG))


@router.get("/catalog/{crop_id}", response_model=CropProfile)
async def get_catalog_entry(crop_id: str) -> CropProfile:
	try:
		return get_crop(crop_id)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.post("/suggestions", response_model=list[CropSuggestion])
async def suggest_crops(
	payload: dict[str, Any] = Body(...),
	water_requirement: WaterRequirementEnum | None = Query(default=None),
	market_demand: MarketDemandEnum | None = Query(default=None),
	season: str | None = Query(default=None, max_length=32),
	min_score: int | None = Query(default=None, ge=0, le=100),
) -> list[CropSuggestion]:
	try:
		suggestions = rank_crops(validate_measurement(payload))
	except Exception as exc:
		raise _map_error(exc) from exc
	return filter_suggestions(
		suggestions,
		water_requirement=water_requirement,
		market_demand=market_demand,
		season=season,
		min_score=min_score,
	)
