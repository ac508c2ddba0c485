"""Pydantic schemas for the crop catalog and ranked suggestions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from soilsense.models.enums import MarketDemandEnum, WaterRequirementEnum


class LocalizedName(BaseModel):
	model_config = ConfigDict(frozen=True)

	en: str
	hi: str
	te: str
	ta: str


class CropProfile(BaseModel):
	"""Static catalog entry."""

	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

	id: str
	name: str
	local_name: LocalizedName
	expected_yield: str
	expected_profit: str
	water_requirement: WaterRequirementEnum
	soil_suitability: int = Field(ge=0, le=100)
	market_demand: MarketDemandEnum
	sustainability_rating: int = Field(ge=0, le=10)
	growth_period: int = Field(gt=0)
	best_season: str


class CropSuggestion(CropProfile):
	suitability_score: int = Field(ge=0, le=100)
	reasons: list[str] = Field(min_length=1)


class CropCatalogResponse(BaseModel):
	items: list[CropProfile]
