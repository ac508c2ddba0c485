"""Pydantic schemas for advisory reports and measurement listings."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from soilsense.schemas.crops import CropSuggestion
from soilsense.schemas.soil import HealthRating, SoilMeasurement


class AdvisoryReport(BaseModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

	measurement: SoilMeasurement
	health: HealthRating
	soil_index: int = Field(ge=0, le=100)
	suggestions: list[CropSuggestion]
	summary: str
	persisted: bool


class MeasurementListRead(BaseModel):
	items: list[SoilMeasurement]
