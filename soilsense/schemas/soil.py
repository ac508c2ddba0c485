"""Pydantic schemas for soil measurements and derived health ratings."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from soilsense.models.enums import HealthCategoryEnum


class GeoPoint(BaseModel):
	model_config = ConfigDict(frozen=True)

	lat: float
	lng: float


class SoilMeasurement(BaseModel):
	"""One recorded soil sample. Replaced wholesale, never edited in place."""

	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

	id: str
	field_name: str = Field(min_length=1)
	ph: float
	nitrogen: float
	phosphorus: float
	potassium: float
	moisture: float
	organic_matter: float | None = None
	temperature: float | None = None
	last_updated: datetime
	location: GeoPoint | None = None


class HealthRating(BaseModel):
	model_config = ConfigDict(frozen=True)

	ph: HealthCategoryEnum
	nutrients: HealthCategoryEnum
	moisture: HealthCategoryEnum
	overall: float = Field(ge=0.0, le=100.0)
