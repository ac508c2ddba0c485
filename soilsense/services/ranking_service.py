"""Crop suitability ranking — additive rule scoring with a reason per factor."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from soilsense.models.enums import MarketDemandEnum, WaterRequirementEnum
from soilsense.schemas.crops import CropProfile, CropSuggestion
from soilsense.schemas.soil import SoilMeasurement
from soilsense.services.crop_catalog import CROP_CATALOG

MAX_SCORE = 100

# Nitrogen is compared on a kg/ha-like scale even though inputs are 0-100.
NITROGEN_GOOD = 200.0


def _score_ph(ph: float, reasons: list[str]) -> int:
	if 6.0 <= ph <= 7.5:
		reasons.append("Optimal soil pH")
		return 20
	if 5.5 <= ph <= 8.0:
		reasons.append("Acceptable soil pH")
		return 10
	return 0


def _score_nitrogen(nitrogen: float, reasons: list[str]) -> int:
	if nitrogen >= NITROGEN_GOOD:
		reasons.append("Good nitrogen levels")
		return 15
	reasons.append("Low nitrogen - may need fertilizer")
	return 0


def _score_phosphorus(phosphorus: float, reasons: list[str]) -> int:
	if phosphorus >= 20:
		reasons.append("Adequate phosphorus")
		return 15
	if phosphorus >= 10:
		reasons.append("Low phosphorus - may need fertilizer")
		return 8
	reasons.append("Phosphorus deficient - apply fertilizer")
	return 0


def _score_potassium(potassium: float, reasons: list[str]) -> int:
	if potassium >= 150:
		reasons.append("Good potassium levels")
		return 15
	if potassium >= 75:
		reasons.append("Moderate potassium")
		return 8
	reasons.append("Potassium deficient - apply potash")
	return 0


def _score_moisture_fit(
	water_requirement: WaterRequirementEnum,
	moisture: float,
	reasons: list[str],
) -> int:
	if water_requirement == WaterRequirementEnum.high and moisture >= 60:
		reasons.append("High moisture suits water-loving crop")
		return 20
	if water_requirement == WaterRequirementEnum.medium and 40 <= moisture <= 70:
		reasons.append("Balanced moisture levels")
		return 20
	if water_requirement == WaterRequirementEnum.low and moisture <= 50:
		reasons.append("Low water requirement matches soil moisture")
		return 20
	reasons.append("Moisture management needed")
	return 5


def _score_organic_matter(organic_matter: float | None, reasons: list[str]) -> int:
	if organic_matter is not None and organic_matter >= 2:
		reasons.append("Rich organic matter")
		return 15
	reasons.append("Low organic matter - add compost")
	return 5


def score_crop(measurement: SoilMeasurement, crop: CropProfile) -> CropSuggestion:
	"""Score one crop. Reasons follow pH, N, P, K, moisture fit, organic matter."""
	reasons: list[str] = []
	score = 0
	score += _score_ph(measurement.ph, reasons)
	score += _score_nitrogen(measurement.nitrogen, reasons)
	score += _score_phosphorus(measurement.phosphorus, reasons)
	score += _score_potassium(measurement.potassium, reasons)
	score += _score_moisture_fit(crop.water_requirement, measurement.moisture, reasons)
	score += _score_organic_matter(measurement.organic_matter, reasons)

	return CropSuggestion(
		**crop.model_dump(),
		suitability_score=min(MAX_SCORE, score),
		reasons=reasons,
	)


def rank_crops(
	measurement: SoilMeasurement,
	catalog: Sequence[CropProfile] = CROP_CATALOG,
) -> list[CropSuggestion]:
	"""Every catalog crop, best first. ``sorted`` is stable so ties keep catalog order."""
	suggestions = [score_crop(measurement, crop) for crop in catalog]
	return sorted(suggestions, key=lambda item: item.suitability_score, reverse=True)


def filter_suggestions(
	suggestions: Iterable[CropSuggestion],
	*,
	water_requirement: WaterRequirementEnum | None = None,
	market_demand: MarketDemandEnum | None = None,
	season: str | None = None,
	min_score: int | None = None,
) -> list[CropSuggestion]:
	"""Narrow a ranked list without reordering it."""
	season_token = season.strip().lower() if season else None

	result: list[CropSuggestion] = []
	for item in suggestions:
		if water_requirement is not None and item.water_requirement != water_requirement:
			continue
		if market_demand is not None and item.market_demand != market_demand:
			continue
		if min_score is not None and item.suitability_score < min_score:
			continue
		if season_token and not _matches_season(item.best_season, season_token):
			continue
		result.append(item)
	return result


def _matches_season(best_season: str, season_token: str) -> bool:
	label = best_season.lower()
	return label == "year-round" or season_token in label
