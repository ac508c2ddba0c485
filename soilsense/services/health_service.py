"""Soil health scoring — categorical rating per axis plus an overall score."""

from __future__ import annotations

from soilsense.models.enums import HealthCategoryEnum
from soilsense.schemas.soil import HealthRating, SoilMeasurement

CATEGORY_ANCHORS: dict[HealthCategoryEnum, float] = {
	HealthCategoryEnum.excellent: 90.0,
	HealthCategoryEnum.good: 75.0,
	HealthCategoryEnum.moderate: 60.0,
	HealthCategoryEnum.poor: 40.0,
}

# (lower, upper) inclusive bands, tightest first.
_PH_BANDS: list[tuple[float, float, HealthCategoryEnum]] = [
	(6.0, 7.5, HealthCategoryEnum.excellent),
	(5.5, 8.0, HealthCategoryEnum.good),
	(5.0, 8.5, HealthCategoryEnum.moderate),
]

_MOISTURE_BANDS: list[tuple[float, float, HealthCategoryEnum]] = [
	(60.0, 80.0, HealthCategoryEnum.excellent),
	(40.0, 90.0, HealthCategoryEnum.good),
	(20.0, 95.0, HealthCategoryEnum.moderate),
]

_NUTRIENT_FLOORS: list[tuple[float, HealthCategoryEnum]] = [
	(80.0, HealthCategoryEnum.excellent),
	(60.0, HealthCategoryEnum.good),
	(40.0, HealthCategoryEnum.moderate),
]

# parameter -> (optimal min, optimal max, weight)
SOIL_INDEX_RANGES: dict[str, tuple[float, float, float]] = {
	"ph": (6.0, 7.5, 0.2),
	"nitrogen": (200.0, 400.0, 0.15),
	"phosphorus": (20.0, 50.0, 0.15),
	"potassium": (150.0, 300.0, 0.15),
	"moisture": (40.0, 70.0, 0.2),
	"organic_matter": (2.0, 5.0, 0.15),
}


def _categorize_band(
	value: float,
	bands: list[tuple[float, float, HealthCategoryEnum]],
) -> HealthCategoryEnum:
	for lower, upper, category in bands:
		if lower <= value <= upper:
			return category
	return HealthCategoryEnum.poor


def categorize_ph(ph: float) -> HealthCategoryEnum:
	return _categorize_band(ph, _PH_BANDS)


def categorize_nutrients(nitrogen: float, phosphorus: float, potassium: float) -> HealthCategoryEnum:
	mean = (nitrogen + phosphorus + potassium) / 3
	for floor, category in _NUTRIENT_FLOORS:
		if mean >= floor:
			return category
	return HealthCategoryEnum.poor


def categorize_moisture(moisture: float) -> HealthCategoryEnum:
	return _categorize_band(moisture, _MOISTURE_BANDS)


def score_health(measurement: SoilMeasurement) -> HealthRating:
	"""Rate pH, nutrients and moisture; overall is the plain mean of the anchors."""
	ph = categorize_ph(measurement.ph)
	nutrients = categorize_nutrients(
		measurement.nitrogen,
		measurement.phosphorus,
		measurement.potassium,
	)
	moisture = categorize_moisture(measurement.moisture)

	overall = sum(CATEGORY_ANCHORS[category] for category in (ph, nutrients, moisture)) / 3
	return HealthRating(ph=ph, nutrients=nutrients, moisture=moisture, overall=overall)


def _range_score(value: float, lower: float, upper: float) -> float:
	if lower <= value <= upper:
		return 100.0
	if value < lower:
		return max(0.0, (value / lower) * 100.0)
	return max(0.0, 100.0 - ((value - upper) / upper) * 50.0)


def weighted_soil_index(measurement: SoilMeasurement) -> int:
	"""Continuous 0-100 index: distance from each parameter's optimal range, weighted.

	Missing organic matter is scored as zero.
	"""
	values = {
		"ph": measurement.ph,
		"nitrogen": measurement.nitrogen,
		"phosphorus": measurement.phosphorus,
		"potassium": measurement.potassium,
		"moisture": measurement.moisture,
		"organic_matter": measurement.organic_matter or 0.0,
	}

	total_score = 0.0
	total_weight = 0.0
	for name, (lower, upper, weight) in SOIL_INDEX_RANGES.items():
		total_score += _range_score(values[name], lower, upper) * weight
		total_weight += weight

	return round(total_score / total_weight)
