"""Reference crop catalog scored by the suitability ranker.

Order matters: the ranker's stable sort falls back to catalog order on ties,
so rice is the top pick when rice and sugarcane score the same.
"""

from __future__ import annotations

from soilsense.models.enums import MarketDemandEnum, WaterRequirementEnum
from soilsense.schemas.crops import CropProfile, LocalizedName

CROP_CATALOG: tuple[CropProfile, ...] = (
	CropProfile(
		id="rice",
		name="Rice",
		local_name=LocalizedName(en="Rice", hi="चावल", te="వరి", ta="அரிசி"),
		expected_yield="4-6 tons/hectare",
		expected_profit="₹40,000-60,000/acre",
		water_requirement=WaterRequirementEnum.high,
		soil_suitability=85,
		market_demand=MarketDemandEnum.high,
		sustainability_rating=7,
		growth_period=120,
		best_season="Kharif",
	),
	CropProfile(
		id="wheat",
		name="Wheat",
		local_name=LocalizedName(en="Wheat", hi="गेहूं", te="గోధుమ", ta="கோதுமை"),
		expected_yield="3-5 tons/hectare",
		expected_profit="₹35,000-50,000/acre",
		water_requirement=WaterRequirementEnum.medium,
		soil_suitability=80,
		market_demand=MarketDemandEnum.high,
		sustainability_rating=8,
		growth_period=110,
		best_season="Rabi",
	),
	CropProfile(
		id="cotton",
		name="Cotton",
		local_name=LocalizedName(en="Cotton", hi="कपास", te="పత్తి", ta="பருத்தி"),
		expected_yield="500-800 kg/hectare",
		expected_profit="₹50,000-80,000/acre",
		water_requirement=WaterRequirementEnum.medium,
		soil_suitability=75,
		market_demand=MarketDemandEnum.medium,
		sustainability_rating=6,
		growth_period=180,
		best_season="Kharif",
	),
	CropProfile(
		id="sugarcane",
		name="Sugarcane",
		local_name=LocalizedName(en="Sugarcane", hi="गन्ना", te="చెరకు", ta="கரும்பு"),
		expected_yield="70-100 tons/hectare",
		expected_profit="₹80,000-120,000/acre",
		water_requirement=WaterRequirementEnum.high,
		soil_suitability=90,
		market_demand=MarketDemandEnum.high,
		sustainability_rating=7,
		growth_period=365,
		best_season="Year-round",
	),
	CropProfile(
		id="maize",
		name="Maize",
		local_name=LocalizedName(en="Maize", hi="मक्का", te="మొక్కజొన్న", ta="சோளம்"),
		expected_yield="6-8 tons/hectare",
		expected_profit="₹30,000-45,000/acre",
		water_requirement=WaterRequirementEnum.medium,
		soil_suitability=85,
		market_demand=MarketDemandEnum.medium,
		sustainability_rating=8,
		growth_period=90,
		best_season="Both Kharif & Rabi",
	),
	CropProfile(
		id="soybean",
		name="Soybean",
		local_name=LocalizedName(en="Soybean", hi="सोयाबीन", te="సోయాబీన్", ta="சோயாபீன்"),
		expected_yield="2-3 tons/hectare",
		expected_profit="₹25,000-40,000/acre",
		water_requirement=WaterRequirementEnum.medium,
		soil_suitability=80,
		market_demand=MarketDemandEnum.high,
		sustainability_rating=9,
		growth_period=100,
		best_season="Kharif",
	),
	CropProfile(
		id="groundnut",
		name="Groundnut",
		local_name=LocalizedName(en="Groundnut", hi="मूंगफली", te="వేరుశనగ", ta="நிலக்கடலை"),
		expected_yield="2-3 tons/hectare",
		expected_profit="₹35,000-55,000/acre",
		water_requirement=WaterRequirementEnum.low,
		soil_suitability=75,
		market_demand=MarketDemandEnum.medium,
		sustainability_rating=8,
		growth_period=120,
		best_season="Kharif",
	),
)


def get_crop(crop_id: str) -> CropProfile:
	for crop in CROP_CATALOG:
		if crop.id == crop_id:
			return crop
	raise LookupError(f"Crop {crop_id} not found")
