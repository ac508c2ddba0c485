"""Enumerations shared by the scoring engine, schemas and API.

All are StrEnums so they serialize to their plain string values in JSON
payloads and offline envelopes.
"""

from enum import StrEnum


class HealthCategoryEnum(StrEnum):
    """Per-axis soil health category."""

    excellent = "excellent"
    good = "good"
    moderate = "moderate"
    poor = "poor"
    critical = "critical"


class WaterRequirementEnum(StrEnum):
    """How much water a crop needs over its growth period."""

    low = "low"
    medium = "medium"
    high = "high"


class MarketDemandEnum(StrEnum):
    """Relative market demand tier of a crop."""

    low = "low"
    medium = "medium"
    high = "high"


class LocaleEnum(StrEnum):
    """Locale keys carried by every crop profile's localized names."""

    en = "en"
    hi = "hi"
    te = "te"
    ta = "ta"
