"""ORM model registry — importing this module registers every table on Base.metadata.

Application code can also do::

    from soilsense.models import OfflineRecord, HealthCategoryEnum, ...
"""

# ── Base ────────────────────────────────────────────────────────────────────
from soilsense.models.base import Base

# ── Enums ───────────────────────────────────────────────────────────────────
from soilsense.models.enums import (
    HealthCategoryEnum,
    LocaleEnum,
    MarketDemandEnum,
    WaterRequirementEnum,
)

# ── Offline store ───────────────────────────────────────────────────────────
from soilsense.models.offline import OfflineRecord

__all__ = [
    "Base",
    "HealthCategoryEnum",
    "LocaleEnum",
    "MarketDemandEnum",
    "OfflineRecord",
    "WaterRequirementEnum",
]
