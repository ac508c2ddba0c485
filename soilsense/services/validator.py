"""Raw soil input normalization — turns form or voice values into a SoilMeasurement."""

from __future__ import annotations

import math
import uuid
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from soilsense.errors import ValidationError
from soilsense.schemas.soil import GeoPoint, SoilMeasurement

FIELD_NAMES = (
	"fieldName",
	"ph",
	"nitrogen",
	"phosphorus",
	"potassium",
	"moisture",
	"organicMatter",
	"temperature",
)

REQUIRED_NUMERIC_FIELDS = ("ph", "nitrogen", "phosphorus", "potassium", "moisture")
OPTIONAL_NUMERIC_FIELDS = ("organicMatter", "temperature")


def _is_blank(value: Any) -> bool:
	return value is None or (isinstance(value, str) and not value.strip())


def _to_number(field: str, value: Any) -> float:
	if isinstance(value, bool):
		raise ValidationError(field, "must be numeric")
	try:
		number = float(value.strip() if isinstance(value, str) else value)
	except (TypeError, ValueError) as exc:
		raise ValidationError(field, f"must be numeric, got {value!r}") from exc
	if not math.isfinite(number):
		raise ValidationError(field, f"must be a finite number, got {value!r}")
	return number


def _parse_location(value: Any) -> GeoPoint | None:
	if value is None:
		return None
	if not isinstance(value, Mapping):
		raise ValidationError("location", "must be an object with lat and lng")
	if _is_blank(value.get("lat")) or _is_blank(value.get("lng")):
		raise ValidationError("location", "lat and lng are both required")
	return GeoPoint(
		lat=_to_number("location.lat", value["lat"]),
		lng=_to_number("location.lng", value["lng"]),
	)


def validate_measurement(
	raw: Mapping[str, Any],
	*,
	measurement_id: str | None = None,
	now: datetime | None = None,
) -> SoilMeasurement:
	"""Build a SoilMeasurement from a flat field-name -> value mapping.

	Out-of-domain numbers (pH 20, moisture 140) are kept as entered; only a
	missing, blank or non-numeric value is rejected. ``measurement_id`` is
	passed when replacing an existing measurement; otherwise a new id is
	generated.
	"""
	field_name = raw.get("fieldName")
	if _is_blank(field_name):
		raise ValidationError("fieldName", "is required")

	values: dict[str, float | None] = {}
	for field in REQUIRED_NUMERIC_FIELDS:
		value = raw.get(field)
		if _is_blank(value):
			raise ValidationError(field, "is required")
		values[field] = _to_number(field, value)

	for field in OPTIONAL_NUMERIC_FIELDS:
		value = raw.get(field)
		values[field] = None if _is_blank(value) else _to_number(field, value)

	return SoilMeasurement(
		id=measurement_id or uuid.uuid4().hex,
		field_name=str(field_name).strip(),
		ph=values["ph"],
		nitrogen=values["nitrogen"],
		phosphorus=values["phosphorus"],
		potassium=values["potassium"],
		moisture=values["moisture"],
		organic_matter=values["organicMatter"],
		temperature=values["temperature"],
		last_updated=now or datetime.now(UTC),
		location=_parse_location(raw.get("location")),
	)
