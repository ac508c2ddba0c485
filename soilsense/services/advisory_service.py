"""Advisory orchestration — validate, score, rank, persist and speak one measurement."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from soilsense.errors import StorageError
from soilsense.schemas.advisory import AdvisoryReport
from soilsense.schemas.soil import SoilMeasurement
from soilsense.services.health_service import score_health, weighted_soil_index
from soilsense.services.offline_store import OfflineStore
from soilsense.services.ranking_service import rank_crops
from soilsense.services.speech import SpeechOutput, narrate, speech_locale
from soilsense.services.validator import validate_measurement

logger = structlog.get_logger("soilsense.advisory")

MEASUREMENT_KEY_PREFIX = "soil_"


def measurement_key(measurement_id: str) -> str:
	return f"{MEASUREMENT_KEY_PREFIX}{measurement_id}"


class AdvisoryService:
	def __init__(self, store: OfflineStore, speech_output: SpeechOutput | None = None):
		self.store = store
		self.speech_output = speech_output

	async def record(self, raw: Mapping[str, Any], language: str = "en") -> AdvisoryReport:
		measurement = validate_measurement(raw)
		return await self._analyze_and_persist(measurement, language)

	async def replace(self, measurement_id: str, raw: Mapping[str, Any], language: str = "en") -> AdvisoryReport:
		existing = await self.store.get(measurement_key(measurement_id))
		if existing is None:
			raise LookupError(f"Measurement {measurement_id} not found")
		measurement = validate_measurement(raw, measurement_id=measurement_id)
		return await self._analyze_and_persist(measurement, language)

	async def history(self) -> list[SoilMeasurement]:
		"""Stored measurements, oldest first."""
		try:
			keys = await self.store.list_keys()
		except StorageError as exc:
			logger.error("measurement_history_unavailable", error=str(exc))
			return []

		measurements: list[SoilMeasurement] = []
		for key in keys:
			if not key.startswith(MEASUREMENT_KEY_PREFIX):
				continue
			envelope = await self.store.get(key)
			if envelope is None or not isinstance(envelope.data, dict):
				continue
			measurements.append(SoilMeasurement.model_validate(envelope.data))

		measurements.sort(key=lambda item: item.last_updated)
		return measurements

	async def current(self) -> SoilMeasurement | None:
		measurements = await self.history()
		return measurements[-1] if measurements else None

	async def _analyze_and_persist(self, measurement: SoilMeasurement, language: str) -> AdvisoryReport:
		health = score_health(measurement)
		suggestions = rank_crops(measurement)
		summary = narrate(health, suggestions, language)

		persisted = await self.store.put(
			measurement_key(measurement.id),
			measurement.model_dump(mode="json", by_alias=True),
		)
		if not persisted:
			logger.error("measurement_not_persisted", measurement_id=measurement.id)

		if self.speech_output is not None:
			await self.speech_output.speak(summary, speech_locale(language))

		return AdvisoryReport(
			measurement=measurement,
			health=health,
			soil_index=weighted_soil_index(measurement),
			suggestions=suggestions,
			summary=summary,
			persisted=persisted,
		)
