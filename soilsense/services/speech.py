"""Speech boundary — injected voice capabilities, transcript parsing and narration."""

from __future__ import annotations

import re
from collections.abc import AsyncIterator, Sequence
from typing import Protocol

from soilsense.models.enums import LocaleEnum
from soilsense.schemas.crops import CropSuggestion
from soilsense.schemas.soil import HealthRating

SPEECH_LOCALES: dict[str, str] = {
	LocaleEnum.en: "en-US",
	LocaleEnum.hi: "hi-IN",
	LocaleEnum.te: "te-IN",
	LocaleEnum.ta: "ta-IN",
}

# Spoken keyword -> validator field name. Longer phrases first so
# "organic matter" is not mistaken for something shorter.
_FIELD_KEYWORDS: list[tuple[str, str]] = [
	("organic matter", "organicMatter"),
	("temperature", "temperature"),
	("phosphorus", "phosphorus"),
	("potassium", "potassium"),
	("nitrogen", "nitrogen"),
	("moisture", "moisture"),
	("acidity", "ph"),
	("ph", "ph"),
]

_NUMBER = r"(-?\d+(?:\.\d+)?)"

# Only filler may sit between a keyword and its number, never another word.
_FILLER = r"(?:\s*(?:(?:level|is|of|about|around|at)\b|[=:,]))*\s*"


class SpeechOutput(Protocol):
	async def speak(self, text: str, locale: str) -> None: ...


class SpeechInput(Protocol):
	def listen(self) -> AsyncIterator[str]:
		"""Yield transcripts until the stream ends; ``aclose()`` cancels it."""
		...


def speech_locale(language: str) -> str:
	return SPEECH_LOCALES.get(language.strip().lower(), "en-US")


def extract_fields(transcript: str) -> dict[str, str]:
	"""Pull ``{field: "number"}`` pairs out of phrases like "ph 6.5, nitrogen is 220"."""
	text = transcript.lower()
	found: dict[str, str] = {}
	for keyword, field in _FIELD_KEYWORDS:
		if field in found:
			continue
		pattern = rf"\b{re.escape(keyword)}\b{_FILLER}{_NUMBER}"
		match = re.search(pattern, text)
		if match:
			found[field] = match.group(1)
	return found


async def collect_fields(speech_input: SpeechInput) -> dict[str, str]:
	"""Merge extracted fields across transcripts; later values win."""
	fields: dict[str, str] = {}
	async for transcript in speech_input.listen():
		fields.update(extract_fields(transcript))
	return fields


def narrate(
	health: HealthRating,
	suggestions: Sequence[CropSuggestion],
	language: str = LocaleEnum.en,
) -> str:
	parts = [
		f"Soil health score is {round(health.overall)} out of 100.",
		f"pH is {health.ph.value}, nutrients are {health.nutrients.value}, moisture is {health.moisture.value}.",
	]
	if suggestions:
		top = suggestions[0]
		name = top.local_name.model_dump().get(language.strip().lower()) or top.name
		parts.append(f"Best crop for this field is {name}, with suitability {top.suitability_score} percent.")
	return " ".join(parts)
