"""Pydantic schema for the offline durability envelope."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class OfflineEnvelope(BaseModel):
	"""``{key, data, timestamp, synced}`` plus the first-write ``capturedAt``.

	``timestamp`` and ``captured_at`` are epoch milliseconds.
	"""

	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

	key: str
	data: Any = None
	timestamp: int
	synced: bool = False
	captured_at: int | None = None

	def to_json_dict(self) -> dict[str, Any]:
		return self.model_dump(mode="json", by_alias=True)
