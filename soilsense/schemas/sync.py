"""Pydantic schemas for the sync endpoint and reconciler results."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from soilsense.config import SyncMethod


class SyncRequest(BaseModel):
	endpoint: str | None = Field(default=None, min_length=1)
	method: SyncMethod | None = None


class SyncItemResult(BaseModel):
	key: str
	success: bool
	error: str | None = None


class SyncResult(BaseModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

	success: bool
	results: list[SyncItemResult] = Field(default_factory=list)
	error: str | None = None