"""Failure taxonomy shared by the scoring engine, offline store and sync."""

from __future__ import annotations


class SoilSenseError(Exception):
	"""Base class for every failure raised inside the advisory core."""


class ValidationError(SoilSenseError, ValueError):
	"""A required measurement field is missing, blank or not a finite number."""

	def __init__(self, field: str, message: str):
		super().__init__(f"{field}: {message}")
		self.field = field


class StorageError(SoilSenseError):
	"""Both persistence tiers failed for one operation."""


class SyncItemError(SoilSenseError):
	"""The remote endpoint rejected one offline record."""

	def __init__(self, key: str, message: str = "Sync failed"):
		super().__init__(message)
		self.key = key


class OfflineUnavailable(SoilSenseError):
	"""Sync was attempted without connectivity."""

	def __init__(self, message: str = "Device is offline"):
		super().__init__(message)
