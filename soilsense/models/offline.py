"""OfflineRecord ORM model — primary tier of the offline store.

Each row is one envelope. ``payload`` holds the JSON ``data`` exactly as the
caller handed it to the store; the bookkeeping columns mirror the envelope
fields:

    {
        "key": "soil_3f2c...",
        "data": {...},
        "timestamp": 1718000000000,
        "synced": false,
        "capturedAt": 1718000000000
    }
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, BigInteger, Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from soilsense.models.base import Base


class OfflineRecord(Base):
    """Durable envelope keyed by an application-chosen string."""

    __tablename__ = "offline_records"
    __table_args__ = (
        Index("ix_offline_records_synced", "synced"),
    )

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    payload: Mapped[Any] = mapped_column(JSON, nullable=True)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    captured_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    synced: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="0"
    )

    def __repr__(self) -> str:
        return (
            f"<OfflineRecord key={self.key!r} ts={self.timestamp} "
            f"synced={self.synced}>"
        )
