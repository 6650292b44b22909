"""
Trail status models.

TroyStatusRow is the durable single-row table; TroyStatus is the
immutable snapshot handed to the poller and API.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, Integer, Text

from trailwatch.models.base import Base


class TroyStatusRow(Base):
    """On-trail flag and active beacon URL. Always row id 1."""

    __tablename__ = "troy_status"

    id = Column(Integer, primary_key=True)
    is_on_trail = Column(Boolean, nullable=False, default=False)
    beacon_url = Column(Text, nullable=True)
    trail_status_updated = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<TroyStatusRow on_trail={self.is_on_trail} beacon={self.beacon_url is not None}>"


@dataclass(frozen=True)
class TroyStatus:
    is_on_trail: bool = False
    beacon_url: Optional[str] = None
    trail_status_updated: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: TroyStatusRow) -> "TroyStatus":
        return cls(
            is_on_trail=bool(row.is_on_trail),
            beacon_url=row.beacon_url,
            trail_status_updated=row.trail_status_updated,
        )
