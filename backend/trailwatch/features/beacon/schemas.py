"""
Beacon live-tracking schemas.

The beacon feed reports the activity status as an integer code.
Codes outside the known range decode to Status.UNKNOWN so the status
machine always has a defined input.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Status(str, Enum):
    """Live activity status."""
    ACTIVE = "active"
    AUTO_PAUSED = "auto_paused"
    MANUAL_PAUSED = "manual_paused"
    UPLOADED = "uploaded"
    DISCARDED = "discarded"
    NOT_STARTED = "not_started"
    # Reported as uploaded but no activity id yet. Never on the wire.
    UPLOADED_LIE = "uploaded_lie"
    UNKNOWN = "unknown"

    @classmethod
    def from_wire(cls, code: Any) -> "Status":
        """Decode a wire status code. Anything unrecognised is UNKNOWN."""
        if isinstance(code, bool) or not isinstance(code, int):
            return cls.UNKNOWN
        return _WIRE_TO_STATUS.get(code, cls.UNKNOWN)

    def to_wire(self) -> int:
        """
        Encode for the wire.

        Raises:
            ValueError: For UPLOADED_LIE, which only exists locally
        """
        try:
            return _STATUS_TO_WIRE[self]
        except KeyError:
            raise ValueError(f"{self.name} has no wire encoding") from None

    @property
    def is_active(self) -> bool:
        return self in (Status.ACTIVE, Status.AUTO_PAUSED, Status.MANUAL_PAUSED)


_WIRE_TO_STATUS = {
    1: Status.ACTIVE,
    2: Status.AUTO_PAUSED,
    3: Status.MANUAL_PAUSED,
    4: Status.UNKNOWN,
    5: Status.UPLOADED,
    6: Status.DISCARDED,
    7: Status.NOT_STARTED,
}
_STATUS_TO_WIRE = {status: code for code, status in _WIRE_TO_STATUS.items()}


class BeaconStats(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    distance: float = 0.0
    moving_time: int = 0
    elapsed_time: int = 0


class BeaconSnapshot(BaseModel):
    """
    One reading of the beacon feed.

    Only status, activity_id and update_time drive the status machine;
    the rest is carried along for logging.
    """
    model_config = ConfigDict(extra="ignore", frozen=True)

    status: Status
    activity_id: Optional[int] = None
    update_time: datetime = Field(..., description="Last update, epoch seconds on the wire")

    live_activity_id: Optional[int] = None
    athlete_id: Optional[int] = None
    activity_type: Optional[int] = None
    battery_level: Optional[int] = None
    source_app: Optional[str] = None
    stats: BeaconStats = Field(default_factory=BeaconStats)

    @field_validator("status", mode="before")
    @classmethod
    def decode_status(cls, v):
        """Decode integer wire codes; Status members pass through."""
        if isinstance(v, Status):
            return v
        return Status.from_wire(v)
