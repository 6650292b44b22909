"""
Activity status machine.

Maps one beacon snapshot plus the persisted trail status to the side
effects the poller should perform. There is no in-memory machine state:
every poll is a fresh evaluation against what is stored, so a restart
simply picks up where the database says we are.

Normalization (before dispatch):

    activity_id | reported status        | normalized
    ------------+------------------------+-------------
    present     | Uploaded or Discarded  | unchanged
    present     | anything else          | Uploaded
    absent      | Uploaded               | UploadedLie
    absent      | anything else          | unchanged

An activity id is stronger evidence of a finished ride than the status
field, which lags. "Uploaded" without an id is not trusted until it has
been stale for UPLOADED_LIE_TIMEOUT_MINUTES.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from trailwatch.features.status import TroyStatus
from .schemas import BeaconSnapshot, Status

logger = logging.getLogger(__name__)

NOT_STARTED_TIMEOUT_MINUTES = 45
UPLOADED_LIE_TIMEOUT_MINUTES = 4 * 60


# =============================================================================
# Intents
# =============================================================================

@dataclass(frozen=True)
class SetOnTrail:
    is_on_trail: bool


@dataclass(frozen=True)
class SetBeaconUrl:
    beacon_url: Optional[str]


@dataclass(frozen=True)
class NotifyStart:
    beacon_url: str


@dataclass(frozen=True)
class NotifyEnd:
    activity_id: Optional[int]


@dataclass(frozen=True)
class NotifyDiscard:
    pass


Intent = Union[SetOnTrail, SetBeaconUrl, NotifyStart, NotifyEnd, NotifyDiscard]


@dataclass(frozen=True)
class Decision:
    """Outcome of one evaluation, intents in the order they must run."""
    status: Status
    ride_time_minutes: int
    intents: tuple[Intent, ...] = ()


# =============================================================================
# Classification
# =============================================================================

def normalize_status(activity_id: Optional[int], status: Status) -> Status:
    """Reconcile the reported status with presence of an activity id."""
    if activity_id is not None:
        if status in (Status.UPLOADED, Status.DISCARDED):
            return status
        return Status.UPLOADED
    if status == Status.UPLOADED:
        return Status.UPLOADED_LIE
    return status


def normalize_snapshot(snapshot: BeaconSnapshot) -> BeaconSnapshot:
    """Return the snapshot re-tagged with its normalized status."""
    status = normalize_status(snapshot.activity_id, snapshot.status)
    if status == snapshot.status:
        return snapshot
    return snapshot.model_copy(update={"status": status})


def ride_time_minutes(update_time: datetime, now: datetime) -> int:
    """Whole minutes since the beacon last updated, truncated toward zero."""
    return int((now - update_time).total_seconds() / 60)


def evaluate(previous: TroyStatus, snapshot: BeaconSnapshot, now: datetime) -> Decision:
    """
    Decide what to do with a snapshot. Pure: no I/O, no clock reads.

    Args:
        previous: Persisted status before this poll (beacon_url must be set)
        snapshot: Raw beacon reading
        now: Current time, timezone-aware

    Returns:
        Decision with the normalized status and intents to apply
    """
    snapshot = normalize_snapshot(snapshot)
    status = snapshot.status
    ride_time = ride_time_minutes(snapshot.update_time, now)
    was_on_trail = previous.is_on_trail
    intents: list[Intent] = []

    if status.is_active:
        intents.append(SetOnTrail(True))
        if not was_on_trail:
            intents.append(NotifyStart(previous.beacon_url))

    elif status == Status.UPLOADED:
        intents.append(SetBeaconUrl(None))
        if was_on_trail:
            intents.append(SetOnTrail(False))
            intents.append(NotifyEnd(snapshot.activity_id))

    elif status == Status.DISCARDED:
        intents.append(SetBeaconUrl(None))
        if was_on_trail:
            intents.append(SetOnTrail(False))
            intents.append(NotifyDiscard())

    elif status == Status.NOT_STARTED:
        if ride_time > NOT_STARTED_TIMEOUT_MINUTES:
            intents.append(SetBeaconUrl(None))

    elif status == Status.UPLOADED_LIE:
        # beacon_url stays set on this path, unlike NOT_STARTED
        if ride_time > UPLOADED_LIE_TIMEOUT_MINUTES:
            intents.append(SetOnTrail(False))
            intents.append(NotifyEnd(None))

    else:
        logger.warning("Beacon data indicates unknown status")

    return Decision(status=status, ride_time_minutes=ride_time, intents=tuple(intents))
