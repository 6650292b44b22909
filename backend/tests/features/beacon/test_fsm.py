"""
Tests for the activity status machine.

evaluate() is pure, so every case is a table lookup: previous status and
snapshot in, normalized status and ordered intents out.
"""

from datetime import datetime, timedelta, timezone

import pytest

from trailwatch.features.beacon import (
    BeaconSnapshot,
    NotifyDiscard,
    NotifyEnd,
    NotifyStart,
    SetBeaconUrl,
    SetOnTrail,
    Status,
    evaluate,
    normalize_status,
    ride_time_minutes,
)
from trailwatch.features.status import TroyStatus


# =============================================================================
# Test Data
# =============================================================================

NOW = datetime(2024, 6, 1, 18, 0, tzinfo=timezone.utc)
BEACON_URL = "https://www.strava.com/beacon/abc123"

OFF_TRAIL = TroyStatus(is_on_trail=False, beacon_url=BEACON_URL)
ON_TRAIL = TroyStatus(is_on_trail=True, beacon_url=BEACON_URL)


def snapshot(status: Status, activity_id=None, minutes_ago: float = 1) -> BeaconSnapshot:
    return BeaconSnapshot(
        status=status,
        activity_id=activity_id,
        update_time=NOW - timedelta(minutes=minutes_ago),
    )


# =============================================================================
# Normalization
# =============================================================================

ALL_STATUSES = list(Status)


class TestNormalizeStatus:
    """Tests for normalize_status over every status, with and without an id."""

    @pytest.mark.parametrize("status", ALL_STATUSES)
    def test_with_activity_id(self, status):
        expected = status if status in (Status.UPLOADED, Status.DISCARDED) else Status.UPLOADED
        assert normalize_status(123, status) == expected

    @pytest.mark.parametrize("status", ALL_STATUSES)
    def test_without_activity_id(self, status):
        expected = Status.UPLOADED_LIE if status == Status.UPLOADED else status
        assert normalize_status(None, status) == expected

    def test_never_yields_uploaded_without_id(self):
        for status in ALL_STATUSES:
            assert normalize_status(None, status) != Status.UPLOADED


class TestRideTime:
    """Tests for ride_time_minutes."""

    def test_truncates(self):
        assert ride_time_minutes(NOW - timedelta(seconds=119), NOW) == 1

    def test_future_update_time_is_negative(self):
        assert ride_time_minutes(NOW + timedelta(minutes=5), NOW) == -5


# =============================================================================
# Active statuses
# =============================================================================

class TestActive:
    """Active, AutoPaused and ManualPaused all mean on the trail."""

    def test_ride_start(self):
        decision = evaluate(OFF_TRAIL, snapshot(Status.ACTIVE), NOW)

        assert decision.status == Status.ACTIVE
        assert decision.intents == (SetOnTrail(True), NotifyStart(BEACON_URL))

    @pytest.mark.parametrize("status", [Status.ACTIVE, Status.AUTO_PAUSED, Status.MANUAL_PAUSED])
    def test_already_on_trail_does_not_renotify(self, status):
        decision = evaluate(ON_TRAIL, snapshot(status), NOW)
        assert decision.intents == (SetOnTrail(True),)

    def test_paused_start_notifies(self):
        decision = evaluate(OFF_TRAIL, snapshot(Status.AUTO_PAUSED), NOW)
        assert NotifyStart(BEACON_URL) in decision.intents


# =============================================================================
# Terminal statuses
# =============================================================================

class TestUploaded:
    """Tests for a finished ride."""

    def test_ride_end(self):
        decision = evaluate(ON_TRAIL, snapshot(Status.UPLOADED, activity_id=123), NOW)

        assert decision.status == Status.UPLOADED
        assert decision.intents == (
            SetBeaconUrl(None),
            SetOnTrail(False),
            NotifyEnd(123),
        )

    def test_activity_id_overrides_active(self):
        decision = evaluate(ON_TRAIL, snapshot(Status.ACTIVE, activity_id=123), NOW)

        assert decision.status == Status.UPLOADED
        assert NotifyEnd(123) in decision.intents

    def test_off_trail_only_clears_url(self):
        decision = evaluate(OFF_TRAIL, snapshot(Status.UPLOADED, activity_id=123), NOW)
        assert decision.intents == (SetBeaconUrl(None),)


class TestDiscarded:
    """Tests for a discarded ride."""

    def test_discard_on_trail(self):
        decision = evaluate(ON_TRAIL, snapshot(Status.DISCARDED), NOW)

        assert decision.intents == (
            SetBeaconUrl(None),
            SetOnTrail(False),
            NotifyDiscard(),
        )

    def test_discard_off_trail(self):
        decision = evaluate(OFF_TRAIL, snapshot(Status.DISCARDED, activity_id=5), NOW)

        assert decision.status == Status.DISCARDED
        assert decision.intents == (SetBeaconUrl(None),)


# =============================================================================
# Stale statuses
# =============================================================================

class TestNotStarted:
    """Beacon shared but recording never started."""

    def test_within_timeout_waits(self):
        decision = evaluate(OFF_TRAIL, snapshot(Status.NOT_STARTED, minutes_ago=45), NOW)
        assert decision.intents == ()

    def test_past_timeout_clears_url(self):
        decision = evaluate(OFF_TRAIL, snapshot(Status.NOT_STARTED, minutes_ago=46), NOW)
        assert decision.intents == (SetBeaconUrl(None),)


class TestUploadedLie:
    """Uploaded reported without an activity id."""

    def test_recent_is_ignored(self):
        decision = evaluate(ON_TRAIL, snapshot(Status.UPLOADED, minutes_ago=10), NOW)

        assert decision.status == Status.UPLOADED_LIE
        assert decision.ride_time_minutes == 10
        assert decision.intents == ()

    def test_boundary_is_ignored(self):
        decision = evaluate(ON_TRAIL, snapshot(Status.UPLOADED, minutes_ago=240), NOW)
        assert decision.intents == ()

    def test_stale_ends_ride_and_keeps_url(self):
        decision = evaluate(ON_TRAIL, snapshot(Status.UPLOADED, minutes_ago=300), NOW)

        assert decision.intents == (SetOnTrail(False), NotifyEnd(None))
        # Unlike NOT_STARTED, the beacon url is left in place
        assert not any(isinstance(i, SetBeaconUrl) for i in decision.intents)


class TestUnknown:
    """Unknown status never changes anything."""

    @pytest.mark.parametrize("previous", [OFF_TRAIL, ON_TRAIL])
    def test_no_intents(self, previous):
        decision = evaluate(previous, snapshot(Status.UNKNOWN, minutes_ago=1000), NOW)

        assert decision.status == Status.UNKNOWN
        assert decision.intents == ()
