"""
Tests for beacon wire decoding.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from trailwatch.features.beacon import BeaconSnapshot, Status


# =============================================================================
# Status codes
# =============================================================================

class TestStatusFromWire:
    """Tests for Status.from_wire."""

    @pytest.mark.parametrize("code,expected", [
        (1, Status.ACTIVE),
        (2, Status.AUTO_PAUSED),
        (3, Status.MANUAL_PAUSED),
        (4, Status.UNKNOWN),
        (5, Status.UPLOADED),
        (6, Status.DISCARDED),
        (7, Status.NOT_STARTED),
    ])
    def test_known_codes(self, code, expected):
        assert Status.from_wire(code) == expected

    @pytest.mark.parametrize("code", [0, 8, 42, -1, "1", None, 1.0, True])
    def test_out_of_range_is_unknown(self, code):
        assert Status.from_wire(code) == Status.UNKNOWN


class TestStatusToWire:
    """Tests for Status.to_wire."""

    def test_roundtrip_for_wire_statuses(self):
        for code in range(1, 8):
            assert Status.from_wire(code).to_wire() == code

    def test_uploaded_lie_has_no_wire_code(self):
        with pytest.raises(ValueError):
            Status.UPLOADED_LIE.to_wire()

    def test_is_active(self):
        assert Status.ACTIVE.is_active
        assert Status.AUTO_PAUSED.is_active
        assert Status.MANUAL_PAUSED.is_active
        assert not Status.UPLOADED.is_active
        assert not Status.NOT_STARTED.is_active


# =============================================================================
# Snapshot
# =============================================================================

class TestBeaconSnapshot:
    """Tests for BeaconSnapshot parsing."""

    def test_parses_feed_payload(self):
        snapshot = BeaconSnapshot.model_validate({
            "status": 1,
            "activity_id": None,
            "update_time": 1700000000,
            "athlete_id": 42,
            "battery_level": 80,
            "stats": {"distance": 1234.5, "moving_time": 600},
            "something_new": "ignored",
        })

        assert snapshot.status == Status.ACTIVE
        assert snapshot.activity_id is None
        assert snapshot.update_time == datetime.fromtimestamp(1700000000, tz=timezone.utc)
        assert snapshot.stats.distance == 1234.5

    def test_unknown_status_code(self):
        snapshot = BeaconSnapshot.model_validate({"status": 99, "update_time": 0})
        assert snapshot.status == Status.UNKNOWN

    def test_missing_update_time_rejected(self):
        with pytest.raises(ValidationError):
            BeaconSnapshot.model_validate({"status": 1})
