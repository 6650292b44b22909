"""
Beacon tracking module.

Usage:
    from trailwatch.features.beacon import BeaconPoller, resolve_role

Components:
- BeaconClient: fetches live-tracking snapshots
- fsm: normalization and transition rules (pure)
- BeaconPoller: background reconciliation loop
- TrailNotificationService: Discord notifications
"""

from .schemas import BeaconSnapshot, BeaconStats, Status
from .client import BeaconClient
from .fsm import (
    Decision,
    Intent,
    NotifyDiscard,
    NotifyEnd,
    NotifyStart,
    SetBeaconUrl,
    SetOnTrail,
    evaluate,
    normalize_status,
    ride_time_minutes,
)
from .notifier import Notifier, TrailNotificationService
from .poller import BeaconPoller, Role, resolve_role

__all__ = [
    # Schemas
    "BeaconSnapshot",
    "BeaconStats",
    "Status",
    # Client
    "BeaconClient",
    # Status machine
    "Decision",
    "Intent",
    "NotifyDiscard",
    "NotifyEnd",
    "NotifyStart",
    "SetBeaconUrl",
    "SetOnTrail",
    "evaluate",
    "normalize_status",
    "ride_time_minutes",
    # Notifications
    "Notifier",
    "TrailNotificationService",
    # Poller
    "BeaconPoller",
    "Role",
    "resolve_role",
]
