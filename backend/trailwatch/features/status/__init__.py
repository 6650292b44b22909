"""
Trail status module.

Usage:
    from trailwatch.features.status import TroyStatusStore, TroyStatus
"""

from .models import TroyStatus, TroyStatusRow
from .repository import StatusStore, TroyStatusRepository, TroyStatusStore

__all__ = [
    "TroyStatus",
    "TroyStatusRow",
    "StatusStore",
    "TroyStatusRepository",
    "TroyStatusStore",
]
