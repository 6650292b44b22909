"""
Strava integration module.

Usage:
    from trailwatch.features.strava import StravaClient, TokenManager

Components:
- StravaOAuth: OAuth flow (auth URL, token exchange, refresh)
- TokenManager: cached, self-refreshing access token
- StravaClient: API client (athlete stats, rides, single activity)
- StravaAuthStore: encrypted token persistence
"""

from .models import StravaAuthRow, TokenData
from .schemas import Activity, AthleteStats, RideSummary, StravaData, StravaTotals, TokenResponse
from .oauth import StravaOAuth
from .repository import StravaAuthRepository, StravaAuthStore, TokenStore
from .tokens import TokenManager
from .client import StravaClient, summarize_rides

__all__ = [
    # Models
    "StravaAuthRow",
    "TokenData",
    # Schemas
    "Activity",
    "AthleteStats",
    "RideSummary",
    "StravaData",
    "StravaTotals",
    "TokenResponse",
    # OAuth
    "StravaOAuth",
    "TokenManager",
    # Client
    "StravaClient",
    "summarize_rides",
    # Repositories
    "StravaAuthRepository",
    "StravaAuthStore",
    "TokenStore",
]
