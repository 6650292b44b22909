"""
Error taxonomy for the tracking pipeline.

Everything raised by the beacon, Strava and persistence layers derives
from TrailwatchError so the poll loop can isolate a failed cycle.
"""

from typing import Optional


class TrailwatchError(Exception):
    """Base trailwatch error."""
    pass


class TransientNetworkError(TrailwatchError):
    """Connection or timeout failure. Safe to retry on the next poll."""
    pass


class RetriesExceeded(TransientNetworkError):
    """Rate-limit backoff schedule exhausted."""

    def __init__(self, attempts: int):
        super().__init__(f"Exceeded maximum retries ({attempts})")
        self.attempts = attempts


class BeaconError(TrailwatchError):
    """Beacon returned a non-success status code."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"Beacon returned {status_code}: {body}")
        self.status_code = status_code


class BeaconNotFound(BeaconError):
    """Beacon share expired or was revoked (HTTP 404)."""

    def __init__(self, body: str = ""):
        super().__init__(404, body)


class StravaAPIError(TrailwatchError):
    """Strava API returned a non-success status code."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"API error: {status_code} - {body}")
        self.status_code = status_code


class AuthError(TrailwatchError):
    """No usable OAuth token (missing, refresh failed, exchange failed)."""
    pass


class UserMismatch(AuthError):
    """Authorized athlete is not the configured one."""

    def __init__(self, athlete_id: Optional[str], expected: Optional[str]):
        if expected is None:
            message = "Authenticated Strava user but no STRAVA_USER_ID defined"
        else:
            message = (
                "Authenticated Strava user but the user id does not match "
                "the defined STRAVA_USER_ID"
            )
        super().__init__(message)
        self.athlete_id = athlete_id
        self.expected = expected


class DeserializationError(TrailwatchError):
    """Upstream returned malformed or unexpected JSON."""
    pass


class StorageError(TrailwatchError):
    """Database read or write failed."""
    pass
