"""
Strava API client.

Provides authenticated, cached access to the athlete's stats and rides.
Handles rate limiting (via RetryingHttpClient), token refresh (via
TokenManager) and pagination.

Strava API Limits:
- 200 requests per 15 minutes
- 2,000 requests per day
"""

import logging
import time
from typing import Any, Callable, Optional

from pydantic import TypeAdapter, ValidationError

from trailwatch.shared.cache import ResponseCache
from trailwatch.shared.errors import AuthError, DeserializationError, StravaAPIError
from trailwatch.shared.http import RetryingHttpClient
from .schemas import Activity, AthleteStats, RideSummary
from .tokens import TokenManager

logger = logging.getLogger(__name__)

RIDE_TYPE = "Ride"
PAGE_SIZE = 200

_activity_list = TypeAdapter(list[Activity])


class StravaClient:
    """
    Async client for the Strava API.

    Features:
    - Automatic token refresh
    - Backoff on 429 responses
    - 5 minute cache for athlete stats and the ride list
    - Pagination over /athlete/activities

    Usage:
        client = StravaClient(tokens, RetryingHttpClient(http), user_id="123")
        stats = await client.get_athlete_stats()
        rides = await client.get_all_activities()
        activity = await client.get_activity(123456789)
    """

    API_URL = "https://www.strava.com/api/v3"

    def __init__(
        self,
        tokens: TokenManager,
        http: RetryingHttpClient,
        user_id: Optional[str],
        cache_ttl: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.tokens = tokens
        self.http = http
        self.user_id = user_id
        self._stats_cache: ResponseCache[AthleteStats] = ResponseCache(
            cache_ttl, clock=clock, name="athlete stats"
        )
        self._rides_cache: ResponseCache[list[Activity]] = ResponseCache(
            cache_ttl, clock=clock, name="rides"
        )

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------

    async def _get_json(self, endpoint: str, params: Optional[dict] = None) -> Any:
        """
        Make an authenticated GET request.

        Raises:
            AuthError: If no valid token is available
            RetriesExceeded: If rate limiting outlasts the backoff schedule
            TransientNetworkError: On connection failures
            StravaAPIError: If API returns error
            DeserializationError: If the body is not JSON
        """
        token = await self.tokens.get_token()
        response = await self.http.get(
            f"{self.API_URL}{endpoint}",
            headers={"Authorization": f"Bearer {token.access_token}"},
            params=params,
        )

        if "X-RateLimit-Usage" in response.headers:
            logger.debug(
                f"Strava rate limit: {response.headers.get('X-RateLimit-Usage')} "
                f"/ {response.headers.get('X-RateLimit-Limit')}"
            )

        if not response.is_success:
            raise StravaAPIError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise DeserializationError(f"Invalid JSON from {endpoint}") from e

    async def _get_paginated(self, endpoint: str, per_page: int = PAGE_SIZE) -> list[Activity]:
        """
        Fetch every page of a list endpoint.

        Requests pages 1, 2, ... until a page comes back empty.
        """
        results: list[Activity] = []
        page = 1

        while True:
            data = await self._get_json(endpoint, {"per_page": per_page, "page": page})
            try:
                items = _activity_list.validate_python(data)
            except ValidationError as e:
                raise DeserializationError(f"Failed to deserialize Strava page {page}") from e

            if not items:
                break

            results.extend(items)
            page += 1

        logger.debug(f"Fetched {len(results)} items from {endpoint} in {page} requests")
        return results

    # -------------------------------------------------------------------------
    # API Calls
    # -------------------------------------------------------------------------

    async def get_athlete_stats(self) -> AthleteStats:
        """Get the athlete's totals. Cached for the configured TTL."""
        return await self._stats_cache.get_or_fetch(self._fetch_athlete_stats)

    async def _fetch_athlete_stats(self) -> AthleteStats:
        if not self.user_id:
            raise AuthError("No strava user id found, please set STRAVA_USER_ID")

        data = await self._get_json(f"/athletes/{self.user_id}/stats")
        try:
            return AthleteStats.model_validate(data)
        except ValidationError as e:
            raise DeserializationError("Failed to deserialize athlete stats") from e

    async def get_all_activities(self) -> list[Activity]:
        """Get every ride of the athlete. Cached for the configured TTL."""
        return await self._rides_cache.get_or_fetch(self._fetch_rides)

    async def _fetch_rides(self) -> list[Activity]:
        activities = await self._get_paginated("/athlete/activities")
        return [a for a in activities if a.type == RIDE_TYPE]

    async def get_activity(self, activity_id: int) -> Activity:
        """
        Get detailed activity info.

        Never cached: it is read once right after a ride ends.
        """
        data = await self._get_json(f"/activities/{activity_id}")
        try:
            return Activity.model_validate(data)
        except ValidationError as e:
            raise DeserializationError(f"Failed to deserialize activity {activity_id}") from e


# =============================================================================
# Helper Functions
# =============================================================================

def summarize_rides(rides: list[Activity]) -> RideSummary:
    """Aggregate ride list into totals."""
    return RideSummary(
        ride_count=len(rides),
        total_distance_m=round(sum(r.distance for r in rides), 1),
        total_moving_time_s=sum(r.moving_time for r in rides),
        total_elevation_gain_m=round(sum(r.total_elevation_gain for r in rides), 1),
    )
