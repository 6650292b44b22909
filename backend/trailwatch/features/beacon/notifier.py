"""
Trail notification service.

Turns status-machine notifications into Discord messages, enriching
the end-of-ride message with stats from Strava.
"""

import logging
from typing import Optional, Protocol

from trailwatch.features.strava import Activity, StravaClient
from trailwatch.shared.discord import DiscordWebhook
from trailwatch.shared.errors import TrailwatchError
from trailwatch.shared.notification_formatter import format_discard, format_end, format_start
from trailwatch.shared.units import meters_to_feet, meters_to_miles, mps_to_mph

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Receiver of trail transitions."""

    async def notify_start(self, beacon_url: str) -> None: ...

    async def notify_end(self, activity_id: Optional[int]) -> None: ...

    async def notify_discard(self) -> None: ...


def ride_stats(activity: Activity) -> dict:
    """Convert a Strava activity into notification units."""
    return {
        "name": activity.name,
        "distance_mi": meters_to_miles(activity.distance),
        "elevation_gain_ft": meters_to_feet(activity.total_elevation_gain, round_to_whole=True),
        "average_speed_mph": mps_to_mph(activity.average_speed),
        "max_speed_mph": mps_to_mph(activity.max_speed),
    }


class TrailNotificationService:
    """
    Notifier posting to Discord.

    Delivery is at most once: failures are logged and dropped.
    """

    def __init__(self, webhook: DiscordWebhook, strava: StravaClient):
        self.webhook = webhook
        self.strava = strava

    async def notify_start(self, beacon_url: str) -> None:
        await self.webhook.send_embed(format_start(beacon_url))

    async def notify_end(self, activity_id: Optional[int]) -> None:
        ride = None
        if activity_id is not None:
            ride = await self._get_ride_stats(activity_id)
        await self.webhook.send_embed(format_end(ride))

    async def notify_discard(self) -> None:
        await self.webhook.send_embed(format_discard())

    async def _get_ride_stats(self, activity_id: int) -> Optional[dict]:
        try:
            activity = await self.strava.get_activity(activity_id)
        except TrailwatchError as e:
            logger.error(f"Failed to get activity {activity_id}: {e}")
            return None
        return ride_stats(activity)
