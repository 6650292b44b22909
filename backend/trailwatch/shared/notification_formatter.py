"""
Notification embed formatters.

Formats trail events into Discord embed dicts.

Notification types:
- start: Ride started, links the live beacon
- end: Ride finished, with stats when the activity could be fetched
- discard: Ride was discarded
"""

from typing import Optional

# Strava's auto-generated titles carry no information worth showing
DEFAULT_RIDE_NAMES = frozenset({
    "Morning Mountain Bike Ride",
    "Lunch Mountain Bike Ride",
    "Afternoon Mountain Bike Ride",
    "Evening Mountain Bike Ride",
})


def format_start(beacon_url: str) -> dict:
    return {
        "title": "Troy is on the trails!",
        "description": beacon_url,
    }


def format_end(ride: Optional[dict] = None) -> dict:
    """
    Format the end-of-ride embed.

    Args:
        ride: Optional stats with keys name, distance_mi, elevation_gain_ft,
            average_speed_mph, max_speed_mph

    Returns:
        Embed dict
    """
    embed: dict = {"title": "Troy is no longer on the trails!"}
    if not ride:
        return embed

    name = ride.get("name")
    if name and name not in DEFAULT_RIDE_NAMES:
        embed["description"] = name

    embed["fields"] = [
        _field("Distance", f"{ride['distance_mi']}mi"),
        _field("Elevation Gain", f"{ride['elevation_gain_ft']:.0f}ft"),
        _field("Average Speed", f"{ride['average_speed_mph']}mph"),
        _field("Top Speed", f"{ride['max_speed_mph']}mph"),
    ]
    return embed


def format_discard() -> dict:
    return {"title": "Troy discarded the ride"}


def _field(name: str, value: str) -> dict:
    return {"name": name, "value": value, "inline": True}
