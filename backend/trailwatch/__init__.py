"""
trailwatch

Tracks whether the athlete is out on the trails from a live beacon feed
and posts notifications enriched with Strava ride statistics.
"""

__version__ = "0.1.0"
