"""
Strava API schemas.

Pydantic models for the parts of the Strava payloads we read.
Unknown fields are ignored so upstream additions never break parsing.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _StravaModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class StravaAthlete(_StravaModel):
    id: int


class TokenResponse(_StravaModel):
    """Response of the /oauth/token endpoint."""
    access_token: str
    refresh_token: str
    expires_at: int
    token_type: Optional[str] = None
    expires_in: Optional[int] = None
    athlete: Optional[StravaAthlete] = None


class StravaTotals(_StravaModel):
    """Aggregate totals for one activity type and time window."""
    count: int = 0
    distance: float = 0.0
    moving_time: float = 0.0
    elapsed_time: float = 0.0
    elevation_gain: float = 0.0
    achievement_count: Optional[int] = None


class AthleteStats(_StravaModel):
    """Response of /athletes/{id}/stats."""
    biggest_ride_distance: Optional[float] = None
    biggest_climb_elevation_gain: Optional[float] = None
    recent_ride_totals: StravaTotals = Field(default_factory=StravaTotals)
    all_ride_totals: StravaTotals = Field(default_factory=StravaTotals)
    ytd_ride_totals: StravaTotals = Field(default_factory=StravaTotals)
    recent_run_totals: StravaTotals = Field(default_factory=StravaTotals)
    all_run_totals: StravaTotals = Field(default_factory=StravaTotals)
    ytd_run_totals: StravaTotals = Field(default_factory=StravaTotals)
    recent_swim_totals: StravaTotals = Field(default_factory=StravaTotals)
    all_swim_totals: StravaTotals = Field(default_factory=StravaTotals)
    ytd_swim_totals: StravaTotals = Field(default_factory=StravaTotals)


class ActivityMap(_StravaModel):
    summary_polyline: Optional[str] = None
    polyline: Optional[str] = None


class Activity(_StravaModel):
    """
    Activity summary (list endpoint) or detail (/activities/{id}).

    Distances are meters, speeds m/s, times seconds.
    """
    id: int
    name: str = ""
    type: str = Field(default="", description="Legacy activity type, e.g. Ride")
    sport_type: Optional[str] = None
    distance: float = 0.0
    moving_time: int = 0
    elapsed_time: int = 0
    total_elevation_gain: float = 0.0
    average_speed: float = 0.0
    max_speed: float = 0.0
    start_date: Optional[str] = None
    start_date_local: Optional[str] = None
    map: Optional[ActivityMap] = None


class RideSummary(BaseModel):
    """Aggregated ride metrics for the data endpoint."""
    ride_count: int
    total_distance_m: float
    total_moving_time_s: int
    total_elevation_gain_m: float


class StravaData(BaseModel):
    """Response of GET /api/strava/data."""
    stats: AthleteStats
    rides: RideSummary
