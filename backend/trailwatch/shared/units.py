"""
Unit conversions for ride statistics shown in notifications.

Strava reports metric units; notifications use miles, feet and mph.
Values are rounded to one decimal place unless round_to_whole is set.
"""

METERS_TO_FEET = 3.28084
METERS_TO_MILES = 0.000621371
MPS_TO_MPH = 2.23694


def _round(value: float, round_to_whole: bool) -> float:
    if round_to_whole:
        return float(round(value))
    return round(value, 1)


def meters_to_feet(meters: float, round_to_whole: bool = False) -> float:
    return _round(meters * METERS_TO_FEET, round_to_whole)


def meters_to_miles(meters: float, round_to_whole: bool = False) -> float:
    return _round(meters * METERS_TO_MILES, round_to_whole)


def mps_to_mph(mps: float, round_to_whole: bool = False) -> float:
    return _round(mps * MPS_TO_MPH, round_to_whole)
