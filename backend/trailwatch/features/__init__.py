"""Feature modules: trail status, Strava API, beacon tracking."""
