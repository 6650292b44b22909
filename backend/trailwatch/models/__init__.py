"""
Database Models

Feature models live next to their repositories under features/.
Importing them here registers every table with Base.metadata.
"""

from trailwatch.models.base import Base


def register_models() -> None:
    """Import feature models so create_all() and Alembic see them."""
    from trailwatch.features.status import models as _status  # noqa: F401
    from trailwatch.features.strava import models as _strava  # noqa: F401


__all__ = ["Base", "register_models"]
