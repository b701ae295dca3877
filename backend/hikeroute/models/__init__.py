"""
Database Models

Feature models live next to their feature (features/*/models.py) and
import Base from here, so they are registered lazily to avoid circular
imports. Call register_models() before create_all or Alembic autogenerate.
"""

from hikeroute.models.base import Base


def register_models() -> None:
    """Import every feature model so it is attached to Base.metadata."""
    from hikeroute.features.owners.models import User, Tour  # noqa: F401
    from hikeroute.features.tracks.models import TrackFile, UploadRateLimit  # noqa: F401


__all__ = [
    "Base",
    "register_models",
]
