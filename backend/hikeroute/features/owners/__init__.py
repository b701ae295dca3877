"""
Route owners (guides and their tours).

Usage:
    from hikeroute.features.owners import TourRepository, UserRepository
"""

from .models import User, Tour
from .repository import UserRepository, TourRepository

__all__ = [
    "User",
    "Tour",
    "UserRepository",
    "TourRepository",
]
