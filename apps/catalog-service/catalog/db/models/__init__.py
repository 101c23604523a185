"""
SQLAlchemy models for the car catalog.

Exposes `Base`, `now_utc` and all ORM classes from a single import path.
"""

from .base import Base, now_utc  # re-export

from .users import Role, User
from .cars import Car, CarManufacturer, CarModel, user_favorite_cars

__all__ = [
    "Base",
    "now_utc",
    "Role",
    "User",
    "CarManufacturer",
    "CarModel",
    "Car",
    "user_favorite_cars",
]
