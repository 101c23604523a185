"""Business logic services."""

from .auth_service import AuthService, TokenPair
from .car_manufacturers_service import CarManufacturersService
from .car_models_service import CarModelsService
from .cars_service import CarsService
from .users_service import UsersService

__all__ = [
    "AuthService",
    "TokenPair",
    "CarManufacturersService",
    "CarModelsService",
    "CarsService",
    "UsersService",
]
