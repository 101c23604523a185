"""
Pydantic schemas for request bodies, RPC inputs and response payloads.
"""

from .common import (
    CamelModel,
    ErrorResponse,
    IdInput,
    Page,
    PaginationInput,
    PaginationMeta,
    SlugInput,
    SluggableName,
    SortDirection,
    StrictInput,
    SuccessFlag,
    SuccessResponse,
    UpdateInput,
    ValidationIssue,
    validation_issues,
)
from .auth import AccessToken, ApiKey, HasApiKey, Login, RefreshTokenInput, Register
from .users import Account, Me, ProfileUpdate, User, UsernameInput, UserUpdate
from .car_manufacturers import (
    CarManufacturer,
    CarManufacturerCreate,
    CarManufacturerListInput,
    CarManufacturerSortField,
    CarManufacturerUpdate,
)
from .car_models import CarModel, CarModelCreate, CarModelListInput, CarModelSortField, CarModelUpdate
from .cars import Car, CarCreate, CarListInput, CarSortField, CarUpdate, FavoriteToggle

__all__ = [
    "CamelModel",
    "ErrorResponse",
    "IdInput",
    "Page",
    "PaginationInput",
    "PaginationMeta",
    "SlugInput",
    "SluggableName",
    "SortDirection",
    "StrictInput",
    "SuccessFlag",
    "SuccessResponse",
    "UpdateInput",
    "ValidationIssue",
    "validation_issues",
    "AccessToken",
    "ApiKey",
    "HasApiKey",
    "Login",
    "RefreshTokenInput",
    "Register",
    "Account",
    "Me",
    "ProfileUpdate",
    "User",
    "UsernameInput",
    "UserUpdate",
    "CarManufacturer",
    "CarManufacturerCreate",
    "CarManufacturerListInput",
    "CarManufacturerSortField",
    "CarManufacturerUpdate",
    "CarModel",
    "CarModelCreate",
    "CarModelListInput",
    "CarModelSortField",
    "CarModelUpdate",
    "Car",
    "CarCreate",
    "CarListInput",
    "CarSortField",
    "CarUpdate",
    "FavoriteToggle",
]
