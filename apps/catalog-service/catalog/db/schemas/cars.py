import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import Field, StrictInt, field_validator

from .car_models import CarModel
from .common import CamelModel, PaginationInput, SortDirection, StrictInput

MIN_YEAR = 1886
MAX_KM_DRIVEN = 10_000_000


def max_year() -> int:
    return datetime.now(timezone.utc).year + 1


class CarSortField(str, Enum):
    YEAR = "year"
    COLOR = "color"
    KM_DRIVEN = "kmDriven"
    PRICE = "price"
    CREATED_AT = "createdAt"
    MODEL = "model"


class _YearBound(StrictInput):
    @field_validator("year", check_fields=False)
    @classmethod
    def year_not_in_future(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value > max_year():
            raise ValueError(f"Year must be at most {max_year()}")
        return value


class CarCreate(_YearBound):
    model_id: uuid.UUID = Field(..., description="The model of the car")
    year: StrictInt = Field(..., ge=MIN_YEAR, description="The year the car was manufactured")
    color: str = Field(..., min_length=1, max_length=100, description="The color of the car")
    km_driven: StrictInt = Field(..., ge=0, le=MAX_KM_DRIVEN, description="Kilometers the car has driven")
    price: StrictInt = Field(..., ge=0, description="Price of the car in EUR")


class CarUpdate(_YearBound):
    model_id: Optional[uuid.UUID] = None
    year: Optional[StrictInt] = Field(None, ge=MIN_YEAR)
    color: Optional[str] = Field(None, min_length=1, max_length=100)
    km_driven: Optional[StrictInt] = Field(None, ge=0, le=MAX_KM_DRIVEN)
    price: Optional[StrictInt] = Field(None, ge=0)


class CarListInput(PaginationInput):
    model_slug: Optional[str] = Field(None, min_length=1, max_length=255)
    manufacturer_slug: Optional[str] = Field(None, min_length=1, max_length=255)
    color: Optional[str] = Field(None, min_length=1, max_length=100)
    min_year: Optional[int] = Field(None, ge=MIN_YEAR)
    max_year: Optional[int] = Field(None, ge=MIN_YEAR)
    min_price: Optional[int] = Field(None, ge=0)
    max_price: Optional[int] = Field(None, ge=0)
    sort_field: Optional[CarSortField] = None
    sort_direction: Optional[SortDirection] = None


class Car(CamelModel):
    id: uuid.UUID
    year: int
    color: str
    km_driven: int
    price: int
    created_by: uuid.UUID
    created_at: datetime
    updated_at: datetime
    is_favorite: bool
    model: CarModel


class FavoriteToggle(CamelModel):
    is_favorite: bool
