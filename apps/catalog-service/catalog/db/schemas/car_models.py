import uuid
from enum import Enum
from typing import Optional

from pydantic import Field

from .common import CamelModel, PaginationInput, SluggableName, SortDirection, StrictInput


class CarModelSortField(str, Enum):
    NAME = "name"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"


class CarModelCreate(StrictInput):
    name: SluggableName = Field(..., description="The name of the car model")
    manufacturer_id: uuid.UUID = Field(..., description="The manufacturer producing this model")


class CarModelUpdate(StrictInput):
    name: Optional[SluggableName] = None
    manufacturer_id: Optional[uuid.UUID] = None


class CarModelListInput(PaginationInput):
    manufacturer_id: Optional[uuid.UUID] = None
    manufacturer_slug: Optional[str] = Field(None, min_length=1, max_length=255)
    sort_field: Optional[CarModelSortField] = None
    sort_direction: Optional[SortDirection] = None


class CarModel(CamelModel):
    id: uuid.UUID
    name: str
    slug: str
    manufacturer_id: uuid.UUID
