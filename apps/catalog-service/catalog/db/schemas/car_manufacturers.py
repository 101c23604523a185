import uuid
from enum import Enum
from typing import Optional

from pydantic import Field

from .common import CamelModel, PaginationInput, SluggableName, SortDirection, StrictInput


class CarManufacturerSortField(str, Enum):
    NAME = "name"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"


class CarManufacturerCreate(StrictInput):
    name: SluggableName = Field(..., description="The name of the car manufacturer")


class CarManufacturerUpdate(StrictInput):
    name: Optional[SluggableName] = Field(None, description="The new name of the car manufacturer")


class CarManufacturerListInput(PaginationInput):
    sort_field: Optional[CarManufacturerSortField] = None
    sort_direction: Optional[SortDirection] = None


class CarManufacturer(CamelModel):
    id: uuid.UUID
    name: str
    slug: str
