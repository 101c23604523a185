"""Query parameter declarations shared by the list endpoints."""
import uuid
from typing import Optional

from fastapi import Query

from catalog.db import schemas
from catalog.db.schemas.cars import MIN_YEAR
from catalog.db.schemas.common import LIMIT_DEFAULT, LIMIT_MAX, SKIP_DEFAULT

SKIP = Query(SKIP_DEFAULT, ge=0, description="Number of items to skip")
LIMIT = Query(LIMIT_DEFAULT, ge=1, le=LIMIT_MAX, description="Maximum number of items to return")
SORT_DIRECTION = Query(None, alias="sortDirection", description="Sort direction")


def pagination_params(skip: int = SKIP, limit: int = LIMIT) -> schemas.PaginationInput:
    return schemas.PaginationInput(skip=skip, limit=limit)


def manufacturer_list_params(
    skip: int = SKIP,
    limit: int = LIMIT,
    sort_field: Optional[schemas.CarManufacturerSortField] = Query(None, alias="sortField"),
    sort_direction: Optional[schemas.SortDirection] = SORT_DIRECTION,
) -> schemas.CarManufacturerListInput:
    return schemas.CarManufacturerListInput(
        skip=skip, limit=limit, sort_field=sort_field, sort_direction=sort_direction
    )


def model_list_params(
    skip: int = SKIP,
    limit: int = LIMIT,
    manufacturer_id: Optional[uuid.UUID] = Query(None, alias="manufacturerId"),
    manufacturer_slug: Optional[str] = Query(None, alias="manufacturerSlug", min_length=1, max_length=255),
    sort_field: Optional[schemas.CarModelSortField] = Query(None, alias="sortField"),
    sort_direction: Optional[schemas.SortDirection] = SORT_DIRECTION,
) -> schemas.CarModelListInput:
    return schemas.CarModelListInput(
        skip=skip,
        limit=limit,
        manufacturer_id=manufacturer_id,
        manufacturer_slug=manufacturer_slug,
        sort_field=sort_field,
        sort_direction=sort_direction,
    )


def car_list_params(
    skip: int = SKIP,
    limit: int = LIMIT,
    model_slug: Optional[str] = Query(None, alias="modelSlug", min_length=1, max_length=255),
    manufacturer_slug: Optional[str] = Query(None, alias="manufacturerSlug", min_length=1, max_length=255),
    color: Optional[str] = Query(None, min_length=1, max_length=100, description="Case-insensitive color match"),
    min_year: Optional[int] = Query(None, alias="minYear", ge=MIN_YEAR),
    max_year: Optional[int] = Query(None, alias="maxYear", ge=MIN_YEAR),
    min_price: Optional[int] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[int] = Query(None, alias="maxPrice", ge=0),
    sort_field: Optional[schemas.CarSortField] = Query(None, alias="sortField"),
    sort_direction: Optional[schemas.SortDirection] = SORT_DIRECTION,
) -> schemas.CarListInput:
    return schemas.CarListInput(
        skip=skip,
        limit=limit,
        model_slug=model_slug,
        manufacturer_slug=manufacturer_slug,
        color=color,
        min_year=min_year,
        max_year=max_year,
        min_price=min_price,
        max_price=max_price,
        sort_field=sort_field,
        sort_direction=sort_direction,
    )
