"""
Car endpoints.

Listing and detail views are public; ``isFavorite`` reflects the caller when
credentials are supplied. Updates and deletes are limited to the owner or an
admin.
"""
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from catalog.api.deps import get_current_principal, get_optional_principal, require_user_or_admin
from catalog.api.params import car_list_params
from catalog.api.responses import ERROR_RESPONSES, no_content, ok
from catalog.context import Principal
from catalog.db import schemas
from catalog.db.database import get_db
from catalog.services import CarsService

router = APIRouter(prefix="/cars", tags=["cars"], responses=ERROR_RESPONSES)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=schemas.SuccessResponse[schemas.Car])
def create_car(
    payload: schemas.CarCreate,
    principal: Principal = Depends(require_user_or_admin),
    db: Session = Depends(get_db),
):
    return ok(CarsService(db).create(payload, principal), "Car created")


@router.get("", response_model=schemas.SuccessResponse[schemas.Page[schemas.Car]])
def list_cars(
    params: schemas.CarListInput = Depends(car_list_params),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return ok(CarsService(db).list(params, viewer_id=principal.id if principal else None))


@router.get("/{car_id}", response_model=schemas.SuccessResponse[schemas.Car])
def get_car(
    car_id: uuid.UUID,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return ok(CarsService(db).get_by_id(car_id, viewer_id=principal.id if principal else None))


@router.put("/{car_id}", response_model=schemas.SuccessResponse[schemas.Car])
def update_car(
    car_id: uuid.UUID,
    payload: schemas.CarUpdate,
    principal: Principal = Depends(require_user_or_admin),
    db: Session = Depends(get_db),
):
    return ok(CarsService(db).update(car_id, payload, principal), "Car updated")


@router.delete("/{car_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_car(
    car_id: uuid.UUID,
    principal: Principal = Depends(require_user_or_admin),
    db: Session = Depends(get_db),
):
    CarsService(db).soft_delete(car_id, principal)
    return no_content()


@router.post("/{car_id}/favorite", response_model=schemas.SuccessResponse[schemas.FavoriteToggle])
def toggle_favorite(
    car_id: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    state = CarsService(db).toggle_favorite(car_id, principal.id)
    return ok(schemas.FavoriteToggle(is_favorite=state))
