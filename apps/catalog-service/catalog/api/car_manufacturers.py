"""
Car manufacturer endpoints. Reads are public; writes are admin only.
"""
import uuid

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from catalog.api.deps import require_admin
from catalog.api.params import manufacturer_list_params
from catalog.api.responses import ERROR_RESPONSES, no_content, ok
from catalog.db import schemas
from catalog.db.database import get_db
from catalog.services import CarManufacturersService

router = APIRouter(prefix="/car-manufacturers", tags=["car-manufacturers"], responses=ERROR_RESPONSES)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.SuccessResponse[schemas.CarManufacturer],
    dependencies=[Depends(require_admin)],
)
def create_manufacturer(payload: schemas.CarManufacturerCreate, db: Session = Depends(get_db)):
    return ok(CarManufacturersService(db).create(payload), "Car manufacturer created")


@router.get("", response_model=schemas.SuccessResponse[schemas.Page[schemas.CarManufacturer]])
def list_manufacturers(
    params: schemas.CarManufacturerListInput = Depends(manufacturer_list_params),
    db: Session = Depends(get_db),
):
    return ok(CarManufacturersService(db).list(params))


@router.get("/slug/{slug}", response_model=schemas.SuccessResponse[schemas.CarManufacturer])
def get_manufacturer_by_slug(slug: str = Path(..., min_length=1, max_length=255), db: Session = Depends(get_db)):
    return ok(CarManufacturersService(db).get_by_slug(slug))


@router.get("/{manufacturer_id}", response_model=schemas.SuccessResponse[schemas.CarManufacturer])
def get_manufacturer(manufacturer_id: uuid.UUID, db: Session = Depends(get_db)):
    return ok(CarManufacturersService(db).get_by_id(manufacturer_id))


@router.put(
    "/{manufacturer_id}",
    response_model=schemas.SuccessResponse[schemas.CarManufacturer],
    dependencies=[Depends(require_admin)],
)
def update_manufacturer(
    manufacturer_id: uuid.UUID,
    payload: schemas.CarManufacturerUpdate,
    db: Session = Depends(get_db),
):
    return ok(CarManufacturersService(db).update(manufacturer_id, payload), "Car manufacturer updated")


@router.delete(
    "/{manufacturer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(require_admin)],
)
def delete_manufacturer(manufacturer_id: uuid.UUID, db: Session = Depends(get_db)):
    CarManufacturersService(db).delete(manufacturer_id)
    return no_content()
