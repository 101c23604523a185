"""
Car model endpoints. Reads are public; writes are admin only.
"""
import uuid

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from catalog.api.deps import require_admin
from catalog.api.params import model_list_params
from catalog.api.responses import ERROR_RESPONSES, no_content, ok
from catalog.db import schemas
from catalog.db.database import get_db
from catalog.services import CarModelsService

router = APIRouter(prefix="/car-models", tags=["car-models"], responses=ERROR_RESPONSES)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.SuccessResponse[schemas.CarModel],
    dependencies=[Depends(require_admin)],
)
def create_model(payload: schemas.CarModelCreate, db: Session = Depends(get_db)):
    return ok(CarModelsService(db).create(payload), "Car model created")


@router.get("", response_model=schemas.SuccessResponse[schemas.Page[schemas.CarModel]])
def list_models(
    params: schemas.CarModelListInput = Depends(model_list_params),
    db: Session = Depends(get_db),
):
    return ok(CarModelsService(db).list(params))


@router.get("/slug/{slug}", response_model=schemas.SuccessResponse[schemas.CarModel])
def get_model_by_slug(slug: str = Path(..., min_length=1, max_length=255), db: Session = Depends(get_db)):
    return ok(CarModelsService(db).get_by_slug(slug))


@router.get("/{model_id}", response_model=schemas.SuccessResponse[schemas.CarModel])
def get_model(model_id: uuid.UUID, db: Session = Depends(get_db)):
    return ok(CarModelsService(db).get_by_id(model_id))


@router.put(
    "/{model_id}",
    response_model=schemas.SuccessResponse[schemas.CarModel],
    dependencies=[Depends(require_admin)],
)
def update_model(
    model_id: uuid.UUID,
    payload: schemas.CarModelUpdate,
    db: Session = Depends(get_db),
):
    return ok(CarModelsService(db).update(model_id, payload), "Car model updated")


@router.delete(
    "/{model_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(require_admin)],
)
def delete_model(model_id: uuid.UUID, db: Session = Depends(get_db)):
    CarModelsService(db).delete(model_id)
    return no_content()
