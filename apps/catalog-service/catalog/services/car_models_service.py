"""
Car model service.
"""
import logging
import uuid

from sqlalchemy.orm import Session

from catalog.db import schemas
from catalog.db.pg_errors import translating
from catalog.db.repositories import car_manufacturers as manufacturers_repo
from catalog.db.repositories import car_models as models_repo
from catalog.errors import AppError, Errors
from catalog.utils.slugs import slugify

logger = logging.getLogger(__name__)

_WRITE_CONSTRAINTS = {
    "uq_car_models_name": Errors.CAR_MODEL_ALREADY_EXISTS,
    "uq_car_models_slug": Errors.CAR_MODEL_ALREADY_EXISTS,
    "fk_car_models_manufacturer_id": Errors.CAR_MANUFACTURER_NOT_FOUND,
}
_DELETE_CONSTRAINTS = {
    "fk_cars_model_id": Errors.CAR_MODEL_IN_USE,
}


class CarModelsService:
    def __init__(self, db: Session):
        self.db = db

    def _get_or_404(self, model_id: uuid.UUID):
        car_model = models_repo.get_model(self.db, model_id)
        if car_model is None:
            raise AppError(Errors.CAR_MODEL_NOT_FOUND)
        return car_model

    def _require_manufacturer(self, manufacturer_id: uuid.UUID) -> None:
        if manufacturers_repo.get_manufacturer(self.db, manufacturer_id) is None:
            raise AppError(Errors.CAR_MANUFACTURER_NOT_FOUND)

    def create(self, data: schemas.CarModelCreate) -> schemas.CarModel:
        self._require_manufacturer(data.manufacturer_id)
        name = data.name
        slug = slugify(name)
        if models_repo.name_or_slug_taken(self.db, name=name, slug=slug):
            raise AppError(Errors.CAR_MODEL_ALREADY_EXISTS)
        with translating(self.db, _WRITE_CONSTRAINTS):
            car_model = models_repo.create_model(self.db, name=name, slug=slug, manufacturer_id=data.manufacturer_id)
        logger.info(f"Car model created: {car_model.id} ({car_model.slug})")
        return schemas.CarModel.model_validate(car_model)

    def list(self, params: schemas.CarModelListInput) -> schemas.Page[schemas.CarModel]:
        items, total = models_repo.list_models(
            self.db,
            skip=params.skip,
            limit=params.limit,
            manufacturer_id=params.manufacturer_id,
            manufacturer_slug=params.manufacturer_slug,
            sort_field=params.sort_field.value if params.sort_field else None,
            sort_direction=params.sort_direction.value if params.sort_direction else None,
        )
        return schemas.Page[schemas.CarModel].build(
            [schemas.CarModel.model_validate(m) for m in items],
            total=total,
            limit=params.limit,
            skipped=params.skip,
        )

    def get_by_id(self, model_id: uuid.UUID) -> schemas.CarModel:
        return schemas.CarModel.model_validate(self._get_or_404(model_id))

    def get_by_slug(self, slug: str) -> schemas.CarModel:
        car_model = models_repo.get_model_by_slug(self.db, slug)
        if car_model is None:
            raise AppError(Errors.CAR_MODEL_NOT_FOUND)
        return schemas.CarModel.model_validate(car_model)

    def update(self, model_id: uuid.UUID, data: schemas.CarModelUpdate) -> schemas.CarModel:
        car_model = self._get_or_404(model_id)
        changes = {}
        if data.manufacturer_id is not None and data.manufacturer_id != car_model.manufacturer_id:
            self._require_manufacturer(data.manufacturer_id)
            changes["manufacturer_id"] = data.manufacturer_id
        if data.name is not None:
            name = data.name
            slug = slugify(name)
            if models_repo.name_or_slug_taken(self.db, name=name, slug=slug, exclude_id=car_model.id):
                raise AppError(Errors.CAR_MODEL_ALREADY_EXISTS)
            changes.update(name=name, slug=slug)
        if changes:
            with translating(self.db, _WRITE_CONSTRAINTS):
                car_model = models_repo.update_model(self.db, car_model, **changes)
            logger.info(f"Car model updated: {car_model.id}")
        return schemas.CarModel.model_validate(car_model)

    def delete(self, model_id: uuid.UUID) -> None:
        car_model = self._get_or_404(model_id)
        if models_repo.has_cars(self.db, car_model.id):
            raise AppError(Errors.CAR_MODEL_IN_USE)
        with translating(self.db, _DELETE_CONSTRAINTS):
            models_repo.delete_model(self.db, car_model)
        logger.info(f"Car model deleted: {model_id}")
