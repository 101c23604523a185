"""
Car manufacturer service: slug derivation, uniqueness and in-use checks.
"""
import logging
import uuid

from sqlalchemy.orm import Session

from catalog.db import schemas
from catalog.db.pg_errors import translating
from catalog.db.repositories import car_manufacturers as manufacturers_repo
from catalog.errors import AppError, Errors
from catalog.utils.slugs import slugify

logger = logging.getLogger(__name__)

_CONSTRAINTS = {
    "uq_car_manufacturers_name": Errors.CAR_MANUFACTURER_ALREADY_EXISTS,
    "uq_car_manufacturers_slug": Errors.CAR_MANUFACTURER_ALREADY_EXISTS,
    "fk_car_models_manufacturer_id": Errors.CAR_MANUFACTURER_IN_USE,
}


class CarManufacturersService:
    def __init__(self, db: Session):
        self.db = db

    def _get_or_404(self, manufacturer_id: uuid.UUID):
        manufacturer = manufacturers_repo.get_manufacturer(self.db, manufacturer_id)
        if manufacturer is None:
            raise AppError(Errors.CAR_MANUFACTURER_NOT_FOUND)
        return manufacturer

    def create(self, data: schemas.CarManufacturerCreate) -> schemas.CarManufacturer:
        name = data.name
        slug = slugify(name)
        if manufacturers_repo.name_or_slug_taken(self.db, name=name, slug=slug):
            raise AppError(Errors.CAR_MANUFACTURER_ALREADY_EXISTS)
        with translating(self.db, _CONSTRAINTS):
            manufacturer = manufacturers_repo.create_manufacturer(self.db, name=name, slug=slug)
        logger.info(f"Car manufacturer created: {manufacturer.id} ({manufacturer.slug})")
        return schemas.CarManufacturer.model_validate(manufacturer)

    def list(self, params: schemas.CarManufacturerListInput) -> schemas.Page[schemas.CarManufacturer]:
        items, total = manufacturers_repo.list_manufacturers(
            self.db,
            skip=params.skip,
            limit=params.limit,
            sort_field=params.sort_field.value if params.sort_field else None,
            sort_direction=params.sort_direction.value if params.sort_direction else None,
        )
        return schemas.Page[schemas.CarManufacturer].build(
            [schemas.CarManufacturer.model_validate(m) for m in items],
            total=total,
            limit=params.limit,
            skipped=params.skip,
        )

    def get_by_id(self, manufacturer_id: uuid.UUID) -> schemas.CarManufacturer:
        return schemas.CarManufacturer.model_validate(self._get_or_404(manufacturer_id))

    def get_by_slug(self, slug: str) -> schemas.CarManufacturer:
        manufacturer = manufacturers_repo.get_manufacturer_by_slug(self.db, slug)
        if manufacturer is None:
            raise AppError(Errors.CAR_MANUFACTURER_NOT_FOUND)
        return schemas.CarManufacturer.model_validate(manufacturer)

    def update(self, manufacturer_id: uuid.UUID, data: schemas.CarManufacturerUpdate) -> schemas.CarManufacturer:
        manufacturer = self._get_or_404(manufacturer_id)
        changes = {}
        if data.name is not None:
            name = data.name
            slug = slugify(name)
            if manufacturers_repo.name_or_slug_taken(self.db, name=name, slug=slug, exclude_id=manufacturer.id):
                raise AppError(Errors.CAR_MANUFACTURER_ALREADY_EXISTS)
            changes = {"name": name, "slug": slug}
        if changes:
            with translating(self.db, _CONSTRAINTS):
                manufacturer = manufacturers_repo.update_manufacturer(self.db, manufacturer, **changes)
            logger.info(f"Car manufacturer updated: {manufacturer.id}")
        return schemas.CarManufacturer.model_validate(manufacturer)

    def delete(self, manufacturer_id: uuid.UUID) -> None:
        manufacturer = self._get_or_404(manufacturer_id)
        if manufacturers_repo.has_models(self.db, manufacturer.id):
            raise AppError(Errors.CAR_MANUFACTURER_IN_USE)
        with translating(self.db, _CONSTRAINTS):
            manufacturers_repo.delete_manufacturer(self.db, manufacturer)
        logger.info(f"Car manufacturer deleted: {manufacturer_id}")
