"""
Car service: listing with filters, ownership rules and favorites.

Every car DTO carries ``isFavorite`` computed for the viewing user (false
for anonymous callers).
"""
import logging
import uuid
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from catalog.context import Principal
from catalog.db import models, schemas
from catalog.db.pg_errors import translating
from catalog.db.repositories import car_models as models_repo
from catalog.db.repositories import cars as cars_repo
from catalog.errors import AppError, Errors

logger = logging.getLogger(__name__)

_CONSTRAINTS = {
    "fk_cars_model_id": Errors.CAR_MODEL_NOT_FOUND,
    "fk_cars_created_by_id": Errors.USER_NOT_FOUND,
    "fk_user_favorite_cars_car_id": Errors.CAR_NOT_FOUND,
    "fk_user_favorite_cars_user_id": Errors.USER_NOT_FOUND,
}


def to_dto(car: models.Car, *, is_favorite: bool) -> schemas.Car:
    return schemas.Car(
        id=car.id,
        year=car.year,
        color=car.color,
        km_driven=car.km_driven,
        price=car.price,
        created_by=car.created_by_id,
        created_at=car.created_at,
        updated_at=car.updated_at,
        is_favorite=is_favorite,
        model=schemas.CarModel.model_validate(car.model),
    )


class CarsService:
    def __init__(self, db: Session):
        self.db = db

    def _get_or_404(self, car_id: uuid.UUID) -> models.Car:
        car = cars_repo.get_car(self.db, car_id)
        if car is None:
            raise AppError(Errors.CAR_NOT_FOUND)
        return car

    def _require_model(self, model_id: uuid.UUID) -> None:
        if models_repo.get_model(self.db, model_id) is None:
            raise AppError(Errors.CAR_MODEL_NOT_FOUND)

    @staticmethod
    def _require_owner_or_admin(car: models.Car, principal: Principal) -> None:
        if not principal.is_admin and car.created_by_id != principal.id:
            raise AppError(Errors.USERS_CAN_ONLY_UPDATE_OWN_CARS)

    def _dtos(self, cars: Iterable[models.Car], viewer_id: Optional[uuid.UUID]) -> List[schemas.Car]:
        cars = list(cars)
        favorites = cars_repo.favorite_car_ids(self.db, viewer_id, [c.id for c in cars]) if viewer_id else set()
        return [to_dto(c, is_favorite=c.id in favorites) for c in cars]

    def _page(self, cars, total: int, viewer_id, *, skip: int, limit: int) -> schemas.Page[schemas.Car]:
        return schemas.Page[schemas.Car].build(self._dtos(cars, viewer_id), total=total, limit=limit, skipped=skip)

    def create(self, data: schemas.CarCreate, principal: Principal) -> schemas.Car:
        self._require_model(data.model_id)
        with translating(self.db, _CONSTRAINTS):
            car = cars_repo.create_car(
                self.db,
                model_id=data.model_id,
                created_by_id=principal.id,
                year=data.year,
                color=data.color,
                km_driven=data.km_driven,
                price=data.price,
            )
        logger.info(f"New car created: {car.id} by {principal.id}")
        return to_dto(car, is_favorite=False)

    def list(self, params: schemas.CarListInput, viewer_id: Optional[uuid.UUID] = None) -> schemas.Page[schemas.Car]:
        filters = cars_repo.CarFilters(
            model_slug=params.model_slug,
            manufacturer_slug=params.manufacturer_slug,
            color=params.color,
            min_year=params.min_year,
            max_year=params.max_year,
            min_price=params.min_price,
            max_price=params.max_price,
        )
        cars, total = cars_repo.list_cars(
            self.db,
            filters=filters,
            skip=params.skip,
            limit=params.limit,
            sort_field=params.sort_field.value if params.sort_field else None,
            sort_direction=params.sort_direction.value if params.sort_direction else None,
        )
        return self._page(cars, total, viewer_id, skip=params.skip, limit=params.limit)

    def get_by_id(self, car_id: uuid.UUID, viewer_id: Optional[uuid.UUID] = None) -> schemas.Car:
        return self._dtos([self._get_or_404(car_id)], viewer_id)[0]

    def update(self, car_id: uuid.UUID, data: schemas.CarUpdate, principal: Principal) -> schemas.Car:
        car = self._get_or_404(car_id)
        self._require_owner_or_admin(car, principal)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "model_id" in changes and changes["model_id"] != car.model_id:
            self._require_model(changes["model_id"])
        if changes:
            with translating(self.db, _CONSTRAINTS):
                car = cars_repo.update_car(self.db, car, **changes)
            logger.info(f"Updated car: {car.id}")
        return self._dtos([car], principal.id)[0]

    def soft_delete(self, car_id: uuid.UUID, principal: Principal) -> None:
        car = self._get_or_404(car_id)
        self._require_owner_or_admin(car, principal)
        cars_repo.soft_delete_car(self.db, car)
        logger.info(f"Car deleted: {car_id}")

    def toggle_favorite(self, car_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        """Flip the favorite flag for ``user_id`` and return the new state."""
        car = self._get_or_404(car_id)
        with translating(self.db, _CONSTRAINTS):
            if cars_repo.is_favorite(self.db, user_id, car.id):
                cars_repo.remove_favorite(self.db, user_id, car.id)
                state = False
            else:
                cars_repo.add_favorite(self.db, user_id, car.id)
                state = True
        logger.info(f"User {user_id} toggled favorite for car {car_id}: {state}")
        return state

    def favorites(self, user_id: uuid.UUID, *, skip: int = 0, limit: int = 20) -> schemas.Page[schemas.Car]:
        cars, total = cars_repo.list_favorite_cars(self.db, user_id, skip=skip, limit=limit)
        return self._page(cars, total, user_id, skip=skip, limit=limit)

    def cars_by_user(
        self, user_id: uuid.UUID, *, skip: int = 0, limit: int = 20, viewer_id: Optional[uuid.UUID] = None
    ) -> schemas.Page[schemas.Car]:
        cars, total = cars_repo.list_cars_by_creator(self.db, user_id, skip=skip, limit=limit)
        return self._page(cars, total, viewer_id, skip=skip, limit=limit)
