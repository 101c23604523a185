"""
Car repository functions.

All lookups exclude soft-deleted rows (``deleted_at`` set).
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Set, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from catalog.db import models

from ._paging import apply_sort, paginate

SORT_COLUMNS = {
    "year": models.Car.year,
    "color": models.Car.color,
    "kmDriven": models.Car.km_driven,
    "price": models.Car.price,
    "createdAt": models.Car.created_at,
    "model": models.CarModel.name,
}


@dataclass(frozen=True)
class CarFilters:
    model_slug: Optional[str] = None
    manufacturer_slug: Optional[str] = None
    color: Optional[str] = None
    min_year: Optional[int] = None
    max_year: Optional[int] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None


def _active(db: Session) -> Query:
    return db.query(models.Car).filter(models.Car.deleted_at.is_(None))


def create_car(
    db: Session,
    *,
    model_id: uuid.UUID,
    created_by_id: uuid.UUID,
    year: int,
    color: str,
    km_driven: int,
    price: int,
) -> models.Car:
    car = models.Car(
        model_id=model_id,
        created_by_id=created_by_id,
        year=year,
        color=color,
        km_driven=km_driven,
        price=price,
    )
    db.add(car)
    db.commit()
    db.refresh(car)
    return car


def get_car(db: Session, car_id: uuid.UUID) -> Optional[models.Car]:
    return _active(db).filter(models.Car.id == car_id).first()


def list_cars(
    db: Session,
    *,
    filters: CarFilters = CarFilters(),
    skip: int = 0,
    limit: int = 20,
    sort_field: Optional[str] = None,
    sort_direction: Optional[str] = None,
) -> Tuple[List[models.Car], int]:
    q = _active(db)
    if filters.model_slug or filters.manufacturer_slug or sort_field == "model":
        q = q.join(models.CarModel, models.Car.model_id == models.CarModel.id)
        if filters.model_slug:
            q = q.filter(models.CarModel.slug == filters.model_slug)
        if filters.manufacturer_slug:
            q = q.join(models.CarManufacturer, models.CarModel.manufacturer_id == models.CarManufacturer.id).filter(
                models.CarManufacturer.slug == filters.manufacturer_slug
            )
    if filters.color:
        q = q.filter(func.lower(models.Car.color) == filters.color.lower())
    if filters.min_year is not None:
        q = q.filter(models.Car.year >= filters.min_year)
    if filters.max_year is not None:
        q = q.filter(models.Car.year <= filters.max_year)
    if filters.min_price is not None:
        q = q.filter(models.Car.price >= filters.min_price)
    if filters.max_price is not None:
        q = q.filter(models.Car.price <= filters.max_price)
    q = apply_sort(
        q,
        SORT_COLUMNS,
        sort_field,
        sort_direction,
        default=(models.Car.created_at, "desc"),
        tiebreaker=models.Car.id,
    )
    return paginate(q, skip, limit)


def list_cars_by_creator(db: Session, user_id: uuid.UUID, *, skip: int = 0, limit: int = 20) -> Tuple[List[models.Car], int]:
    q = _active(db).filter(models.Car.created_by_id == user_id)
    q = q.order_by(models.Car.created_at.desc(), models.Car.id.asc())
    return paginate(q, skip, limit)


def list_favorite_cars(db: Session, user_id: uuid.UUID, *, skip: int = 0, limit: int = 20) -> Tuple[List[models.Car], int]:
    q = (
        _active(db)
        .join(models.user_favorite_cars, models.user_favorite_cars.c.car_id == models.Car.id)
        .filter(models.user_favorite_cars.c.user_id == user_id)
        .order_by(models.Car.created_at.desc(), models.Car.id.asc())
    )
    return paginate(q, skip, limit)


def update_car(db: Session, car: models.Car, **changes) -> models.Car:
    for key, value in changes.items():
        setattr(car, key, value)
    db.commit()
    db.refresh(car)
    return car


def soft_delete_car(db: Session, car: models.Car) -> None:
    car.deleted_at = datetime.now(timezone.utc)
    db.commit()


def soft_delete_cars_by_creator(db: Session, user_id: uuid.UUID, *, when: datetime) -> int:
    """Mark the user's cars deleted without committing."""
    return (
        db.query(models.Car)
        .filter(models.Car.created_by_id == user_id, models.Car.deleted_at.is_(None))
        .update({models.Car.deleted_at: when}, synchronize_session=False)
    )


# Favorites


def favorite_car_ids(db: Session, user_id: uuid.UUID, car_ids: Iterable[uuid.UUID]) -> Set[uuid.UUID]:
    ids = list(car_ids)
    if not ids:
        return set()
    table = models.user_favorite_cars
    rows = db.query(table.c.car_id).filter(table.c.user_id == user_id, table.c.car_id.in_(ids)).all()
    return {row[0] for row in rows}


def is_favorite(db: Session, user_id: uuid.UUID, car_id: uuid.UUID) -> bool:
    return bool(favorite_car_ids(db, user_id, [car_id]))


def add_favorite(db: Session, user_id: uuid.UUID, car_id: uuid.UUID) -> None:
    db.execute(models.user_favorite_cars.insert().values(user_id=user_id, car_id=car_id))
    db.commit()


def remove_favorite(db: Session, user_id: uuid.UUID, car_id: uuid.UUID) -> None:
    table = models.user_favorite_cars
    db.execute(table.delete().where(table.c.user_id == user_id, table.c.car_id == car_id))
    db.commit()
