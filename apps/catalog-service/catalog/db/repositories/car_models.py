"""
Car model repository functions.
"""
from __future__ import annotations

import uuid
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from catalog.db import models

from ._paging import apply_sort, paginate

SORT_COLUMNS = {
    "name": models.CarModel.name,
    "createdAt": models.CarModel.created_at,
    "updatedAt": models.CarModel.updated_at,
}


def create_model(db: Session, *, name: str, slug: str, manufacturer_id: uuid.UUID) -> models.CarModel:
    car_model = models.CarModel(name=name, slug=slug, manufacturer_id=manufacturer_id)
    db.add(car_model)
    db.commit()
    db.refresh(car_model)
    return car_model


def get_model(db: Session, model_id: uuid.UUID) -> Optional[models.CarModel]:
    return db.query(models.CarModel).filter(models.CarModel.id == model_id).first()


def get_model_by_slug(db: Session, slug: str) -> Optional[models.CarModel]:
    return db.query(models.CarModel).filter(models.CarModel.slug == slug).first()


def name_or_slug_taken(db: Session, *, name: str, slug: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
    q = db.query(models.CarModel.id).filter(or_(models.CarModel.name == name, models.CarModel.slug == slug))
    if exclude_id is not None:
        q = q.filter(models.CarModel.id != exclude_id)
    return q.first() is not None


def list_models(
    db: Session,
    *,
    skip: int = 0,
    limit: int = 20,
    manufacturer_id: Optional[uuid.UUID] = None,
    manufacturer_slug: Optional[str] = None,
    sort_field: Optional[str] = None,
    sort_direction: Optional[str] = None,
) -> Tuple[List[models.CarModel], int]:
    q = db.query(models.CarModel)
    if manufacturer_id is not None:
        q = q.filter(models.CarModel.manufacturer_id == manufacturer_id)
    if manufacturer_slug:
        q = q.join(models.CarManufacturer, models.CarModel.manufacturer_id == models.CarManufacturer.id).filter(
            models.CarManufacturer.slug == manufacturer_slug
        )
    q = apply_sort(
        q,
        SORT_COLUMNS,
        sort_field,
        sort_direction,
        default=(models.CarModel.name, "asc"),
        tiebreaker=models.CarModel.id,
    )
    return paginate(q, skip, limit)


def update_model(db: Session, car_model: models.CarModel, **changes) -> models.CarModel:
    for key, value in changes.items():
        setattr(car_model, key, value)
    db.commit()
    db.refresh(car_model)
    return car_model


def has_cars(db: Session, model_id: uuid.UUID) -> bool:
    """Any car row, soft-deleted included, still holds the foreign key."""
    return db.query(models.Car.id).filter(models.Car.model_id == model_id).first() is not None


def delete_model(db: Session, car_model: models.CarModel) -> None:
    db.delete(car_model)
    db.commit()
