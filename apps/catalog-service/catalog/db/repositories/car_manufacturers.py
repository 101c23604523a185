"""
Car manufacturer repository functions.
"""
from __future__ import annotations

import uuid
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from catalog.db import models

from ._paging import apply_sort, paginate

SORT_COLUMNS = {
    "name": models.CarManufacturer.name,
    "createdAt": models.CarManufacturer.created_at,
    "updatedAt": models.CarManufacturer.updated_at,
}


def create_manufacturer(db: Session, *, name: str, slug: str) -> models.CarManufacturer:
    manufacturer = models.CarManufacturer(name=name, slug=slug)
    db.add(manufacturer)
    db.commit()
    db.refresh(manufacturer)
    return manufacturer


def get_manufacturer(db: Session, manufacturer_id: uuid.UUID) -> Optional[models.CarManufacturer]:
    return db.query(models.CarManufacturer).filter(models.CarManufacturer.id == manufacturer_id).first()


def get_manufacturer_by_slug(db: Session, slug: str) -> Optional[models.CarManufacturer]:
    return db.query(models.CarManufacturer).filter(models.CarManufacturer.slug == slug).first()


def name_or_slug_taken(
    db: Session, *, name: str, slug: str, exclude_id: Optional[uuid.UUID] = None
) -> bool:
    q = db.query(models.CarManufacturer.id).filter(
        or_(models.CarManufacturer.name == name, models.CarManufacturer.slug == slug)
    )
    if exclude_id is not None:
        q = q.filter(models.CarManufacturer.id != exclude_id)
    return q.first() is not None


def list_manufacturers(
    db: Session,
    *,
    skip: int = 0,
    limit: int = 20,
    sort_field: Optional[str] = None,
    sort_direction: Optional[str] = None,
) -> Tuple[List[models.CarManufacturer], int]:
    q = db.query(models.CarManufacturer)
    q = apply_sort(
        q,
        SORT_COLUMNS,
        sort_field,
        sort_direction,
        default=(models.CarManufacturer.name, "asc"),
        tiebreaker=models.CarManufacturer.id,
    )
    return paginate(q, skip, limit)


def update_manufacturer(db: Session, manufacturer: models.CarManufacturer, **changes) -> models.CarManufacturer:
    for key, value in changes.items():
        setattr(manufacturer, key, value)
    db.commit()
    db.refresh(manufacturer)
    return manufacturer


def has_models(db: Session, manufacturer_id: uuid.UUID) -> bool:
    return (
        db.query(models.CarModel.id).filter(models.CarModel.manufacturer_id == manufacturer_id).first()
        is not None
    )


def delete_manufacturer(db: Session, manufacturer: models.CarManufacturer) -> None:
    db.delete(manufacturer)
    db.commit()
