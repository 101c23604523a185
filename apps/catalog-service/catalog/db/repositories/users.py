"""
User repository functions.

Soft-deleted users are invisible to every lookup.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Query, Session

from catalog.db import models


def _active(db: Session) -> Query:
    return db.query(models.User).filter(models.User.deleted_at.is_(None))


def create_user(
    db: Session,
    *,
    username: str,
    password_hash: str,
    first_name: str,
    last_name: str,
    role: models.Role = models.Role.USER,
) -> models.User:
    user = models.User(
        username=username,
        password=password_hash,
        first_name=first_name,
        last_name=last_name,
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_user(db: Session, user_id: uuid.UUID) -> Optional[models.User]:
    return _active(db).filter(models.User.id == user_id).first()


def get_user_by_username(db: Session, username: str) -> Optional[models.User]:
    return _active(db).filter(models.User.username == username).first()


def get_user_by_api_key_hash(db: Session, lookup_hash: str) -> Optional[models.User]:
    return _active(db).filter(models.User.api_key_lookup_hash == lookup_hash).first()


def username_taken(db: Session, username: str) -> bool:
    """Soft-deleted rows keep their username reserved (unique constraint)."""
    return db.query(models.User.id).filter(models.User.username == username).first() is not None


def api_key_hash_taken(db: Session, lookup_hash: str) -> bool:
    return db.query(models.User.id).filter(models.User.api_key_lookup_hash == lookup_hash).first() is not None


def update_user(db: Session, user: models.User, **changes) -> models.User:
    for key, value in changes.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user


def mark_user_deleted(db: Session, user: models.User, *, when: datetime) -> None:
    """Soft delete without committing; the caller owns the transaction."""
    user.deleted_at = when
