"""
User service: account creation, profile/role updates and soft deletion.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from catalog.context import Principal
from catalog.db import models, schemas
from catalog.db.pg_errors import translating
from catalog.db.repositories import cars as cars_repo
from catalog.db.repositories import users as users_repo
from catalog.errors import AppError, Errors
from catalog.utils.ttl_store import TTLStore, api_key_user_key, get_session_store

logger = logging.getLogger(__name__)

_CONSTRAINTS = {
    "uq_users_username": Errors.USERNAME_ALREADY_EXISTS,
}


class UsersService:
    def __init__(self, db: Session, store: Optional[TTLStore] = None):
        self.db = db
        self.store = store if store is not None else get_session_store()

    def create(self, *, username: str, password_hash: str, first_name: str, last_name: str) -> models.User:
        if users_repo.username_taken(self.db, username):
            raise AppError(Errors.USERNAME_ALREADY_EXISTS)
        with translating(self.db, _CONSTRAINTS):
            user = users_repo.create_user(
                self.db,
                username=username,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
                role=models.Role.USER,
            )
        logger.info(f"User created: {user.id}")
        return user

    def find_by_id(self, user_id: uuid.UUID) -> Optional[models.User]:
        return users_repo.get_user(self.db, user_id)

    def get_by_id(self, user_id: uuid.UUID) -> models.User:
        user = users_repo.get_user(self.db, user_id)
        if user is None:
            raise AppError(Errors.USER_NOT_FOUND)
        return user

    def find_by_username(self, username: str) -> Optional[models.User]:
        return users_repo.get_user_by_username(self.db, username)

    def get_by_username(self, username: str) -> models.User:
        user = users_repo.get_user_by_username(self.db, username)
        if user is None:
            raise AppError(Errors.USER_NOT_FOUND)
        return user

    def find_by_api_key_hash(self, lookup_hash: str) -> Optional[models.User]:
        return users_repo.get_user_by_api_key_hash(self.db, lookup_hash)

    def update(self, user_id: uuid.UUID, data: schemas.UserUpdate, actor: Principal) -> models.User:
        user = self.get_by_id(user_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "role" in changes:
            if changes["role"] == user.role:
                del changes["role"]
            elif not actor.is_admin:
                raise AppError(Errors.ONLY_ADMINS_CAN_UPDATE_ROLES)
            else:
                # cached API key principals carry the old role
                self._evict_api_key(user)
        if not changes:
            return user
        user = users_repo.update_user(self.db, user, **changes)
        logger.info(f"User updated: {user.id} fields={sorted(changes)}")
        return user

    def update_profile(self, user_id: uuid.UUID, data: schemas.ProfileUpdate) -> models.User:
        user = self.get_by_id(user_id)
        user = users_repo.update_user(self.db, user, first_name=data.first_name, last_name=data.last_name)
        logger.info(f"Profile updated: {user.id}")
        return user

    def set_api_key(self, user: models.User, *, lookup_hash: str, secret_hash: str) -> models.User:
        self._evict_api_key(user)
        return users_repo.update_user(self.db, user, api_key_lookup_hash=lookup_hash, api_key_secret=secret_hash)

    def soft_delete(self, user_id: uuid.UUID) -> None:
        """Soft delete the user and their cars in one transaction."""
        user = self.get_by_id(user_id)
        now = datetime.now(timezone.utc)
        try:
            users_repo.mark_user_deleted(self.db, user, when=now)
            removed = cars_repo.soft_delete_cars_by_creator(self.db, user.id, when=now)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self._evict_api_key(user)
        logger.info(f"User deleted: {user_id} (cars soft-deleted: {removed})")

    def _evict_api_key(self, user: models.User) -> None:
        if user.api_key_lookup_hash:
            self.store.delete(api_key_user_key(user.api_key_lookup_hash))
