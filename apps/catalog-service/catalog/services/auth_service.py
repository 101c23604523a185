"""
Authentication service.

Issues access/refresh token pairs backed by server-side refresh sessions,
rotates sessions on refresh, resolves principals from access tokens and API
keys, and generates API keys.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catalog.context import Principal
from catalog.db import models, schemas
from catalog.db.repositories import users as users_repo
from catalog.errors import AppError, Errors
from catalog.services.users_service import UsersService
from catalog.utils import security
from catalog.utils.settings import Settings, get_settings
from catalog.utils.ttl_store import TTLStore, api_key_user_key, get_session_store, refresh_token_key

logger = logging.getLogger(__name__)

API_KEY_CACHE_TTL_SECONDS = 24 * 60 * 60
API_KEY_ATTEMPTS = 3


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class AuthService:
    def __init__(
        self,
        db: Session,
        store: Optional[TTLStore] = None,
        settings: Optional[Settings] = None,
    ):
        self.db = db
        self.store = store if store is not None else get_session_store()
        self.settings = settings or get_settings()
        self.users = UsersService(db, store=self.store)

    # Sessions

    def register(self, data: schemas.Register) -> models.User:
        return self.users.create(
            username=data.username,
            password_hash=security.hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
        )

    def login(self, username: str, password: str) -> TokenPair:
        user = self.users.find_by_username(username)
        if user is None or not security.verify_password(password, user.password):
            logger.debug(f"Failed login attempt for username={username!r}")
            raise AppError(Errors.INVALID_CREDENTIALS)
        tokens = self._issue_tokens(user)
        logger.info(f"User logged in: {user.id}")
        return tokens

    def refresh(self, refresh_token: Optional[str]) -> TokenPair:
        if not refresh_token:
            raise AppError(Errors.INVALID_REFRESH_TOKEN)
        claims = security.decode_refresh_token(refresh_token, self.settings)
        if claims is None:
            raise AppError(Errors.INVALID_REFRESH_TOKEN)
        key = refresh_token_key(claims.sub, claims.sid)
        if self.store.get(key) != refresh_token:
            logger.debug(f"Refresh rejected: session {claims.sid} revoked or expired")
            raise AppError(Errors.INVALID_REFRESH_TOKEN)
        user = self.users.find_by_id(uuid.UUID(claims.sub))
        if user is None:
            self.store.delete(key)
            raise AppError(Errors.INVALID_REFRESH_TOKEN)
        self.store.delete(key)
        tokens = self._issue_tokens(user)
        logger.info(f"User {user.id} renewed their session")
        return tokens

    def logout(self, principal: Optional[Principal]) -> None:
        if principal is None or not principal.session_id:
            raise AppError(Errors.UNAUTHORIZED)
        self.store.delete(refresh_token_key(principal.id, principal.session_id))
        logger.info(f"User {principal.id} logged out of session {principal.session_id}")

    def _issue_tokens(self, user: models.User) -> TokenPair:
        session_id = security.new_session_id()
        role = user.role.value if isinstance(user.role, models.Role) else str(user.role)
        access_token = security.create_access_token(
            user_id=user.id,
            session_id=session_id,
            role=role,
            first_name=user.first_name,
            last_name=user.last_name,
            settings=self.settings,
        )
        refresh_token = security.create_refresh_token(user_id=user.id, session_id=session_id, settings=self.settings)
        self.store.set(
            refresh_token_key(user.id, session_id),
            refresh_token,
            self.settings.refresh_token_ttl_seconds,
        )
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    # Principals

    def principal_from_access_token(self, token: str) -> Optional[Principal]:
        claims = security.decode_access_token(token, self.settings)
        if claims is None:
            return None
        try:
            user_id = uuid.UUID(claims.sub)
        except ValueError:
            return None
        return Principal(id=user_id, role=claims.role, auth_type="jwt", session_id=claims.sid)

    def principal_from_api_key(self, api_key: str) -> Optional[Principal]:
        """Resolve an API key, caching the owning user for 24 hours."""
        if not security.looks_like_api_key(api_key):
            return None
        lookup_hash = security.api_key_lookup_hash(api_key)
        cache_key = api_key_user_key(lookup_hash)
        cached: Optional[Dict[str, Any]] = self.store.get(cache_key)
        if cached is not None:
            logger.debug("User found in cache for API key")
            return Principal(id=cached["id"], role=cached["role"], auth_type="api-key")

        user = self.users.find_by_api_key_hash(lookup_hash)
        if user is None or not security.verify_password(api_key, user.api_key_secret):
            logger.debug("API key rejected")
            return None
        role = user.role.value if isinstance(user.role, models.Role) else str(user.role)
        self.store.set(cache_key, {"id": user.id, "role": role}, API_KEY_CACHE_TTL_SECONDS)
        logger.debug("User cached for API key")
        return Principal(id=user.id, role=role, auth_type="api-key")

    # API keys

    def create_api_key(self, actor: Principal, user_id: Optional[uuid.UUID] = None) -> str:
        """Generate a new API key for ``user_id`` (admins only) or the actor.

        The raw key is returned once; only its SHA-256 lookup hash and Argon2
        hash are stored.
        """
        if user_id is not None and user_id != actor.id and not actor.is_admin:
            raise AppError(Errors.ONLY_ADMINS_CAN_CREATE_API_KEYS_FOR_OTHERS)
        target = self.users.get_by_id(user_id or actor.id)

        for attempt in range(1, API_KEY_ATTEMPTS + 1):
            api_key = security.generate_api_key(self.settings)
            lookup_hash = security.api_key_lookup_hash(api_key)
            if users_repo.api_key_hash_taken(self.db, lookup_hash):
                logger.warning(f"API key lookup hash collision (attempt {attempt})")
                continue
            try:
                self.users.set_api_key(target, lookup_hash=lookup_hash, secret_hash=security.hash_password(api_key))
            except IntegrityError:
                self.db.rollback()
                logger.warning(f"API key lookup hash collision on write (attempt {attempt})")
                continue
            logger.info(f"API key generated for user {target.id} by {actor.id}")
            return api_key

        logger.error(f"Failed generating API key {API_KEY_ATTEMPTS} times in a row")
        raise AppError(Errors.UNEXPECTED_ERROR)
