"""
Password hashing, JWT issuing/verification and API key helpers.

Responsibilities:
- Hash and verify passwords and API key secrets with Argon2id
- Issue and decode HS256 access / refresh tokens
- Generate API keys of the form ``ak_<live|test>_<64 hex>`` and derive the
  SHA-256 lookup hash stored alongside the Argon2 secret
"""
from __future__ import annotations

import hashlib
import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from argon2.low_level import Type
from jwt.exceptions import InvalidTokenError

from catalog.utils.settings import Settings, get_settings

logger = logging.getLogger(__name__)

_argon2 = PasswordHasher(time_cost=2, memory_cost=102400, parallelism=8, hash_len=32, type=Type.ID)

JWT_ALGORITHM = "HS256"
API_KEY_PREFIX = "ak_"


def hash_password(password: str) -> str:
    return _argon2.hash(password)


def verify_password(password: str, encoded_hash: Optional[str]) -> bool:
    """Constant-time verification of a password (or API key secret) against its Argon2 hash."""
    if not password or not encoded_hash:
        return False
    try:
        return _argon2.verify(encoded_hash, password)
    except VerifyMismatchError:
        return False
    except (VerificationError, InvalidHashError):
        logger.debug("Stored hash could not be verified")
        return False


# Access / refresh tokens


@dataclass(frozen=True)
class AccessClaims:
    sub: str
    sid: str
    role: str
    first_name: str
    last_name: str


@dataclass(frozen=True)
class RefreshClaims:
    sub: str
    sid: str


def new_session_id() -> str:
    return uuid.uuid4().hex


def create_access_token(
    *,
    user_id: uuid.UUID,
    session_id: str,
    role: str,
    first_name: str,
    last_name: str,
    settings: Optional[Settings] = None,
) -> str:
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "iss": settings.jwt_issuer,
        "sub": str(user_id),
        "sid": session_id,
        "firstName": first_name,
        "lastName": last_name,
        "role": role,
        "iat": now,
        "exp": now + timedelta(seconds=settings.access_token_ttl_seconds),
    }
    return jwt.encode(payload, settings.jwt_access_secret, algorithm=JWT_ALGORITHM)


def create_refresh_token(
    *, user_id: uuid.UUID, session_id: str, settings: Optional[Settings] = None
) -> str:
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "sid": session_id,
        "iat": now,
        "exp": now + timedelta(seconds=settings.refresh_token_ttl_seconds),
        # keeps two refresh tokens minted in the same second distinct
        "jti": secrets.token_hex(8),
    }
    return jwt.encode(payload, settings.jwt_refresh_secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str, settings: Optional[Settings] = None) -> Optional[AccessClaims]:
    """Return the access claims or None when the token is invalid or expired."""
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_access_secret,
            algorithms=[JWT_ALGORITHM],
            issuer=settings.jwt_issuer,
            options={"require": ["exp", "sub", "sid"]},
        )
    except InvalidTokenError as e:
        logger.debug(f"Access token rejected: {e}")
        return None
    return AccessClaims(
        sub=str(payload["sub"]),
        sid=str(payload["sid"]),
        role=str(payload.get("role", "")),
        first_name=str(payload.get("firstName", "")),
        last_name=str(payload.get("lastName", "")),
    )


def decode_refresh_token(token: str, settings: Optional[Settings] = None) -> Optional[RefreshClaims]:
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_refresh_secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "sub", "sid"]},
        )
    except InvalidTokenError as e:
        logger.debug(f"Refresh token rejected: {e}")
        return None
    return RefreshClaims(sub=str(payload["sub"]), sid=str(payload["sid"]))


# API keys


def generate_api_key(settings: Optional[Settings] = None) -> str:
    """Return a new ``ak_<env>_<64 hex>`` key; ``live`` only in production."""
    settings = settings or get_settings()
    env = "live" if settings.is_production else "test"
    return f"{API_KEY_PREFIX}{env}_{secrets.token_hex(32)}"


def api_key_lookup_hash(api_key: str) -> str:
    """Deterministic SHA-256 hex digest used to find the owner of a key."""
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()


def looks_like_api_key(value: Optional[str]) -> bool:
    return bool(value) and value.startswith(API_KEY_PREFIX)
