"""Runtime settings sourced from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal, Tuple, cast

AppEnv = Literal["development", "production", "test"]

_APP_ENVS = ("development", "production", "test")
_TEST_ACCESS_SECRET = "test-access-secret"
_TEST_REFRESH_SECRET = "test-refresh-secret"


@dataclass(frozen=True)
class Settings:
    jwt_access_secret: str
    jwt_refresh_secret: str
    access_token_ttl_seconds: int
    refresh_token_ttl_seconds: int
    app_env: AppEnv
    port: int
    log_level: str
    rate_limit_enabled: bool
    cors_origins: Tuple[str, ...]
    jwt_issuer: str = "car-catalog"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


def _normalize_bool(value: str | None, default: bool = True) -> bool:
    """Return normalized boolean from environment-style value."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"", "0", "false", "no", "off"}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _secret(name: str, app_env: str, test_default: str) -> str:
    value = os.getenv(name)
    if value:
        return value
    if app_env == "test":
        return test_default
    raise ValueError(f"Missing required environment variable: {name}")


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Return the cached settings built from the current environment."""
    app_env = (os.getenv("APP_ENV") or "development").strip().lower()
    if app_env not in _APP_ENVS:
        raise ValueError(f"APP_ENV must be one of {', '.join(_APP_ENVS)}, got {app_env!r}")

    origins = tuple(
        origin.strip()
        for origin in (os.getenv("CORS_ORIGINS") or "").split(",")
        if origin.strip()
    )
    return Settings(
        jwt_access_secret=_secret("JWT_ACCESS_SECRET", app_env, _TEST_ACCESS_SECRET),
        jwt_refresh_secret=_secret("JWT_REFRESH_SECRET", app_env, _TEST_REFRESH_SECRET),
        access_token_ttl_seconds=_int_env("ACCESS_TOKEN_TTL_SECONDS", 15 * 60),
        refresh_token_ttl_seconds=_int_env("REFRESH_TOKEN_TTL_SECONDS", 7 * 24 * 60 * 60),
        app_env=cast(AppEnv, app_env),
        port=_int_env("PORT", 3000),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        rate_limit_enabled=_normalize_bool(os.getenv("RATE_LIMIT_ENABLED"), default=True),
        cors_origins=origins,
    )


def refresh_settings_cache() -> None:
    """Invalidate cached settings (useful for tests)."""
    get_settings.cache_clear()
