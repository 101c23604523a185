"""
API dependency helpers.

Resolves the request principal from ``Authorization: Bearer <jwt>`` or
``x-api-key``, enforces authentication / role requirements and applies rate
limit tiers.
"""
import logging
from typing import Callable, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from catalog.context import Principal, set_principal
from catalog.db.database import get_db
from catalog.errors import AppError, Errors
from catalog.services.auth_service import AuthService
from catalog.utils.rate_limit import RateLimitTier, get_rate_limiter, rate_limit_key
from catalog.utils.settings import get_settings

logger = logging.getLogger(__name__)


def resolve_principal(
    db: Session,
    authorization: Optional[str],
    x_api_key: Optional[str],
) -> Optional[Principal]:
    """Return the caller's principal, or None for anonymous / invalid credentials.

    A bearer token takes precedence: when one is supplied the API key header
    is not consulted.
    """
    auth = AuthService(db)
    if authorization and authorization.lower().startswith("bearer "):
        return auth.principal_from_access_token(authorization[7:].strip())
    if x_api_key and x_api_key.strip():
        return auth.principal_from_api_key(x_api_key.strip())
    return None


async def get_optional_principal(
    request: Request,
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None),
    x_api_key: Optional[str] = Header(default=None, alias="x-api-key"),
) -> Optional[Principal]:
    principal = await run_in_threadpool(resolve_principal, db, authorization, x_api_key)
    # Set in the request task so sync endpoints (run in the threadpool) inherit it
    set_principal(principal)
    request.state.principal = principal
    return principal


def get_current_principal(principal: Optional[Principal] = Depends(get_optional_principal)) -> Principal:
    if principal is None:
        raise AppError(Errors.UNAUTHORIZED)
    return principal


def require_roles(*roles: str) -> Callable[..., Principal]:
    """Dependency factory admitting principals whose role is listed."""
    allowed = frozenset(roles)

    def _require(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed:
            logger.debug(f"Role {principal.role!r} rejected; allowed={sorted(allowed)}")
            raise AppError(Errors.FORBIDDEN, message="Insufficient role")
        return principal

    return _require


require_admin = require_roles("admin")
require_user_or_admin = require_roles("user", "admin")


def rate_limit(tier: RateLimitTier) -> Callable[..., None]:
    def _limit(request: Request, principal: Optional[Principal] = Depends(get_optional_principal)) -> None:
        if not get_settings().rate_limit_enabled:
            return
        key = rate_limit_key(request, principal.id if principal else None)
        get_rate_limiter().enforce(tier, key)

    return _limit
