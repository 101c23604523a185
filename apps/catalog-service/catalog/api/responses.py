"""Response envelope helpers shared by the REST routers."""
from typing import Any, Dict, Optional

from fastapi import Response, status

from catalog.db.schemas import ErrorResponse
from catalog.errors import AppError
from catalog.utils.settings import get_settings

REFRESH_TOKEN_COOKIE = "refresh_token"

# Documented error shapes, reused in router ``responses=`` declarations
ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Validation failed"},
    401: {"model": ErrorResponse, "description": "Missing or invalid credentials"},
    403: {"model": ErrorResponse, "description": "Insufficient permissions"},
    404: {"model": ErrorResponse, "description": "Resource not found"},
    409: {"model": ErrorResponse, "description": "Conflict with existing data"},
    429: {"model": ErrorResponse, "description": "Too many requests"},
}


def ok(data: Any, message: Optional[str] = None) -> Dict[str, Any]:
    return {"success": True, "data": data, "message": message}


def error_body(exc: AppError) -> Dict[str, Any]:
    return {"success": False, "error": exc.to_body()}


def no_content() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        refresh_token,
        max_age=settings.refresh_token_ttl_seconds,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


def clear_refresh_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        REFRESH_TOKEN_COOKIE,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
