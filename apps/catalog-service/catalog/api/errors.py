"""
Exception handlers rendering every failure in the error envelope.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from catalog.api.responses import error_body
from catalog.db.schemas import validation_issues
from catalog.errors import AppError, Errors, entry_for_status
from catalog.utils.rate_limit import RateLimitExceeded

logger = logging.getLogger(__name__)


def _render(exc: AppError) -> JSONResponse:
    response = JSONResponse(error_body(exc), status_code=exc.status)
    if isinstance(exc, RateLimitExceeded):
        response.headers["Retry-After"] = str(exc.retry_after)
    return response


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.entry.key} (error id {exc.id})")
    else:
        logger.debug(f"{request.method} {request.url.path} -> {exc.status} {exc.entry.key}")
    return _render(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    issues = validation_issues(exc.errors())
    logger.debug(f"{request.method} {request.url.path} validation failed: {len(issues)} issue(s)")
    return _render(AppError(Errors.VALIDATION_ERROR, issues=issues))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    entry = entry_for_status(exc.status_code)
    message = exc.detail if isinstance(exc.detail, str) else None
    response = _render(AppError(entry, message=message, status=exc.status_code))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = AppError(Errors.UNEXPECTED_ERROR)
    logger.exception(f"Unhandled error on {request.method} {request.url.path} (error id {error.id})")
    return _render(error)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
