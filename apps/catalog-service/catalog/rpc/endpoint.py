"""
HTTP endpoint serving the RPC procedures at ``/trpc``.

Each addressed procedure runs through the same pipeline: lookup and verb
check, rate limiting, access check, input validation and the handler call.
Failures are rendered per call in the tRPC error shape.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from fastapi import APIRouter, Depends, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from catalog.api.deps import resolve_principal
from catalog.context import set_principal
from catalog.db.database import get_db
from catalog.db.schemas import validation_issues
from catalog.errors import AppError, ErrorCode, Errors
from catalog.rpc import wire
from catalog.rpc.app_router import app_router
from catalog.rpc.base import Access, Procedure, ProcedureContext, ProcedureType, RpcError, RpcRouter
from catalog.utils.rate_limit import RateLimitExceeded, get_rate_limiter, rate_limit_key
from catalog.utils.settings import get_settings

logger = logging.getLogger("catalog.rpc")

router = APIRouter(prefix="/trpc", tags=["trpc"], include_in_schema=False)

# Headers of the scratch response that are not forwarded to the client
_SKIP_HEADERS = {"content-length", "content-type"}


def _lookup(root: RpcRouter, path: str, method: str) -> Procedure:
    expected = ProcedureType.QUERY if method == "GET" else ProcedureType.MUTATION
    procedure = root.resolve(path)
    if procedure is None:
        raise RpcError(
            "NOT_FOUND",
            f'No "{expected.value}"-procedure on path "{path}"',
            error_code=ErrorCode.NOT_FOUND,
        )
    if procedure.type is not expected:
        raise RpcError(
            "METHOD_NOT_SUPPORTED",
            f'Unsupported {method}-request to {procedure.type.value} procedure at path "{path}"',
            error_code=ErrorCode.GENERAL_ERROR,
        )
    return procedure


def _authorize(procedure: Procedure, ctx: ProcedureContext) -> None:
    if procedure.access is Access.PUBLIC:
        return
    if ctx.principal is None:
        raise AppError(Errors.UNAUTHORIZED)
    if procedure.access is Access.ADMIN and not ctx.principal.is_admin:
        raise AppError(Errors.FORBIDDEN, message="Insufficient role")


def _validate_input(procedure: Procedure, raw: Any) -> Any:
    if procedure.input_model is None:
        return None
    if raw is None and procedure.input_optional:
        raw = {}
    try:
        return procedure.input_model.model_validate(raw)
    except ValidationError as exc:
        raise AppError(Errors.VALIDATION_ERROR, issues=validation_issues(exc.errors())) from exc


def call_procedure(
    root: RpcRouter, path: str, method: str, raw_input: Any, ctx: ProcedureContext
) -> Tuple[int, Dict[str, Any]]:
    """Run one procedure call and return ``(http_status, payload)``."""
    try:
        procedure = _lookup(root, path, method)
        if get_settings().rate_limit_enabled:
            key = rate_limit_key(ctx.request, ctx.principal.id if ctx.principal else None)
            get_rate_limiter().enforce(procedure.tier, key)
        _authorize(procedure, ctx)
        data = _validate_input(procedure, raw_input)
        result = procedure.handler(ctx, data)
        return 200, {"result": {"data": jsonable_encoder(result, by_alias=True)}}
    except RpcError as exc:
        error = exc
        logger.debug(f"{method} {path} failed: {exc.code} {exc.message}")
    except AppError as exc:
        if isinstance(exc, RateLimitExceeded) and exc.retry_after:
            ctx.response.headers["Retry-After"] = str(exc.retry_after)
        error = RpcError.from_app_error(exc)
        logger.debug(f"{method} {path} failed: {exc.entry.key} ({exc.status})")
    except Exception:
        logger.exception(f"Unexpected error in procedure {method} {path}")
        error = RpcError(
            "INTERNAL_SERVER_ERROR",
            Errors.UNEXPECTED_ERROR.message,
            error_code=Errors.UNEXPECTED_ERROR.code,
        )
    return error.http_status, error.to_shape(path)


def _forward_headers(scratch: Response, response: Response) -> None:
    for name, value in scratch.raw_headers:
        if name.decode("latin-1") not in _SKIP_HEADERS:
            response.raw_headers.append((name, value))


@router.api_route("/{path:path}", methods=["GET", "POST"])
async def handle_trpc(path: str, request: Request, db: Session = Depends(get_db)):
    batch = wire.is_batch(request.query_params)
    if request.method == "GET":
        raw: Optional[Union[str, bytes]] = request.query_params.get("input")
    else:
        raw = (await request.body()) or None

    try:
        calls = wire.parse_calls(path, raw, batch)
    except RpcError as exc:
        shape = exc.to_shape(None)
        return JSONResponse([shape] if batch else shape, status_code=exc.http_status)

    principal = await run_in_threadpool(
        resolve_principal, db, request.headers.get("authorization"), request.headers.get("x-api-key")
    )
    set_principal(principal)
    request.state.principal = principal

    scratch = Response()
    ctx = ProcedureContext(db=db, request=request, response=scratch, principal=principal)
    statuses: List[int] = []
    payloads: List[Dict[str, Any]] = []
    for call_path, call_input in calls:
        status_code, payload = await run_in_threadpool(
            call_procedure, app_router, call_path, request.method, call_input, ctx
        )
        statuses.append(status_code)
        payloads.append(payload)

    if batch:
        response = JSONResponse(payloads, status_code=wire.batch_status(statuses))
    else:
        response = JSONResponse(payloads[0], status_code=statuses[0])
    _forward_headers(scratch, response)
    return response
