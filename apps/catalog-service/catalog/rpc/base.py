"""
Procedure registry for the tRPC-compatible RPC surface.

A procedure is a plain function ``handler(ctx, input)`` registered on an
``RpcRouter`` as a query (GET) or a mutation (POST), together with its input
model, access level and rate limit tier. Routers nest by name, producing
dotted paths such as ``cars.getById``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Type

from fastapi import Request, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from catalog.context import Principal
from catalog.errors import AppError, ErrorCode
from catalog.utils.rate_limit import RateLimitTier

# tRPC error code -> JSON-RPC 2.0 numeric code
TRPC_ERROR_CODES: Dict[str, int] = {
    "PARSE_ERROR": -32700,
    "BAD_REQUEST": -32600,
    "INTERNAL_SERVER_ERROR": -32603,
    "UNAUTHORIZED": -32001,
    "FORBIDDEN": -32003,
    "NOT_FOUND": -32004,
    "METHOD_NOT_SUPPORTED": -32005,
    "CONFLICT": -32009,
    "TOO_MANY_REQUESTS": -32029,
}

TRPC_HTTP_STATUS: Dict[str, int] = {
    "PARSE_ERROR": 400,
    "BAD_REQUEST": 400,
    "INTERNAL_SERVER_ERROR": 500,
    "UNAUTHORIZED": 401,
    "FORBIDDEN": 403,
    "NOT_FOUND": 404,
    "METHOD_NOT_SUPPORTED": 405,
    "CONFLICT": 409,
    "TOO_MANY_REQUESTS": 429,
}

_STATUS_TO_TRPC = {status: code for code, status in TRPC_HTTP_STATUS.items() if code != "PARSE_ERROR"}


def trpc_code_for_status(status: int) -> str:
    return _STATUS_TO_TRPC.get(status, "INTERNAL_SERVER_ERROR" if status >= 500 else "BAD_REQUEST")


class ProcedureType(str, Enum):
    QUERY = "query"
    MUTATION = "mutation"


class Access(str, Enum):
    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"


class RpcError(Exception):
    """Error rendered in the tRPC error shape."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        error_code: int = ErrorCode.GENERAL_ERROR,
        errors: Optional[List[Dict[str, Any]]] = None,
        http_status: Optional[int] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.error_code = int(error_code)
        self.errors = errors
        self.http_status = http_status or TRPC_HTTP_STATUS.get(code, 500)

    @classmethod
    def from_app_error(cls, exc: AppError) -> "RpcError":
        return cls(
            trpc_code_for_status(exc.status),
            exc.message,
            error_code=exc.entry.code,
            errors=exc.issues,
            http_status=exc.status,
        )

    def to_shape(self, path: Optional[str]) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "code": self.code,
            "httpStatus": self.http_status,
            "path": path,
            "errorCode": self.error_code,
        }
        if self.errors is not None:
            data["errors"] = self.errors
        return {
            "error": {
                "message": self.message,
                "code": TRPC_ERROR_CODES.get(self.code, TRPC_ERROR_CODES["INTERNAL_SERVER_ERROR"]),
                "data": data,
            }
        }


@dataclass
class ProcedureContext:
    db: Session
    request: Request
    # Collects Set-Cookie headers for the final HTTP response
    response: Response
    principal: Optional[Principal] = None

    def require_principal(self) -> Principal:
        if self.principal is None:
            raise RpcError("UNAUTHORIZED", "You need to be authorized to perform this action", error_code=ErrorCode.UNAUTHORIZED)
        return self.principal


Handler = Callable[[ProcedureContext, Any], Any]


@dataclass(frozen=True)
class Procedure:
    type: ProcedureType
    handler: Handler
    input_model: Optional[Type[BaseModel]] = None
    input_optional: bool = False
    access: Access = Access.PUBLIC
    tier: RateLimitTier = RateLimitTier.LONG


@dataclass
class RpcRouter:
    procedures: Dict[str, Procedure] = field(default_factory=dict)
    children: Dict[str, "RpcRouter"] = field(default_factory=dict)

    def _register(self, name: str, procedure_type: ProcedureType, **options) -> Callable[[Handler], Handler]:
        def decorator(fn: Handler) -> Handler:
            if name in self.procedures:
                raise ValueError(f"Duplicate procedure {name!r}")
            self.procedures[name] = Procedure(type=procedure_type, handler=fn, **options)
            return fn

        return decorator

    def query(self, name: str, **options) -> Callable[[Handler], Handler]:
        return self._register(name, ProcedureType.QUERY, **options)

    def mutation(self, name: str, **options) -> Callable[[Handler], Handler]:
        return self._register(name, ProcedureType.MUTATION, **options)

    def mount(self, name: str, child: "RpcRouter") -> None:
        self.children[name] = child

    def walk(self, prefix: str = "") -> Iterator[Tuple[str, Procedure]]:
        for name, procedure in self.procedures.items():
            yield f"{prefix}{name}", procedure
        for name, child in self.children.items():
            yield from child.walk(f"{prefix}{name}.")

    def resolve(self, path: str) -> Optional[Procedure]:
        head, _, rest = path.partition(".")
        if not rest:
            return self.procedures.get(head)
        child = self.children.get(head)
        return child.resolve(rest) if child else None
