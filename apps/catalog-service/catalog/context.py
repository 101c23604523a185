"""
Per-request context.

Values live in ``contextvars`` so that they follow the request across the
sync threadpool and async boundaries without being threaded through every
call signature.
"""
from __future__ import annotations

import logging
import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import Literal, Optional

AuthType = Literal["jwt", "api-key"]


@dataclass(frozen=True)
class Principal:
    id: uuid.UUID
    role: str
    auth_type: AuthType
    session_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
_principal: ContextVar[Optional[Principal]] = ContextVar("principal", default=None)


def is_uuid(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def resolve_request_id(incoming: Optional[str]) -> str:
    """Accept a client supplied request id only when it is a UUID."""
    if incoming and is_uuid(incoming):
        return incoming
    return str(uuid.uuid4())


def set_request_ids(request_id: str, correlation_id: Optional[str] = None) -> tuple[Token, Token]:
    return (
        _request_id.set(request_id),
        _correlation_id.set(correlation_id or request_id),
    )


def reset_request_ids(tokens: tuple[Token, Token]) -> None:
    _request_id.reset(tokens[0])
    _correlation_id.reset(tokens[1])


def get_request_id() -> Optional[str]:
    return _request_id.get()


def get_correlation_id() -> Optional[str]:
    return _correlation_id.get()


def set_principal(principal: Optional[Principal]) -> Token:
    return _principal.set(principal)


def reset_principal(token: Token) -> None:
    _principal.reset(token)


def get_principal() -> Optional[Principal]:
    return _principal.get()


def current_user_id() -> Optional[uuid.UUID]:
    principal = _principal.get()
    return principal.id if principal else None


class RequestContextFilter(logging.Filter):
    """Stamp ``request_id``, ``correlation_id`` and ``user_id`` on log records.

    Outside a request the fields are ``-`` so format strings always resolve.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        user_id = current_user_id()
        record.request_id = _request_id.get() or "-"
        record.correlation_id = _correlation_id.get() or "-"
        record.user_id = str(user_id) if user_id else "-"
        return True
