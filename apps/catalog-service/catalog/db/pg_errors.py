"""
Helpers for classifying PostgreSQL errors raised through SQLAlchemy.

SQLAlchemy wraps driver exceptions in ``DBAPIError`` subclasses; the driver
exception (``exc.orig``) carries the SQLSTATE (``pgcode`` for psycopg2,
``sqlstate`` for psycopg 3) and, through ``diag``, the violated constraint
and table names.
"""
from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Iterator, Mapping, Optional

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from catalog.errors import AppError, ErrorEntry


class PgSqlState(str, Enum):
    UNIQUE_VIOLATION = "23505"
    FOREIGN_KEY_VIOLATION = "23503"
    CHECK_VIOLATION = "23514"
    NOT_NULL_VIOLATION = "23502"
    SERIALIZATION_FAILURE = "40001"
    DEADLOCK_DETECTED = "40P01"


def _orig(exc: BaseException) -> Optional[BaseException]:
    if isinstance(exc, DBAPIError):
        return exc.orig
    return None


def get_sqlstate(exc: BaseException) -> Optional[str]:
    orig = _orig(exc)
    if orig is None:
        return None
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    return str(code) if code else None


def _diag(exc: BaseException, attr: str) -> Optional[str]:
    orig = _orig(exc)
    diag = getattr(orig, "diag", None)
    value = getattr(diag, attr, None) if diag is not None else None
    return str(value) if value else None


def get_constraint(exc: BaseException) -> Optional[str]:
    return _diag(exc, "constraint_name")


def get_table(exc: BaseException) -> Optional[str]:
    return _diag(exc, "table_name")


def is_pg_error(exc: BaseException, state: PgSqlState) -> bool:
    return get_sqlstate(exc) == state.value


def _matches(
    exc: BaseException,
    state: PgSqlState,
    constraint: Optional[str] = None,
    table: Optional[str] = None,
) -> bool:
    if not is_pg_error(exc, state):
        return False
    if constraint is not None and get_constraint(exc) != constraint:
        return False
    if table is not None and get_table(exc) != table:
        return False
    return True


def is_unique_violation(exc: BaseException, constraint: Optional[str] = None, table: Optional[str] = None) -> bool:
    return _matches(exc, PgSqlState.UNIQUE_VIOLATION, constraint, table)


def is_foreign_key_violation(exc: BaseException, constraint: Optional[str] = None, table: Optional[str] = None) -> bool:
    return _matches(exc, PgSqlState.FOREIGN_KEY_VIOLATION, constraint, table)


def is_check_violation(exc: BaseException, constraint: Optional[str] = None, table: Optional[str] = None) -> bool:
    return _matches(exc, PgSqlState.CHECK_VIOLATION, constraint, table)


def is_not_null_violation(exc: BaseException, table: Optional[str] = None) -> bool:
    return _matches(exc, PgSqlState.NOT_NULL_VIOLATION, table=table)


def is_retryable(exc: BaseException) -> bool:
    """Serialization failures and deadlocks may succeed when retried."""
    return get_sqlstate(exc) in (
        PgSqlState.SERIALIZATION_FAILURE.value,
        PgSqlState.DEADLOCK_DETECTED.value,
    )


def translate_pg_error(exc: BaseException, mapping: Mapping[str, ErrorEntry]) -> None:
    """Raise the ``AppError`` mapped to the violated constraint, if any.

    ``mapping`` is keyed by constraint name. Returns without raising when the
    error is not a PostgreSQL constraint error or the constraint is unmapped;
    the caller is expected to re-raise the original exception.
    """
    if get_sqlstate(exc) is None:
        return
    constraint = get_constraint(exc)
    if constraint and constraint in mapping:
        raise AppError(mapping[constraint]) from exc


@contextmanager
def translating(db: Session, mapping: Mapping[str, ErrorEntry]) -> Iterator[None]:
    """Roll back and translate constraint violations raised inside the block."""
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        translate_pg_error(exc, mapping)
        raise
