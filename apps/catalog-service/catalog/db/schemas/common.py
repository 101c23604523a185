"""
Shared pydantic building blocks: camelCase models, envelopes, pagination
and the conversion of pydantic errors into validation issues.
"""
from __future__ import annotations

import re
import uuid
from enum import Enum
from typing import Annotated, Any, Dict, Generic, Iterable, List, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from catalog.utils.slugs import slugify

T = TypeVar("T")

SKIP_DEFAULT = 0
LIMIT_DEFAULT = 20
LIMIT_MAX = 100


def _sluggable_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Name must not be blank")
    if not slugify(value):
        raise ValueError("Name must contain at least one Latin letter or digit")
    return value


# Manufacturer and model names: trimmed, and always yielding a non-empty slug
SluggableName = Annotated[str, Field(min_length=1, max_length=255), AfterValidator(_sluggable_name)]


class CamelModel(BaseModel):
    """Response model serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True, protected_namespaces=()
    )


class StrictInput(BaseModel):
    """Request body: camelCase keys, unknown keys rejected."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid", protected_namespaces=()
    )


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class PaginationInput(StrictInput):
    skip: int = Field(SKIP_DEFAULT, ge=0, description="Number of items to skip")
    limit: int = Field(LIMIT_DEFAULT, ge=1, le=LIMIT_MAX, description="Maximum number of items to return")


class PaginationMeta(BaseModel):
    total: int
    limit: int
    skipped: int
    count: int


class Page(BaseModel, Generic[T]):
    items: List[T]
    meta: PaginationMeta

    @classmethod
    def build(cls, items: List[Any], *, total: int, limit: int, skipped: int) -> "Page":
        return cls(
            items=items,
            meta=PaginationMeta(total=total, limit=limit, skipped=skipped, count=len(items)),
        )


class SuccessResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T
    message: Optional[str] = None


class ValidationIssue(BaseModel):
    code: str
    path: List[Any]
    message: str
    received: Any = None
    options: Optional[List[str]] = None


class ErrorBody(BaseModel):
    statusCode: int
    errorCode: int
    message: str
    errors: Optional[List[ValidationIssue]] = None
    id: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorBody


class SuccessFlag(BaseModel):
    success: bool = True


_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}
_QUOTED = re.compile(r"'([^']*)'")
_ENUM_ERROR_TYPES = {"enum", "literal_error"}
_MISSING = {"missing", "missing_argument"}


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    return str(value)


def validation_issues(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Convert pydantic error dicts into ``{code, path, message, received, options}`` issues."""
    issues: List[Dict[str, Any]] = []
    for err in errors:
        loc = list(err.get("loc") or ())
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        code = str(err.get("type", "invalid"))
        issue: Dict[str, Any] = {
            "code": code,
            "path": loc,
            "message": str(err.get("msg", "Invalid value")),
            "received": None if code in _MISSING else _jsonable(err.get("input")),
        }
        if code in _ENUM_ERROR_TYPES:
            expected = str((err.get("ctx") or {}).get("expected", ""))
            issue["options"] = _QUOTED.findall(expected)
        issues.append(issue)
    return issues


class IdInput(StrictInput):
    id: uuid.UUID


class SlugInput(StrictInput):
    slug: str = Field(..., min_length=1, max_length=255)


class UpdateInput(StrictInput, Generic[T]):
    """RPC update payload: the target id plus the partial changes."""

    id: uuid.UUID
    data: T
