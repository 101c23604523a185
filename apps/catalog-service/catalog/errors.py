"""
Domain error registry.

Every failure the service reports is described by an ``ErrorEntry`` (HTTP
status, numeric error code and default message). ``AppError`` is the single
exception raised by services and routers; the API and RPC layers render it
into their respective envelopes.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Optional


class ErrorCode(IntEnum):
    GENERAL_ERROR = 1000
    UNKNOWN = 1001
    VALIDATION_ERROR = 1100
    INVALID_ENUM = 1101
    NOT_FOUND = 2000
    CAR_NOT_FOUND = 2001
    CAR_MODEL_NOT_FOUND = 2002
    CAR_MANUFACTURER_NOT_FOUND = 2003
    USER_NOT_FOUND = 2004
    UNAUTHORIZED = 3000
    FORBIDDEN = 3001
    INVALID_CREDENTIALS = 3002
    INVALID_REFRESH_TOKEN = 3003
    ONLY_ADMINS_CAN_UPDATE_ROLES = 3004
    USERS_CAN_ONLY_UPDATE_OWN_CARS = 3005
    ONLY_ADMINS_CAN_CREATE_API_KEYS_FOR_OTHERS = 3006
    CONFLICT = 4000
    USERNAME_ALREADY_EXISTS = 4001
    CAR_MODEL_ALREADY_EXISTS = 4002
    CAR_MANUFACTURER_ALREADY_EXISTS = 4003
    CAR_MANUFACTURER_IN_USE = 4004
    CAR_MODEL_IN_USE = 4005
    TOO_MANY_REQUESTS = 4290


@dataclass(frozen=True)
class ErrorEntry:
    key: str
    status: int
    code: ErrorCode
    message: str


class Errors:
    # General
    GENERAL_ERROR = ErrorEntry("GENERAL_ERROR", 400, ErrorCode.GENERAL_ERROR, "The request could not be processed")
    UNEXPECTED_ERROR = ErrorEntry("UNEXPECTED_ERROR", 500, ErrorCode.UNKNOWN, "An unexpected error occurred")
    VALIDATION_ERROR = ErrorEntry("VALIDATION_ERROR", 400, ErrorCode.VALIDATION_ERROR, "Validation failed")
    INVALID_ENUM = ErrorEntry("INVALID_ENUM", 400, ErrorCode.INVALID_ENUM, "Invalid enum value")
    NOT_FOUND = ErrorEntry("NOT_FOUND", 404, ErrorCode.NOT_FOUND, "Resource not found")
    CONFLICT = ErrorEntry("CONFLICT", 409, ErrorCode.CONFLICT, "Resource conflict")
    TOO_MANY_REQUESTS = ErrorEntry("TOO_MANY_REQUESTS", 429, ErrorCode.TOO_MANY_REQUESTS, "Too many requests, try again later")

    # Auth
    UNAUTHORIZED = ErrorEntry("UNAUTHORIZED", 401, ErrorCode.UNAUTHORIZED, "You need to be authorized to perform this action")
    FORBIDDEN = ErrorEntry("FORBIDDEN", 403, ErrorCode.FORBIDDEN, "You don't have permission to perform this action")
    INVALID_CREDENTIALS = ErrorEntry("INVALID_CREDENTIALS", 401, ErrorCode.INVALID_CREDENTIALS, "Invalid credentials")
    INVALID_REFRESH_TOKEN = ErrorEntry("INVALID_REFRESH_TOKEN", 401, ErrorCode.INVALID_REFRESH_TOKEN, "Missing or invalid refresh token")
    ONLY_ADMINS_CAN_CREATE_API_KEYS_FOR_OTHERS = ErrorEntry(
        "ONLY_ADMINS_CAN_CREATE_API_KEYS_FOR_OTHERS",
        403,
        ErrorCode.ONLY_ADMINS_CAN_CREATE_API_KEYS_FOR_OTHERS,
        "Only admins can create API keys for other users",
    )

    # Cars
    CAR_NOT_FOUND = ErrorEntry("CAR_NOT_FOUND", 404, ErrorCode.CAR_NOT_FOUND, "Car not found")
    USERS_CAN_ONLY_UPDATE_OWN_CARS = ErrorEntry(
        "USERS_CAN_ONLY_UPDATE_OWN_CARS", 403, ErrorCode.USERS_CAN_ONLY_UPDATE_OWN_CARS, "Users can only update their own cars"
    )

    # Car models
    CAR_MODEL_NOT_FOUND = ErrorEntry("CAR_MODEL_NOT_FOUND", 404, ErrorCode.CAR_MODEL_NOT_FOUND, "Car model not found")
    CAR_MODEL_ALREADY_EXISTS = ErrorEntry(
        "CAR_MODEL_ALREADY_EXISTS",
        409,
        ErrorCode.CAR_MODEL_ALREADY_EXISTS,
        "Car model already exists. Ensure the model name is new and unique",
    )
    CAR_MODEL_IN_USE = ErrorEntry(
        "CAR_MODEL_IN_USE", 409, ErrorCode.CAR_MODEL_IN_USE, "Car model is still referenced by cars"
    )

    # Car manufacturers
    CAR_MANUFACTURER_NOT_FOUND = ErrorEntry(
        "CAR_MANUFACTURER_NOT_FOUND", 404, ErrorCode.CAR_MANUFACTURER_NOT_FOUND, "Car manufacturer not found"
    )
    CAR_MANUFACTURER_ALREADY_EXISTS = ErrorEntry(
        "CAR_MANUFACTURER_ALREADY_EXISTS", 409, ErrorCode.CAR_MANUFACTURER_ALREADY_EXISTS, "Car manufacturer already exists"
    )
    CAR_MANUFACTURER_IN_USE = ErrorEntry(
        "CAR_MANUFACTURER_IN_USE", 409, ErrorCode.CAR_MANUFACTURER_IN_USE, "Car manufacturer is still referenced by car models"
    )

    # Users
    USER_NOT_FOUND = ErrorEntry("USER_NOT_FOUND", 404, ErrorCode.USER_NOT_FOUND, "User not found")
    USERNAME_ALREADY_EXISTS = ErrorEntry("USERNAME_ALREADY_EXISTS", 409, ErrorCode.USERNAME_ALREADY_EXISTS, "Username already exists")
    ONLY_ADMINS_CAN_UPDATE_ROLES = ErrorEntry(
        "ONLY_ADMINS_CAN_UPDATE_ROLES", 403, ErrorCode.ONLY_ADMINS_CAN_UPDATE_ROLES, "Only admins can update roles"
    )


_STATUS_FALLBACKS: Dict[int, ErrorEntry] = {
    400: Errors.GENERAL_ERROR,
    401: Errors.UNAUTHORIZED,
    403: Errors.FORBIDDEN,
    404: Errors.NOT_FOUND,
    409: Errors.CONFLICT,
    422: Errors.VALIDATION_ERROR,
    429: Errors.TOO_MANY_REQUESTS,
    500: Errors.UNEXPECTED_ERROR,
}


def entry_for_status(status: int) -> ErrorEntry:
    """Return the generic registry entry used for a bare HTTP status."""
    if status in _STATUS_FALLBACKS:
        return _STATUS_FALLBACKS[status]
    return Errors.UNEXPECTED_ERROR if status >= 500 else Errors.GENERAL_ERROR


class AppError(Exception):
    """Domain exception carrying a registry entry and an instance id."""

    def __init__(
        self,
        entry: ErrorEntry,
        message: Optional[str] = None,
        issues: Optional[List[Dict[str, Any]]] = None,
        status: Optional[int] = None,
    ):
        self.entry = entry
        self.message = message or entry.message
        self.issues = issues
        self.status = status or entry.status
        self.id = str(uuid.uuid4())
        super().__init__(self.message)

    @property
    def code(self) -> ErrorCode:
        return self.entry.code

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "statusCode": self.status,
            "errorCode": int(self.entry.code),
            "message": self.message,
        }
        if self.issues is not None:
            body["errors"] = self.issues
        body["id"] = self.id
        return body

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"AppError({self.entry.key}, status={self.status}, message={self.message!r})"
