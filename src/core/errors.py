"""
Custom exceptions and error handling for Tripkeeper.

Defines application-specific exceptions with error codes for consistent
error handling across services, Lambda handlers and client communication.

Usage:
    from core.errors import NotFoundError, ErrorCode

    raise NotFoundError("trip:u1:t1 is not in trash", code=ErrorCode.NOT_FOUND)
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for client-facing error messages."""

    # Authentication errors
    AUTH_FAILED = "AUTH_FAILED"

    # Resource errors
    NOT_FOUND = "NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"

    # Storage errors
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    PARSE_ERROR = "PARSE_ERROR"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.AUTH_FAILED: "Authentication failed. Please sign in again.",
    ErrorCode.NOT_FOUND: "The requested item could not be found.",
    ErrorCode.INVALID_INPUT: "Your request contains invalid information. Please check and try again.",
    ErrorCode.STORAGE_UNAVAILABLE: "Storage is temporarily unavailable. Please try again later.",
    ErrorCode.PARSE_ERROR: "A stored record could not be read. Please contact support.",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred. Please try again.",
}

HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.AUTH_FAILED: 401,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.STORAGE_UNAVAILABLE: 503,
    ErrorCode.PARSE_ERROR: 500,
    ErrorCode.INTERNAL_ERROR: 500,
}


class TripkeeperError(Exception):
    """Base exception for all Tripkeeper errors."""

    default_code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, code: ErrorCode | None = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return USER_MESSAGES.get(self.code, USER_MESSAGES[ErrorCode.INTERNAL_ERROR])

    @property
    def status_code(self) -> int:
        return HTTP_STATUS.get(self.code, 500)


class AuthenticationError(TripkeeperError):
    """Caller identity is missing or could not be verified."""

    default_code = ErrorCode.AUTH_FAILED


class NotFoundError(TripkeeperError):
    """Entity or tombstone absent, or restore attempted on an active record."""

    default_code = ErrorCode.NOT_FOUND


class InvalidInputError(TripkeeperError):
    """Required fields missing or invalid."""

    default_code = ErrorCode.INVALID_INPUT


class StorageUnavailableError(TripkeeperError):
    """Store binding absent or a store call was rejected."""

    default_code = ErrorCode.STORAGE_UNAVAILABLE


class ParseError(TripkeeperError):
    """Stored value is not valid structured data."""

    default_code = ErrorCode.PARSE_ERROR
