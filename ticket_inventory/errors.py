"""Error taxonomy for the hold-and-purchase protocol."""

from enum import Enum


class ErrorCode(str, Enum):
    """Stable, machine-readable error categories."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class InventoryError(Exception):
    """Base error with a category and a user-safe message.

    ``detail`` carries internal diagnostics and is only shown to callers
    when the application runs in debug mode.
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(InventoryError):
    """Malformed or missing input."""

    code = ErrorCode.VALIDATION_ERROR
    status_code = 400


class NotFoundError(InventoryError):
    """Event, ticket type or order does not exist."""

    code = ErrorCode.NOT_FOUND
    status_code = 404


class ConflictError(InventoryError):
    """Capacity exhausted, stale hold or concurrent modification. Retriable."""

    code = ErrorCode.CONFLICT
    status_code = 409


class InternalError(InventoryError):
    """Store unavailable or unexpected failure."""

    code = ErrorCode.INTERNAL_ERROR
    status_code = 500
