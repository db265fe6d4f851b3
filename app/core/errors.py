"""Application error taxonomy. Each error carries the HTTP status used in the failure envelope."""

from typing import Any


class AppError(Exception):
    """Base error raised by services; rendered as {success: false, message, errors?}."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        errors: list[dict[str, Any]] | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message = message
        self.errors = errors
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationFailed(AppError):
    """Input rejected before any store mutation."""

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message, errors=errors)


class Unauthenticated(AppError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized access") -> None:
        super().__init__(message)


class Forbidden(AppError):
    status_code = 403

    def __init__(self, message: str = "Access forbidden") -> None:
        super().__init__(message)


class NotFound(AppError):
    status_code = 404

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message)


class Conflict(AppError):
    """Duplicate key: either caught by a pre-check or by the database unique constraint."""

    status_code = 409

    def __init__(self, message: str = "Resource conflict") -> None:
        super().__init__(message)


def invalid_id() -> ValidationFailed:
    """Error for identifiers that cannot name any stored row."""
    return ValidationFailed(errors=[{"field": "id", "message": "Invalid ID format"}])
