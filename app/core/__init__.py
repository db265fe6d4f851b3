"""Core app plumbing: configuration, database session and the error taxonomy."""

from app.core.config import get_settings, settings
from app.core.database import get_db
from app.core.errors import AppError, Conflict, Forbidden, NotFound, Unauthenticated, ValidationFailed

__all__ = [
    "get_settings",
    "settings",
    "get_db",
    "AppError",
    "Conflict",
    "Forbidden",
    "NotFound",
    "Unauthenticated",
    "ValidationFailed",
]
