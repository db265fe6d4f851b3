"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthPayload,
    CurrentUser,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenClaims,
    TokenPair,
    UpdateProfileRequest,
    UserSummary,
)
from app.schemas.common import Envelope, PaginationMeta
from app.schemas.entry import (
    EntryCreate,
    EntryQuery,
    EntryRead,
    EntryUpdate,
    SortField,
    SortOrder,
)
from app.schemas.health import ApiIndex, HealthResponse

__all__ = [
    "ApiIndex",
    "AuthPayload",
    "CurrentUser",
    "EntryCreate",
    "EntryQuery",
    "EntryRead",
    "EntryUpdate",
    "Envelope",
    "HealthResponse",
    "LoginRequest",
    "PaginationMeta",
    "RefreshTokenRequest",
    "RegisterRequest",
    "SortField",
    "SortOrder",
    "TokenClaims",
    "TokenPair",
    "UpdateProfileRequest",
    "UserSummary",
]
