"""Auth endpoints and the auth gate dependencies (get_current_user, get_optional_user, require_roles)."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import Forbidden, Unauthenticated, ValidationFailed
from app.core.security import (
    TokenExpiredError,
    TokenInvalidError,
    TokenVerificationError,
    decode_access_token,
    decode_refresh_token,
    extract_bearer_token,
    issue_token_pair,
)
from app.schemas.auth import (
    AuthPayload,
    CurrentUser,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPair,
    UpdateProfileRequest,
    UserSummary,
)
from app.schemas.common import Envelope
from app.services import users as user_service

logger = logging.getLogger(__name__)

router = APIRouter()

AuthorizationHeader = Annotated[str | None, Header(alias="Authorization")]


def authenticate_request(authorization: str | None, db: Session) -> CurrentUser:
    """
    Resolve the bearer token to an active identity or raise Unauthenticated.

    The user is re-read on every request so a deactivated account is locked
    out even though its tokens still verify.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise Unauthenticated("Access token required")
    try:
        claims = decode_access_token(token)
    except TokenExpiredError:
        raise Unauthenticated("Access token expired") from None
    except TokenInvalidError:
        raise Unauthenticated("Invalid access token") from None
    except TokenVerificationError:
        raise Unauthenticated("Authentication failed") from None

    if user_service.get_active_user(db, claims.id) is None:
        raise Unauthenticated("User not found or inactive")
    return CurrentUser(id=claims.id, email=claims.email, role=claims.role)


def get_current_user(
    db: Annotated[Session, Depends(get_db)],
    authorization: AuthorizationHeader = None,
) -> CurrentUser:
    """Dependency: require a valid Bearer token for an active user. Raises 401 otherwise."""
    return authenticate_request(authorization, db)


def get_optional_user(
    db: Annotated[Session, Depends(get_db)],
    authorization: AuthorizationHeader = None,
) -> CurrentUser | None:
    """Dependency: same checks as get_current_user, but any failure yields None instead of 401."""
    try:
        return authenticate_request(authorization, db)
    except Unauthenticated:
        return None
    except SQLAlchemyError:
        logger.warning("Optional auth skipped: user lookup failed", exc_info=True)
        return None


def require_roles(*roles: str) -> Callable[..., CurrentUser]:
    """Dependency factory: authenticated user whose role is in `roles`, else 403."""
    allowed = frozenset(roles)

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if current_user.role not in allowed:
            raise Forbidden("Insufficient permissions")
        return current_user

    return dependency


require_admin = require_roles("admin")


def _auth_payload(user) -> AuthPayload:
    tokens = issue_token_pair(user_service.claims_for(user))
    return AuthPayload(
        user=UserSummary.model_validate(user),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


@router.post(
    "/register",
    response_model=Envelope[AuthPayload],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> Envelope[AuthPayload]:
    """Create an account and return the user summary with an access/refresh token pair."""
    user = user_service.register_user(db, body)
    return Envelope(message="User registered successfully", data=_auth_payload(user))


@router.post("/login", response_model=Envelope[AuthPayload], response_model_exclude_none=True)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> Envelope[AuthPayload]:
    """
    Authenticate with email and password; returns a token pair.
    Include the access token in the Authorization header as: Bearer <accessToken>
    """
    user = user_service.authenticate_user(db, body.email, body.password)
    return Envelope(message="Login successful", data=_auth_payload(user))


@router.post("/refresh-token", response_model=Envelope[TokenPair], response_model_exclude_none=True)
def refresh_token(
    body: RefreshTokenRequest,
    db: Annotated[Session, Depends(get_db)],
) -> Envelope[TokenPair]:
    """Exchange a valid refresh token for a new pair, re-reading the user's email and role."""
    if not body.refresh_token:
        raise ValidationFailed(
            errors=[{"field": "refreshToken", "message": "Refresh token is required"}]
        )
    try:
        claims = decode_refresh_token(body.refresh_token)
    except TokenExpiredError as e:
        logger.info("Refresh rejected: %s", e.message)
        raise Unauthenticated("Refresh token expired") from None
    except TokenInvalidError as e:
        logger.info("Refresh rejected: %s", e.message)
        raise Unauthenticated("Invalid refresh token") from None
    except TokenVerificationError as e:
        logger.warning("Refresh rejected: %s", e.message)
        raise Unauthenticated("Token refresh failed") from None

    user = user_service.get_active_user(db, claims.id)
    if user is None:
        raise Unauthenticated("User not found or inactive")
    tokens = issue_token_pair(user_service.claims_for(user))
    return Envelope(message="Tokens refreshed successfully", data=tokens)


@router.get("/profile", response_model=Envelope[UserSummary], response_model_exclude_none=True)
def get_profile(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Envelope[UserSummary]:
    user = user_service.get_user(db, current_user.id)
    return Envelope(message="Profile retrieved successfully", data=UserSummary.model_validate(user))


@router.put("/profile", response_model=Envelope[UserSummary], response_model_exclude_none=True)
def update_profile(
    body: UpdateProfileRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Envelope[UserSummary]:
    """Update display name and/or mobile number."""
    user = user_service.update_profile(db, current_user.id, body)
    return Envelope(message="Profile updated successfully", data=UserSummary.model_validate(user))


@router.post("/logout", response_model=Envelope[dict], response_model_exclude_none=True)
def logout(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> Envelope[dict]:
    """Tokens are stateless; the client discards them. Nothing is revoked server-side."""
    return Envelope(message="Logged out successfully")


@router.get("/users", response_model=Envelope[list[UserSummary]], response_model_exclude_none=True)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> Envelope[list[UserSummary]]:
    """List all users (admin only)."""
    users = user_service.list_users(db)
    return Envelope(
        message="Users retrieved successfully",
        data=[UserSummary.model_validate(u) for u in users],
    )


@router.post(
    "/users/{user_id}/deactivate",
    response_model=Envelope[UserSummary],
    response_model_exclude_none=True,
)
def deactivate_user(
    user_id: str,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> Envelope[UserSummary]:
    """Soft-deactivate an account (admin only). Its tokens are refused from the next request on."""
    user = user_service.deactivate_user(db, user_id)
    return Envelope(message="User deactivated successfully", data=UserSummary.model_validate(user))
