"""Password hashing and the token codec: issue and verify signed access/refresh tokens."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from app.core.config import get_settings
from app.schemas.auth import TokenClaims, TokenPair

if TYPE_CHECKING:
    from app.core.config import Settings

# Claims every issued token must carry.
REQUIRED_CLAIMS = ["exp", "iat", "iss", "aud", "sub"]


class TokenError(Exception):
    """Base class for token verification failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class TokenExpiredError(TokenError):
    """Signature valid but the exp claim is in the past."""


class TokenInvalidError(TokenError):
    """Bad signature, malformed token, wrong issuer/audience or missing claims."""


class TokenVerificationError(TokenError):
    """Any other verification failure."""


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    if rounds is None:
        rounds = get_settings().BCRYPT_ROUNDS
    # bcrypt has a 72-byte limit; truncate to avoid errors.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def _encode(
    claims: TokenClaims,
    secret: str,
    expires_delta: timedelta,
    settings: "Settings",
) -> str:
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": claims.id,
        "id": claims.id,
        "email": claims.email,
        "role": claims.role,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)


def _decode(token: str, secret: str, kind: str, settings: "Settings") -> TokenClaims:
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            issuer=settings.JWT_ISSUER,
            audience=settings.JWT_AUDIENCE,
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError(f"{kind} token expired") from e
    except jwt.InvalidTokenError as e:
        raise TokenInvalidError(f"Invalid {kind.lower()} token") from e
    except jwt.PyJWTError as e:
        raise TokenVerificationError(f"{kind} token verification failed") from e

    try:
        return TokenClaims(
            id=payload["id"],
            email=payload["email"],
            role=payload["role"],
        )
    except (KeyError, ValueError) as e:
        raise TokenInvalidError(f"Invalid {kind.lower()} token") from e


def create_access_token(
    claims: TokenClaims,
    settings: "Settings | None" = None,
    expires_delta: timedelta | None = None,
) -> str:
    settings = settings or get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_ACCESS_EXPIRE_MINUTES)
    return _encode(claims, settings.JWT_SECRET.get_secret_value(), expires_delta, settings)


def create_refresh_token(
    claims: TokenClaims,
    settings: "Settings | None" = None,
    expires_delta: timedelta | None = None,
) -> str:
    settings = settings or get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_REFRESH_EXPIRE_MINUTES)
    return _encode(
        claims, settings.JWT_REFRESH_SECRET.get_secret_value(), expires_delta, settings
    )


def issue_token_pair(claims: TokenClaims, settings: "Settings | None" = None) -> TokenPair:
    """Sign an access token and a refresh token carrying the same identity claims."""
    return TokenPair(
        access_token=create_access_token(claims, settings),
        refresh_token=create_refresh_token(claims, settings),
    )


def decode_access_token(token: str, settings: "Settings | None" = None) -> TokenClaims:
    """
    Verify signature, expiry, issuer and audience of an access token.
    Raises TokenExpiredError, TokenInvalidError or TokenVerificationError.
    """
    settings = settings or get_settings()
    return _decode(token, settings.JWT_SECRET.get_secret_value(), "Access", settings)


def decode_refresh_token(token: str, settings: "Settings | None" = None) -> TokenClaims:
    """Same contract as decode_access_token, checked against the refresh secret."""
    settings = settings or get_settings()
    return _decode(token, settings.JWT_REFRESH_SECRET.get_secret_value(), "Refresh", settings)


def extract_bearer_token(header_value: str | None) -> str | None:
    """Return the token from 'Bearer <token>', or None when absent or malformed."""
    if not header_value:
        return None
    parts = header_value.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]
