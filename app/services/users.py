"""Credential store: registration, login, identity lookups and profile changes."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import Conflict, NotFound, Unauthenticated
from app.core.security import hash_password, verify_password
from app.models import User
from app.schemas.auth import RegisterRequest, Role, TokenClaims, UpdateProfileRequest

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "User with this email already exists"
INVALID_CREDENTIALS = "Invalid email or password"


def claims_for(user: User) -> TokenClaims:
    """Token claims built from the stored user (current email and role)."""
    return TokenClaims(id=user.id, email=user.email, role=user.role)


def _email_taken(db: Session, email: str) -> bool:
    return db.query(db.query(User).filter(User.email == email).exists()).scalar()


def register_user(db: Session, body: RegisterRequest, role: Role = "user") -> User:
    """
    Create an active user with a hashed password.
    The pre-check gives a clean message; the unique index on email decides races.
    """
    if _email_taken(db, body.email):
        raise Conflict(EMAIL_TAKEN)

    user = User(
        name=body.name,
        email=body.email,
        password_hash=hash_password(body.password),
        mobile_no=body.mobile_no,
        role=role,
        is_active=True,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise Conflict(EMAIL_TAKEN) from e
    db.refresh(user)
    logger.info("Registered user id=%s role=%s", user.id, user.role)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """Return the active user for these credentials; unknown email and bad password look the same."""
    user = db.query(User).filter(User.email == email, User.is_active.is_(True)).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt for email=%s", email)
        raise Unauthenticated(INVALID_CREDENTIALS)
    return user


def get_active_user(db: Session, user_id: str) -> User | None:
    """Lookup used by the auth gate: a user that exists and is still active."""
    return db.query(User).filter(User.id == user_id, User.is_active.is_(True)).first()


def get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def update_profile(db: Session, user_id: str, body: UpdateProfileRequest) -> User:
    """Apply name (when non-empty) and mobile number; email and role are not editable here."""
    user = get_user(db, user_id)
    if body.name:
        user.name = body.name
    if "mobile_no" in body.model_fields_set:
        user.mobile_no = body.mobile_no
    db.commit()
    db.refresh(user)
    return user


def deactivate_user(db: Session, user_id: str) -> User:
    """Soft-deactivate. Existing tokens stop working at the next gate check."""
    user = get_user(db, user_id)
    user.is_active = False
    db.commit()
    db.refresh(user)
    logger.info("Deactivated user id=%s", user.id)
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at, User.id).all()
