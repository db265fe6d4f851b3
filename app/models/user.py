"""ORM model for application users (credentials, role, active flag)."""

from sqlalchemy import Boolean, Column, String

from app.models.base import Base, TimestampMixin, new_id


class User(TimestampMixin, Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'admin' or 'user'. Accounts are never hard-deleted; is_active=False
    locks them out even while previously issued tokens are unexpired.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    mobile_no = Column(String(10), nullable=True)
    role = Column(String(32), nullable=False, default="user")
    is_active = Column(Boolean, nullable=False, default=True)
