"""
User model for authentication.

Admins manage candidates and invitations; candidates sign up (optionally
through an invitation link) and take their interview.
"""

import enum
from sqlalchemy import Column, Integer, String, DateTime, Enum, func
from app.core.database import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    CANDIDATE = "candidate"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Authentication credentials
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)
    role = Column(
        Enum(UserRole, values_callable=lambda e: [m.value for m in e]),
        default=UserRole.CANDIDATE,
        nullable=False
    )

    # Password reset (persisted so restarts don't invalidate outstanding links)
    reset_token = Column(String, unique=True, nullable=True, index=True)
    reset_token_expires_at = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role.value})>"
