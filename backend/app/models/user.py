"""
User model with secure password storage and login lockout state.

Key design decisions:
- `public_id` is the only identifier that leaves the service (tokens, URLs)
- `failed_login_attempts` / `is_suspended` are owned by the auth service;
  the account is suspended exactly when the counter reaches the threshold
"""

import enum
import uuid

from sqlalchemy import Column, Integer, String, Boolean, Enum, CheckConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class UserRole(str, enum.Enum):
    CUSTOMER = "customer"
    PROVIDER = "provider"
    ADMIN = "admin"


class AccountStatus(str, enum.Enum):
    ACTIVE = "active"
    DEACTIVATED = "deactivated"


def new_public_id() -> str:
    return str(uuid.uuid4())


def enum_column(enum_cls: type[enum.Enum], length: int = 20) -> Enum:
    """Store enums by value as constrained VARCHAR, portable across engines."""
    return Enum(
        enum_cls,
        native_enum=False,
        length=length,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(String(36), unique=True, index=True, nullable=False, default=new_public_id)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(30), nullable=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(enum_column(UserRole), nullable=False, default=UserRole.CUSTOMER)
    status = Column(enum_column(AccountStatus), nullable=False, default=AccountStatus.ACTIVE)

    # Lockout state
    failed_login_attempts = Column(Integer, nullable=False, default=0)
    is_suspended = Column(Boolean, nullable=False, default=False)

    # Relationships
    bookings = relationship("Booking", back_populates="user")
    provider = relationship("Provider", back_populates="user", uselist=False)

    __table_args__ = (
        CheckConstraint("failed_login_attempts >= 0", name="check_failed_login_attempts_non_negative"),
    )

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE and not self.is_suspended

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
