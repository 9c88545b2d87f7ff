"""
Authentication service handling registration, login lockout and password reset.

Lockout rule: every failed password check increments the account's
`failed_login_attempts`; the account is suspended exactly when the counter
reaches LOGIN_MAX_FAILED_ATTEMPTS. Any successful login resets it to zero.
"""

import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import (
    ConflictException,
    ForbiddenException,
    UnauthenticatedException,
    ValidationException,
)
from app.core.logging import get_logger
from app.core.metrics import account_suspensions, record_login
from app.core.security import hash_password, verify_password, create_access_token
from app.models.password_reset import PasswordReset
from app.models.user import AccountStatus, User, UserRole
from app.schemas.user import UserCreate, UserLogin, Token
from app.services.mailer import Mailer

logger = get_logger(__name__)
settings = get_settings()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def register_user(db: AsyncSession, user_data: UserCreate) -> User:
    """
    Register a new customer account with a hashed password.
    Raises 409 if the email already exists.
    """
    email = user_data.email.lower()
    if await get_user_by_email(db, email):
        logger.warning("registration_failed", reason="email_exists")
        raise ConflictException("Email already registered.")

    user = User(
        name=user_data.name,
        email=email,
        phone=user_data.phone,
        hashed_password=hash_password(user_data.password),
        role=UserRole.CUSTOMER,
    )
    db.add(user)
    await db.flush()

    logger.info("user_registered", user_id=user.id)
    return user


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> Token:
    """
    Authenticate and return a JWT access token.
    Raises 401 on bad credentials, 403 if the account is suspended or deactivated.
    """
    user = await get_user_by_email(db, login_data.email)

    if user is None:
        record_login("invalid_credentials")
        logger.warning("login_failed", reason="unknown_email")
        raise UnauthenticatedException("Invalid email or password.")

    if user.is_suspended:
        record_login("suspended")
        logger.warning("login_refused", user_id=user.id, reason="suspended")
        raise ForbiddenException(
            "Account suspended after too many failed login attempts. Reset your password to unlock it."
        )

    if not verify_password(login_data.password, user.hashed_password):
        await _register_failed_attempt(db, user)
        record_login("invalid_credentials")
        raise UnauthenticatedException("Invalid email or password.")

    if user.status != AccountStatus.ACTIVE:
        record_login("deactivated")
        raise ForbiddenException("Account is deactivated.")

    if user.failed_login_attempts:
        user.failed_login_attempts = 0
        await db.flush()

    role = UserRole(user.role)
    token = create_access_token(data={"sub": user.public_id, "role": role.value})
    record_login("success")
    logger.info("user_logged_in", user_id=user.id)
    return Token(access_token=token, user_uuid=user.public_id, role=role.value)


async def _register_failed_attempt(db: AsyncSession, user: User) -> None:
    user.failed_login_attempts = (user.failed_login_attempts or 0) + 1
    if user.failed_login_attempts >= settings.LOGIN_MAX_FAILED_ATTEMPTS:
        user.is_suspended = True
        account_suspensions.inc()
        logger.warning("account_suspended", user_id=user.id, attempts=user.failed_login_attempts)
    else:
        logger.warning("login_failed", user_id=user.id, attempts=user.failed_login_attempts)
    # Persist now: the request ends in an error, which rolls back the session
    await db.commit()


def _generate_otp() -> str:
    return f"{secrets.randbelow(1_000_000):06d}"


async def request_password_reset(db: AsyncSession, email: str, mailer: Mailer) -> None:
    """
    Issue a one-time code if the account exists.
    Callers always report success so the endpoint cannot be used to discover registered emails.
    """
    user = await get_user_by_email(db, email)
    if user is None:
        logger.info("password_reset_requested", known=False)
        return

    await db.execute(delete(PasswordReset).where(PasswordReset.user_id == user.id))

    otp = _generate_otp()
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.PASSWORD_RESET_OTP_TTL_MINUTES)
    db.add(PasswordReset(user_id=user.id, otp_code=otp, expires_at=expires_at))
    await db.flush()

    await mailer.send_password_reset(user.email, user.name, otp, expires_at)
    logger.info("password_reset_requested", known=True, user_id=user.id)


async def reset_password(db: AsyncSession, email: str, otp: str, new_password: str) -> None:
    """Consume a valid code, set the new password and lift any suspension."""
    invalid = ValidationException("Invalid or expired reset code.")

    user = await get_user_by_email(db, email)
    if user is None:
        raise invalid

    result = await db.execute(
        select(PasswordReset)
        .where(
            PasswordReset.user_id == user.id,
            PasswordReset.otp_code == otp,
            PasswordReset.expires_at > datetime.now(timezone.utc),
        )
        .limit(1)
    )
    if result.scalar_one_or_none() is None:
        logger.warning("password_reset_failed", user_id=user.id)
        raise invalid

    user.hashed_password = hash_password(new_password)
    user.failed_login_attempts = 0
    user.is_suspended = False
    await db.execute(delete(PasswordReset).where(PasswordReset.user_id == user.id))
    await db.flush()

    logger.info("password_reset_completed", user_id=user.id)
