"""
Security utilities: password hashing, JWT issuance and the auth gateway.

The gateway resolves a bearer token to a CurrentUser (internal id, public id,
role) and gates routes by role. Tokens only ever carry the public id.
"""

import hashlib
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import ForbiddenException, UnauthenticatedException
from app.core.logging import bind_caller, get_logger
from app.db.session import get_db
from app.models.user import User, UserRole

logger = get_logger(__name__)
settings = get_settings()

bearer_scheme = HTTPBearer(auto_error=False)


def _pre_hash_password(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes; a SHA256 digest is always 32.
    return hashlib.sha256(password.encode("utf-8")).digest()


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_pre_hash_password(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(_pre_hash_password(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT. `data` should hold `sub` (public user id) and `role`."""
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "iat": now})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and verify a JWT; None when invalid or expired."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


@dataclass(frozen=True)
class CurrentUser:
    id: int
    public_id: str
    role: UserRole


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Resolve the bearer token to the calling user or fail with 401."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthenticatedException("Token not provided.")

    payload = decode_access_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise UnauthenticatedException("Invalid or expired token.")

    result = await db.execute(select(User).where(User.public_id == payload["sub"]))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        logger.warning("token_rejected", reason="inactive_or_unknown_user")
        raise UnauthenticatedException("Invalid or expired token.")

    role = UserRole(user.role)
    bind_caller(user.public_id, role.value)
    return CurrentUser(id=user.id, public_id=user.public_id, role=role)


def require_roles(*roles: UserRole) -> Callable:
    """Dependency factory: authenticated caller whose role is in `roles`."""
    allowed = frozenset(roles)

    async def dependency(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in allowed:
            logger.warning("role_forbidden", role=current_user.role.value)
            raise ForbiddenException(
                f"Forbidden: insufficient access rights for role '{current_user.role.value}'."
            )
        return current_user

    return dependency


customer_or_admin = require_roles(UserRole.CUSTOMER, UserRole.ADMIN)
customer_only = require_roles(UserRole.CUSTOMER)
