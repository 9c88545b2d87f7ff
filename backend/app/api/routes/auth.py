"""
Authentication endpoints: register, login and password reset.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.common import ApiResponse
from app.schemas.user import (
    ForgotPasswordRequest,
    ResetPasswordRequest,
    Token,
    UserCreate,
    UserLogin,
    UserResponse,
)
from app.services.auth_service import (
    authenticate_user,
    register_user,
    request_password_reset,
    reset_password,
)
from app.services.mailer import Mailer, get_mailer

router = APIRouter(prefix="/auth", tags=["Authentication"])

FORGOT_PASSWORD_MESSAGE = "If the email is registered, a reset code has been sent."


@router.post("/register", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Register a new customer account."""
    user = await register_user(db, user_data)
    return ApiResponse(message="Registration successful.", data=UserResponse.model_validate(user))


@router.post("/login", response_model=ApiResponse[Token])
async def login(login_data: UserLogin, db: AsyncSession = Depends(get_db)):
    """Authenticate and receive a JWT access token."""
    token = await authenticate_user(db, login_data)
    return ApiResponse(message="Login successful.", data=token)


@router.post("/forgot-password", response_model=ApiResponse[None])
async def forgot_password(
    payload: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    """Always succeeds, whether or not the email is registered."""
    await request_password_reset(db, payload.email, mailer)
    return ApiResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=ApiResponse[None])
async def reset_password_endpoint(payload: ResetPasswordRequest, db: AsyncSession = Depends(get_db)):
    await reset_password(db, payload.email, payload.otp, payload.new_password)
    return ApiResponse(message="Password has been reset. You can now log in.")
