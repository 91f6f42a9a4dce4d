"""
Authentication Router

Endpoints:
- POST /auth/register - Create an agent or student account
- POST /auth/login - Exchange credentials for JWTs
- POST /auth/refresh - Exchange a refresh token for new JWTs
- GET /auth/me - The authenticated account

Admin accounts are created with scripts/seed_admin.py, never through the API.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.core.rate_limit import RateLimitExceeded, check_rate_limit
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from app.modules.auth.schemas import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from app.modules.users.models import User, UserRole
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMIT_LOGIN = (5, 300)  # 5 attempts per 5 minutes per email

# Unique index behind User.email
EMAIL_INDEX = "ix_users_email"


def _issue_tokens(user: User) -> tuple[str, str]:
    additional_claims = {
        "email": user.email,
        "role": user.role.value,
        "name": user.full_name,
    }
    access_token = create_access_token(subject=str(user.id), additional_claims=additional_claims)
    refresh_token = create_refresh_token(subject=str(user.id))
    return access_token, refresh_token


def _email_exists() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "error": "EMAIL_EXISTS",
            "message": "An account with this email already exists.",
        },
    )


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Email already registered"}},
)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """
    Create an agent or student account.

    Raises:
        HTTPException 409: Email already registered
    """
    if await UserRepository.email_exists(db, data.email):
        logger.warning(f"Registration attempt for existing email: {data.email}")
        raise _email_exists()

    try:
        user = await UserRepository.create(
            db,
            email=data.email,
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            role=UserRole(data.role),
            phone=data.phone,
        )
    except IntegrityError as e:
        await db.rollback()
        if EMAIL_INDEX not in str(e.orig):
            raise
        # A concurrent registration took the email after the check above
        logger.warning(f"Concurrent registration for email: {data.email}")
        raise _email_exists() from e

    logger.info(f"User registered: {user.email} (role: {user.role.value})")
    return UserResponse.model_validate(user)


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """
    Authenticate user and return JWT tokens.

    Raises:
        HTTPException 401: Invalid credentials
        HTTPException 403: Account inactive
        HTTPException 429: Too many attempts for this email
    """
    if not await check_rate_limit(f"login:{credentials.email.lower()}", *RATE_LIMIT_LOGIN):
        logger.warning(f"Login rate limit exceeded for {credentials.email}")
        raise RateLimitExceeded(*RATE_LIMIT_LOGIN)

    user = await UserRepository.get_by_email(db, credentials.email)

    if not user or not verify_password(credentials.password, user.password_hash):
        logger.warning(f"Failed login for email: {credentials.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "INVALID_CREDENTIALS",
                "message": "Invalid email or password.",
            },
        )

    if not user.is_active:
        logger.warning(f"Login attempt for inactive account: {credentials.email}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "ACCOUNT_INACTIVE",
                "message": "Your account has been deactivated.",
            },
        )

    access_token, refresh_token = _issue_tokens(user)
    logger.info(f"User logged in: {user.email} (role: {user.role.value})")

    return LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        user=UserResponse.model_validate(user),
    )


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    data: RefreshRequest,
    db: AsyncSession = Depends(get_db),
) -> TokenResponse:
    """Issue a new token pair from a valid refresh token."""
    payload = decode_token(data.refresh_token)
    user = None

    if payload is not None and payload.get("type") == "refresh":
        try:
            user = await UserRepository.get_by_id(db, UUID(payload["sub"]))
        except (KeyError, TypeError, ValueError):
            user = None

    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "INVALID_REFRESH_TOKEN",
                "message": "Invalid or expired refresh token.",
            },
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token, refresh_token = _issue_tokens(user)
    return TokenResponse(access_token=access_token, refresh_token=refresh_token)


@router.get("/me", response_model=UserResponse)
async def me(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Return the authenticated account."""
    user = await UserRepository.get_by_id(db, current_user.id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "USER_NOT_FOUND", "message": "Account not found."},
        )
    return UserResponse.model_validate(user)
