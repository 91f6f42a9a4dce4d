"""
Authentication and Authorization Module

FastAPI dependencies that validate bearer tokens and enforce portal roles
(admin, agent, student). Token encoding lives in security.py.

SECURITY NOTE:
- Development test tokens are ONLY accepted when PYTHON_ENV=development
- Production environments MUST set PYTHON_ENV=production
"""

import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.core.security import decode_token
from app.modules.users.models import UserRole

logger = logging.getLogger(__name__)

security = HTTPBearer(
    auto_error=True,
    description="JWT Bearer token for authentication",
)


@dataclass
class CurrentUser:
    """
    The authenticated caller, populated from JWT claims.

    Attributes:
        id: User's unique identifier
        email: User's email address
        role: Portal role
        name: Display name (optional)
    """

    id: UUID
    email: str
    role: UserRole
    name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __str__(self) -> str:
        return f"CurrentUser(id={self.id}, role={self.role.value})"


def _is_dev_mode_safe() -> bool:
    """
    Check whether development test tokens may be accepted.

    Requires settings.is_development and a PYTHON_ENV that is neither
    production nor staging.
    """
    env_var = os.getenv("PYTHON_ENV", "").lower()
    is_safe = (
        settings.is_development
        and not settings.is_production
        and env_var not in ("production", "staging")
    )

    if is_safe:
        logger.warning("SECURITY: Development auth mode is ENABLED. Never use this in production!")

    return is_safe


_DEVELOPMENT_MODE = _is_dev_mode_safe()

# "dev-<role>" tokens authenticate as a fixed user of that role in development
_DEV_USERS = {
    f"dev-{role.value}": CurrentUser(
        id=UUID(f"00000000-0000-0000-0000-00000000000{index}"),
        email=f"{role.value}@sovportal.dev",
        role=role,
        name=f"Development {role.value.title()}",
    )
    for index, role in enumerate(UserRole, start=1)
}


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _validate_jwt_token(token: str) -> CurrentUser:
    """
    Validate a JWT and build the CurrentUser from its claims.

    Raises:
        HTTPException 401: If the token is invalid, expired, or not an access token
    """
    if _DEVELOPMENT_MODE and token in _DEV_USERS:
        logger.debug(f"Development mode: using test token {token}")
        return _DEV_USERS[token]

    payload = decode_token(token)

    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    if payload.get("type", "access") != "access":
        logger.warning(f"Invalid token type: {payload.get('type')}")
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    try:
        user_id_str = payload.get("sub")
        if not user_id_str:
            raise ValueError("Missing 'sub' claim in token")

        return CurrentUser(
            id=UUID(user_id_str),
            email=payload.get("email", ""),
            role=UserRole(payload.get("role", "")),
            name=payload.get("name"),
        )
    except ValueError as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CurrentUser:
    """FastAPI dependency returning the authenticated user of any role."""
    user = await _validate_jwt_token(credentials.credentials)
    logger.debug(f"Authenticated {user}")
    return user


def require_roles(*roles: UserRole) -> Callable[..., Awaitable[CurrentUser]]:
    """
    Build a dependency that only admits the given roles.

    Usage:
        @router.post("/tickets")
        async def create_ticket(
            user: CurrentUser = Depends(require_roles(UserRole.STUDENT)),
        ):
            ...
    """
    allowed = set(roles)

    async def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed:
            logger.warning(
                f"Access denied: user {user.id} has role '{user.role.value}', "
                f"required one of {sorted(r.value for r in allowed)}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": "ROLE_NOT_ALLOWED",
                    "message": "Your role is not allowed to use this endpoint.",
                },
            )
        return user

    return dependency


get_current_admin_user = require_roles(UserRole.ADMIN)


__all__ = [
    "CurrentUser",
    "get_current_user",
    "get_current_admin_user",
    "require_roles",
]
