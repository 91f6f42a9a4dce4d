"""Authentication module - registration, login and token refresh."""

from app.modules.auth.schemas import LoginRequest, LoginResponse, RegisterRequest, TokenResponse

__all__ = ["LoginRequest", "LoginResponse", "RegisterRequest", "TokenResponse"]
