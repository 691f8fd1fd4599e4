"""Pydantic request/response schemas."""

from tasklist.schemas.auth import (
    CurrentUser,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    TokenValidationRequest,
    TokenValidationResponse,
)
from tasklist.schemas.health import HealthResponse
from tasklist.schemas.todo import MessageResponse, TodoWrite

__all__ = [
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "RefreshTokenRequest",
    "RegisterRequest",
    "RegisterResponse",
    "TokenResponse",
    "TokenValidationRequest",
    "TokenValidationResponse",
    "TodoWrite",
]
