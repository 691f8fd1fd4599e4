"""Request/response schemas for auth endpoints."""

from pydantic import Field

from tasklist.core.security import PASSWORD_MAX_LEN, USERNAME_MAX_LEN
from tasklist.models.account import Role
from tasklist.models.base import CamelModel

# Blank or missing fields are rejected by the session flow as InvalidInputError (400),
# so request fields are optional at the schema level.


class RegisterRequest(CamelModel):
    """New account; role defaults to User."""

    username: str | None = Field(default=None, max_length=USERNAME_MAX_LEN, description="Username")
    password: str | None = Field(default=None, max_length=PASSWORD_MAX_LEN, description="Password")
    role: str | None = Field(default=None, description="User or Admin")


class LoginRequest(CamelModel):
    """Credentials for login."""

    username: str | None = Field(default=None, max_length=USERNAME_MAX_LEN)
    password: str | None = Field(default=None, max_length=PASSWORD_MAX_LEN)


class RefreshTokenRequest(CamelModel):
    """Username plus the refresh token last issued to it."""

    username: str | None = None
    refresh_token: str | None = None


class TokenValidationRequest(CamelModel):
    token: str | None = None


class TokenResponse(CamelModel):
    """Access token (JWT) and the rotated refresh token."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="Opaque refresh token; single use")


class RegisterResponse(TokenResponse):
    username: str


class TokenValidationResponse(CamelModel):
    message: str = "Token is valid"
    username: str


class CurrentUser(CamelModel):
    """Authenticated caller taken from verified token claims."""

    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value
