"""Register, login, refresh-token and validate-token routes plus the auth dependencies."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tasklist.core.dependencies import get_session_service, get_token_service
from tasklist.core.errors import ForbiddenError
from tasklist.core.security import TokenService
from tasklist.models.account import Role
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
from tasklist.services.session import SessionService

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> CurrentUser:
    """Dependency: require a valid Bearer JWT and return the caller from its claims. Raises 401 otherwise."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    claims = tokens.verify(credentials.credentials)
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return CurrentUser(username=claims.username, role=claims.role)


def require_member(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require role User or Admin. Raises 403 for any other role claim."""
    if current_user.role not in (Role.USER.value, Role.ADMIN.value):
        raise ForbiddenError("User or Admin role required")
    return current_user


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'Admin'. Raises 403 for non-admin."""
    if not current_user.is_admin:
        raise ForbiddenError("Admin access required")
    return current_user


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    sessions: Annotated[SessionService, Depends(get_session_service)],
) -> RegisterResponse:
    """
    Create an account (role defaults to User) and return its first access and refresh tokens.
    409 if the username is taken.
    """
    result = sessions.register(body.username, body.password, body.role)
    return RegisterResponse(
        username=result.username,
        access_token=result.access_token,
        refresh_token=result.refresh_token,
    )


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    sessions: Annotated[SessionService, Depends(get_session_service)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns a JWT access token and a new refresh token.
    Any refresh token issued earlier for the account stops working.
    Include the access token in the Authorization header as: Bearer <accessToken>
    """
    result = sessions.login(body.username, body.password)
    return TokenResponse(access_token=result.access_token, refresh_token=result.refresh_token)


@router.post("/refresh-token", response_model=TokenResponse)
def refresh_token(
    body: RefreshTokenRequest,
    sessions: Annotated[SessionService, Depends(get_session_service)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> TokenResponse:
    """Exchange the current refresh token for a new access/refresh pair (requires a valid access token)."""
    result = sessions.refresh(body.username, body.refresh_token)
    return TokenResponse(access_token=result.access_token, refresh_token=result.refresh_token)


@router.post("/validate-token", response_model=TokenValidationResponse)
def validate_token(
    body: TokenValidationRequest,
    sessions: Annotated[SessionService, Depends(get_session_service)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> TokenValidationResponse:
    """Check a token on behalf of another backend; returns the username it was issued to."""
    username = sessions.validate_token(body.token)
    return TokenValidationResponse(message="Token is valid", username=username)
