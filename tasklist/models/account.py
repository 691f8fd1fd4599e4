"""Account entity for authentication and role-based access control."""

from enum import Enum

from pydantic import Field

from tasklist.models.base import CamelModel


class Role(str, Enum):
    """Account role carried in access tokens."""

    USER = "User"
    ADMIN = "Admin"


class Account(CamelModel):
    """
    Registered account, keyed by case-sensitive username.

    password_hash is the encoded salt:digest pair from core.security.
    refresh_token holds the single live refresh credential; issuing a new one replaces it.
    """

    username: str = Field(..., min_length=1)
    password_hash: str
    role: Role = Role.USER
    refresh_token: str | None = None
