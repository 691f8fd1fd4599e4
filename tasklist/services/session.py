"""Session flow: register, login, refresh-token rotation and out-of-band token validation."""

import logging
from dataclasses import dataclass

from tasklist.core.errors import InvalidCredentialsError, InvalidInputError
from tasklist.core.security import TokenService, new_refresh_token, verify_password
from tasklist.models.account import Account, Role
from tasklist.services.account_store import AccountStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionTokens:
    username: str
    access_token: str
    refresh_token: str


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def parse_role(value: str | None) -> Role:
    """Role from a request; blank means User. Matching is case-insensitive."""
    if _blank(value):
        return Role.USER
    for role in Role:
        if role.value.lower() == value.strip().lower():
            return role
    raise InvalidInputError("Invalid registration details")


class SessionService:
    """Stateless orchestration over the account store and the token service."""

    def __init__(self, accounts: AccountStore, tokens: TokenService) -> None:
        self.accounts = accounts
        self.tokens = tokens

    def _rotate(self, account: Account, expected: str | None = None) -> SessionTokens:
        """
        Issue an access token and replace the account's refresh token. With expected set, the
        replacement only happens if the stored token still equals it.
        """
        access_token = self.tokens.issue(account)
        refresh_token = new_refresh_token()
        if not self.accounts.rotate_refresh_token(account.username, refresh_token, expected):
            logger.warning("Refresh token rejected: username=%s", account.username)
            raise InvalidCredentialsError("Invalid refresh token")
        return SessionTokens(
            username=account.username,
            access_token=access_token,
            refresh_token=refresh_token,
        )

    def register(self, username: str | None, password: str | None, role: str | None = None) -> SessionTokens:
        if _blank(username) or _blank(password):
            raise InvalidInputError("Invalid registration details")
        account = self.accounts.create(username, password, parse_role(role))
        logger.info("Registered account: username=%s role=%s", account.username, account.role.value)
        return self._rotate(account)

    def login(self, username: str | None, password: str | None) -> SessionTokens:
        if _blank(username) or _blank(password):
            raise InvalidInputError("Invalid login details")
        account = self.accounts.find_by_username(username)
        if account is None or not verify_password(password, account.password_hash):
            logger.warning("Login failed: username=%s", username)
            raise InvalidCredentialsError("Invalid credentials")
        return self._rotate(account)

    def refresh(self, username: str | None, refresh_token: str | None) -> SessionTokens:
        """
        Exchange the current refresh token for a new pair. The presented token must equal the
        stored one exactly; after success it no longer works.
        """
        if _blank(username) or _blank(refresh_token):
            raise InvalidInputError("Invalid refresh token request")
        account = self.accounts.find_by_username(username)
        if account is None or account.refresh_token is None or account.refresh_token != refresh_token:
            logger.warning("Refresh token rejected: username=%s", username)
            raise InvalidCredentialsError("Invalid refresh token")
        return self._rotate(account, expected=refresh_token)

    def validate_token(self, token: str | None) -> str:
        """Username carried by a valid token; InvalidCredentialsError otherwise."""
        if _blank(token):
            raise InvalidInputError("Invalid token")
        claims = self.tokens.verify(token)
        if claims is None:
            raise InvalidCredentialsError("Invalid or expired token")
        return claims.username
