"""Account store: username -> Account, persisted to one JSON file."""

import hmac
import logging
import os

from tasklist.core.errors import DuplicateUsernameError, InvalidInputError
from tasklist.core.security import hash_password
from tasklist.core.storage import JsonFileStore
from tasklist.models.account import Account, Role

logger = logging.getLogger(__name__)


class AccountStore:
    """Create, find and update accounts. Returned accounts are copies; use save() to persist changes."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._store: JsonFileStore[Account] = JsonFileStore(path, Account)

    @property
    def backing_store(self) -> JsonFileStore[Account]:
        return self._store

    def find_by_username(self, username: str) -> Account | None:
        with self._store.transaction() as accounts:
            for account in accounts:
                if account.username == username:
                    return account.model_copy()
        return None

    def create(self, username: str, password: str, role: Role = Role.USER) -> Account:
        """
        Hash the password and store a new account with no refresh token.
        Raises InvalidInputError for blank fields and DuplicateUsernameError if the name is taken.
        """
        if not username or not username.strip() or not password or not password.strip():
            raise InvalidInputError("Invalid user creation parameters")

        with self._store.transaction() as accounts:
            if any(a.username == username for a in accounts):
                raise DuplicateUsernameError("Username already exists")
            account = Account(
                username=username,
                password_hash=hash_password(password),
                role=role,
                refresh_token=None,
            )
            accounts.append(account)
            self._store.save()
            logger.info("Account created: username=%s role=%s", username, role.value)
            return account.model_copy()

    def save(self, account: Account) -> bool:
        """
        Persist the account's refresh token. Returns False (and writes nothing) when the
        username is no longer present in the store.
        """
        with self._store.transaction() as accounts:
            for existing in accounts:
                if existing.username == account.username:
                    existing.refresh_token = account.refresh_token
                    self._store.save()
                    return True
        logger.warning("Account save skipped: username=%s not found", account.username)
        return False


    def rotate_refresh_token(self, username: str, new_token: str, expected: str | None = None) -> bool:
        """
        Replace the account's refresh token in one locked read-modify-write.

        When expected is given, the stored token must equal it or nothing changes, so a refresh
        token can be redeemed at most once even under concurrent requests. Returns False when the
        account is missing or the stored token does not match.
        """
        with self._store.transaction() as accounts:
            existing = next((a for a in accounts if a.username == username), None)
            if existing is None:
                return False
            if expected is not None and (
                existing.refresh_token is None
                or not hmac.compare_digest(existing.refresh_token.encode(), expected.encode())
            ):
                return False
            existing.refresh_token = new_token
            self._store.save()
            return True
