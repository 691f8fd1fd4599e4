"""Unit tests for tasklist.services.session: register, login, refresh rotation, validate."""

import tempfile
import threading
import unittest
from pathlib import Path

from tasklist.core.errors import (
    ConfigurationError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidInputError,
)
from tasklist.core.security import TokenService
from tasklist.models.account import Role
from tasklist.services.account_store import AccountStore
from tasklist.services.session import SessionService, parse_role

SECRET = "unit-test-signing-key-0123456789abcdef"


class SessionTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.accounts = AccountStore(Path(self._tmp.name) / "users.json")
        self.tokens = TokenService(SECRET, "tasklist-tests", "tasklist-clients")
        self.sessions = SessionService(self.accounts, self.tokens)

    def tearDown(self) -> None:
        self._tmp.cleanup()


class TestRegister(SessionTestCase):
    def test_register_returns_tokens_and_stores_refresh_token(self) -> None:
        result = self.sessions.register("alice", "pw1")
        self.assertEqual(result.username, "alice")
        self.assertEqual(self.tokens.verify(result.access_token).username, "alice")
        account = self.accounts.find_by_username("alice")
        self.assertEqual(account.role, Role.USER)
        self.assertEqual(account.refresh_token, result.refresh_token)

    def test_register_admin(self) -> None:
        result = self.sessions.register("root", "pw", "admin")
        self.assertTrue(self.tokens.verify(result.access_token).is_admin)

    def test_duplicate_username(self) -> None:
        self.sessions.register("alice", "pw1")
        with self.assertRaises(DuplicateUsernameError):
            self.sessions.register("alice", "pw2")

    def test_blank_credentials(self) -> None:
        for username, password in ((None, "pw"), ("", "pw"), ("alice", None), ("alice", "  ")):
            with self.subTest(username=username, password=password):
                with self.assertRaises(InvalidInputError):
                    self.sessions.register(username, password)

    def test_unknown_role_is_invalid_input(self) -> None:
        with self.assertRaises(InvalidInputError):
            self.sessions.register("alice", "pw1", "Superuser")
        self.assertIsNone(self.accounts.find_by_username("alice"))

    def test_parse_role(self) -> None:
        self.assertIs(parse_role(None), Role.USER)
        self.assertIs(parse_role(" "), Role.USER)
        self.assertIs(parse_role("User"), Role.USER)
        self.assertIs(parse_role("ADMIN"), Role.ADMIN)

    def test_unconfigured_token_service(self) -> None:
        sessions = SessionService(self.accounts, TokenService("", "tasklist-tests", "tasklist-clients"))
        with self.assertRaises(ConfigurationError):
            sessions.register("alice", "pw1")


class TestLogin(SessionTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.registered = self.sessions.register("alice", "pw1")

    def test_login_succeeds_and_rotates_refresh_token(self) -> None:
        result = self.sessions.login("alice", "pw1")
        self.assertEqual(self.tokens.verify(result.access_token).username, "alice")
        self.assertNotEqual(result.refresh_token, self.registered.refresh_token)
        self.assertEqual(self.accounts.find_by_username("alice").refresh_token, result.refresh_token)

    def test_wrong_password_or_unknown_user(self) -> None:
        with self.assertRaises(InvalidCredentialsError):
            self.sessions.login("alice", "wrong")
        with self.assertRaises(InvalidCredentialsError):
            self.sessions.login("mallory", "pw1")

    def test_blank_credentials(self) -> None:
        with self.assertRaises(InvalidInputError):
            self.sessions.login("alice", "")

    def test_login_elsewhere_invalidates_previous_refresh_token(self) -> None:
        first = self.sessions.login("alice", "pw1")
        self.sessions.login("alice", "pw1")
        with self.assertRaises(InvalidCredentialsError):
            self.sessions.refresh("alice", first.refresh_token)


class TestRefresh(SessionTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.registered = self.sessions.register("alice", "pw1")

    def test_refresh_rotates(self) -> None:
        refreshed = self.sessions.refresh("alice", self.registered.refresh_token)
        self.assertNotEqual(refreshed.refresh_token, self.registered.refresh_token)
        self.assertEqual(self.tokens.verify(refreshed.access_token).username, "alice")

    def test_old_refresh_token_stops_working(self) -> None:
        refreshed = self.sessions.refresh("alice", self.registered.refresh_token)
        with self.assertRaises(InvalidCredentialsError):
            self.sessions.refresh("alice", self.registered.refresh_token)
        self.sessions.refresh("alice", refreshed.refresh_token)

    def test_mismatch_and_unknown_user(self) -> None:
        with self.assertRaises(InvalidCredentialsError):
            self.sessions.refresh("alice", "not-the-token")
        with self.assertRaises(InvalidCredentialsError):
            self.sessions.refresh("bob", self.registered.refresh_token)

    def test_blank_request(self) -> None:
        with self.assertRaises(InvalidInputError):
            self.sessions.refresh("alice", "")

    def test_concurrent_refresh_redeems_token_once(self) -> None:
        # Both requests pass the initial lookup before either rotates the stored token.
        barrier = threading.Barrier(2, timeout=5)
        issue = self.tokens.issue

        def issue_after_both_checked(account, now=None):
            barrier.wait()
            return issue(account, now)

        self.tokens.issue = issue_after_both_checked
        outcomes: list[str] = []

        def redeem() -> None:
            try:
                self.sessions.refresh("alice", self.registered.refresh_token)
                outcomes.append("ok")
            except InvalidCredentialsError:
                outcomes.append("rejected")

        threads = [threading.Thread(target=redeem) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(sorted(outcomes), ["ok", "rejected"])


class TestValidateToken(SessionTestCase):
    def test_valid_token_returns_username(self) -> None:
        result = self.sessions.register("alice", "pw1")
        self.assertEqual(self.sessions.validate_token(result.access_token), "alice")

    def test_invalid_token(self) -> None:
        with self.assertRaises(InvalidCredentialsError):
            self.sessions.validate_token("garbage")
        with self.assertRaises(InvalidInputError):
            self.sessions.validate_token("")


if __name__ == "__main__":
    unittest.main()
