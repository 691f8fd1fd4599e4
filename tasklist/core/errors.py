"""Error taxonomy for account, session and record operations.

Every failure the service reports to a caller is one of the kinds below. Ownership
failures use NOT_FOUND rather than FORBIDDEN so a caller cannot probe which record
ids exist.
"""

from enum import Enum

from fastapi import status


class ErrorKind(str, Enum):
    """Failure categories, each mapped to one HTTP status."""

    INVALID_INPUT = "invalid_input"
    DUPLICATE_USERNAME = "duplicate_username"
    INVALID_CREDENTIALS = "invalid_credentials"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    CONFIGURATION = "configuration"
    PERSISTENCE = "persistence"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]


_HTTP_STATUS: dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DUPLICATE_USERNAME: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.CONFIGURATION: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.PERSISTENCE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class TaskListError(Exception):
    """Base error; carries a short caller-safe message and its kind."""

    kind: ErrorKind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def http_status(self) -> int:
        return self.kind.http_status


class InvalidInputError(TaskListError):
    kind = ErrorKind.INVALID_INPUT


class DuplicateUsernameError(TaskListError):
    kind = ErrorKind.DUPLICATE_USERNAME


class InvalidCredentialsError(TaskListError):
    """Bad password, bad or expired token, or mismatched refresh token."""

    kind = ErrorKind.INVALID_CREDENTIALS


class NotFoundError(TaskListError):
    """Record absent or owned by someone else."""

    kind = ErrorKind.NOT_FOUND


class ForbiddenError(TaskListError):
    """Authenticated caller whose role is not allowed on the route."""

    kind = ErrorKind.FORBIDDEN


class ConfigurationError(TaskListError):
    """Signing material (key, issuer or audience) missing."""

    kind = ErrorKind.CONFIGURATION


class PersistenceError(TaskListError):
    """A data file could not be written; memory may now differ from disk."""

    kind = ErrorKind.PERSISTENCE
