"""Password hashing and JWT creation/verification for authentication."""

import base64
import binascii
import hashlib
import hmac
import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import jwt

from tasklist.core.errors import ConfigurationError
from tasklist.models.account import Account, Role

if TYPE_CHECKING:
    from tasklist.core.config import Settings

logger = logging.getLogger(__name__)

# Random salt length in bytes; also the HMAC key length.
SALT_BYTES = 16
DIGEST_SEPARATOR = ":"

# Max lengths for username and password validation.
USERNAME_MAX_LEN = 255
PASSWORD_MAX_LEN = 128


def hash_password(plain_password: str) -> str:
    """
    Hash a plain-text password for storage as "base64(salt):base64(hmac_sha256(salt, password))".
    A fresh salt is drawn for every call, so hashing the same password twice gives different digests.
    """
    salt = secrets.token_bytes(SALT_BYTES)
    digest = hmac.new(salt, plain_password.encode("utf-8"), hashlib.sha256).digest()
    return DIGEST_SEPARATOR.join(
        (base64.b64encode(salt).decode("ascii"), base64.b64encode(digest).decode("ascii"))
    )


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored digest. Malformed digests never verify."""
    parts = hashed.split(DIGEST_SEPARATOR) if hashed else []
    if len(parts) != 2:
        logger.warning("Stored password digest is malformed (expected salt:hash)")
        return False
    try:
        salt = base64.b64decode(parts[0], validate=True)
        expected = base64.b64decode(parts[1], validate=True)
    except (binascii.Error, ValueError):
        logger.warning("Stored password digest is not valid base64")
        return False
    if not salt or not expected:
        logger.warning("Stored password digest has an empty salt or hash")
        return False
    computed = hmac.new(salt, plain_password.encode("utf-8"), hashlib.sha256).digest()
    return hmac.compare_digest(computed, expected)


def new_refresh_token() -> str:
    """Opaque, unguessable refresh credential."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class TokenClaims:
    """Identity extracted from a verified access token."""

    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


class TokenService:
    """
    Mints and verifies HMAC-signed access tokens carrying sub, name and role claims.

    Stateless: nothing is stored, so instances are safe to share across request threads.
    A token that verifies (signature, issuer, audience, expiry) is trusted as-is; there
    is no revocation list.
    """

    def __init__(
        self,
        secret: str | None,
        issuer: str | None,
        audience: str | None,
        lifetime: timedelta = timedelta(hours=1),
        algorithm: str = "HS256",
    ) -> None:
        self._secret = secret or ""
        self._issuer = issuer or ""
        self._audience = audience or ""
        self.lifetime = lifetime
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenService":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            issuer=settings.JWT_ISSUER,
            audience=settings.JWT_AUDIENCE,
            lifetime=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
            algorithm=settings.JWT_ALGORITHM,
        )

    @property
    def configured(self) -> bool:
        return bool(self._secret and self._issuer and self._audience)

    def issue(self, account: Account, now: datetime | None = None) -> str:
        """Create a signed access token for the account. Raises ConfigurationError if it cannot."""
        if not self.configured:
            logger.error("Cannot issue access token: signing key, issuer or audience is not set")
            raise ConfigurationError("Token generation failed")
        role = account.role.value if isinstance(account.role, Role) else account.role
        if not account.username or not role:
            logger.error("Cannot issue access token: account has no username or role")
            raise ConfigurationError("Token generation failed")

        issued_at = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": account.username,
            "name": account.username,
            "role": role,
            "iss": self._issuer,
            "aud": self._audience,
            "iat": issued_at,
            "nbf": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str | None) -> TokenClaims | None:
        """
        Decode and validate a token; return its claims, or None when it is empty, malformed,
        wrongly signed, for another issuer/audience, or expired.
        """
        if not token or not self.configured:
            return None
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={"require": ["exp", "sub", "iss", "aud"]},
            )
        except jwt.PyJWTError as e:
            logger.info("Access token rejected: %s", type(e).__name__)
            return None

        username = payload.get("name") or payload.get("sub")
        role = payload.get("role")
        if not isinstance(username, str) or not username or not isinstance(role, str) or not role:
            logger.info("Access token rejected: missing name or role claim")
            return None
        return TokenClaims(username=username, role=role)
