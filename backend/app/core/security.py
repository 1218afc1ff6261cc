"""
Password hashing and JWT bearer tokens.

CredentialStore wraps a passlib CryptContext (pbkdf2_sha256: salted per call,
adaptive round count, constant-time verify).

TokenService issues and validates the bearer token wire format:

    {"userId": <int>, "exp": <unix seconds>}

signed with an HMAC algorithm. Validation accepts only the HMAC family, so a
token re-signed as "none" or with an asymmetric algorithm is rejected even if
the signing key were known as a public key.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import jwt
from jwt import InvalidTokenError
from passlib.context import CryptContext

from app.core.config import Settings
from app.core.errors import InfrastructureError
from app.core.logging import get_logger

logger = get_logger(__name__)

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")
USER_ID_CLAIM = "userId"
EXPIRY_CLAIM = "exp"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CredentialStore:
    def __init__(self, rounds: int = 29000):
        self._context = CryptContext(
            schemes=["pbkdf2_sha256"],
            deprecated="auto",
            pbkdf2_sha256__default_rounds=rounds,
        )

    def hash(self, plaintext: str) -> str:
        try:
            return self._context.hash(plaintext)
        except (ValueError, TypeError) as e:
            logger.error("password_hash_failed", error=str(e))
            raise InfrastructureError("Failed to hash password") from e

    def verify(self, plaintext: str, credential: str) -> bool:
        if not plaintext or not credential:
            return False
        try:
            return self._context.verify(plaintext, credential)
        except (ValueError, TypeError):
            # Unrecognised or corrupt stored hash
            logger.warning("password_hash_unreadable")
            return False


class TokenValidationError(Exception):
    pass


@dataclass(frozen=True)
class TokenService:
    secret: str = field(repr=False)
    algorithm: str = "HS256"
    ttl: timedelta = timedelta(hours=72)
    clock: Callable[[], datetime] = _utcnow

    def __post_init__(self) -> None:
        if self.algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {self.algorithm}")
        if not self.secret:
            raise ValueError("Signing secret must not be empty")

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            ttl=timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS),
        )

    def issue(self, user_id: int) -> str:
        expires_at = self.clock() + self.ttl
        payload: dict[str, Any] = {
            USER_ID_CLAIM: user_id,
            EXPIRY_CLAIM: int(expires_at.timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def validate(self, token: str) -> int:
        """Return the user id carried by `token` or raise TokenValidationError."""
        try:
            # Expiry is checked below against the injectable clock.
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=list(HMAC_ALGORITHMS),
                options={
                    "require": [USER_ID_CLAIM, EXPIRY_CLAIM],
                    "verify_exp": False,
                },
            )
        except InvalidTokenError as e:
            raise TokenValidationError(str(e)) from e

        expires_at = payload[EXPIRY_CLAIM]
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            raise TokenValidationError("Expiration time claim must be a number")
        # A token is still valid at exactly `exp`
        if self.clock().timestamp() > expires_at:
            raise TokenValidationError("Signature has expired")

        user_id = payload[USER_ID_CLAIM]
        if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
            raise TokenValidationError("Invalid user id claim")
        return user_id
