"""Security utilities for authentication.

Provides:
- Password hashing with Argon2id (OWASP recommended)
- Access token issuing and validation (JWT, HS512 by default)

Key material is injected into ``TokenProvider``. When no key is configured a
random one is generated for the life of the process, so tokens do not
survive a restart. Retired keys can be listed as fallbacks to rotate the
signing key without logging everybody out.
"""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import structlog
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from jose import JWTError, jwt

from src.auth.permissions import MemberRole
from src.config.settings import Settings
from src.core.errors import BalanceTalkError, ErrorCode


logger = structlog.get_logger(__name__)


# Argon2id configuration (OWASP recommended parameters)
_password_hasher = PasswordHasher(
    time_cost=2,
    memory_cost=19456,  # 19 MiB
    parallelism=1,
    hash_len=32,
    salt_len=16,
)


def hash_password(password: str) -> str:
    """Hash a password using Argon2id.

    The returned hash embeds salt and parameters.

    Example:
        >>> hash_password("secret-pass1").startswith("$argon2id$")
        True
    """
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against its Argon2id hash."""
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


class TokenProvider:
    """Issues and validates signed access tokens.

    Tokens carry the member email as ``sub`` and the member role as ``role``.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS512",
        expire_minutes: int = 30,
        fallback_keys: list[str] | None = None,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes
        self.fallback_keys = list(fallback_keys or [])

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenProvider":
        """Build a provider from settings, generating a key when none is set."""
        secret_key = settings.auth_secret_key
        if not secret_key:
            secret_key = secrets.token_urlsafe(64)
            logger.warning(
                "auth_ephemeral_signing_key",
                message="AUTH_SECRET_KEY not set, tokens will not survive a restart",
            )
        return cls(
            secret_key=secret_key,
            algorithm=settings.auth_algorithm,
            expire_minutes=settings.auth_access_token_expire_minutes,
            fallback_keys=settings.auth_previous_secret_keys,
        )

    def create_token(
        self,
        email: str,
        role: MemberRole | str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a signed access token.

        Args:
            email: Member email, stored as the ``sub`` claim
            role: Member role
            expires_delta: Token lifetime (defaults to expire_minutes)

        Returns:
            Encoded JWT string
        """
        issued_at = datetime.now(UTC)
        expire = issued_at + (expires_delta or timedelta(minutes=self.expire_minutes))
        claims = {
            "sub": email,
            "role": MemberRole(role).value,
            "iat": issued_at,
            "exp": expire,
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def validate_token(self, token: str) -> dict[str, Any]:
        """Decode a token, checking signature and expiry.

        The current key is tried first, then each fallback key.

        Returns:
            Decoded claims

        Raises:
            BalanceTalkError(INVALID_TOKEN): On any signature, format or
                expiry problem.
        """
        for key in (self.secret_key, *self.fallback_keys):
            try:
                claims = jwt.decode(token, key, algorithms=[self.algorithm])
            except JWTError:
                continue
            if not claims.get("sub"):
                break
            return claims
        raise BalanceTalkError(ErrorCode.INVALID_TOKEN)

    def get_email(self, token: str) -> str:
        """Subject email of a valid token."""
        return self.validate_token(token)["sub"]
