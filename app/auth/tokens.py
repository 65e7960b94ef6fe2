"""Session token issuance and validation.

Tokens are stateless HS256 JWTs. Validity is decided purely by signature,
expiry and the presence of the identity claims; nothing is stored
server-side.
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import lru_cache

import jwt

from app.auth.exceptions import InvalidTokenError
from app.core.exceptions import InternalError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
_REQUIRED_CLAIMS = ["sub", "email", "iat", "exp"]


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a session token."""

    id: uuid.UUID
    email: str


class TokenService:
    """Issues and validates signed, time-limited session tokens."""

    def __init__(
        self,
        secret: str | None,
        expires_in: timedelta,
        clock: Callable[[], datetime] | None = None,
    ):
        self._secret = secret
        self._expires_in = expires_in
        self._clock = clock or (lambda: datetime.now(UTC))

    @property
    def expires_in(self) -> timedelta:
        return self._expires_in

    def _ensure_secret(self) -> str:
        if not self._secret:
            logger.error("JWT_SECRET is not configured")
            raise InternalError("Token signing is not configured")
        return self._secret

    def issue(self, user_id: uuid.UUID, email: str) -> str:
        """Sign a token for the given identity.

        Raises:
            InternalError: If no signing secret is configured
        """
        secret = self._ensure_secret()
        now = self._clock()
        payload = {
            "sub": str(user_id),
            "id": str(user_id),
            "email": email,
            "iat": int(now.timestamp()),
            "exp": int((now + self._expires_in).timestamp()),
        }
        return jwt.encode(payload, secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """Validate a token and return the identity it carries.

        Raises:
            InvalidTokenError: On any malformed, expired or badly signed token
            InternalError: If no signing secret is configured
        """
        secret = self._ensure_secret()
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[ALGORITHM],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError() from e

        # PyJWT checks exp against wall time; also honour the injected clock.
        if payload["exp"] <= int(self._clock().timestamp()):
            raise InvalidTokenError("Token has expired")

        try:
            user_id = uuid.UUID(str(payload["sub"]))
        except ValueError as e:
            raise InvalidTokenError() from e

        email = payload["email"]
        if not isinstance(email, str) or not email:
            raise InvalidTokenError()

        return TokenClaims(id=user_id, email=email)


@lru_cache
def get_token_service() -> TokenService:
    """Get cached TokenService built from application settings."""
    from app.core.settings import get_settings

    settings = get_settings()
    return TokenService(secret=settings.jwt_secret, expires_in=settings.jwt_expires_in)
