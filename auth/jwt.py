"""
JWT creation and verification.

Tokens are standard HS256 JWTs carrying ``{"user": {"id": ...}}`` plus the
registered ``iat`` / ``exp`` claims. The signing secret is handed to
``TokenService`` explicitly; ``get_token_service`` builds the process-wide
instance from ``config``.
"""

from __future__ import annotations

import logging
import time
from functools import lru_cache
from typing import Any, Dict, Optional

import jwt

from config.settings import config

logger = logging.getLogger(__name__)


class SigningError(Exception):
    """A token could not be signed (misconfigured secret or algorithm)."""


class TokenInvalidError(Exception):
    """A token failed signature, structure or expiry checks."""


class TokenService:
    """Issue and verify signed, time-limited bearer tokens."""

    def __init__(
        self,
        secret: str,
        expiry_seconds: int = 360000,
        algorithm: str = "HS256",
    ) -> None:
        self._secret = secret
        self._expiry_seconds = expiry_seconds
        self._algorithm = algorithm

    @property
    def expiry_seconds(self) -> int:
        return self._expiry_seconds

    def issue(self, user_id: str, *, now: Optional[int] = None) -> str:
        """Create a signed token for ``user_id``. Raises ``SigningError``."""
        if not self._secret:
            raise SigningError("JWT secret is not configured")

        issued_at = int(time.time()) if now is None else now
        payload: Dict[str, Any] = {
            "user": {"id": str(user_id)},
            "iat": issued_at,
            "exp": issued_at + self._expiry_seconds,
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=self._algorithm)
        except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as exc:
            raise SigningError(f"Could not sign token: {exc}") from exc

    def verify(self, token: str) -> str:
        """
        Verify token and return the embedded user id.

        Raises ``TokenInvalidError`` on a bad signature, malformed payload
        or expired token.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenInvalidError("token expired") from exc
        except jwt.PyJWTError as exc:
            raise TokenInvalidError(str(exc)) from exc

        user = payload.get("user")
        if not isinstance(user, dict) or not user.get("id"):
            raise TokenInvalidError("token payload has no user id")
        return str(user["id"])


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    """FastAPI dependency: the process-wide token service."""
    return TokenService(
        secret=config.jwt_secret,
        expiry_seconds=config.jwt_expiry_seconds,
        algorithm=config.jwt_algorithm,
    )
