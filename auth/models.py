"""Auth-facing models: the authenticated identity and the token response.
"""

from pydantic import BaseModel

from database.models import User  # noqa: F401


class AuthUser(BaseModel):
    """Identity injected into protected handlers."""

    id: str


class TokenResponse(BaseModel):
    token: str


__all__ = ["AuthUser", "TokenResponse", "User"]
