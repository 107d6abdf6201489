"""
FastAPI dependencies for authentication.

``get_current_user`` gates every protected route: it reads the raw token
from the ``x-auth-token`` header (configurable), verifies it and returns
the authenticated identity, which is also kept on ``request.state.user``.
"""

from __future__ import annotations

import logging

from fastapi import Depends, Request

from api.errors import AuthenticationError
from auth.jwt import TokenInvalidError, TokenService, get_token_service
from auth.models import AuthUser
from config.settings import config

logger = logging.getLogger(__name__)

NO_TOKEN = "No token, authorization denied"
INVALID_TOKEN = "Token is not valid"


async def get_current_user(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> AuthUser:
    """Verify the request's token and return the authenticated user."""
    token = request.headers.get(config.auth_header)
    if not token:
        raise AuthenticationError(NO_TOKEN)

    try:
        user_id = tokens.verify(token)
    except TokenInvalidError as exc:
        logger.info("Rejected token on %s %s: %s", request.method, request.url.path, exc)
        raise AuthenticationError(INVALID_TOKEN) from exc

    user = AuthUser(id=user_id)
    request.state.user = user
    return user


async def get_current_user_id(user: AuthUser = Depends(get_current_user)) -> str:
    return user.id
