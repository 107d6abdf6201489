"""
Auth API routes — current user, login.

Route prefix: /api/auth
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from api.dependencies import get_user_repo, json_body
from api.errors import NotFoundError, ValidationError
from auth.dependencies import get_current_user
from auth.jwt import TokenService, get_token_service
from auth.models import AuthUser, TokenResponse
from auth.password import check_credentials
from database.repositories import UserRepository
from utils.schemas import LoginRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

INVALID_CREDENTIALS = "Invalid Credentials"


@router.get("")
async def get_auth_user(
    current: AuthUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repo),
) -> Dict[str, Any]:
    """Return the authenticated user without the password hash."""
    user = await users.find_by_id(current.id)
    if user is None:
        raise NotFoundError("User not found")
    return user.public()


@router.post("", response_model=TokenResponse)
async def login(
    req: LoginRequest = Depends(json_body(LoginRequest)),
    users: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
) -> Dict[str, Any]:
    """Login with email + password."""
    user = await users.find_by_email(req.email)
    stored_hash = user.password if user is not None else None

    # Same error (and one bcrypt check) for "no such user" and "wrong password".
    if not await run_in_threadpool(check_credentials, req.password, stored_hash):
        logger.info("Failed login for %s", req.email)
        raise ValidationError.single(INVALID_CREDENTIALS)

    token = tokens.issue(user.id)
    logger.info("Login: %s (%s)", user.name, user.id)
    return {"token": token}
