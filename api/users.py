"""
User registration.

Route prefix: /api/users
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from bson import ObjectId
from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from api.dependencies import get_user_repo, json_body
from api.errors import ValidationError
from auth.jwt import TokenService, get_token_service
from auth.models import TokenResponse, User
from auth.password import hash_password
from database.repositories import UserAlreadyExistsError, UserRepository
from utils.avatar import gravatar_url
from utils.schemas import RegisterRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])

USER_EXISTS = "User already exists"


@router.post("", response_model=TokenResponse)
async def register(
    req: RegisterRequest = Depends(json_body(RegisterRequest)),
    users: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
) -> Dict[str, Any]:
    """Register a new user and return a token for it."""
    if await users.find_by_email(req.email) is not None:
        raise ValidationError.single(USER_EXISTS)

    user = User(
        id=str(ObjectId()),
        name=req.name,
        email=req.email,
        password=await run_in_threadpool(hash_password, req.password),
        avatar=gravatar_url(req.email),
    )
    try:
        await users.save(user)
    except UserAlreadyExistsError:
        raise ValidationError.single(USER_EXISTS) from None

    token = tokens.issue(user.id)
    logger.info("Registered user %s (%s)", user.name, user.id)
    return {"token": token}
