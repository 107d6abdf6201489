"""
FastAPI dependencies (shared across routes).
"""

from __future__ import annotations

from typing import Any, Callable, Type, TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from database.repositories import PostRepository, ProfileRepository, UserRepository
from database.session import get_database

RequestModel = TypeVar("RequestModel", bound=BaseModel)


def get_user_repo() -> UserRepository:
    """Repositories share the process-wide Motor database."""
    return UserRepository(get_database())


def get_profile_repo() -> ProfileRepository:
    return ProfileRepository(get_database())


def get_post_repo() -> PostRepository:
    return PostRepository(get_database())


def json_body(model: Type[RequestModel]) -> Callable[..., Any]:
    """
    Dependency that validates the JSON body against ``model``.

    A missing, empty, non-JSON or non-object body is validated as ``{}``,
    so the client still gets one message per missing field.
    """

    async def _parse(request: Request) -> RequestModel:
        try:
            data = await request.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            data = {}
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            errors = [{**err, "loc": ("body", *err["loc"])} for err in exc.errors()]
            raise RequestValidationError(errors) from None

    return _parse
