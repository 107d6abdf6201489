"""
Shared fixtures: in-memory repositories wired into the FastAPI app.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from api.dependencies import get_post_repo, get_profile_repo, get_user_repo
from auth.jwt import TokenService, get_token_service
from connectors.github import get_github_client
from database.models import Comment, Like, Post, Profile, User, utcnow
from database.repositories import (
    PROFILE_SECTIONS,
    ProfileAlreadyExistsError,
    UserAlreadyExistsError,
)
from main import create_app


# ---------------------------------------------------------------------------
# Fake repositories (pure in-memory, no Mongo)
# ---------------------------------------------------------------------------


class FakeUserRepository:
    def __init__(self) -> None:
        self._users: Dict[str, User] = {}

    async def find_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.email == email), None)

    async def find_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    async def save(self, user: User) -> User:
        if await self.find_by_email(user.email) is not None:
            raise UserAlreadyExistsError(user.email)
        self._users[user.id] = user
        return user

    async def delete_by_id(self, user_id: str) -> bool:
        return self._users.pop(user_id, None) is not None


class FakeProfileRepository:
    def __init__(self, users: FakeUserRepository) -> None:
        self._users = users
        self._docs: Dict[str, Dict[str, Any]] = {}

    def _view(self, doc: Dict[str, Any]) -> Profile:
        owner = self._users._users.get(doc["user"])
        summary = {"_id": owner.id, "name": owner.name, "avatar": owner.avatar} if owner else None
        return Profile.model_validate({**copy.deepcopy(doc), "user": summary})

    async def find_by_user(self, user_id: str) -> Optional[Profile]:
        doc = self._docs.get(user_id)
        return self._view(doc) if doc else None

    async def list_all(self) -> List[Profile]:
        return [self._view(doc) for doc in self._docs.values()]

    async def create(self, user_id: str, fields: Dict[str, Any]) -> Profile:
        if user_id in self._docs:
            raise ProfileAlreadyExistsError(user_id)
        self._docs[user_id] = {
            "_id": str(ObjectId()),
            "user": user_id,
            "experience": [],
            "education": [],
            "social": {},
            "date": utcnow(),
            **fields,
        }
        return self._view(self._docs[user_id])

    async def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[Profile]:
        doc = self._docs.get(user_id)
        if doc is None:
            return None
        for key, value in fields.items():
            if key.startswith("social."):
                doc["social"][key.split(".", 1)[1]] = value
            else:
                doc[key] = value
        return self._view(doc)

    async def delete_by_user(self, user_id: str) -> bool:
        return self._docs.pop(user_id, None) is not None

    async def push_item(self, user_id: str, section: str, item: Dict[str, Any]) -> Optional[Profile]:
        assert section in PROFILE_SECTIONS
        doc = self._docs.get(user_id)
        if doc is None:
            return None
        doc[section].insert(0, {"_id": str(ObjectId()), **item})
        return self._view(doc)

    async def replace_item(
        self, user_id: str, section: str, item_id: str, item: Dict[str, Any]
    ) -> Optional[Profile]:
        doc = self._docs.get(user_id)
        if doc is None:
            return None
        for index, entry in enumerate(doc[section]):
            if entry["_id"] == item_id:
                doc[section][index] = {"_id": item_id, **item}
                return self._view(doc)
        return None

    async def pull_item(self, user_id: str, section: str, item_id: str) -> Optional[Profile]:
        doc = self._docs.get(user_id)
        if doc is None:
            return None
        remaining = [entry for entry in doc[section] if entry["_id"] != item_id]
        if len(remaining) == len(doc[section]):
            return None
        doc[section] = remaining
        return self._view(doc)


class FakePostRepository:
    def __init__(self) -> None:
        self._docs: Dict[str, Dict[str, Any]] = {}

    async def create(self, user_id: str, text: str, name: Optional[str], avatar: Optional[str]) -> Post:
        doc = {
            "_id": str(ObjectId()),
            "user": user_id,
            "text": text,
            "name": name,
            "avatar": avatar,
            "likes": [],
            "comments": [],
            "date": utcnow(),
        }
        self._docs[doc["_id"]] = doc
        return Post.model_validate(copy.deepcopy(doc))

    async def list_newest_first(self) -> List[Post]:
        docs = sorted(self._docs.values(), key=lambda d: d["date"], reverse=True)
        return [Post.model_validate(copy.deepcopy(doc)) for doc in docs]

    async def find_by_id(self, post_id: str) -> Optional[Post]:
        doc = self._docs.get(post_id)
        return Post.model_validate(copy.deepcopy(doc)) if doc else None

    async def delete_owned(self, post_id: str, owner_id: str) -> bool:
        doc = self._docs.get(post_id)
        if doc is None or doc["user"] != owner_id:
            return False
        del self._docs[post_id]
        return True

    async def add_like(self, post_id: str, user_id: str) -> Optional[List[Like]]:
        doc = self._docs.get(post_id)
        if doc is None or any(like["user"] == user_id for like in doc["likes"]):
            return None
        doc["likes"].insert(0, {"_id": str(ObjectId()), "user": user_id})
        return [Like.model_validate(like) for like in doc["likes"]]

    async def remove_like(self, post_id: str, user_id: str) -> Optional[List[Like]]:
        doc = self._docs.get(post_id)
        if doc is None or not any(like["user"] == user_id for like in doc["likes"]):
            return None
        doc["likes"] = [like for like in doc["likes"] if like["user"] != user_id]
        return [Like.model_validate(like) for like in doc["likes"]]

    async def add_comment(
        self, post_id: str, user_id: str, text: str, name: Optional[str], avatar: Optional[str]
    ) -> Optional[List[Comment]]:
        doc = self._docs.get(post_id)
        if doc is None:
            return None
        doc["comments"].insert(
            0,
            {"_id": str(ObjectId()), "user": user_id, "text": text, "name": name, "avatar": avatar, "date": utcnow()},
        )
        return [Comment.model_validate(c) for c in doc["comments"]]

    async def remove_comment(self, post_id: str, comment_id: str, owner_id: str) -> Optional[List[Comment]]:
        doc = self._docs.get(post_id)
        if doc is None:
            return None
        match = [c for c in doc["comments"] if c["_id"] == comment_id and c["user"] == owner_id]
        if not match:
            return None
        doc["comments"] = [c for c in doc["comments"] if c["_id"] != comment_id]
        return [Comment.model_validate(c) for c in doc["comments"]]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def users() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def profiles(users) -> FakeProfileRepository:
    return FakeProfileRepository(users)


@pytest.fixture
def posts() -> FakePostRepository:
    return FakePostRepository()


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(secret="test-secret-key-for-the-suite-0123456789", expiry_seconds=3600)


@pytest.fixture
def app(users, profiles, posts, tokens):
    app = create_app()
    app.dependency_overrides[get_user_repo] = lambda: users
    app.dependency_overrides[get_profile_repo] = lambda: profiles
    app.dependency_overrides[get_post_repo] = lambda: posts
    app.dependency_overrides[get_token_service] = lambda: tokens
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    # Not used as a context manager: startup (Mongo connect) never runs.
    return TestClient(app)


@pytest.fixture
def make_user(users, tokens):
    """Insert a user straight into the fake store; returns (user, headers)."""

    def _make(name: str = "Ada", email: Optional[str] = None):
        user = User(
            id=str(ObjectId()),
            name=name,
            email=email or f"{name.lower()}@example.com",
            password="not-a-real-hash",
            avatar=f"https://avatars.example.com/{name.lower()}",
        )
        users._users[user.id] = user
        return user, {"x-auth-token": tokens.issue(user.id)}

    return _make


@pytest.fixture
def github_override(app):
    def _install(client_obj):
        app.dependency_overrides[get_github_client] = lambda: client_obj

    return _install
