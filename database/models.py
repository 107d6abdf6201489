"""
Pydantic models for the MongoDB documents (users, profiles, posts).

Documents keep ObjectIds in storage; the models expose them as strings so
they serialize straight into API responses under their ``_id`` keys.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Optional

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

PyObjectId = Annotated[str, BeforeValidator(str)]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse ``value`` as an ObjectId; malformed ids yield None."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


class MongoModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: PyObjectId = Field(alias="_id")

    def to_response(self, **kwargs: Any) -> Dict[str, Any]:
        """JSON-ready dict keyed the way documents are stored."""
        return self.model_dump(by_alias=True, mode="json", **kwargs)


# ── Users ──────────────────────────────────────────────────────────────


class User(MongoModel):
    name: str
    email: str
    password: str
    avatar: Optional[str] = None
    date: datetime = Field(default_factory=utcnow)

    def public(self) -> Dict[str, Any]:
        """The user as returned to clients: never includes the hash."""
        return self.to_response(exclude={"password"})


class UserSummary(MongoModel):
    name: Optional[str] = None
    avatar: Optional[str] = None


# ── Profiles ───────────────────────────────────────────────────────────


class Experience(MongoModel):
    title: str
    company: str
    location: Optional[str] = None
    from_: datetime = Field(alias="from")
    to: Optional[datetime] = None
    current: bool = False
    description: Optional[str] = None


class Education(MongoModel):
    school: str
    degree: str
    fieldofstudy: str
    from_: datetime = Field(alias="from")
    to: Optional[datetime] = None
    current: bool = False
    description: Optional[str] = None


class Social(BaseModel):
    youtube: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None


class Profile(MongoModel):
    """A profile with its owner populated as ``{_id, name, avatar}``."""

    user: Optional[UserSummary] = None
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    status: str
    skills: List[str] = Field(default_factory=list)
    bio: Optional[str] = None
    githubusername: Optional[str] = None
    experience: List[Experience] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    social: Social = Field(default_factory=Social)
    date: datetime = Field(default_factory=utcnow)


# ── Posts ──────────────────────────────────────────────────────────────


class Like(MongoModel):
    user: PyObjectId


class Comment(MongoModel):
    user: PyObjectId
    text: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    date: datetime = Field(default_factory=utcnow)


class Post(MongoModel):
    user: PyObjectId
    text: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    likes: List[Like] = Field(default_factory=list)
    comments: List[Comment] = Field(default_factory=list)
    date: datetime = Field(default_factory=utcnow)
