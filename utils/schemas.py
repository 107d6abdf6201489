"""
Pydantic request schemas for the public API.

Every required field has a default so that a missing field goes through
the same check (and produces the same message) as a blank one.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.validators import (
    optional_date,
    parse_date,
    require_email,
    require_min_length,
    require_present,
    require_text,
    split_skills,
)


class _Request(BaseModel):
    model_config = ConfigDict(validate_default=True, populate_by_name=True)


def _set_fields(model: BaseModel, names: tuple) -> Dict[str, Any]:
    """Fields the client actually filled in (blank strings are skipped)."""
    out: Dict[str, Any] = {}
    for name in names:
        value = getattr(model, name)
        if value not in (None, ""):
            out[name] = value
    return out


# ═══════════════════════════════════════════════════════════════════════════════
# Users / Auth
# ═══════════════════════════════════════════════════════════════════════════════


class RegisterRequest(_Request):
    name: str = ""
    email: str = ""
    password: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> str:
        return require_text(v, "Name is required")

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v: Any) -> str:
        return require_email(v, "Please include a valid email")

    @field_validator("password", mode="before")
    @classmethod
    def _password(cls, v: Any) -> str:
        return require_min_length(v, 6, "Please enter a password with 6 or more characters")


class LoginRequest(_Request):
    email: str = ""
    password: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v: Any) -> str:
        return require_email(v, "Please include a valid email")

    @field_validator("password", mode="before")
    @classmethod
    def _password(cls, v: Any) -> str:
        return require_present(v, "Password is required")


# ═══════════════════════════════════════════════════════════════════════════════
# Profile
# ═══════════════════════════════════════════════════════════════════════════════

PROFILE_FIELDS = ("company", "website", "location", "bio", "githubusername")
SOCIAL_FIELDS = ("youtube", "twitter", "facebook", "linkedin", "instagram")


class ProfileRequest(_Request):
    status: str = ""
    skills: List[str] = Field(default_factory=list)
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    githubusername: Optional[str] = None
    youtube: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v: Any) -> str:
        return require_text(v, "Status is required")

    @field_validator("skills", mode="before")
    @classmethod
    def _skills(cls, v: Any) -> List[str]:
        return split_skills(v, "Skills are required")

    def profile_fields(self) -> Dict[str, Any]:
        fields = {"status": self.status, "skills": self.skills}
        fields.update(_set_fields(self, PROFILE_FIELDS))
        return fields

    def social_fields(self) -> Dict[str, Any]:
        return _set_fields(self, SOCIAL_FIELDS)


def _dated(model: BaseModel) -> Dict[str, Any]:
    return {
        "from": model.from_,
        "to": model.to,
        "current": bool(model.current),
        "description": model.description,
    }


class ExperienceRequest(_Request):
    title: str = ""
    company: str = ""
    location: Optional[str] = None
    from_: Optional[datetime] = Field(default=None, alias="from")
    to: Optional[datetime] = None
    current: Optional[bool] = False
    description: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v: Any) -> str:
        return require_text(v, "Job title is required")

    @field_validator("company", mode="before")
    @classmethod
    def _company(cls, v: Any) -> str:
        return require_text(v, "Company Name is required")

    @field_validator("from_", mode="before")
    @classmethod
    def _from(cls, v: Any) -> datetime:
        return parse_date(v, "Starting date is required")

    @field_validator("to", mode="before")
    @classmethod
    def _to(cls, v: Any) -> Optional[datetime]:
        return optional_date(v)

    def item(self) -> Dict[str, Any]:
        return {"title": self.title, "company": self.company, "location": self.location, **_dated(self)}


class EducationRequest(_Request):
    school: str = ""
    degree: str = ""
    fieldofstudy: str = ""
    from_: Optional[datetime] = Field(default=None, alias="from")
    to: Optional[datetime] = None
    current: Optional[bool] = False
    description: Optional[str] = None

    @field_validator("school", mode="before")
    @classmethod
    def _school(cls, v: Any) -> str:
        return require_text(v, "School name is required")

    @field_validator("degree", mode="before")
    @classmethod
    def _degree(cls, v: Any) -> str:
        return require_text(v, "Major is required")

    @field_validator("fieldofstudy", mode="before")
    @classmethod
    def _fieldofstudy(cls, v: Any) -> str:
        return require_text(v, "Field of study is required")

    @field_validator("from_", mode="before")
    @classmethod
    def _from(cls, v: Any) -> datetime:
        return parse_date(v, "Starting date is required")

    @field_validator("to", mode="before")
    @classmethod
    def _to(cls, v: Any) -> Optional[datetime]:
        return optional_date(v)

    def item(self) -> Dict[str, Any]:
        return {
            "school": self.school,
            "degree": self.degree,
            "fieldofstudy": self.fieldofstudy,
            **_dated(self),
        }


# ═══════════════════════════════════════════════════════════════════════════════
# Posts
# ═══════════════════════════════════════════════════════════════════════════════


class PostRequest(_Request):
    text: str = ""

    @field_validator("text", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return require_text(v, "Post text is required")


class CommentRequest(_Request):
    text: str = ""

    @field_validator("text", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return require_text(v, "You didnt write anything")
