"""
MongoDB repositories for users, profiles and posts.

Array fields (likes, comments, experience, education) are only ever
changed through single atomic update operators with conditional filters,
never by reading the document, splicing a list and saving it back.
Malformed ids are treated exactly like ids that match nothing.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from database.models import (
    Comment,
    Like,
    Post,
    Profile,
    User,
    to_object_id,
    utcnow,
)

logger = logging.getLogger(__name__)

PROFILE_SECTIONS = ("experience", "education")


class UserAlreadyExistsError(Exception):
    pass


class ProfileAlreadyExistsError(Exception):
    pass


# ── Users (credential store) ───────────────────────────────────────────


class UserRepository:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.collection = db["users"]

    async def find_by_email(self, email: str) -> Optional[User]:
        doc = await self.collection.find_one({"email": email})
        return User.model_validate(doc) if doc else None

    async def find_by_id(self, user_id: str) -> Optional[User]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        doc = await self.collection.find_one({"_id": oid})
        return User.model_validate(doc) if doc else None

    async def save(self, user: User) -> User:
        """Insert a new user. Raises ``UserAlreadyExistsError`` on a taken email."""
        doc = user.model_dump(by_alias=True)
        doc["_id"] = ObjectId(user.id)
        try:
            await self.collection.insert_one(doc)
        except DuplicateKeyError as exc:
            raise UserAlreadyExistsError(user.email) from exc
        return user

    async def delete_by_id(self, user_id: str) -> bool:
        oid = to_object_id(user_id)
        if oid is None:
            return False
        result = await self.collection.delete_one({"_id": oid})
        return result.deleted_count == 1


# ── Profiles ───────────────────────────────────────────────────────────


def _populate_owner(match: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Aggregation stages that replace ``user`` with ``{_id, name, avatar}``."""
    return [
        {"$match": match},
        {
            "$lookup": {
                "from": "users",
                "localField": "user",
                "foreignField": "_id",
                "pipeline": [{"$project": {"name": 1, "avatar": 1}}],
                "as": "user",
            }
        },
        {"$unwind": {"path": "$user", "preserveNullAndEmptyArrays": True}},
    ]


class ProfileRepository:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.collection = db["profiles"]

    async def _find_one(self, match: Dict[str, Any]) -> Optional[Profile]:
        cursor = self.collection.aggregate(_populate_owner(match) + [{"$limit": 1}])
        docs = await cursor.to_list(length=1)
        return Profile.model_validate(docs[0]) if docs else None

    async def find_by_user(self, user_id: str) -> Optional[Profile]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return await self._find_one({"user": oid})

    async def list_all(self) -> List[Profile]:
        cursor = self.collection.aggregate(_populate_owner({}))
        return [Profile.model_validate(doc) async for doc in cursor]

    async def create(self, user_id: str, fields: Dict[str, Any]) -> Profile:
        oid = ObjectId(user_id)
        doc = {
            "user": oid,
            "experience": [],
            "education": [],
            "social": {},
            "date": utcnow(),
            **fields,
        }
        try:
            result = await self.collection.insert_one(doc)
        except DuplicateKeyError as exc:
            raise ProfileAlreadyExistsError(user_id) from exc
        return await self._find_one({"_id": result.inserted_id})

    async def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[Profile]:
        """Apply ``$set`` with ``fields`` (dotted keys allowed) to the user's profile."""
        oid = to_object_id(user_id)
        if oid is None:
            return None
        doc = await self.collection.find_one_and_update(
            {"user": oid},
            {"$set": fields},
            projection={"_id": 1},
            return_document=ReturnDocument.AFTER,
        )
        return await self._find_one({"_id": doc["_id"]}) if doc else None

    async def delete_by_user(self, user_id: str) -> bool:
        oid = to_object_id(user_id)
        if oid is None:
            return False
        result = await self.collection.delete_one({"user": oid})
        return result.deleted_count == 1

    async def _apply(self, match: Dict[str, Any], update: Dict[str, Any]) -> Optional[Profile]:
        doc = await self.collection.find_one_and_update(
            match,
            update,
            projection={"_id": 1},
            return_document=ReturnDocument.AFTER,
        )
        return await self._find_one({"_id": doc["_id"]}) if doc else None

    async def push_item(self, user_id: str, section: str, item: Dict[str, Any]) -> Optional[Profile]:
        """Prepend ``item`` to ``section`` (experience / education)."""
        _check_section(section)
        oid = to_object_id(user_id)
        if oid is None:
            return None
        entry = {"_id": ObjectId(), **item}
        return await self._apply(
            {"user": oid},
            {"$push": {section: {"$each": [entry], "$position": 0}}},
        )

    async def replace_item(
        self, user_id: str, section: str, item_id: str, item: Dict[str, Any]
    ) -> Optional[Profile]:
        """Replace one entry in place, keeping its id and position."""
        _check_section(section)
        oid, item_oid = to_object_id(user_id), to_object_id(item_id)
        if oid is None or item_oid is None:
            return None
        return await self._apply(
            {"user": oid, f"{section}._id": item_oid},
            {"$set": {f"{section}.$": {"_id": item_oid, **item}}},
        )

    async def pull_item(self, user_id: str, section: str, item_id: str) -> Optional[Profile]:
        _check_section(section)
        oid, item_oid = to_object_id(user_id), to_object_id(item_id)
        if oid is None or item_oid is None:
            return None
        return await self._apply(
            {"user": oid, f"{section}._id": item_oid},
            {"$pull": {section: {"_id": item_oid}}},
        )


def _check_section(section: str) -> None:
    if section not in PROFILE_SECTIONS:
        raise ValueError(f"Unknown profile section '{section}'")


# ── Posts ──────────────────────────────────────────────────────────────


class PostRepository:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.collection = db["posts"]

    async def create(self, user_id: str, text: str, name: Optional[str], avatar: Optional[str]) -> Post:
        doc = {
            "user": ObjectId(user_id),
            "text": text,
            "name": name,
            "avatar": avatar,
            "likes": [],
            "comments": [],
            "date": utcnow(),
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return Post.model_validate(doc)

    async def list_newest_first(self) -> List[Post]:
        cursor = self.collection.find({}).sort("date", -1)
        return [Post.model_validate(doc) async for doc in cursor]

    async def find_by_id(self, post_id: str) -> Optional[Post]:
        oid = to_object_id(post_id)
        if oid is None:
            return None
        doc = await self.collection.find_one({"_id": oid})
        return Post.model_validate(doc) if doc else None

    async def delete_owned(self, post_id: str, owner_id: str) -> bool:
        """Delete the post only if ``owner_id`` still owns it."""
        oid, owner = to_object_id(post_id), to_object_id(owner_id)
        if oid is None or owner is None:
            return False
        result = await self.collection.delete_one({"_id": oid, "user": owner})
        return result.deleted_count == 1

    async def _update_array(
        self, match: Dict[str, Any], update: Dict[str, Any], field: str
    ) -> Optional[List[Dict[str, Any]]]:
        doc = await self.collection.find_one_and_update(
            match,
            update,
            projection={field: 1},
            return_document=ReturnDocument.AFTER,
        )
        return doc.get(field, []) if doc else None

    async def add_like(self, post_id: str, user_id: str) -> Optional[List[Like]]:
        """Prepend a like; None when the post is missing or already liked."""
        oid, uid = to_object_id(post_id), to_object_id(user_id)
        if oid is None or uid is None:
            return None
        likes = await self._update_array(
            {"_id": oid, "likes.user": {"$ne": uid}},
            {"$push": {"likes": {"$each": [{"_id": ObjectId(), "user": uid}], "$position": 0}}},
            "likes",
        )
        return None if likes is None else [Like.model_validate(like) for like in likes]

    async def remove_like(self, post_id: str, user_id: str) -> Optional[List[Like]]:
        """Remove the user's like; None when the post is missing or not liked."""
        oid, uid = to_object_id(post_id), to_object_id(user_id)
        if oid is None or uid is None:
            return None
        likes = await self._update_array(
            {"_id": oid, "likes.user": uid},
            {"$pull": {"likes": {"user": uid}}},
            "likes",
        )
        return None if likes is None else [Like.model_validate(like) for like in likes]

    async def add_comment(
        self,
        post_id: str,
        user_id: str,
        text: str,
        name: Optional[str],
        avatar: Optional[str],
    ) -> Optional[List[Comment]]:
        oid = to_object_id(post_id)
        if oid is None:
            return None
        comment = {
            "_id": ObjectId(),
            "user": ObjectId(user_id),
            "text": text,
            "name": name,
            "avatar": avatar,
            "date": utcnow(),
        }
        comments = await self._update_array(
            {"_id": oid},
            {"$push": {"comments": {"$each": [comment], "$position": 0}}},
            "comments",
        )
        return None if comments is None else [Comment.model_validate(c) for c in comments]

    async def remove_comment(self, post_id: str, comment_id: str, owner_id: str) -> Optional[List[Comment]]:
        """Pull a comment only if ``owner_id`` wrote it."""
        oid, cid, owner = to_object_id(post_id), to_object_id(comment_id), to_object_id(owner_id)
        if oid is None or cid is None or owner is None:
            return None
        comments = await self._update_array(
            {"_id": oid, "comments": {"$elemMatch": {"_id": cid, "user": owner}}},
            {"$pull": {"comments": {"_id": cid}}},
            "comments",
        )
        return None if comments is None else [Comment.model_validate(c) for c in comments]
