"""
Post routes — posts, likes and comments.

Route prefix: /api/posts
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from api.dependencies import get_post_repo, get_user_repo, json_body
from api.errors import BadRequestError, NotFoundError
from auth.dependencies import get_current_user, get_current_user_id
from auth.guards import require_owner
from database.models import Post, User
from database.repositories import PostRepository, UserRepository
from utils.schemas import CommentRequest, PostRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["posts"])

POST_NOT_FOUND = "Post not found"


async def _author(users: UserRepository, user_id: str) -> User:
    user = await users.find_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def _post(posts: PostRepository, post_id: str) -> Post:
    post = await posts.find_by_id(post_id)
    if post is None:
        raise NotFoundError(POST_NOT_FOUND)
    return post


# ── Posts ──────────────────────────────────────────────────────────────


@router.post("")
async def create_post(
    user_id: str = Depends(get_current_user_id),
    req: PostRequest = Depends(json_body(PostRequest)),
    posts: PostRepository = Depends(get_post_repo),
    users: UserRepository = Depends(get_user_repo),
) -> Dict[str, Any]:
    """Create a post; author name and avatar are copied at creation time."""
    author = await _author(users, user_id)
    post = await posts.create(user_id, req.text, author.name, author.avatar)
    return post.to_response()


@router.get("", dependencies=[Depends(get_current_user)])
async def list_posts(
    posts: PostRepository = Depends(get_post_repo),
) -> List[Dict[str, Any]]:
    return [post.to_response() for post in await posts.list_newest_first()]


@router.get("/{post_id}", dependencies=[Depends(get_current_user)])
async def get_post(
    post_id: str,
    posts: PostRepository = Depends(get_post_repo),
) -> Dict[str, Any]:
    return (await _post(posts, post_id)).to_response()


@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    posts: PostRepository = Depends(get_post_repo),
) -> Dict[str, str]:
    post = await _post(posts, post_id)
    require_owner(post.user, user_id, "Not Authorized")

    if not await posts.delete_owned(post_id, user_id):
        raise NotFoundError(POST_NOT_FOUND)
    logger.info("Post %s removed by %s", post_id, user_id)
    return {"msg": "Post Removed"}


# ── Likes ──────────────────────────────────────────────────────────────


@router.put("/like/{post_id}")
async def like_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    posts: PostRepository = Depends(get_post_repo),
) -> List[Dict[str, Any]]:
    await _post(posts, post_id)
    likes = await posts.add_like(post_id, user_id)
    if likes is None:
        raise BadRequestError("Post already liked")
    return [like.to_response() for like in likes]


@router.put("/unlike/{post_id}")
async def unlike_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    posts: PostRepository = Depends(get_post_repo),
) -> List[Dict[str, Any]]:
    await _post(posts, post_id)
    likes = await posts.remove_like(post_id, user_id)
    if likes is None:
        raise BadRequestError("Post has not been liked yet")
    return [like.to_response() for like in likes]


# ── Comments ───────────────────────────────────────────────────────────


@router.post("/comment/{post_id}")
async def add_comment(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    req: CommentRequest = Depends(json_body(CommentRequest)),
    posts: PostRepository = Depends(get_post_repo),
    users: UserRepository = Depends(get_user_repo),
) -> List[Dict[str, Any]]:
    author = await _author(users, user_id)
    comments = await posts.add_comment(post_id, user_id, req.text, author.name, author.avatar)
    if comments is None:
        raise NotFoundError(POST_NOT_FOUND)
    return [comment.to_response() for comment in comments]


@router.delete("/comment/{post_id}/{comment_id}")
async def delete_comment(
    post_id: str,
    comment_id: str,
    user_id: str = Depends(get_current_user_id),
    posts: PostRepository = Depends(get_post_repo),
) -> List[Dict[str, Any]]:
    post = await _post(posts, post_id)
    comment = next((c for c in post.comments if c.id == comment_id), None)
    if comment is None:
        raise NotFoundError("Comment does not exist")
    require_owner(comment.user, user_id, "User not authorized")

    comments = await posts.remove_comment(post_id, comment_id, user_id)
    if comments is None:
        raise NotFoundError("Comment does not exist")
    return [c.to_response() for c in comments]
