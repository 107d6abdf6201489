"""
Profile routes — profile CRUD, experience, education and GitHub repos.

Route prefix: /api/profile

Experience and education changes are scoped to the caller's own profile
by the update filter; there is no separate ownership check for them.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import httpx
from fastapi import APIRouter, Depends

from api.dependencies import get_profile_repo, get_user_repo, json_body
from api.errors import BadRequestError, InternalError, NotFoundError
from auth.dependencies import get_current_user_id
from connectors.github import GitHubClient, GitHubProfileNotFound, get_github_client
from database.models import Profile
from database.repositories import ProfileAlreadyExistsError, ProfileRepository, UserRepository
from utils.schemas import EducationRequest, ExperienceRequest, ProfileRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["profile"])

NO_PROFILE = "There is no profile for this user"
PROFILE_NOT_FOUND = "Profile not found"


async def _own_profile(profiles: ProfileRepository, user_id: str) -> Profile:
    profile = await profiles.find_by_user(user_id)
    if profile is None:
        raise BadRequestError(NO_PROFILE)
    return profile


# ── Profile ────────────────────────────────────────────────────────────


@router.post("")
async def create_profile(
    user_id: str = Depends(get_current_user_id),
    req: ProfileRequest = Depends(json_body(ProfileRequest)),
    profiles: ProfileRepository = Depends(get_profile_repo),
) -> Dict[str, Any]:
    """Create the caller's profile."""
    fields = req.profile_fields()
    fields["social"] = req.social_fields()
    try:
        profile = await profiles.create(user_id, fields)
    except ProfileAlreadyExistsError:
        raise BadRequestError("Profile already exists for this user") from None
    logger.info("Created profile for %s", user_id)
    return profile.to_response()


@router.put("")
async def update_profile(
    user_id: str = Depends(get_current_user_id),
    req: ProfileRequest = Depends(json_body(ProfileRequest)),
    profiles: ProfileRepository = Depends(get_profile_repo),
) -> Dict[str, Any]:
    """Update the caller's profile; social links are merged, not replaced."""
    fields = req.profile_fields()
    for key, value in req.social_fields().items():
        fields[f"social.{key}"] = value

    profile = await profiles.update(user_id, fields)
    if profile is None:
        raise BadRequestError(NO_PROFILE)
    return profile.to_response()


@router.get("/me")
async def get_my_profile(
    user_id: str = Depends(get_current_user_id),
    profiles: ProfileRepository = Depends(get_profile_repo),
) -> Dict[str, Any]:
    profile = await _own_profile(profiles, user_id)
    return profile.to_response()


@router.get("")
async def list_profiles(
    profiles: ProfileRepository = Depends(get_profile_repo),
) -> List[Dict[str, Any]]:
    return [profile.to_response() for profile in await profiles.list_all()]


@router.get("/user/{user_id}")
async def get_profile_by_user(
    user_id: str,
    profiles: ProfileRepository = Depends(get_profile_repo),
) -> Dict[str, Any]:
    profile = await profiles.find_by_user(user_id)
    if profile is None:
        raise NotFoundError(PROFILE_NOT_FOUND, status_code=400)
    return profile.to_response()


@router.delete("")
async def delete_account(
    user_id: str = Depends(get_current_user_id),
    profiles: ProfileRepository = Depends(get_profile_repo),
    users: UserRepository = Depends(get_user_repo),
) -> Dict[str, str]:
    """Delete the caller's profile, then the user itself."""
    await profiles.delete_by_user(user_id)
    await users.delete_by_id(user_id)
    logger.info("Deleted user %s and their profile", user_id)
    return {"msg": "User Deleted"}


# ── Experience / education ─────────────────────────────────────────────


async def _push(profiles: ProfileRepository, user_id: str, section: str, item: Dict[str, Any]) -> Dict[str, Any]:
    profile = await profiles.push_item(user_id, section, item)
    if profile is None:
        raise BadRequestError(NO_PROFILE)
    return profile.to_response()


async def _replace(
    profiles: ProfileRepository, user_id: str, section: str, item_id: str, item: Dict[str, Any]
) -> Dict[str, Any]:
    await _own_profile(profiles, user_id)
    profile = await profiles.replace_item(user_id, section, item_id, item)
    if profile is None:
        raise NotFoundError(f"{section.capitalize()} not found")
    return profile.to_response()


async def _pull(profiles: ProfileRepository, user_id: str, section: str, item_id: str) -> Dict[str, Any]:
    await _own_profile(profiles, user_id)
    profile = await profiles.pull_item(user_id, section, item_id)
    if profile is None:
        raise NotFoundError(f"{section.capitalize()} not found")
    return profile.to_response()


@router.post("/experience")
async def add_experience(
    user_id: str = Depends(get_current_user_id),
    req: ExperienceRequest = Depends(json_body(ExperienceRequest)),
    profiles: ProfileRepository = Depends(get_profile_repo),
) -> Dict[str, Any]:
    return await _push(profiles, user_id, "experience", req.item())


@router.put("/experience/{exp_id}")
async def update_experience(
    exp_id: str,
    user_id: str = Depends(get_current_user_id),
    req: ExperienceRequest = Depends(json_body(ExperienceRequest)),
    profiles: ProfileRepository = Depends(get_profile_repo),
) -> Dict[str, Any]:
    return await _replace(profiles, user_id, "experience", exp_id, req.item())


@router.delete("/experience/{exp_id}")
async def delete_experience(
    exp_id: str,
    user_id: str = Depends(get_current_user_id),
    profiles: ProfileRepository = Depends(get_profile_repo),
) -> Dict[str, Any]:
    return await _pull(profiles, user_id, "experience", exp_id)


@router.post("/education")
async def add_education(
    user_id: str = Depends(get_current_user_id),
    req: EducationRequest = Depends(json_body(EducationRequest)),
    profiles: ProfileRepository = Depends(get_profile_repo),
) -> Dict[str, Any]:
    return await _push(profiles, user_id, "education", req.item())


@router.put("/education/{edu_id}")
async def update_education(
    edu_id: str,
    user_id: str = Depends(get_current_user_id),
    req: EducationRequest = Depends(json_body(EducationRequest)),
    profiles: ProfileRepository = Depends(get_profile_repo),
) -> Dict[str, Any]:
    return await _replace(profiles, user_id, "education", edu_id, req.item())


@router.delete("/education/{edu_id}")
async def delete_education(
    edu_id: str,
    user_id: str = Depends(get_current_user_id),
    profiles: ProfileRepository = Depends(get_profile_repo),
) -> Dict[str, Any]:
    return await _pull(profiles, user_id, "education", edu_id)


# ── GitHub ─────────────────────────────────────────────────────────────


@router.get("/github/{username}")
async def get_github_repos(
    username: str,
    github: GitHubClient = Depends(get_github_client),
) -> List[Dict[str, Any]]:
    """Latest public repos of a GitHub user."""
    try:
        return await github.list_repos(username)
    except GitHubProfileNotFound:
        raise NotFoundError("No Github profile found") from None
    except httpx.HTTPError as exc:
        logger.error("GitHub request for %s failed: %s", username, exc)
        raise InternalError() from exc
