"""
GitHub repository lookup for profile pages.

Fetches a user's most recently created public repositories through the
GitHub REST API, authenticating as the configured OAuth app when client
credentials are set.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from config.settings import config

logger = logging.getLogger(__name__)


class GitHubProfileNotFound(Exception):
    """GitHub answered with anything other than 200 for the user."""


class GitHubClient:
    """Thin async client for the GitHub user-repos endpoint."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = (base_url or config.github_api_url).rstrip("/")
        self._client_id = config.github_client_id if client_id is None else client_id
        self._client_secret = config.github_client_secret if client_secret is None else client_secret
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self._client_id and self._client_secret)

    async def list_repos(self, username: str, count: Optional[int] = None) -> List[Dict[str, Any]]:
        """Return up to ``count`` repos for ``username``, oldest-created first."""
        params = {"per_page": count or config.github_repo_count, "sort": "created", "direction": "asc"}
        auth = (self._client_id, self._client_secret) if self.is_configured() else None

        async with httpx.AsyncClient(base_url=self._base_url, transport=self._transport, timeout=10.0) as client:
            resp = await client.get(
                f"/users/{quote(username, safe='')}/repos",
                params=params,
                auth=auth,
                headers={"Accept": "application/vnd.github+json", "User-Agent": "devconnector-api"},
            )

        if resp.status_code != 200:
            logger.info("GitHub lookup for %s returned %s", username, resp.status_code)
            raise GitHubProfileNotFound(username)
        return resp.json()


def get_github_client() -> GitHubClient:
    return GitHubClient()
