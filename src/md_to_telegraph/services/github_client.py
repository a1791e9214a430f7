"""GitHub repository metadata: read and update description/homepage."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import github_repository, github_token

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"


class GitHubClient:
    """Talks to the REST API for the repository the action runs in."""

    def __init__(self, token: str | None = None, repository: str | None = None, timeout: float = 10.0) -> None:
        token = token or github_token()
        if not token:
            raise RuntimeError(
                "GitHub token is required. Please provide GITHUB_TOKEN environment variable or github-token input."
            )
        repository = repository or github_repository()
        owner, _, repo = repository.partition("/")
        if not owner or not repo:
            raise RuntimeError(f"Repository must look like owner/repo, got: {repository!r}")
        self.owner = owner
        self.repo = repo
        self._token = token
        self._timeout = timeout

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=GITHUB_API_BASE,
            timeout=self._timeout,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {self._token}",
            },
        )

    @property
    def _repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def get_repository(self) -> dict[str, Any]:
        """GET /repos/{owner}/{repo}: owner, repo, description, homepage."""
        with self._client() as client:
            resp = client.get(self._repo_path)
            try:
                resp.raise_for_status()
            except httpx.HTTPStatusError as e:
                logger.error("Failed to get repository information: %s", e)
                raise
            data = resp.json()
        return {
            "owner": self.owner,
            "repo": self.repo,
            "description": data.get("description") or None,
            "homepage": data.get("homepage") or None,
        }

    def _update(self, fields: dict[str, Any]) -> None:
        with self._client() as client:
            resp = client.patch(self._repo_path, json=fields)
            resp.raise_for_status()

    def update_description(self, description: str) -> None:
        logger.info("Updating repository description to: %s", description)
        try:
            self._update({"description": description})
        except httpx.HTTPError as e:
            logger.error("Failed to update repository description: %s", e)
            raise
        logger.info("Repository description updated successfully")

    def update_homepage(self, homepage: str) -> None:
        logger.info("Updating repository homepage to: %s", homepage)
        try:
            self._update({"homepage": homepage})
        except httpx.HTTPError as e:
            logger.error("Failed to update repository homepage: %s", e)
            raise
        logger.info("Repository homepage updated successfully")

    def check_permissions(self) -> bool:
        """True when the repository can be read with the configured token."""
        try:
            with self._client() as client:
                client.get(self._repo_path).raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("GitHub API permission check failed: %s", e)
            return False
        return True
