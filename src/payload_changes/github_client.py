"""GitHub REST API client for commit history retrieval."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

import requests

from .errors import ApiError, CommitFetchError
from .models import RawCommit
from .repository import format_repository

logger = logging.getLogger(__name__)


class CommitSource(Protocol):
    """Anything able to list the commits of one repository branch."""

    def list_commits(
        self,
        organization: str,
        name: str,
        branch: str,
        since: datetime,
    ) -> List[RawCommit]:
        ...


class GitHubClient:
    """Small, typed client for the GitHub commits API.

    The client keeps no per-call state, so a single instance is shared by
    every repository worker.
    """

    BASE_URL = "https://api.github.com"
    _API_VERSION = "2022-11-28"

    def __init__(self, token: str, timeout_seconds: int = 30) -> None:
        """Initialize an authenticated GitHub API client.

        Args:
            token: GitHub personal access token.
            timeout_seconds: Per-request timeout in seconds.
        """
        self._timeout_seconds = timeout_seconds

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": self._API_VERSION,
            }
        )

    def _build_url(self, path: str) -> str:
        """Build a fully qualified API URL from a path below the API root."""
        return f"{self.BASE_URL}/{path.lstrip('/')}"

    def _format_datetime(self, value: datetime) -> str:
        """Format a datetime as UTC ISO8601 suitable for GitHub query params."""
        utc_value = value.astimezone(timezone.utc)
        return utc_value.isoformat().replace("+00:00", "Z")

    def _parse_datetime(self, value: Optional[str]) -> Optional[datetime]:
        """Parse GitHub ISO8601 timestamps into timezone-aware datetimes."""
        if not value:
            return None

        normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
        parsed = datetime.fromisoformat(normalized)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Execute a single GET request and decode the JSON body.

        Raises:
            ApiError: If the request fails, returns HTTP >= 400,
                or does not return valid JSON.
        """
        url = self._build_url(path)

        try:
            response = self._session.get(url, params=params, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise ApiError(f"GitHub request failed: GET {url}: {exc}") from exc

        if response.status_code >= 400:
            raise ApiError(
                "GitHub API request failed: "
                f"GET {url} returned {response.status_code} - {response.text}"
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(f"GitHub API returned invalid JSON: GET {url}") from exc

    def list_commits(
        self,
        organization: str,
        name: str,
        branch: str,
        since: datetime,
    ) -> List[RawCommit]:
        """List commits on ``branch`` committed at or after ``since``.

        Only the first page returned by the API is read.

        Raises:
            CommitFetchError: If the request fails or the payload is not a
                list of well-formed commits.
        """
        repository = format_repository(organization, name)
        try:
            payload = self._get_json(
                f"repos/{organization}/{name}/commits",
                params={"sha": branch, "since": self._format_datetime(since)},
            )
        except ApiError as exc:
            raise CommitFetchError(f"{repository}: {exc}") from exc

        if not isinstance(payload, list):
            raise CommitFetchError(f"{repository}: GitHub API returned unexpected payload shape")

        commits: List[RawCommit] = []
        for item in payload:
            if not isinstance(item, dict):
                raise CommitFetchError(f"{repository}: GitHub API returned unexpected commit shape")

            commit = item.get("commit") or {}
            if not isinstance(commit, dict):
                raise CommitFetchError(f"{repository}: GitHub API returned unexpected commit shape")

            committer = commit.get("committer") or {}
            if not isinstance(committer, dict):
                raise CommitFetchError(f"{repository}: GitHub API returned unexpected committer shape")

            date = committer.get("date")
            if date is not None and not isinstance(date, str):
                raise CommitFetchError(f"{repository}: GitHub API returned unexpected committer date {date!r}")

            try:
                committed_at = self._parse_datetime(date)
            except ValueError:
                committed_at = None

            if committed_at is None:
                logger.debug(
                    "[%s] skipping commit %s without committer date",
                    repository,
                    item.get("sha"),
                    extra={"repository": repository, "sha": item.get("sha")},
                )
                continue

            commits.append(
                RawCommit(
                    message=str(commit.get("message") or ""),
                    html_url=str(item.get("html_url") or ""),
                    committed_at=committed_at,
                )
            )

        return commits
