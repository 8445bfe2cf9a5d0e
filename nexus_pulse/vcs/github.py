"""
GitHub VCS provider implementation for NexusPulse.

This module implements the GitHub-specific VCS provider using the GitHub REST
API to collect the activity counts the vitality engine scores.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

from nexus_pulse.config import (
    ACTIVITY_WINDOW_DAYS,
    STALE_THRESHOLD_DAYS,
    get_github_token,
    get_request_timeout,
)
from nexus_pulse.core import RawMetrics
from nexus_pulse.formatting import parse_timestamp
from nexus_pulse.http_client import _get_async_http_client
from nexus_pulse.vcs.base import (
    BaseVCSProvider,
    CommitActivity,
    IssueActivity,
    PullRequestActivity,
    RepositorySummary,
    VCSRepositoryData,
)

# GitHub API endpoint
GITHUB_REST_API = "https://api.github.com"

# Page sizes requested from each REST endpoint (100 is the GitHub maximum)
REST_SAMPLE_LIMITS = {
    "commits": 100,
    "closed_pulls": 100,
    "open_issues": 100,
}

# Number of items kept for the activity feed
RECENT_LIMITS = {
    "commits": 10,
    "pull_requests": 10,
    "issues": 15,
}

TITLE_MAX_LENGTH = 80


def _to_github_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def is_issue_stale(updated_at: str, now: datetime) -> bool:
    """Return True if an issue has had no activity for STALE_THRESHOLD_DAYS."""
    return now - parse_timestamp(updated_at) > timedelta(days=STALE_THRESHOLD_DAYS)


def _count_from_link_header(response: httpx.Response) -> int | None:
    """Read the total item count from a per_page=1 response's 'last' link."""
    last_link = response.links.get("last")
    if not last_link or "url" not in last_link:
        return None
    page = httpx.URL(last_link["url"]).params.get("page")
    return int(page) if page and page.isdigit() else None


class GitHubProvider(BaseVCSProvider):
    """GitHub VCS provider using the REST API."""

    def __init__(self, token: str | None = None):
        """
        Initialize GitHub provider.

        Args:
            token: GitHub Personal Access Token. If not provided, reads from
                   GITHUB_TOKEN environment variable.

        Raises:
            ValueError: If token is not provided and GITHUB_TOKEN env var is not set
        """
        self.token = token or get_github_token()
        if not self.token:
            raise ValueError(
                "GITHUB_TOKEN is required for GitHub provider.\n"
                "\n"
                "To get started:\n"
                "1. Create a GitHub Personal Access Token:\n"
                "   -> https://github.com/settings/tokens/new\n"
                "2. Select scope: 'public_repo'\n"
                "3. Set the token:\n"
                "   export GITHUB_TOKEN='your_token_here'  # Linux/macOS\n"
                "   or add to your .env file: GITHUB_TOKEN=your_token_here\n"
            )

    def get_platform_name(self) -> str:
        """Return 'github' as the platform identifier."""
        return "github"

    def validate_credentials(self) -> bool:
        """Check if GitHub token is configured."""
        return self.token is not None and len(self.token) > 0

    def get_repository_url(self, owner: str, repo: str) -> str:
        """Construct GitHub repository URL."""
        return f"https://github.com/{owner}/{repo}"

    async def get_repository_data(
        self, owner: str, repo: str, now: datetime | None = None
    ) -> VCSRepositoryData:
        """
        Fetch repository activity from the GitHub REST API.

        The five endpoints are requested concurrently.

        Args:
            owner: GitHub repository owner (username or organization)
            repo: GitHub repository name
            now: Reference time for the activity window (defaults to now)

        Returns:
            Normalized VCSRepositoryData structure

        Raises:
            ValueError: If the repository payload is malformed
            httpx.HTTPStatusError: If GitHub API returns an error
        """
        if now is None:
            now = datetime.now(timezone.utc)
        since = now - timedelta(days=ACTIVITY_WINDOW_DAYS)
        base_path = f"/repos/{owner}/{repo}"

        client = await _get_async_http_client()
        (
            repo_response,
            commits_response,
            pulls_response,
            issues_response,
            contributors_response,
        ) = await asyncio.gather(
            self._get(client, base_path),
            self._get(
                client,
                f"{base_path}/commits",
                {
                    "since": _to_github_timestamp(since),
                    "per_page": REST_SAMPLE_LIMITS["commits"],
                },
            ),
            self._get(
                client,
                f"{base_path}/pulls",
                {
                    "state": "closed",
                    "sort": "updated",
                    "direction": "desc",
                    "per_page": REST_SAMPLE_LIMITS["closed_pulls"],
                },
            ),
            self._get(
                client,
                f"{base_path}/issues",
                {"state": "open", "per_page": REST_SAMPLE_LIMITS["open_issues"]},
            ),
            self._get(
                client,
                f"{base_path}/contributors",
                {"per_page": 1, "anon": "false"},
            ),
        )

        repo_info = repo_response.json()
        if not isinstance(repo_info, dict) or "full_name" not in repo_info:
            raise ValueError(f"Repository {owner}/{repo} not found or is inaccessible.")

        return self._normalize_github_data(
            repo_info,
            commits_response.json(),
            pulls_response.json(),
            issues_response.json(),
            self._count_contributors(contributors_response),
            since=since,
            now=now,
        )

    async def _get(
        self,
        client: httpx.AsyncClient,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Execute a GET request against the GitHub REST API.

        Raises:
            httpx.HTTPStatusError: If API returns an error
        """
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github.v3+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "nexus-pulse",
        }
        response = await client.get(
            f"{GITHUB_REST_API}{path}",
            params=params,
            headers=headers,
            timeout=get_request_timeout(),
        )
        response.raise_for_status()
        return response

    def _count_contributors(self, response: httpx.Response) -> int:
        # GitHub answers 204 No Content for empty repositories
        if response.status_code == 204 or not response.content:
            return 0
        total = _count_from_link_header(response)
        if total is not None:
            return total
        return len(response.json())

    def _normalize_github_data(
        self,
        repo_info: dict[str, Any],
        commits_data: list[dict[str, Any]],
        pulls_data: list[dict[str, Any]],
        issues_data: list[dict[str, Any]],
        contributors: int,
        since: datetime,
        now: datetime,
    ) -> VCSRepositoryData:
        """
        Normalize GitHub REST responses to VCSRepositoryData format.

        Args:
            repo_info: Repository payload
            commits_data: Commits since the start of the activity window
            pulls_data: Closed pull requests, most recently updated first
            issues_data: Open issues (may include pull requests)
            contributors: Contributor count
            since: Start of the activity window
            now: Reference time for staleness

        Returns:
            Normalized VCSRepositoryData structure
        """
        now_iso = now.isoformat()

        # Extract commits
        recent_commits = []
        for entry in commits_data[: RECENT_LIMITS["commits"]]:
            commit = entry.get("commit") or {}
            commit_author = commit.get("author") or {}
            user = entry.get("author") or {}
            message = (commit.get("message") or "").split("\n")[0]
            recent_commits.append(
                CommitActivity(
                    sha=entry["sha"][:7],
                    message=message[:TITLE_MAX_LENGTH],
                    author=commit_author.get("name") or user.get("login") or "unknown",
                    date=commit_author.get("date") or now_iso,
                    url=entry.get("html_url", ""),
                )
            )

        # Extract merged pull requests inside the window
        merged_prs = [
            pr
            for pr in pulls_data
            if pr.get("merged_at") and parse_timestamp(pr["merged_at"]) >= since
        ]
        recent_prs = [
            PullRequestActivity(
                number=pr["number"],
                title=pr.get("title", "")[:TITLE_MAX_LENGTH],
                state="merged",
                merged_at=pr["merged_at"],
                author=(pr.get("user") or {}).get("login") or "ghost",
                url=pr.get("html_url", ""),
            )
            for pr in merged_prs[: RECENT_LIMITS["pull_requests"]]
        ]

        # Extract issues (the issues endpoint also lists pull requests)
        issues = [issue for issue in issues_data if "pull_request" not in issue]
        stale_flags = [is_issue_stale(issue["updated_at"], now) for issue in issues]
        recent_issues = [
            IssueActivity(
                number=issue["number"],
                title=issue.get("title", "")[:TITLE_MAX_LENGTH],
                state=issue.get("state", "open"),
                created_at=issue["created_at"],
                updated_at=issue["updated_at"],
                is_stale=is_stale,
                url=issue.get("html_url", ""),
                labels=[label["name"] for label in issue.get("labels", [])],
            )
            for issue, is_stale in list(zip(issues, stale_flags))[
                : RECENT_LIMITS["issues"]
            ]
        ]

        last_commit_date = recent_commits[0].date if recent_commits else now_iso

        metrics = RawMetrics(
            commits=len(commits_data),
            prs_merged=len(merged_prs),
            stale_issues=sum(stale_flags),
            total_issues=len(issues),
            total_stars=repo_info.get("stargazers_count", 0),
            total_forks=repo_info.get("forks_count", 0),
            contributors=contributors,
            last_commit_date=last_commit_date,
        )

        repository = RepositorySummary(
            name=repo_info["full_name"],
            description=repo_info.get("description") or "No description provided.",
            stars=metrics.total_stars,
            forks=metrics.total_forks,
            url=repo_info.get("html_url", ""),
        )

        return VCSRepositoryData(
            repository=repository,
            metrics=metrics,
            recent_commits=recent_commits,
            recent_pull_requests=recent_prs,
            recent_issues=recent_issues,
        )
