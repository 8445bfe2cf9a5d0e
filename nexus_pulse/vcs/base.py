"""
Base VCS provider interface and normalized repository data.
"""

from abc import ABC, abstractmethod
from typing import NamedTuple

from nexus_pulse.core import RawMetrics


class RepositorySummary(NamedTuple):
    """Basic repository metadata shown in the dashboard header."""

    name: str
    description: str
    stars: int
    forks: int
    url: str


class CommitActivity(NamedTuple):
    sha: str
    message: str
    author: str
    date: str
    url: str


class PullRequestActivity(NamedTuple):
    number: int
    title: str
    state: str  # "open", "closed" or "merged"
    merged_at: str | None
    author: str
    url: str


class IssueActivity(NamedTuple):
    number: int
    title: str
    state: str  # "open" or "closed"
    created_at: str
    updated_at: str
    is_stale: bool
    url: str
    labels: list[str]


class VCSRepositoryData(NamedTuple):
    """Normalized repository data returned by every VCS provider."""

    repository: RepositorySummary
    metrics: RawMetrics
    recent_commits: list[CommitActivity]
    recent_pull_requests: list[PullRequestActivity]
    recent_issues: list[IssueActivity]


class BaseVCSProvider(ABC):
    """Interface that every VCS provider implements."""

    @abstractmethod
    def get_platform_name(self) -> str:
        """Return the platform identifier (e.g. 'github')."""

    @abstractmethod
    def validate_credentials(self) -> bool:
        """Return True if the provider has usable credentials."""

    @abstractmethod
    def get_repository_url(self, owner: str, repo: str) -> str:
        """Construct the web URL of a repository."""

    @abstractmethod
    async def get_repository_data(self, owner: str, repo: str) -> VCSRepositoryData:
        """
        Fetch and normalize repository activity.

        Raises:
            ValueError: If the repository is missing or the payload is malformed
            httpx.HTTPError: If the upstream API fails
        """
