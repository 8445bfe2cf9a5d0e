"""Tests for GitHub VCS provider."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from nexus_pulse import vcs
from nexus_pulse.vcs import (
    BaseVCSProvider,
    get_vcs_provider,
    list_supported_platforms,
    register_vcs_provider,
)
from nexus_pulse.vcs.github import GitHubProvider, is_issue_stale

NOW = datetime(2024, 6, 30, tzinfo=timezone.utc)

REPO_PAYLOAD = {
    "full_name": "octo/demo",
    "description": None,
    "stargazers_count": 1200,
    "forks_count": 80,
    "html_url": "https://github.com/octo/demo",
}

COMMITS_PAYLOAD = [
    {
        "sha": "abcdef1234567890",
        "commit": {
            "message": "feat: add pulse\n\nLonger body text",
            "author": {"name": "Alice", "date": "2024-06-29T10:00:00Z"},
        },
        "author": {"login": "alice"},
        "html_url": "https://github.com/octo/demo/commit/abcdef1",
    },
    {
        "sha": "1234567abcdef000",
        "commit": {"message": "fix: typo", "author": None},
        "author": {"login": "bob"},
        "html_url": "https://github.com/octo/demo/commit/1234567",
    },
    {
        "sha": "fedcba9876543210",
        "commit": {
            "message": "chore: bump",
            "author": {"name": "Carol", "date": "2024-06-20T08:00:00Z"},
        },
        "author": None,
        "html_url": "https://github.com/octo/demo/commit/fedcba9",
    },
]

PULLS_PAYLOAD = [
    {
        "number": 12,
        "title": "Merged inside the window",
        "merged_at": "2024-06-20T00:00:00Z",
        "user": {"login": "alice"},
        "html_url": "https://github.com/octo/demo/pull/12",
    },
    {
        "number": 11,
        "title": "Closed without merge",
        "merged_at": None,
        "user": {"login": "bob"},
        "html_url": "https://github.com/octo/demo/pull/11",
    },
    {
        "number": 10,
        "title": "Merged before the window",
        "merged_at": "2024-05-01T00:00:00Z",
        "user": None,
        "html_url": "https://github.com/octo/demo/pull/10",
    },
]

ISSUES_PAYLOAD = [
    {
        "number": 7,
        "title": "Fresh issue",
        "state": "open",
        "created_at": "2024-06-01T00:00:00Z",
        "updated_at": "2024-06-25T00:00:00Z",
        "html_url": "https://github.com/octo/demo/issues/7",
        "labels": [{"name": "bug"}],
    },
    {
        "number": 6,
        "title": "Forgotten issue",
        "state": "open",
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-04-01T00:00:00Z",
        "html_url": "https://github.com/octo/demo/issues/6",
        "labels": [],
    },
    {
        "number": 5,
        "title": "Open pull request",
        "state": "open",
        "created_at": "2024-06-01T00:00:00Z",
        "updated_at": "2024-06-01T00:00:00Z",
        "html_url": "https://github.com/octo/demo/pull/5",
        "labels": [],
        "pull_request": {"url": "https://api.github.com/repos/octo/demo/pulls/5"},
    },
]

CONTRIBUTORS_LINK = (
    '<https://api.github.com/repositories/1/contributors?per_page=1&anon=false&page=2>; rel="next", '
    '<https://api.github.com/repositories/1/contributors?per_page=1&anon=false&page=42>; rel="last"'
)


def make_handler(requests_seen: list[httpx.Request], overrides: dict | None = None):
    """Build a MockTransport handler that serves canned GitHub responses."""
    overrides = overrides or {}

    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        path = request.url.path
        if path in overrides:
            return overrides[path]
        if path == "/repos/octo/demo":
            return httpx.Response(200, json=REPO_PAYLOAD)
        if path == "/repos/octo/demo/commits":
            return httpx.Response(200, json=COMMITS_PAYLOAD)
        if path == "/repos/octo/demo/pulls":
            return httpx.Response(200, json=PULLS_PAYLOAD)
        if path == "/repos/octo/demo/issues":
            return httpx.Response(200, json=ISSUES_PAYLOAD)
        if path == "/repos/octo/demo/contributors":
            return httpx.Response(
                200, json=[{"login": "alice"}], headers={"Link": CONTRIBUTORS_LINK}
            )
        return httpx.Response(404, json={"message": "Not Found"})

    return handler


def fetch(handler, owner="octo", repo="demo"):
    """Run GitHubProvider.get_repository_data against a mock transport."""

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with patch(
                "nexus_pulse.vcs.github._get_async_http_client",
                new=AsyncMock(return_value=client),
            ):
                provider = GitHubProvider(token="test_token")
                return await provider.get_repository_data(owner, repo, now=NOW)

    return asyncio.run(run())


def test_github_provider_requires_token():
    """Test that GitHubProvider requires a token."""
    with patch.dict("os.environ", {}, clear=True):
        with pytest.raises(ValueError, match="GITHUB_TOKEN is required"):
            GitHubProvider()


def test_github_provider_treats_mock_token_as_missing():
    with patch.dict("os.environ", {"GITHUB_TOKEN": "mock"}):
        with pytest.raises(ValueError, match="GITHUB_TOKEN is required"):
            GitHubProvider()


def test_github_provider_reads_token_from_env():
    """Test that GitHubProvider reads token from environment."""
    with patch.dict("os.environ", {"GITHUB_TOKEN": "env_token"}):
        provider = GitHubProvider()
        assert provider.token == "env_token"
        assert provider.validate_credentials() is True


def test_github_provider_basics():
    provider = GitHubProvider(token="test_token")
    assert provider.get_platform_name() == "github"
    assert provider.get_repository_url("octo", "demo") == "https://github.com/octo/demo"


def test_vcs_registry():
    assert list_supported_platforms() == ["github"]
    provider = get_vcs_provider("GitHub", token="test_token")
    assert isinstance(provider, GitHubProvider)
    with pytest.raises(ValueError, match="Unsupported VCS platform"):
        get_vcs_provider("bitbucket", token="test_token")


def test_vcs_registry_accepts_host():
    assert isinstance(get_vcs_provider("github.com", token="test_token"), GitHubProvider)


def test_register_vcs_provider():
    class StubProvider(BaseVCSProvider):
        def __init__(self, token=None):
            self.token = token

        def get_platform_name(self):
            return "stub"

        def validate_credentials(self):
            return True

        def get_repository_url(self, owner, repo):
            return f"https://stub.example/{owner}/{repo}"

        async def get_repository_data(self, owner, repo):
            raise NotImplementedError

    saved_providers = dict(vcs._PROVIDERS)
    saved_aliases = dict(vcs._HOST_ALIASES)
    try:
        register_vcs_provider("Stub", StubProvider, host="stub.example")
        assert "stub" in list_supported_platforms()
        assert isinstance(get_vcs_provider("stub.example", token="t"), StubProvider)
    finally:
        vcs._PROVIDERS.clear()
        vcs._PROVIDERS.update(saved_providers)
        vcs._HOST_ALIASES.clear()
        vcs._HOST_ALIASES.update(saved_aliases)


def test_register_vcs_provider_rejects_other_classes():
    with pytest.raises(TypeError, match="BaseVCSProvider"):
        register_vcs_provider("bad", dict)


def test_github_provider_normalizes_metrics():
    """Test counts derived from the five REST endpoints."""
    data = fetch(make_handler([]))

    metrics = data.metrics
    assert metrics.commits == 3
    assert metrics.prs_merged == 1
    assert metrics.total_issues == 2
    assert metrics.stale_issues == 1
    assert metrics.total_stars == 1200
    assert metrics.total_forks == 80
    assert metrics.contributors == 42
    assert metrics.last_commit_date == "2024-06-29T10:00:00Z"


def test_github_provider_normalizes_activity():
    """Test the recent commit, PR and issue records."""
    data = fetch(make_handler([]))

    assert data.repository.name == "octo/demo"
    assert data.repository.description == "No description provided."

    first_commit = data.recent_commits[0]
    assert first_commit.sha == "abcdef1"
    assert first_commit.message == "feat: add pulse"
    assert first_commit.author == "Alice"

    # Missing commit author falls back to the GitHub login and "now"
    second_commit = data.recent_commits[1]
    assert second_commit.author == "bob"
    assert second_commit.date == NOW.isoformat()

    assert [pr.number for pr in data.recent_pull_requests] == [12]
    assert data.recent_pull_requests[0].state == "merged"

    assert [issue.number for issue in data.recent_issues] == [7, 6]
    assert data.recent_issues[0].labels == ["bug"]
    assert data.recent_issues[0].is_stale is False
    assert data.recent_issues[1].is_stale is True


def test_github_provider_request_details():
    """Test headers and query parameters sent to GitHub."""
    requests_seen: list[httpx.Request] = []
    fetch(make_handler(requests_seen))

    assert len(requests_seen) == 5
    for request in requests_seen:
        assert request.headers["Authorization"] == "Bearer test_token"
        assert request.headers["Accept"] == "application/vnd.github.v3+json"
        assert request.headers["X-GitHub-Api-Version"] == "2022-11-28"

    by_path = {request.url.path: request for request in requests_seen}
    commits_request = by_path["/repos/octo/demo/commits"]
    assert commits_request.url.params["since"] == "2024-05-31T00:00:00Z"
    pulls_request = by_path["/repos/octo/demo/pulls"]
    assert pulls_request.url.params["state"] == "closed"
    issues_request = by_path["/repos/octo/demo/issues"]
    assert issues_request.url.params["state"] == "open"


def test_github_provider_empty_repository():
    """Test a repository without contributors or commits."""
    handler = make_handler(
        [],
        overrides={
            "/repos/octo/demo/commits": httpx.Response(200, json=[]),
            "/repos/octo/demo/contributors": httpx.Response(204),
        },
    )
    data = fetch(handler)

    assert data.metrics.commits == 0
    assert data.metrics.contributors == 0
    assert data.metrics.last_commit_date == NOW.isoformat()
    assert data.recent_commits == []


def test_github_provider_contributors_without_link_header():
    handler = make_handler(
        [],
        overrides={
            "/repos/octo/demo/contributors": httpx.Response(
                200, json=[{"login": "alice"}]
            ),
        },
    )
    assert fetch(handler).metrics.contributors == 1


def test_github_provider_raises_on_http_error():
    """Test that non-2xx responses propagate as HTTPStatusError."""
    handler = make_handler(
        [],
        overrides={"/repos/octo/demo": httpx.Response(404, json={"message": "Not Found"})},
    )
    with pytest.raises(httpx.HTTPStatusError):
        fetch(handler)


def test_github_provider_rejects_malformed_repository():
    handler = make_handler(
        [],
        overrides={"/repos/octo/demo": httpx.Response(200, json={"message": "odd"})},
    )
    with pytest.raises(ValueError, match="not found or is inaccessible"):
        fetch(handler)


def test_is_issue_stale_threshold():
    assert is_issue_stale("2024-05-31T00:00:00Z", NOW) is False
    assert is_issue_stale("2024-05-30T23:59:00Z", NOW) is True
