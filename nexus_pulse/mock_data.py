"""
Deterministic placeholder data used when no GitHub token is configured.

The same repository always produces the same demo metrics, so dashboards
stay stable across refreshes.
"""

import hashlib
import math
import zlib
from datetime import datetime, timedelta, timezone

from nexus_pulse.core import RawMetrics
from nexus_pulse.repository import RepositoryReference
from nexus_pulse.vcs.base import (
    CommitActivity,
    IssueActivity,
    PullRequestActivity,
    RepositorySummary,
    VCSRepositoryData,
)

MOCK_AUTHORS = ["alice", "bob", "carol", "dave", "eve"]

MOCK_COMMIT_MESSAGES = [
    "feat: implement edge-optimized caching layer",
    "fix: resolve race condition in vitality engine",
    "docs: update API integration guide",
    "chore: upgrade dependencies to latest stable",
    "refactor: extract mascot state machine",
    "perf: optimize SVG rendering pipeline",
    "test: add integration tests for GitHub client",
    "feat: add supernova animation sequence",
]

MOCK_PR_TITLES = [
    "Add caching for GitHub data",
    "Mobile navigation z-index fix",
    "Vitality score normalization improvements",
    "Dark mode refinements for metric grid",
    "Strict type checking compliance",
]

MOCK_ISSUES = [
    ("Mascot flickers on Safari iOS 17", "bug"),
    ("Edge runtime crashes with large repos", "ui"),
    ("Add support for GitLab API", "enhancement"),
    ("Timeline scroll performance on older devices", "discussion"),
    ("Accessibility: keyboard navigation in bottom nav", "accessibility"),
    ("Feature: export vitality report as PDF", "feature"),
]

MOCK_DESCRIPTION = (
    "A community dashboard powered by NexusPulse. "
    "[MOCK DATA - set GITHUB_TOKEN to use live data]"
)


class SeededSequence:
    """Sine-based pseudo-random integers; the seed advances on every draw."""

    def __init__(self, seed: int):
        self.seed = seed

    def randint(self, minimum: int, maximum: int) -> int:
        x = math.sin(self.seed) * 10000
        self.seed += 1
        return math.floor((x - math.floor(x)) * (maximum - minimum + 1)) + minimum


def seed_for_repository(target: RepositoryReference) -> int:
    """Stable seed derived from the repository name."""
    return zlib.crc32(target.full_name.lower().encode("utf-8"))


def _iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def generate_mock_metrics(seed: int, now: datetime | None = None) -> RawMetrics:
    """
    Generate a well-formed RawMetrics record from a seed.

    Args:
        seed: Starting seed; equal seeds yield equal metrics
        now: Reference time for the last commit date (defaults to now)
    """
    if now is None:
        now = datetime.now(timezone.utc)
    random = SeededSequence(seed)

    commits = random.randint(5, 150)
    prs_merged = random.randint(2, 60)
    total_issues = random.randint(10, 80)
    stale_issues = random.randint(0, math.floor(total_issues * 0.6))

    return RawMetrics(
        commits=commits,
        prs_merged=prs_merged,
        stale_issues=stale_issues,
        total_issues=total_issues,
        total_stars=random.randint(20, 5000),
        total_forks=random.randint(5, 800),
        contributors=random.randint(3, 50),
        last_commit_date=_iso(now - timedelta(days=random.randint(0, 7))),
    )


def build_mock_dashboard(
    target: RepositoryReference, now: datetime | None = None
) -> VCSRepositoryData:
    """Build a complete placeholder dataset for a repository."""
    if now is None:
        now = datetime.now(timezone.utc)
    metrics = generate_mock_metrics(seed_for_repository(target), now=now)

    commits = [
        CommitActivity(
            sha=hashlib.sha1(f"{target.full_name}:{i}".encode("utf-8")).hexdigest()[
                :7
            ],
            message=message,
            author=MOCK_AUTHORS[i % len(MOCK_AUTHORS)],
            date=_iso(now - timedelta(hours=i * 6)),
            url="#",
        )
        for i, message in enumerate(MOCK_COMMIT_MESSAGES)
    ]

    pull_requests = [
        PullRequestActivity(
            number=100 + i,
            title=title,
            state="merged",
            merged_at=_iso(now - timedelta(days=i * 2)),
            author=MOCK_AUTHORS[i],
            url="#",
        )
        for i, title in enumerate(MOCK_PR_TITLES)
    ]

    issues = [
        IssueActivity(
            number=50 + i,
            title=title,
            state="open",
            created_at=_iso(now - timedelta(days=i * 5)),
            updated_at=_iso(now - timedelta(days=i * 8)),
            is_stale=i > 3,
            url="#",
            labels=[label],
        )
        for i, (title, label) in enumerate(MOCK_ISSUES)
    ]

    repository = RepositorySummary(
        name=target.full_name,
        description=MOCK_DESCRIPTION,
        stars=metrics.total_stars,
        forks=metrics.total_forks,
        url=target.url,
    )

    return VCSRepositoryData(
        repository=repository,
        metrics=metrics,
        recent_commits=commits,
        recent_pull_requests=pull_requests,
        recent_issues=issues,
    )
