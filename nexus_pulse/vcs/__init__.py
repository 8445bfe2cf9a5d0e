"""
Activity providers for NexusPulse.

A provider turns one hosted repository into a VCSRepositoryData record:
summary, raw metrics and the recent commits, merged PRs and open issues
shown in the activity timeline.
"""

from nexus_pulse.vcs.base import (
    BaseVCSProvider,
    CommitActivity,
    IssueActivity,
    PullRequestActivity,
    RepositorySummary,
    VCSRepositoryData,
)
from nexus_pulse.vcs.github import GitHubProvider

__all__ = [
    "BaseVCSProvider",
    "CommitActivity",
    "IssueActivity",
    "PullRequestActivity",
    "RepositorySummary",
    "VCSRepositoryData",
    "GitHubProvider",
    "get_vcs_provider",
    "register_vcs_provider",
    "list_supported_platforms",
]

_PROVIDERS: dict[str, type[BaseVCSProvider]] = {
    "github": GitHubProvider,
}

# Hostnames accepted in place of a platform name
_HOST_ALIASES = {
    "github.com": "github",
    "www.github.com": "github",
}


def _resolve_platform(platform: str) -> str:
    key = platform.strip().lower()
    return _HOST_ALIASES.get(key, key)


def get_vcs_provider(platform: str = "github", **kwargs) -> BaseVCSProvider:
    """
    Build the activity provider for a platform name or repository host.

    Args:
        platform: Platform name ("github") or host ("github.com")
        **kwargs: Passed to the provider, usually ``token``

    Raises:
        ValueError: If no provider is registered for the platform
    """
    name = _resolve_platform(platform)
    provider_class = _PROVIDERS.get(name)
    if provider_class is None:
        supported = ", ".join(list_supported_platforms())
        raise ValueError(
            f"Unsupported VCS platform: {platform}. Supported platforms: {supported}"
        )
    return provider_class(**kwargs)


def register_vcs_provider(
    platform: str, provider_class: type[BaseVCSProvider], host: str | None = None
) -> None:
    """Register an extra provider, optionally reachable by its hostname."""
    if not (isinstance(provider_class, type) and issubclass(provider_class, BaseVCSProvider)):
        raise TypeError(
            f"Provider class must inherit from BaseVCSProvider, got {provider_class!r}"
        )
    name = platform.lower()
    _PROVIDERS[name] = provider_class
    if host:
        _HOST_ALIASES[host.lower()] = name


def list_supported_platforms() -> list[str]:
    return sorted(_PROVIDERS)
