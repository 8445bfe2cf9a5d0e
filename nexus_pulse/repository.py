"""Repository reference parsing."""

from typing import NamedTuple

GITHUB_WEB_URL = "https://github.com"


class RepositoryReference(NamedTuple):
    """An owner/repo pair identifying a GitHub repository."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def url(self) -> str:
        return f"{GITHUB_WEB_URL}/{self.owner}/{self.repo}"


def parse_repository(text: str) -> RepositoryReference:
    """
    Parse user input such as 'owner/repo' or a GitHub URL.

    Accepts 'owner/repo', 'github.com/owner/repo' and
    'https://github.com/owner/repo(.git)'. Anything after the owner is kept
    as the repository path.

    Raises:
        ValueError: If the input does not contain both an owner and a repo.
    """
    trimmed = text.strip()
    for prefix in ("https://", "http://"):
        if trimmed.lower().startswith(prefix):
            trimmed = trimmed[len(prefix) :]
            break
    if trimmed.lower().startswith("github.com/"):
        trimmed = trimmed[len("github.com/") :]
    if trimmed.endswith(".git"):
        trimmed = trimmed[: -len(".git")]

    parts = [part for part in trimmed.split("/") if part]
    if len(parts) < 2:
        raise ValueError("Use format: owner/repo")

    owner, *repo_parts = parts
    return RepositoryReference(owner=owner, repo="/".join(repo_parts))
