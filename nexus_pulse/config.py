"""
Configuration management for NexusPulse.

Settings are resolved from:
1. Values set explicitly at runtime (CLI flags)
2. Environment variables (optionally loaded from a .env file)
3. .nexus-pulse.toml (local config)
4. pyproject.toml ([tool.nexus-pulse] table)
5. Built-in defaults
"""

import os
import tomllib
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# project_root is the parent directory of nexus_pulse/
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Trailing window used for commit and pull request counts
ACTIVITY_WINDOW_DAYS = 30
# Open issues without updates for longer than this are stale
STALE_THRESHOLD_DAYS = 30

DEFAULT_OWNER = "vercel"
DEFAULT_REPO = "next.js"
DEFAULT_REQUEST_TIMEOUT = 10.0

# Token value that forces placeholder data
MOCK_TOKEN = "mock"

# Global configuration for SSL verification
# Default: True (verify SSL certificates)
# Can be set to False by CLI --insecure flag
VERIFY_SSL = True

# Runtime overrides (None means "not set")
_REQUEST_TIMEOUT: float | None = None
_VERBOSE: bool | None = None


def load_config_file(config_path: Path) -> dict:
    """Load a TOML configuration file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def get_tool_config() -> dict[str, Any]:
    """
    Load the [tool.nexus-pulse] table.

    Priority:
    1. .nexus-pulse.toml (local config, highest priority)
    2. pyproject.toml (project-level config, fallback)

    Returns:
        The tool configuration table, or an empty dict.
    """
    local_config_path = PROJECT_ROOT / ".nexus-pulse.toml"
    if local_config_path.exists():
        config = load_config_file(local_config_path)
        tool_config = config.get("tool", {}).get("nexus-pulse", {})
        if tool_config:
            return tool_config

    pyproject_path = PROJECT_ROOT / "pyproject.toml"
    if pyproject_path.exists():
        config = load_config_file(pyproject_path)
        return config.get("tool", {}).get("nexus-pulse", {})

    return {}


def get_github_token() -> str | None:
    """
    Get the GitHub token from the GITHUB_TOKEN environment variable.

    Returns:
        The token, or None when unset, empty, or the "mock" sentinel.
    """
    token = os.getenv("GITHUB_TOKEN", "").strip()
    if not token or token == MOCK_TOKEN:
        return None
    return token


def get_default_repository() -> tuple[str, str]:
    """
    Get the repository analyzed when none is given.

    Priority:
    1. GITHUB_OWNER / GITHUB_REPO environment variables
    2. owner / repo keys in the config file
    3. Default: vercel/next.js

    Returns:
        Tuple of (owner, repo).
    """
    tool_config = get_tool_config()
    owner = os.getenv("GITHUB_OWNER") or tool_config.get("owner") or DEFAULT_OWNER
    repo = os.getenv("GITHUB_REPO") or tool_config.get("repo") or DEFAULT_REPO
    return str(owner), str(repo)


def set_verify_ssl(verify: bool) -> None:
    """
    Set the SSL verification setting globally.

    Args:
        verify: Whether to verify SSL certificates.
    """
    global VERIFY_SSL
    VERIFY_SSL = verify


def get_verify_ssl() -> bool:
    """Get the current SSL verification setting."""
    return VERIFY_SSL


def get_request_timeout() -> float:
    """
    Get the upstream request timeout in seconds.

    Priority:
    1. Explicitly set value via set_request_timeout()
    2. NEXUS_PULSE_TIMEOUT environment variable
    3. timeout key in the config file
    4. Default: 10 seconds

    Returns:
        Timeout in seconds.
    """
    if _REQUEST_TIMEOUT is not None:
        return _REQUEST_TIMEOUT

    env_timeout = os.getenv("NEXUS_PULSE_TIMEOUT")
    if env_timeout:
        try:
            return float(env_timeout)
        except ValueError:
            pass

    tool_config = get_tool_config()
    if "timeout" in tool_config:
        return float(tool_config["timeout"])

    return DEFAULT_REQUEST_TIMEOUT


def set_request_timeout(seconds: float | None) -> None:
    """
    Set the upstream request timeout explicitly.

    Args:
        seconds: Timeout in seconds, or None to fall back to other sources.
    """
    global _REQUEST_TIMEOUT
    _REQUEST_TIMEOUT = seconds


def is_verbose_enabled() -> bool:
    """Check whether verbose diagnostics are enabled."""
    if _VERBOSE is not None:
        return _VERBOSE
    return bool(get_tool_config().get("verbose", False))


def set_verbose(verbose: bool | None) -> None:
    """Enable or disable verbose diagnostics (None restores the config default)."""
    global _VERBOSE
    _VERBOSE = verbose
