"""Shared fixtures for the test suite."""

import pytest

import nexus_pulse.config


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep tests independent of the developer's environment and overrides."""
    for name in ("GITHUB_TOKEN", "GITHUB_OWNER", "GITHUB_REPO", "NEXUS_PULSE_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)

    yield

    nexus_pulse.config.set_request_timeout(None)
    nexus_pulse.config.set_verbose(None)
    nexus_pulse.config.set_verify_ssl(True)
