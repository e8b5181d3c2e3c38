"""
Pytest configuration and shared fixtures for launcher tests.
"""

import pytest
from pathlib import Path

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.releases import (
    release_root,
    release_server,
    linux_target,
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests that use real processes or sockets"
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def cache_dir(tmp_path) -> Path:
    """Empty cache root for installer tests."""
    cache = tmp_path / "cache"
    cache.mkdir()
    return cache


@pytest.fixture
def clean_env(monkeypatch):
    """Remove launcher settings from the process environment."""
    for key in (
        "BOJ_MCP_SERVER_PATH",
        "BOJ_MCP_RELEASE_BASE_URL",
        "BOJ_MCP_CACHE_DIR",
        "BOJ_MCP_SERVER_VERSION",
        "BOJ_MCP_LAUNCHER_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
