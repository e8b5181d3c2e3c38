"""Configuration module for the boj-mcp-server launcher.

Settings come from explicit overrides, then environment variables, then
computed platform defaults.
"""

from boj_mcp_launcher.config.settings import (
    ENV_BINARY_PATH,
    ENV_CACHE_DIR,
    ENV_LOG_LEVEL,
    ENV_RELEASE_BASE_URL,
    ENV_VERSION,
    LauncherConfig,
    resolve_explicit_binary_path,
)

__all__ = [
    "ENV_BINARY_PATH",
    "ENV_CACHE_DIR",
    "ENV_LOG_LEVEL",
    "ENV_RELEASE_BASE_URL",
    "ENV_VERSION",
    "LauncherConfig",
    "resolve_explicit_binary_path",
]
