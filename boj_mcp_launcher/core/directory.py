"""
Cache directory resolution for the boj-mcp-server launcher.

Cache Layout:
    <cache-root>/
        <version>/
            <target-triple>/          : Installed slot (published by rename)
                boj-mcp-server[.exe]
            <target-triple>.lock      : Present only while an install runs
            <target-triple>.tmp-*     : Per-attempt staging directory
"""

import os
import platform
import tempfile
from pathlib import Path
from typing import Mapping, Optional

CACHE_SUBDIR = "boj-mcp-server"


def default_cache_dir(
    env: Optional[Mapping[str, str]] = None, system: Optional[str] = None
) -> Path:
    """
    Get the platform-specific default cache root.

    Args:
        env: Environment mapping (default: os.environ)
        system: platform.system() value override, used by tests

    Returns:
        Path: The cache root.
            - Windows: %LOCALAPPDATA%\\boj-mcp-server, else <tempdir>\\boj-mcp-server
            - Linux/macOS: $XDG_CACHE_HOME/boj-mcp-server, else
              $HOME/.cache/boj-mcp-server, else <tempdir>/boj-mcp-server

    Example:
        >>> default_cache_dir({"XDG_CACHE_HOME": "/var/cache"}, system="Linux")
        PosixPath('/var/cache/boj-mcp-server')
    """
    if env is None:
        env = os.environ
    if system is None:
        system = platform.system()

    if system.lower() == "windows":
        local_app_data = env.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data) / CACHE_SUBDIR
        return Path(tempfile.gettempdir()) / CACHE_SUBDIR

    xdg_cache_home = env.get("XDG_CACHE_HOME")
    if xdg_cache_home:
        return Path(xdg_cache_home) / CACHE_SUBDIR

    home = env.get("HOME")
    if home:
        return Path(home) / ".cache" / CACHE_SUBDIR

    return Path(tempfile.gettempdir()) / CACHE_SUBDIR


def get_slot_dir(cache_root: Path, version: str, target_triple: str) -> Path:
    """Slot directory holding one installed binary."""
    return Path(cache_root) / version / target_triple


__all__ = ["CACHE_SUBDIR", "default_cache_dir", "get_slot_dir"]
