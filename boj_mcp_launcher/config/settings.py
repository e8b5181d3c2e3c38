"""Launcher settings.

Settings are resolved once into an immutable LauncherConfig and threaded
through every call; nothing reads the environment behind the caller's back.

Precedence for each setting: explicit override > environment > default.

Environment:
    BOJ_MCP_SERVER_PATH         Use this binary, skip download and cache
    BOJ_MCP_RELEASE_BASE_URL    Release download root
    BOJ_MCP_CACHE_DIR           Cache root
    BOJ_MCP_SERVER_VERSION      Server version (default: launcher version)
    BOJ_MCP_LAUNCHER_LOG_LEVEL  Launcher log level (default: WARNING)
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Union

from boj_mcp_launcher import __version__
from boj_mcp_launcher.binary.release import normalize_base_url
from boj_mcp_launcher.core.directory import default_cache_dir
from boj_mcp_launcher.core.platform import detect_host

ENV_BINARY_PATH = "BOJ_MCP_SERVER_PATH"
ENV_RELEASE_BASE_URL = "BOJ_MCP_RELEASE_BASE_URL"
ENV_CACHE_DIR = "BOJ_MCP_CACHE_DIR"
ENV_VERSION = "BOJ_MCP_SERVER_VERSION"
ENV_LOG_LEVEL = "BOJ_MCP_LAUNCHER_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class LauncherConfig:
    """Resolved launcher configuration."""

    version: str
    release_base_url: str
    cache_dir: Path
    os_name: str
    arch: str
    binary_path: Optional[Path] = None
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def logging_level(self) -> int:
        """Numeric logging level, WARNING for unknown names."""
        level = getattr(logging, self.log_level.upper(), None)
        return level if isinstance(level, int) else logging.WARNING

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
        **overrides: Any,
    ) -> "LauncherConfig":
        """
        Build configuration from overrides and an environment mapping.

        Empty strings count as unset at every level.

        Args:
            env: Environment mapping (default: os.environ)
            cwd: Base directory for a relative binary override (default: cwd)
            **overrides: Explicit values keyed by field name

        Returns:
            LauncherConfig

        Raises:
            TypeError: If an override names an unknown field

        Example:
            >>> config = LauncherConfig.from_env({"BOJ_MCP_CACHE_DIR": "/tmp/c"})
            >>> config.cache_dir
            PosixPath('/tmp/c')
        """
        if env is None:
            env = os.environ

        unknown = set(overrides) - {f.name for f in fields(cls)}
        if unknown:
            raise TypeError(
                f"Unknown configuration fields: {', '.join(sorted(unknown))}"
            )

        def pick(name: str, env_key: Optional[str], default: Callable[[], Any]) -> Any:
            value = overrides.get(name)
            if value:
                return value
            if env_key:
                value = env.get(env_key)
                if value:
                    return value
            return default()

        host = None
        if not (overrides.get("os_name") and overrides.get("arch")):
            host = detect_host()

        return cls(
            version=pick("version", ENV_VERSION, lambda: __version__),
            release_base_url=normalize_base_url(
                pick("release_base_url", ENV_RELEASE_BASE_URL, lambda: None)
            ),
            cache_dir=Path(
                pick("cache_dir", ENV_CACHE_DIR, lambda: default_cache_dir(env))
            ),
            os_name=pick("os_name", None, lambda: host.os),
            arch=pick("arch", None, lambda: host.arch),
            binary_path=resolve_explicit_binary_path(
                pick("binary_path", ENV_BINARY_PATH, lambda: None), cwd=cwd
            ),
            log_level=str(
                pick("log_level", ENV_LOG_LEVEL, lambda: DEFAULT_LOG_LEVEL)
            ),
        )


def resolve_explicit_binary_path(
    binary_path: Optional[Union[str, Path]], cwd: Optional[Path] = None
) -> Optional[Path]:
    """
    Resolve a user-supplied binary path.

    Absolute paths are used verbatim; relative paths are joined to cwd.

    Example:
        >>> resolve_explicit_binary_path("bin/boj-mcp-server", cwd=Path("/work"))
        PosixPath('/work/bin/boj-mcp-server')
    """
    if not binary_path:
        return None

    path = Path(binary_path)
    if path.is_absolute():
        return path
    return Path(cwd or Path.cwd()) / path


__all__ = [
    "ENV_BINARY_PATH",
    "ENV_RELEASE_BASE_URL",
    "ENV_CACHE_DIR",
    "ENV_VERSION",
    "ENV_LOG_LEVEL",
    "DEFAULT_LOG_LEVEL",
    "LauncherConfig",
    "resolve_explicit_binary_path",
]
