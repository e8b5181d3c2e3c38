"""
Launcher for the boj-mcp-server binary.

Downloads the platform-specific server on first use, verifies it against the
release checksum manifest, caches it, and runs it with the given arguments.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("boj-mcp-server")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = ["__version__"]
