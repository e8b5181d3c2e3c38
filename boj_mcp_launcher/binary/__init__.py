"""
Release lookup and cache installation of the boj-mcp-server binary.
"""

from .installer import BinaryInstaller, ensure_binary
from .release import (
    DEFAULT_RELEASE_BASE_URL,
    ReleaseDescriptor,
    build_release_urls,
    normalize_base_url,
    release_tag,
)

__all__ = [
    "BinaryInstaller",
    "ensure_binary",
    "DEFAULT_RELEASE_BASE_URL",
    "ReleaseDescriptor",
    "build_release_urls",
    "normalize_base_url",
    "release_tag",
]
