"""
Release URL construction for boj-mcp-server binaries.

All URLs are a pure function of (version, target triple, base URL), which
keeps cache slots and tests deterministic.
"""

from dataclasses import dataclass
from typing import Optional

from boj_mcp_launcher.core.platform import asset_name_for_target

DEFAULT_RELEASE_BASE_URL = "https://github.com/explorrrr/boj-client/releases/download"
RELEASE_TAG_PREFIX = "mcp-server-v"
CHECKSUM_MANIFEST_NAME = "SHA256SUMS"


@dataclass(frozen=True)
class ReleaseDescriptor:
    """Download locations for one release asset."""

    tag: str
    """Release tag (e.g., 'mcp-server-v0.1.0')"""

    asset_name: str
    """Archive file name (e.g., 'boj-mcp-server-x86_64-apple-darwin.tar.gz')"""

    asset_url: str
    """URL of the archive"""

    checksum_url: str
    """URL of the SHA256SUMS manifest"""


def normalize_base_url(base_url: Optional[str]) -> str:
    """
    Strip trailing slashes, falling back to the default release location.

    Example:
        >>> normalize_base_url("https://example.com/path/")
        'https://example.com/path'
    """
    return str(base_url or DEFAULT_RELEASE_BASE_URL).rstrip("/")


def release_tag(version: str) -> str:
    return f"{RELEASE_TAG_PREFIX}{version}"


def build_release_urls(
    version: str, target_triple: str, base_url: Optional[str] = None
) -> ReleaseDescriptor:
    """
    Build download URLs for a version and target.

    Args:
        version: Server version (e.g., '0.1.0'); not validated here
        target_triple: Release target triple
        base_url: Release download root (default: GitHub releases)

    Returns:
        ReleaseDescriptor

    Example:
        >>> urls = build_release_urls("0.1.0", "x86_64-unknown-linux-gnu")
        >>> urls.checksum_url
        'https://github.com/explorrrr/boj-client/releases/download/mcp-server-v0.1.0/SHA256SUMS'
    """
    tag = release_tag(version)
    asset_name = asset_name_for_target(target_triple)
    release_prefix = f"{normalize_base_url(base_url)}/{tag}"

    return ReleaseDescriptor(
        tag=tag,
        asset_name=asset_name,
        asset_url=f"{release_prefix}/{asset_name}",
        checksum_url=f"{release_prefix}/{CHECKSUM_MANIFEST_NAME}",
    )


__all__ = [
    "DEFAULT_RELEASE_BASE_URL",
    "CHECKSUM_MANIFEST_NAME",
    "ReleaseDescriptor",
    "normalize_base_url",
    "release_tag",
    "build_release_urls",
]
