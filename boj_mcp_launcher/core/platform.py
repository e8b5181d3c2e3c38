"""
Target resolution for the boj-mcp-server binary.

Maps the host operating system and CPU architecture onto the release target
triple and the binary file name shipped inside the release archive.

Usage:
    from boj_mcp_launcher.core.platform import detect_host, resolve_target

    host = detect_host()
    target = resolve_target(host.os, host.arch)
    print(f"Target triple: {target.target_triple}")
"""

import platform
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from boj_mcp_launcher.core.exceptions import UnsupportedTargetError

BINARY_NAME = "boj-mcp-server"


@dataclass(frozen=True)
class PlatformKey:
    """
    Host platform as an (os, arch) pair.

    Attributes:
        os: Operating system ('linux', 'macos', 'windows')
        arch: CPU architecture ('x64', 'arm64')
    """

    os: str
    arch: str

    def __str__(self) -> str:
        return f"{self.os}:{self.arch}"


@dataclass(frozen=True)
class TargetSpec:
    """Release target for a supported platform."""

    target_triple: str
    binary_name: str


SUPPORTED_TARGETS: Mapping[PlatformKey, TargetSpec] = MappingProxyType(
    {
        PlatformKey("linux", "x64"): TargetSpec(
            "x86_64-unknown-linux-gnu", BINARY_NAME
        ),
        PlatformKey("macos", "x64"): TargetSpec("x86_64-apple-darwin", BINARY_NAME),
        PlatformKey("macos", "arm64"): TargetSpec(
            "aarch64-apple-darwin", BINARY_NAME
        ),
        PlatformKey("windows", "x64"): TargetSpec(
            "x86_64-pc-windows-msvc", f"{BINARY_NAME}.exe"
        ),
    }
)


def supported_targets() -> list[str]:
    """
    Get all supported platform combinations as 'os:arch' strings.

    Example:
        >>> supported_targets()
        ['linux:x64', 'macos:x64', 'macos:arm64', 'windows:x64']
    """
    return [str(key) for key in SUPPORTED_TARGETS]


def resolve_target(os_name: str, arch: str) -> TargetSpec:
    """
    Resolve the release target for an (os, arch) pair.

    Args:
        os_name: Normalized operating system name
        arch: Normalized CPU architecture name

    Returns:
        TargetSpec with target triple and binary name

    Raises:
        UnsupportedTargetError: If no binary is published for the pair

    Example:
        >>> resolve_target("windows", "x64").binary_name
        'boj-mcp-server.exe'
    """
    target = SUPPORTED_TARGETS.get(PlatformKey(os_name, arch))
    if target is None:
        raise UnsupportedTargetError(os_name, arch, supported_targets())
    return target


def asset_name_for_target(target_triple: str) -> str:
    """Release archive file name for a target triple."""
    return f"{BINARY_NAME}-{target_triple}.tar.gz"


def is_windows(os_name: str) -> bool:
    """Check whether a normalized OS name is Windows."""
    return os_name == "windows"


def detect_host() -> PlatformKey:
    """
    Detect the current host as a PlatformKey.

    Unknown systems and machines are passed through lower-cased so that
    resolve_target() can report them alongside the supported list.
    """
    return PlatformKey(_detect_os(), _detect_architecture())


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        Normalized OS name: 'windows', 'linux', 'macos', or the raw system name
    """
    system = platform.system().lower()

    if system == "windows":
        return "windows"
    elif system == "linux":
        return "linux"
    elif system == "darwin":
        return "macos"
    else:
        return system


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', or the raw machine name
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    else:
        return machine


__all__ = [
    "BINARY_NAME",
    "PlatformKey",
    "TargetSpec",
    "SUPPORTED_TARGETS",
    "supported_targets",
    "resolve_target",
    "asset_name_for_target",
    "is_windows",
    "detect_host",
]
