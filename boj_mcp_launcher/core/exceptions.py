"""
Centralized exception hierarchy for the boj-mcp-server launcher.

Every error raised while provisioning the server binary derives from
LauncherError so the entry point can report it as a single diagnostic line.
"""

from typing import Iterable, Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class LauncherError(Exception):
    """Base exception for all launcher errors."""

    pass


# ============================================================================
# Target Resolution Exceptions
# ============================================================================


class UnsupportedTargetError(LauncherError):
    """Raised when the host (os, arch) pair has no published binary."""

    def __init__(self, os_name: str, arch: str, supported: Iterable[str]):
        self.os_name = os_name
        self.arch = arch
        self.supported = list(supported)
        super().__init__(
            f"unsupported platform/arch combination: {os_name}:{arch}. "
            f"supported combinations: {', '.join(self.supported)}"
        )


# ============================================================================
# Integrity Exceptions
# ============================================================================


class ChecksumError(LauncherError):
    """Base exception for checksum manifest and digest failures."""

    pass


class ChecksumEntryMissingError(ChecksumError):
    """Raised when the checksum manifest has no entry for the release asset."""

    def __init__(self, asset_name: str, checksum_url: str):
        self.asset_name = asset_name
        self.checksum_url = checksum_url
        super().__init__(
            f"checksum entry not found for {asset_name} in {checksum_url}"
        )


class ChecksumMismatchError(ChecksumError):
    """Raised when a downloaded archive does not match its manifest digest."""

    def __init__(self, asset_name: str, expected: str, actual: str):
        self.asset_name = asset_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"checksum mismatch for {asset_name}: expected {expected}, got {actual}"
        )


class ArchiveContentMissingError(LauncherError):
    """Raised when a verified archive does not contain the expected binary."""

    def __init__(self, binary_name: str):
        self.binary_name = binary_name
        super().__init__(f"archive did not contain expected binary: {binary_name}")


# ============================================================================
# Locking Exceptions
# ============================================================================


class LockTimeout(LauncherError):
    """Raised when an install lock cannot be acquired within the wait budget."""

    def __init__(self, lock_path, waited: float):
        self.lock_path = lock_path
        self.waited = waited
        super().__init__(
            f"timed out waiting for lock: {lock_path} (waited {waited:.1f}s)"
        )


# ============================================================================
# Network Exceptions
# ============================================================================


class DownloadError(LauncherError):
    """Raised when a release file cannot be fetched."""

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


# ============================================================================
# Filesystem Exceptions
# ============================================================================


class FilesystemError(LauncherError):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Process Hand-off Exceptions
# ============================================================================


class BinaryTerminatedError(LauncherError):
    """Raised when the server binary is killed by a signal."""

    def __init__(self, signal_name: str):
        self.signal_name = signal_name
        super().__init__(f"boj-mcp-server terminated by signal: {signal_name}")
