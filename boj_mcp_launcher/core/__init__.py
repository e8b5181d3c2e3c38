"""
Core functionality for the boj-mcp-server launcher.

This package contains the foundational modules the installer depends on.
"""

from .directory import (
    default_cache_dir,
    get_slot_dir,
)

from .locking import (
    LockHandle,
    acquire_lock,
    file_lock,
)

from .platform import (
    PlatformKey,
    TargetSpec,
    detect_host,
    resolve_target,
    supported_targets,
    asset_name_for_target,
)

from .verification import (
    parse_manifest,
    compute_file_hash,
    verify_file_hash,
)

from .exceptions import (
    LauncherError,
    UnsupportedTargetError,
    ChecksumError,
    ChecksumEntryMissingError,
    ChecksumMismatchError,
    ArchiveContentMissingError,
    LockTimeout,
    DownloadError,
    FilesystemError,
    ArchiveExtractionError,
    UnsupportedArchiveFormat,
    InsecureArchiveError,
    BinaryTerminatedError,
)

__all__ = [
    "default_cache_dir",
    "get_slot_dir",
    "LockHandle",
    "acquire_lock",
    "file_lock",
    "PlatformKey",
    "TargetSpec",
    "detect_host",
    "resolve_target",
    "supported_targets",
    "asset_name_for_target",
    "parse_manifest",
    "compute_file_hash",
    "verify_file_hash",
    "LauncherError",
    "UnsupportedTargetError",
    "ChecksumError",
    "ChecksumEntryMissingError",
    "ChecksumMismatchError",
    "ArchiveContentMissingError",
    "LockTimeout",
    "DownloadError",
    "FilesystemError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "BinaryTerminatedError",
]
