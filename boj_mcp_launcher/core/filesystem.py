"""
Filesystem utilities for installing the boj-mcp-server binary.

This module provides:
- Safe .tar.gz extraction with directory traversal protection
- Guarded recursive deletion
- Executable permission handling
"""

import os
import shutil
import stat
import sys
import tarfile
from pathlib import Path
from typing import Optional, Union

from boj_mcp_launcher.core.exceptions import (
    ArchiveExtractionError,
    FilesystemError,
    InsecureArchiveError,
    UnsupportedArchiveFormat,
)

IS_WINDOWS = sys.platform == "win32"


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to (under) parent directory.

    Args:
        path: Path to check
        parent: Potential parent directory

    Returns:
        True if path is under parent
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_archive(
    archive_path: Union[str, Path], destination: Union[str, Path]
) -> None:
    """
    Extract a gzip-compressed tar archive to a destination directory.

    All member paths are validated before anything is written.

    Args:
        archive_path: Path to the .tar.gz / .tgz file
        destination: Directory to extract to

    Raises:
        UnsupportedArchiveFormat: If archive is not a .tar.gz / .tgz
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths

    Example:
        >>> extract_archive('boj-mcp-server-x86_64-apple-darwin.tar.gz', staging)
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.name.lower().endswith((".tar.gz", ".tgz")):
        raise UnsupportedArchiveFormat(
            f"Unsupported archive format: {archive_path.name}. Supported: .tar.gz, .tgz"
        )

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            for member in tar.getmembers():
                _validate_archive_path(member.name, destination)

            if sys.version_info >= (3, 12):
                tar.extractall(destination, filter="data")
            else:
                tar.extractall(destination)
    except InsecureArchiveError:
        raise
    except (tarfile.TarError, OSError, EOFError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


# ============================================================================
# Safe File Operations
# ============================================================================


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Missing paths are ignored.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        if IS_WINDOWS:

            def handle_remove_readonly(func, path, exc):
                """Error handler for Windows read-only files."""
                if not os.access(path, os.W_OK):
                    os.chmod(path, stat.S_IWRITE)
                    func(path)
                else:
                    raise

            if sys.version_info >= (3, 12):
                shutil.rmtree(path, onexc=handle_remove_readonly)
            else:
                shutil.rmtree(path, onerror=handle_remove_readonly)
        else:
            shutil.rmtree(path)

    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def make_executable(path: Union[str, Path]) -> None:
    """Set rwxr-xr-x on a file."""
    os.chmod(path, 0o755)


__all__ = [
    "is_relative_to",
    "extract_archive",
    "safe_rmtree",
    "make_executable",
]
