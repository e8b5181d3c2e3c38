"""
Binary download and installation.

This module orchestrates provisioning of the boj-mcp-server binary into a
per-(version, target) cache slot:
1. Resolve target and release URLs
2. Return the cached binary if the slot is populated (no lock, no network)
3. Take the slot lock and re-check
4. Fetch SHA256SUMS and look up the archive digest
5. Download the archive into a private staging directory
6. Verify the digest (before anything is unpacked)
7. Extract and check the binary is present
8. Publish the staging directory by renaming it onto the slot

The rename is the only step that touches the slot, so other processes see a
slot either fully absent or fully installed.
"""

import logging
import os
import secrets
import time
from pathlib import Path
from typing import Optional, Union

from boj_mcp_launcher.binary.release import ReleaseDescriptor, build_release_urls
from boj_mcp_launcher.core.directory import default_cache_dir, get_slot_dir
from boj_mcp_launcher.core.download import DEFAULT_TIMEOUT, download_file, fetch_text
from boj_mcp_launcher.core.exceptions import (
    ArchiveContentMissingError,
    ChecksumEntryMissingError,
    ChecksumMismatchError,
    FilesystemError,
)
from boj_mcp_launcher.core.filesystem import (
    extract_archive,
    make_executable,
    safe_rmtree,
)
from boj_mcp_launcher.core.locking import (
    DEFAULT_MAX_WAIT,
    DEFAULT_RETRY_INTERVAL,
    DEFAULT_STALE_AFTER,
    file_lock,
)
from boj_mcp_launcher.core.platform import (
    TargetSpec,
    detect_host,
    is_windows,
    resolve_target,
)
from boj_mcp_launcher.core.verification import (
    compute_file_hash,
    parse_manifest,
    verify_file_hash,
)

logger = logging.getLogger(__name__)


class BinaryInstaller:
    """
    Installs boj-mcp-server binaries into a shared cache root.

    Safe to run from several processes at once against the same cache root:
    installs into one slot are serialized by a lock file next to the slot.

    Example:
        >>> installer = BinaryInstaller(cache_dir=Path("~/.cache/boj-mcp-server"))
        >>> binary = installer.ensure_binary("0.1.0", "linux", "x64")
        >>> print(f"Installed at: {binary}")
    """

    def __init__(
        self,
        cache_dir: Optional[Union[str, Path]] = None,
        release_base_url: Optional[str] = None,
        timeout: int = DEFAULT_TIMEOUT,
        stale_after: float = DEFAULT_STALE_AFTER,
        retry_interval: float = DEFAULT_RETRY_INTERVAL,
        max_wait: float = DEFAULT_MAX_WAIT,
    ):
        """
        Initialize binary installer.

        Args:
            cache_dir: Cache root. If None, uses the platform default.
            release_base_url: Release download root. If None, uses GitHub releases.
            timeout: HTTP timeout in seconds
            stale_after: Seconds after which a slot lock is reclaimed
            retry_interval: Seconds between lock attempts
            max_wait: Maximum seconds to wait for a slot lock
        """
        self.cache_dir = Path(cache_dir) if cache_dir else default_cache_dir()
        self.release_base_url = release_base_url
        self.timeout = timeout
        self.stale_after = stale_after
        self.retry_interval = retry_interval
        self.max_wait = max_wait

    def ensure_binary(
        self,
        version: str,
        os_name: Optional[str] = None,
        arch: Optional[str] = None,
    ) -> Path:
        """
        Return the path to an installed binary, installing it if needed.

        Args:
            version: Server version (e.g., '0.1.0')
            os_name: Normalized OS name (default: detected host)
            arch: Normalized architecture (default: detected host)

        Returns:
            Path to the installed binary

        Raises:
            ValueError: If version is empty
            UnsupportedTargetError: If (os_name, arch) is not published
            LockTimeout: If another install holds the slot lock too long
            DownloadError: If the manifest or archive cannot be fetched
            ChecksumEntryMissingError: If the manifest lacks the archive
            ChecksumMismatchError: If the archive digest does not match
            ArchiveContentMissingError: If the archive lacks the binary
        """
        if not version:
            raise ValueError("version is required for binary install")

        if os_name is None or arch is None:
            host = detect_host()
            os_name = os_name or host.os
            arch = arch or host.arch

        target = resolve_target(os_name, arch)
        release = build_release_urls(
            version, target.target_triple, self.release_base_url
        )

        slot_dir = get_slot_dir(self.cache_dir, version, target.target_triple)
        binary_path = slot_dir / target.binary_name

        if binary_path.exists():
            logger.debug(f"Using cached binary: {binary_path}")
            return binary_path

        slot_dir.parent.mkdir(parents=True, exist_ok=True)
        lock_path = slot_dir.with_name(f"{slot_dir.name}.lock")

        with file_lock(
            lock_path,
            stale_after=self.stale_after,
            retry_interval=self.retry_interval,
            max_wait=self.max_wait,
        ):
            if binary_path.exists():
                logger.info(f"Binary installed by another process: {binary_path}")
                return binary_path

            self._install(release, target, slot_dir, windows=is_windows(os_name))

        logger.info(f"Installed boj-mcp-server {version} to {binary_path}")
        return binary_path

    def _install(
        self,
        release: ReleaseDescriptor,
        target: TargetSpec,
        slot_dir: Path,
        windows: bool,
    ) -> None:
        """
        Download, verify, extract and publish into slot_dir.

        Must be called with the slot lock held.
        """
        staging_dir = self._staging_dir(slot_dir)

        try:
            staging_dir.mkdir(parents=True)

            checksums = parse_manifest(
                fetch_text(release.checksum_url, timeout=self.timeout)
            )
            expected_hash = checksums.get(release.asset_name)
            if not expected_hash:
                raise ChecksumEntryMissingError(
                    release.asset_name, release.checksum_url
                )

            archive_path = staging_dir / release.asset_name
            download_file(release.asset_url, archive_path, timeout=self.timeout)

            if not verify_file_hash(archive_path, expected_hash):
                raise ChecksumMismatchError(
                    release.asset_name, expected_hash, compute_file_hash(archive_path)
                )
            logger.debug(f"Checksum verified: {release.asset_name}")

            extract_archive(archive_path, staging_dir)

            extracted_binary = staging_dir / target.binary_name
            if not extracted_binary.is_file():
                raise ArchiveContentMissingError(target.binary_name)

            if not windows:
                make_executable(extracted_binary)

            archive_path.unlink()
            safe_rmtree(slot_dir, require_prefix=self.cache_dir)
            staging_dir.rename(slot_dir)

        finally:
            if staging_dir.exists():
                try:
                    safe_rmtree(staging_dir, require_prefix=self.cache_dir)
                except FilesystemError as e:
                    logger.warning(f"Failed to remove staging directory: {e}")

    @staticmethod
    def _staging_dir(slot_dir: Path) -> Path:
        """Attempt-private sibling of the slot: <slot>.tmp-<pid>-<ms>-<random>."""
        suffix = f"{os.getpid()}-{int(time.time() * 1000)}-{secrets.token_hex(4)}"
        return slot_dir.with_name(f"{slot_dir.name}.tmp-{suffix}")


def ensure_binary(
    version: str,
    release_base_url: Optional[str] = None,
    cache_dir: Optional[Union[str, Path]] = None,
    os_name: Optional[str] = None,
    arch: Optional[str] = None,
) -> Path:
    """
    Convenience function to provision a binary in one call.

    Example:
        >>> from boj_mcp_launcher.binary.installer import ensure_binary
        >>> path = ensure_binary("0.1.0")
    """
    installer = BinaryInstaller(cache_dir=cache_dir, release_base_url=release_base_url)
    return installer.ensure_binary(version, os_name=os_name, arch=arch)


__all__ = ["BinaryInstaller", "ensure_binary"]
