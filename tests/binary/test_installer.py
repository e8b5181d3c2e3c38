"""
Unit tests for the binary installer.
"""

import os
import socket
import stat
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
import responses

from boj_mcp_launcher.binary.installer import BinaryInstaller, ensure_binary
from boj_mcp_launcher.binary.release import build_release_urls
from boj_mcp_launcher.core.exceptions import (
    ArchiveContentMissingError,
    ChecksumEntryMissingError,
    ChecksumMismatchError,
    DownloadError,
    LockTimeout,
    UnsupportedTargetError,
)
from boj_mcp_launcher.core.locking import file_lock as real_file_lock
from tests.fixtures.releases import build_archive, sha256_hex

BASE_URL = "https://releases.example.com/download"
VERSION = "9.9.9"
LINUX_TRIPLE = "x86_64-unknown-linux-gnu"


def _register_release(
    archive: bytes,
    triple: str = LINUX_TRIPLE,
    manifest: str = None,
    version: str = VERSION,
):
    """Register manifest and archive responses; return the descriptor."""
    release = build_release_urls(version, triple, BASE_URL)
    if manifest is None:
        manifest = f"{sha256_hex(archive)}  {release.asset_name}\n"
    responses.add(responses.GET, release.checksum_url, body=manifest, status=200)
    responses.add(responses.GET, release.asset_url, body=archive, status=200)
    return release


def _calls_to(url):
    return sum(1 for call in responses.calls if call.request.url == url)


def _leftovers(cache_dir: Path):
    """Lock files and staging directories left in the version directory."""
    version_dir = cache_dir / VERSION
    if not version_dir.exists():
        return []
    return [
        p.name
        for p in version_dir.iterdir()
        if p.name.endswith(".lock") or ".tmp-" in p.name
    ]


@pytest.fixture
def installer(cache_dir):
    """Installer with a temporary cache and short lock wait."""
    return BinaryInstaller(cache_dir=cache_dir, release_base_url=BASE_URL, max_wait=2)


class TestEnsureBinary:
    """Tests for BinaryInstaller.ensure_binary."""

    @responses.activate
    def test_installs_binary_into_slot(self, installer, cache_dir):
        archive = build_archive("boj-mcp-server", b"#!/bin/sh\nexit 0\n")
        release = _register_release(archive)

        path = installer.ensure_binary(VERSION, "linux", "x64")

        assert path == cache_dir / VERSION / LINUX_TRIPLE / "boj-mcp-server"
        assert path.read_bytes() == b"#!/bin/sh\nexit 0\n"
        assert _calls_to(release.checksum_url) == 1
        assert _calls_to(release.asset_url) == 1
        # Archive removed, nothing else in the slot
        assert sorted(p.name for p in path.parent.iterdir()) == ["boj-mcp-server"]
        assert _leftovers(cache_dir) == []

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    @responses.activate
    def test_binary_is_executable(self, installer):
        archive = build_archive("boj-mcp-server", b"bin", mode=0o644)
        _register_release(archive)

        path = installer.ensure_binary(VERSION, "linux", "x64")

        assert stat.S_IMODE(path.stat().st_mode) == 0o755

    @responses.activate
    def test_windows_binary_name(self, installer, cache_dir):
        archive = build_archive("boj-mcp-server.exe", b"MZ")
        _register_release(archive, triple="x86_64-pc-windows-msvc")

        path = installer.ensure_binary(VERSION, "windows", "x64")

        assert path == (
            cache_dir / VERSION / "x86_64-pc-windows-msvc" / "boj-mcp-server.exe"
        )
        assert path.read_bytes() == b"MZ"

    @responses.activate
    def test_second_call_uses_cache(self, installer):
        archive = build_archive("boj-mcp-server", b"bin")
        _register_release(archive)

        first = installer.ensure_binary(VERSION, "linux", "x64")
        with patch("boj_mcp_launcher.binary.installer.file_lock") as mock_lock:
            second = installer.ensure_binary(VERSION, "linux", "x64")

        assert first == second
        assert len(responses.calls) == 2
        mock_lock.assert_not_called()

    @responses.activate
    def test_checksum_mismatch_leaves_no_slot(self, installer, cache_dir):
        archive = build_archive("boj-mcp-server", b"bin")
        release = build_release_urls(VERSION, LINUX_TRIPLE, BASE_URL)
        _register_release(archive, manifest=f"{'0' * 64}  {release.asset_name}\n")

        with patch("boj_mcp_launcher.binary.installer.extract_archive") as extract:
            with pytest.raises(ChecksumMismatchError, match="checksum mismatch"):
                installer.ensure_binary(VERSION, "linux", "x64")

        extract.assert_not_called()
        assert not (cache_dir / VERSION / LINUX_TRIPLE).exists()
        assert _leftovers(cache_dir) == []

    @responses.activate
    def test_checksum_entry_missing(self, installer, cache_dir):
        archive = build_archive("boj-mcp-server", b"bin")
        release = _register_release(
            archive, manifest=f"{'a' * 64}  some-other-asset.tar.gz\n"
        )

        with pytest.raises(ChecksumEntryMissingError) as exc_info:
            installer.ensure_binary(VERSION, "linux", "x64")

        assert exc_info.value.asset_name == release.asset_name
        assert exc_info.value.checksum_url == release.checksum_url
        # Archive is never requested without an expected digest
        assert _calls_to(release.asset_url) == 0
        assert _leftovers(cache_dir) == []

    @responses.activate
    def test_archive_without_binary(self, installer, cache_dir):
        archive = build_archive("README.md", b"not the server")
        _register_release(archive)

        with pytest.raises(ArchiveContentMissingError, match="boj-mcp-server"):
            installer.ensure_binary(VERSION, "linux", "x64")

        assert not (cache_dir / VERSION / LINUX_TRIPLE).exists()
        assert _leftovers(cache_dir) == []

    @responses.activate
    def test_download_error_propagates(self, installer, cache_dir):
        release = build_release_urls(VERSION, LINUX_TRIPLE, BASE_URL)
        responses.add(responses.GET, release.checksum_url, status=404)

        with pytest.raises(DownloadError, match="HTTP 404"):
            installer.ensure_binary(VERSION, "linux", "x64")

        assert _leftovers(cache_dir) == []

    @responses.activate
    def test_interrupted_install_leaves_slot_absent(self, installer, cache_dir):
        """Test a failure after download but before publish, then recovery."""
        archive = build_archive("boj-mcp-server", b"bin")
        _register_release(archive)
        _register_release(archive)
        slot_dir = cache_dir / VERSION / LINUX_TRIPLE

        with patch(
            "boj_mcp_launcher.binary.installer.make_executable",
            side_effect=KeyboardInterrupt,
        ):
            with pytest.raises(KeyboardInterrupt):
                installer.ensure_binary(VERSION, "linux", "x64")

        assert not slot_dir.exists()
        assert _leftovers(cache_dir) == []

        path = installer.ensure_binary(VERSION, "linux", "x64")
        assert path.read_bytes() == b"bin"

    @responses.activate
    def test_replaces_partial_slot(self, installer, cache_dir):
        """Test a slot directory without the binary is replaced."""
        slot_dir = cache_dir / VERSION / LINUX_TRIPLE
        slot_dir.mkdir(parents=True)
        (slot_dir / "leftover").write_text("junk")
        _register_release(build_archive("boj-mcp-server", b"bin"))

        path = installer.ensure_binary(VERSION, "linux", "x64")

        assert path.exists()
        assert not (slot_dir / "leftover").exists()

    @responses.activate
    def test_installed_while_waiting_for_lock(self, installer, cache_dir):
        """Test the post-lock re-check skips the network."""
        slot_dir = cache_dir / VERSION / LINUX_TRIPLE

        def lock_then_install(*args, **kwargs):
            slot_dir.mkdir(parents=True)
            (slot_dir / "boj-mcp-server").write_bytes(b"other process")
            return real_file_lock(*args, **kwargs)

        with patch(
            "boj_mcp_launcher.binary.installer.file_lock", side_effect=lock_then_install
        ):
            path = installer.ensure_binary(VERSION, "linux", "x64")

        assert path.read_bytes() == b"other process"
        assert len(responses.calls) == 0
        assert _leftovers(cache_dir) == []

    def test_lock_timeout(self, cache_dir):
        installer = BinaryInstaller(
            cache_dir=cache_dir,
            release_base_url=BASE_URL,
            retry_interval=0.01,
            max_wait=0.05,
        )
        lock_path = cache_dir / VERSION / f"{LINUX_TRIPLE}.lock"
        lock_path.parent.mkdir(parents=True)
        lock_path.write_text(f"{os.getpid()}\n{socket.gethostname()}\n")

        with pytest.raises(LockTimeout):
            installer.ensure_binary(VERSION, "linux", "x64")

        assert lock_path.exists()

    def test_unsupported_target(self, installer):
        with pytest.raises(UnsupportedTargetError):
            installer.ensure_binary(VERSION, "linux", "arm64")

    def test_version_required(self, installer):
        with pytest.raises(ValueError, match="version is required"):
            installer.ensure_binary("", "linux", "x64")

    @responses.activate
    def test_detects_host_when_not_given(self, installer, cache_dir):
        _register_release(build_archive("boj-mcp-server", b"bin"))

        with patch(
            "boj_mcp_launcher.binary.installer.detect_host",
        ) as detect:
            detect.return_value.os = "linux"
            detect.return_value.arch = "x64"
            path = installer.ensure_binary(VERSION)

        assert path == cache_dir / VERSION / LINUX_TRIPLE / "boj-mcp-server"


class TestStagingDir:
    """Tests for staging directory naming."""

    def test_unique_sibling_of_slot(self, tmp_path):
        slot_dir = tmp_path / "0.1.0" / LINUX_TRIPLE

        first = BinaryInstaller._staging_dir(slot_dir)
        second = BinaryInstaller._staging_dir(slot_dir)

        assert first != second
        assert first.parent == slot_dir.parent
        assert first.name.startswith(f"{LINUX_TRIPLE}.tmp-{os.getpid()}-")


@responses.activate
def test_ensure_binary_convenience(cache_dir):
    _register_release(build_archive("boj-mcp-server", b"bin"))

    path = ensure_binary(
        VERSION,
        release_base_url=BASE_URL,
        cache_dir=cache_dir,
        os_name="linux",
        arch="x64",
    )

    assert path.read_bytes() == b"bin"
