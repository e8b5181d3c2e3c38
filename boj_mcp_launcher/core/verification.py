"""
Hash verification for downloaded release archives.

This module provides:
- SHA256SUMS manifest parsing (tolerant of comments and other digest lines)
- Streaming file hash computation
- Constant-time digest comparison
"""

import hashlib
import logging
import re
import secrets
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

# "<64 hex digits> <filename>" or "<64 hex digits> *<filename>"
_MANIFEST_LINE = re.compile(r"^([0-9a-fA-F]{64})\s+\*?(.+)$")


def parse_manifest(content: str) -> dict[str, str]:
    """
    Parse a SHA256SUMS manifest.

    Supports formats:
    - hash  filename
    - hash *filename

    Lines that do not match (comments, SHA512 entries, junk) are skipped.

    Args:
        content: Manifest text

    Returns:
        Dict of filename -> lowercase hex digest

    Example:
        >>> parse_manifest("ABCD...  boj-mcp-server-x86_64-apple-darwin.tar.gz\\n")
        {'boj-mcp-server-x86_64-apple-darwin.tar.gz': 'abcd...'}
    """
    checksums = {}

    for line_num, raw_line in enumerate(re.split(r"\r?\n", str(content)), 1):
        line = raw_line.strip()
        if not line:
            continue

        match = _MANIFEST_LINE.match(line)
        if not match:
            logger.debug(f"Skipping manifest line {line_num}: {line!r}")
            continue

        checksums[match.group(2).strip()] = match.group(1).lower()

    return checksums


def compute_file_hash(
    file_path: Union[str, Path], algorithm: str = "sha256", chunk_size: int = 8192
) -> str:
    """
    Compute cryptographic hash of file.

    Reads the file in chunks, so memory use does not grow with file size.

    Args:
        file_path: Path to file
        algorithm: Hash algorithm name understood by hashlib
        chunk_size: Number of bytes to read at once

    Returns:
        Lowercase hex string of hash

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If algorithm is not supported
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    try:
        hasher = hashlib.new(algorithm)
    except ValueError:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")

    with open(file_path, "rb") as f:
        while chunk := f.read(chunk_size):
            hasher.update(chunk)

    return hasher.hexdigest()


def verify_file_hash(file_path: Union[str, Path], expected_hash: str) -> bool:
    """
    Verify file matches expected SHA256 hash using constant-time comparison.

    A mismatch is reported as False, not raised; the caller decides whether
    it is fatal.

    Args:
        file_path: Path to file
        expected_hash: Expected hash value (hex string, any case)

    Returns:
        True if hash matches, False otherwise

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    actual_hash = compute_file_hash(file_path)
    return _constant_time_compare(actual_hash, str(expected_hash).strip().lower())


def _constant_time_compare(a: str, b: str) -> bool:
    """Compare two digests in constant time."""
    return secrets.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


__all__ = ["parse_manifest", "compute_file_hash", "verify_file_hash"]
