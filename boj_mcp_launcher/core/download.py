"""
Network fetches for release files.

Downloads are streamed to disk and never retried here; a failure surfaces
as DownloadError carrying the URL and HTTP status, and retry policy is left
to the caller.
"""

import logging
from pathlib import Path
from typing import Union

import requests
from requests.exceptions import RequestException

from boj_mcp_launcher.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


def fetch_text(url: str, timeout: int = DEFAULT_TIMEOUT) -> str:
    """
    Fetch a small text resource such as a checksum manifest.

    Args:
        url: URL to fetch
        timeout: Request timeout in seconds

    Returns:
        Response body decoded as text

    Raises:
        DownloadError: On transport failure or non-2xx status
    """
    logger.debug(f"Fetching {url}")
    try:
        response = requests.get(url, timeout=timeout, allow_redirects=True)
    except RequestException as e:
        raise DownloadError(f"failed to download {url}: {e}", url) from e

    _raise_for_status(response, url)
    return response.text


def download_file(
    url: str,
    destination: Union[str, Path],
    timeout: int = DEFAULT_TIMEOUT,
    chunk_size: int = 8192,
) -> Path:
    """
    Stream a URL to a local file.

    Args:
        url: URL to download from
        destination: Local path to save file
        timeout: Request timeout in seconds
        chunk_size: Bytes per streamed chunk

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: On transport failure or non-2xx status
        ValueError: If URL is empty

    Example:
        >>> download_file(
        ...     "https://example.com/boj-mcp-server-x86_64-apple-darwin.tar.gz",
        ...     Path("staging/boj-mcp-server-x86_64-apple-darwin.tar.gz"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Downloading from {url}")

    try:
        with requests.get(
            url, stream=True, timeout=timeout, allow_redirects=True
        ) as response:
            _raise_for_status(response, url)

            downloaded = 0
            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=chunk_size):
                    if chunk:
                        f.write(chunk)
                        downloaded += len(chunk)
    except RequestException as e:
        raise DownloadError(f"failed to download {url}: {e}", url) from e

    logger.debug(f"Download complete: {destination} ({downloaded} bytes)")
    return destination


def _raise_for_status(response: requests.Response, url: str) -> None:
    if not response.ok:
        raise DownloadError(
            f"failed to download {url}: HTTP {response.status_code}",
            url,
            status_code=response.status_code,
        )


__all__ = ["DEFAULT_TIMEOUT", "fetch_text", "download_file"]
