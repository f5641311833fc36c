"""
HTTP fetcher — release downloads with ``urllib.request``.

Redirects are followed (GitHub "latest" URLs redirect to the asset
host). Downloads are streamed to disk in chunks.
"""

from __future__ import annotations

import http.client
import logging
import shutil
import urllib.error
import urllib.request
from pathlib import Path

from eks_toolbox import __version__
from eks_toolbox.adapters.base import Fetcher
from eks_toolbox.core.errors import DownloadError

logger = logging.getLogger(__name__)

_USER_AGENT = f"eks-toolbox/{__version__}"
_CHUNK = 1024 * 1024


def _content_length(resp) -> int | None:
    """Declared body size, or None when absent or unparsable."""
    value = resp.headers.get("Content-Length") if resp.headers else None
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


class UrlFetcher(Fetcher):
    """Fetch over HTTP(S) with a fixed per-request timeout."""

    def __init__(self, *, timeout: int = 300) -> None:
        self._timeout = timeout

    def _open(self, url: str):
        req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
        try:
            return urllib.request.urlopen(req, timeout=self._timeout)
        except urllib.error.HTTPError as e:
            raise DownloadError(f"HTTP {e.code} fetching {url}") from e
        except (urllib.error.URLError, OSError) as e:
            raise DownloadError(f"Failed to fetch {url}: {e}") from e

    def fetch_text(self, url: str) -> str:
        logger.debug("GET %s", url)
        with self._open(url) as resp:
            try:
                body = resp.read().decode("utf-8").strip()
            except (OSError, UnicodeDecodeError) as e:
                raise DownloadError(f"Unreadable response from {url}: {e}") from e
        if not body:
            raise DownloadError(f"Empty response from {url}")
        return body

    def download(self, url: str, dest: Path) -> Path:
        logger.info("Downloading %s", url)
        dest.parent.mkdir(parents=True, exist_ok=True)
        with self._open(url) as resp:
            expected = _content_length(resp)
            try:
                with open(dest, "wb") as f:
                    shutil.copyfileobj(resp, f, _CHUNK)
            except (OSError, http.client.IncompleteRead) as e:
                raise DownloadError(f"Download of {url} interrupted: {e}") from e

        size = dest.stat().st_size
        if size == 0:
            raise DownloadError(f"Downloaded an empty file from {url}")
        if expected is not None and size != expected:
            raise DownloadError(f"Download of {url} truncated: got {size} of {expected} bytes")
        logger.debug("Saved %s (%d bytes)", dest, size)
        return dest
