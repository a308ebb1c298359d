"""HTTP retrieval of fonts and themes."""

from __future__ import annotations

import hashlib
import logging
import shutil
import urllib.request
from pathlib import Path

from .errors import DownloadError
from .filesystem import ensure_parent

logger = logging.getLogger(__name__)

USER_AGENT = "termkit"


class Downloader:
    """Fetches a URL into a local file with a single GET."""

    def __init__(self, timeout: float = 60.0) -> None:
        self.timeout = timeout

    def fetch(self, url: str, destination: Path) -> Path:
        logger.info("GET %s -> %s", url, destination)
        ensure_parent(destination)
        request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response, destination.open("wb") as handle:
                shutil.copyfileobj(response, handle)
        except OSError as exc:
            destination.unlink(missing_ok=True)
            raise DownloadError(f"Failed to download {url}: {exc}") from exc
        return destination


def sha256_file(path: Path) -> str:
    hasher = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1024 * 1024), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def verify_sha256(path: Path, expected: str | None) -> None:
    """Raise :class:`DownloadError` when ``path`` does not hash to ``expected``.

    ``expected`` of ``None`` disables the check.
    """

    if expected is None:
        return
    actual = sha256_file(path)
    if actual.lower() != expected.lower():
        raise DownloadError(f"Checksum mismatch for '{path.name}': expected {expected}, got {actual}")
