"""Fetching and unpacking remote rule archives."""

from __future__ import annotations

import logging
import posixpath
import tarfile
import tempfile
from pathlib import Path
from urllib.parse import urlparse

import requests

from .config import Config

logger = logging.getLogger(__name__)

DEFAULT_ARCHIVE_NAME = "rules.tar"
CHUNK_SIZE = 64 * 1024


def archive_file_name(url: str) -> str:
    """Derive the local archive file name from the URL's base name."""
    name = posixpath.basename(urlparse(url).path)
    return name or DEFAULT_ARCHIVE_NAME


class RulesDownloader:
    """Fetch a tar archive over HTTP and extract it into a folder.

    The archive is saved inside a scoped temporary directory which is
    removed on every exit path, including a failed extraction. A failed
    extraction may still leave some members in the target folder.
    """

    def __init__(self, verify_tls: bool = True, timeout: float = 30.0):
        self.verify_tls = verify_tls
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Config) -> RulesDownloader:
        return cls(verify_tls=config.verify_tls, timeout=config.download_timeout)

    def download(self, url: str, target: Path) -> list[str]:
        """Download the archive at url and extract it into target.

        Args:
            url: Location of a tar archive (optionally compressed)
            target: Extraction root, created if missing

        Returns:
            Names of the extracted archive members

        Raises:
            requests.RequestException: If the fetch fails
            tarfile.TarError: If the payload is not a readable tar archive
            OSError: If saving or extracting fails
        """
        if not self.verify_tls:
            logger.warning(f"TLS certificate verification is disabled for {url}")

        with tempfile.TemporaryDirectory(prefix="rulestore-") as temp_dir:
            archive_path = Path(temp_dir) / archive_file_name(url)

            self._fetch(url, archive_path)
            members = self._extract(archive_path, Path(target))
            archive_path.unlink()

        logger.info(f"Extracted {len(members)} entries from {url} into {target}")
        return members

    def _fetch(self, url: str, destination: Path) -> None:
        """Stream the response body to destination."""
        with requests.get(
            url, stream=True, verify=self.verify_tls, timeout=self.timeout
        ) as response:
            response.raise_for_status()

            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)

    def _extract(self, archive_path: Path, target: Path) -> list[str]:
        """Extract every member, refusing paths that leave target."""
        target.mkdir(parents=True, exist_ok=True)

        with tarfile.open(archive_path, "r:*") as tar:
            members = tar.getnames()
            tar.extractall(target, filter="data")

        return members
