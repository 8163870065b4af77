"""File system implementation for RuleStore."""

import os
import tempfile
from pathlib import Path
from typing import Union

from ..models import DirectoryIndex, DirectoryListing, DirectoryTree


class FileSystem:
    """Plain file system access for rule documents.

    Listings are sorted by name so results are stable across platforms.
    """

    def read_directory(self, path: Path) -> DirectoryListing:
        """List the immediate subfolders and files of a directory."""
        folders: list[str] = []
        files: list[str] = []

        with os.scandir(path) as entries:
            for entry in sorted(entries, key=lambda e: e.name):
                if entry.is_dir():
                    folders.append(entry.name)
                elif entry.is_file():
                    files.append(entry.name)

        return DirectoryListing(folders=folders, files=files)

    def read_directory_recursive(self, path: Path) -> DirectoryTree:
        """List a directory and all of its subdirectories."""
        path = Path(path)
        listing = self.read_directory(path)

        return DirectoryTree(
            name=path.name,
            folders=[
                self.read_directory_recursive(path / folder)
                for folder in listing.folders
            ],
            files=listing.files,
        )

    def file_exists(self, path: Path) -> bool:
        """Check whether a regular file exists."""
        return Path(path).is_file()

    def read_file(self, path: Path) -> bytes:
        """Read a file exactly as stored."""
        return Path(path).read_bytes()

    def write_file(self, path: Path, content: Union[str, bytes]) -> None:
        """Write a file atomically, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._atomic_write(path, content)

    def delete_file(self, path: Path) -> None:
        """Delete a file."""
        Path(path).unlink()

    def make_directory(self, path: Path) -> None:
        """Create a directory and any missing parents."""
        Path(path).mkdir(parents=True, exist_ok=True)

    def get_empty_directory_index(self) -> DirectoryIndex:
        """Return the index of a directory with no entries."""
        return DirectoryIndex(folders=[], rules=[])

    def _atomic_write(self, path: Path, content: Union[str, bytes]) -> None:
        """Write content to file atomically."""
        temp_fd = None
        temp_path = None
        data = content.encode("utf-8") if isinstance(content, str) else content

        try:
            temp_fd, temp_path_str = tempfile.mkstemp(
                dir=path.parent, prefix=f"{path.name}.tmp.", suffix=".tmp"
            )
            temp_path = Path(temp_path_str)

            with os.fdopen(temp_fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())

            temp_fd = None  # closed by fdopen

            temp_path.replace(path)

        finally:
            if temp_fd is not None:
                os.close(temp_fd)
            if temp_path and temp_path.exists():
                temp_path.unlink(missing_ok=True)
