"""File system access for RuleStore."""

from abc import abstractmethod
from pathlib import Path
from typing import Protocol, Union

from ..models import DirectoryIndex, DirectoryListing, DirectoryTree
from .filesystem import FileSystem


class FileSystemAdapter(Protocol):
    """Protocol for the file system used by the rules controller."""

    @abstractmethod
    def read_directory(self, path: Path) -> DirectoryListing:
        """List the immediate subfolders and files of a directory."""
        ...

    @abstractmethod
    def read_directory_recursive(self, path: Path) -> DirectoryTree:
        """List a directory and all of its subdirectories."""
        ...

    @abstractmethod
    def file_exists(self, path: Path) -> bool:
        """Check whether a regular file exists."""
        ...

    @abstractmethod
    def read_file(self, path: Path) -> bytes:
        """Read a file exactly as stored."""
        ...

    @abstractmethod
    def write_file(self, path: Path, content: Union[str, bytes]) -> None:
        """Write a file atomically, creating parent directories."""
        ...

    @abstractmethod
    def delete_file(self, path: Path) -> None:
        """Delete a file."""
        ...

    @abstractmethod
    def make_directory(self, path: Path) -> None:
        """Create a directory and any missing parents."""
        ...

    @abstractmethod
    def get_empty_directory_index(self) -> DirectoryIndex:
        """Return the index of a directory with no entries."""
        ...


__all__ = ["FileSystemAdapter", "FileSystem"]
