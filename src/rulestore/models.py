"""Core data models for RuleStore."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field

RULE_EXTENSION = ".yaml"


def is_rule_file(file_name: str) -> bool:
    """Return True if the file name carries the rule extension (any case)."""
    return os.path.splitext(file_name)[1].lower() == RULE_EXTENSION


def rule_file_name(rule_id: str) -> str:
    """Get the file name backing a rule ID."""
    return f"{rule_id}{RULE_EXTENSION}"


class AccessCapability(BaseModel):
    """What a caller may do with one rule."""

    model_config = ConfigDict(frozen=True)

    read: bool = Field(False, description="Rule content may be read")
    write: bool = Field(False, description="Rule content may be written or deleted")

    @classmethod
    def full(cls) -> AccessCapability:
        return cls(read=True, write=True)

    @classmethod
    def read_only(cls) -> AccessCapability:
        return cls(read=True, write=False)


class DirectoryListing(BaseModel):
    """Raw listing of a single directory as produced by the file system."""

    folders: list[str] = Field(default_factory=list, description="Subfolder names")
    files: list[str] = Field(default_factory=list, description="File names")


class DirectoryIndex(BaseModel):
    """Listing of a single directory split into subfolders and rule IDs."""

    folders: list[str] = Field(default_factory=list, description="Subfolder names")
    rules: list[str] = Field(
        default_factory=list, description="Rule IDs (file names without .yaml)"
    )

    @classmethod
    def from_listing(cls, listing: DirectoryListing) -> DirectoryIndex:
        """Keep only rule files, strip their extension and drop raw files.

        Args:
            listing: Raw directory listing

        Returns:
            Index with the same folders and the derived rule IDs, in
            listing order
        """
        rules = [
            file_name[: -len(RULE_EXTENSION)]
            for file_name in listing.files
            if is_rule_file(file_name)
        ]
        return cls(folders=list(listing.folders), rules=rules)


class DirectoryTree(BaseModel):
    """Recursive listing of a directory."""

    name: str = Field(..., description="Directory name")
    folders: list[DirectoryTree] = Field(
        default_factory=list, description="Nested directories"
    )
    files: list[str] = Field(default_factory=list, description="File names")

    def rule_count(self) -> int:
        """Count rule files in this directory and every nested one."""
        own = sum(1 for file_name in self.files if is_rule_file(file_name))
        return own + sum(folder.rule_count() for folder in self.folders)


DirectoryTree.model_rebuild()
