"""RuleStore - sandboxed storage and import of ElastAlert rule documents."""

__version__ = "0.1.0"

from .controller import RuleAccessor, RulesController
from .errors import (
    RuleNotFoundError,
    RuleNotReadableError,
    RuleNotWritableError,
    RuleRequestError,
    RulesDownloadError,
    RulesFolderNotFoundError,
    RulesRootFolderNotCreatableError,
)
from .models import AccessCapability, DirectoryIndex, DirectoryTree

__all__ = [
    "RulesController",
    "RuleAccessor",
    "AccessCapability",
    "DirectoryIndex",
    "DirectoryTree",
    "RuleRequestError",
    "RulesFolderNotFoundError",
    "RulesRootFolderNotCreatableError",
    "RuleNotFoundError",
    "RuleNotReadableError",
    "RuleNotWritableError",
    "RulesDownloadError",
]
