"""Capability resolution for rule access."""

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from .config import Config
from .errors import RuleNotFoundError
from .models import AccessCapability, rule_file_name
from .storage import FileSystemAdapter

logger = logging.getLogger(__name__)


@runtime_checkable
class AccessResolver(Protocol):
    """Protocol for resolving what a caller may do with a rule."""

    def resolve(self, rule_id: str) -> AccessCapability:
        """Resolve the capabilities held for a rule.

        Args:
            rule_id: Rule identifier

        Returns:
            Capabilities for the rule

        Raises:
            RuleNotFoundError: If the rule does not exist
        """
        ...


class ExistenceAccessResolver:
    """Grants full access to every rule that exists.

    There is no permission backend yet; existence is the only check.
    """

    capability = AccessCapability.full()

    def __init__(self, rules_folder: Path, file_system: FileSystemAdapter):
        self.rules_folder = Path(rules_folder)
        self.file_system = file_system

    def resolve(self, rule_id: str) -> AccessCapability:
        """Return the granted capabilities if the rule file exists."""
        if not self.file_system.file_exists(self.rules_folder / rule_file_name(rule_id)):
            raise RuleNotFoundError(rule_id)

        return self.capability


class ReadOnlyAccessResolver(ExistenceAccessResolver):
    """Grants read access only, for mirrors of a managed rule set."""

    capability = AccessCapability.read_only()


def make_resolver(
    config: Config, rules_folder: Path, file_system: FileSystemAdapter
) -> AccessResolver:
    """Factory function to create an AccessResolver based on configuration.

    Args:
        config: RuleStore configuration
        rules_folder: Resolved rules root folder
        file_system: File system used for existence checks

    Returns:
        AccessResolver instance based on config.access_mode
    """
    mode = config.access_mode

    if mode == "read_only":
        return ReadOnlyAccessResolver(rules_folder, file_system)

    if mode != "full":
        logger.warning(f"Unknown access mode '{mode}', falling back to full access")

    return ExistenceAccessResolver(rules_folder, file_system)


__all__ = [
    "AccessResolver",
    "ExistenceAccessResolver",
    "ReadOnlyAccessResolver",
    "make_resolver",
]
