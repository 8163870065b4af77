"""Orchestration of rule listing, access and import."""

from __future__ import annotations

import asyncio
import logging
import os
import tarfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import requests

from .access import AccessResolver, ExistenceAccessResolver, make_resolver
from .archive import RulesDownloader
from .config import Config
from .errors import (
    RuleNotFoundError,
    RuleNotReadableError,
    RuleNotWritableError,
    RulesDownloadError,
    RulesFolderNotFoundError,
    RulesRootFolderNotCreatableError,
)
from .models import AccessCapability, DirectoryIndex, DirectoryTree, rule_file_name
from .storage import FileSystem, FileSystemAdapter

logger = logging.getLogger(__name__)


def resolve_rules_folder(config: Config) -> Path:
    """Compute the rules root folder from configuration.

    With ``rulesPath.relative`` the path is joined onto ``elastalertPath``,
    otherwise it is taken verbatim.
    """
    if config.rules_path_relative:
        return config.elastalert_path / config.rules_path

    return Path(config.rules_path)


@dataclass(frozen=True)
class RuleAccessor:
    """Operations on one rule, bound to the capabilities resolved for it."""

    controller: RulesController
    rule_id: str
    capability: AccessCapability

    @property
    def can_read(self) -> bool:
        return self.capability.read

    @property
    def can_write(self) -> bool:
        return self.capability.write

    async def get(self) -> bytes:
        if not self.can_read:
            raise self.controller._log_failure(
                f"get({self.rule_id})", RuleNotReadableError(self.rule_id)
            )
        return await self.controller._get_rule(self.rule_id)

    async def edit(self, body: Union[str, bytes]) -> None:
        if not self.can_write:
            raise self.controller._log_failure(
                f"edit({self.rule_id})", RuleNotWritableError(self.rule_id)
            )
        await self.controller._edit_rule(self.rule_id, body)

    async def delete(self) -> None:
        if not self.can_write:
            raise self.controller._log_failure(
                f"delete({self.rule_id})", RuleNotWritableError(self.rule_id)
            )
        await self.controller._delete_rule(self.rule_id)


class RulesController:
    """Entry point for every rule operation.

    All paths are computed inside ``rules_folder``. Low-level failures are
    logged and re-raised as errors from :mod:`rulestore.errors`.
    """

    def __init__(
        self,
        rules_folder: Path,
        file_system: Optional[FileSystemAdapter] = None,
        resolver: Optional[AccessResolver] = None,
        downloader: Optional[RulesDownloader] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.rules_folder = Path(os.path.normpath(os.path.abspath(rules_folder)))
        self.file_system = file_system or FileSystem()
        self.resolver = resolver or ExistenceAccessResolver(
            self.rules_folder, self.file_system
        )
        self.downloader = downloader or RulesDownloader()
        self.logger = log or logger

    @classmethod
    def from_config(
        cls,
        config: Config,
        log: Optional[logging.Logger] = None,
        downloader: Optional[RulesDownloader] = None,
    ) -> RulesController:
        """Build a controller with collaborators chosen by configuration.

        An explicit downloader overrides the one built from ``[download]``.
        """
        rules_folder = resolve_rules_folder(config)
        file_system = FileSystem()

        return cls(
            rules_folder,
            file_system=file_system,
            resolver=make_resolver(config, rules_folder, file_system),
            downloader=downloader or RulesDownloader.from_config(config),
            log=log,
        )

    async def get_rules_all(self) -> DirectoryTree:
        """Recursively list everything under the rules folder."""
        try:
            return await asyncio.to_thread(
                self.file_system.read_directory_recursive, self.rules_folder
            )
        except OSError as e:
            raise self._log_failure(
                "get_rules_all()", RulesFolderNotFoundError(self.rules_folder), e
            ) from e

    async def get_rules(self, path: str = "") -> DirectoryIndex:
        """List the subfolders and rule IDs of one directory.

        A missing root folder is created on first access and reported as
        empty. Any other missing folder is not found.
        """
        full_path = self._folder_path(path)
        if full_path is None:
            raise self._log_failure(
                f"get_rules({path})", RulesFolderNotFoundError(path)
            )

        try:
            listing = await asyncio.to_thread(self.file_system.read_directory, full_path)
            return DirectoryIndex.from_listing(listing)
        except OSError as e:
            if full_path != self.rules_folder:
                raise self._log_failure(
                    f"get_rules({path})", RulesFolderNotFoundError(path), e
                ) from e

        return await self._create_root_folder()

    async def rule(self, rule_id: str, path: Optional[str] = None) -> RuleAccessor:
        """Resolve access to a rule.

        Raises:
            RuleNotFoundError: If the rule does not exist or access
                can't be resolved
        """
        if not self._is_inside(self._rule_path(rule_id)):
            raise self._log_failure(
                f"rule({rule_id}, {path})", RuleNotFoundError(rule_id)
            )

        try:
            capability = await asyncio.to_thread(self.resolver.resolve, rule_id)
        except Exception as e:
            raise self._log_failure(
                f"rule({rule_id}, {path})", RuleNotFoundError(rule_id), e
            ) from e

        return RuleAccessor(self, rule_id, capability)

    async def create_rule(self, rule_id: str, content: Union[str, bytes]) -> None:
        """Write a rule without checking access or prior existence."""
        if not self._is_inside(self._rule_path(rule_id)):
            raise self._log_failure(
                f"create_rule({rule_id})", RuleNotWritableError(rule_id)
            )

        await self._edit_rule(rule_id, content)

    async def download_rules(self, url: str) -> list[str]:
        """Fetch a tar archive and extract it into the rules folder."""
        try:
            return await asyncio.to_thread(
                self.downloader.download, url, self.rules_folder
            )
        except (requests.RequestException, tarfile.TarError, OSError) as e:
            raise self._log_failure(
                f"download_rules({url})", RulesDownloadError(url), e
            ) from e

    async def _create_root_folder(self) -> DirectoryIndex:
        try:
            await asyncio.to_thread(self.file_system.make_directory, self.rules_folder)
        except OSError as e:
            raise self._log_failure(
                "get_rules()", RulesRootFolderNotCreatableError(self.rules_folder), e
            ) from e

        self.logger.info(f"Created rules root folder {self.rules_folder}")
        return self.file_system.get_empty_directory_index()

    async def _get_rule(self, rule_id: str) -> bytes:
        return await asyncio.to_thread(self.file_system.read_file, self._rule_path(rule_id))

    async def _edit_rule(self, rule_id: str, body: Union[str, bytes]) -> None:
        await asyncio.to_thread(
            self.file_system.write_file, self._rule_path(rule_id), body
        )

    async def _delete_rule(self, rule_id: str) -> None:
        await asyncio.to_thread(self.file_system.delete_file, self._rule_path(rule_id))

    def _rule_path(self, rule_id: str) -> Path:
        return self.rules_folder / rule_file_name(rule_id)

    def _folder_path(self, path: str) -> Optional[Path]:
        """Join path onto the rules folder; None if the result escapes it."""
        relative = str(path or "").lstrip("/\\")
        full_path = Path(os.path.normpath(self.rules_folder / relative))

        return full_path if self._is_inside(full_path) else None

    def _is_inside(self, path: Path) -> bool:
        return Path(os.path.normpath(path)).is_relative_to(self.rules_folder)

    def _log_failure(
        self, operation: str, error: Exception, cause: Optional[Exception] = None
    ) -> Exception:
        if cause is None:
            self.logger.error(f"Failed to {operation} error: {error}")
        else:
            self.logger.error(f"Failed to {operation} error: {error}. Cause: {cause!r}")
        return error
