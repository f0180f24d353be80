"""The parsed view of one project: manifest, lockfile and registry metadata.

A Project is built by :func:`parse` and never changes afterwards. Mutations
rewrite the manifest on disk; callers then :meth:`Project.reparse` to get a
fresh view that reuses the metadata already fetched.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from common.errors import ManifestError
from common.http_client import RegistryClient
from common.settings import EngineSettings
from constants import BackendKind, UpgradeType
from registry.base import Backend
from registry.models import Config, DepInfo, InstallCandidate, Lockfile, SearchResult
from registry.selector import get_backend
from versioning.models import Version, VersionRequirement
from versioning.upgrade import best_compatible_version, classify_upgrade

from .fetch import fetch_metadata

logger = logging.getLogger(__name__)


class Project:
    """Query and mutation API over a parsed project."""

    def __init__(
        self,
        backend: Backend,
        root: str,
        config: Config,
        lockfile: Lockfile,
        metadata: Dict[str, DepInfo],
    ):
        self.backend = backend
        self.root = root
        self.config = config
        self.lockfile = lockfile
        self.metadata = metadata

    @property
    def kind(self) -> BackendKind:
        return self.backend.kind

    @property
    def settings(self) -> EngineSettings:
        return self.backend.settings

    # Structure

    def get_groups(self) -> List[str]:
        """Dependency groups in manifest order."""
        return list(self.config.groups)

    def get_deps_in_group(self, group: str) -> List[str]:
        """Dependency names in ``group`` in declaration order; empty if absent."""
        return list(self.config.groups.get(group, {}))

    # Versions

    def get_specified_version(self, group: str, name: str) -> Optional[VersionRequirement]:
        return self.config.groups.get(group, {}).get(name)

    def get_current_version(self, name: str) -> Optional[Version]:
        return self.lockfile.get(name)

    def get_versions(self, name: str) -> Tuple[Version, ...]:
        """Every registry version of ``name``, newest first."""
        info = self.metadata.get(name)
        return info.versions if info else ()

    def is_versions_available(self, name: str) -> bool:
        return bool(self.get_versions(name))

    def get_latest_version(self, name: str) -> Optional[Version]:
        versions = self.get_versions(name)
        return versions[0] if versions else None

    def get_best_compatible_version(self, group: str, name: str) -> Optional[Version]:
        return best_compatible_version(
            self.get_current_version(name),
            self.get_specified_version(group, name),
            self.get_versions(name),
        )

    def get_upgrade_type(self, group: str, name: str) -> UpgradeType:
        return classify_upgrade(
            self.get_current_version(name),
            self.get_best_compatible_version(group, name),
            self.get_latest_version(name),
        )

    # Registry metadata

    def _info_field(self, name: str, field_name: str) -> Optional[str]:
        info = self.metadata.get(name)
        return getattr(info, field_name) if info else None

    def get_author(self, name: str) -> Optional[str]:
        return self._info_field(name, "author")

    def get_homepage(self, name: str) -> Optional[str]:
        return self._info_field(name, "homepage")

    def get_repository(self, name: str) -> Optional[str]:
        return self._info_field(name, "repository")

    def get_license(self, name: str) -> Optional[str]:
        return self._info_field(name, "license")

    def get_description(self, name: str) -> Optional[str]:
        return self._info_field(name, "description")

    # Mutations

    def install_dep(self, candidate: InstallCandidate) -> bool:
        """Write ``candidate`` into the manifest. Returns False on failure."""
        try:
            self.backend.install(candidate, self.root)
        except ManifestError as e:
            logger.error("Unable to install %s %s: %s", candidate.name, candidate.version, e)
            return False
        return True

    def delete_dep(self, group: str, name: str) -> bool:
        """Remove ``name`` from ``group`` in the manifest. Returns False on failure."""
        try:
            self.backend.delete(group, name, self.root)
        except ManifestError as e:
            logger.error("Unable to delete %s from %s: %s", name, group, e)
            return False
        return True

    async def search_dep(self, term: str) -> List[SearchResult]:
        """Search the project's registry.

        Raises:
            RegistryError: If the search request fails.
        """
        async with RegistryClient(self.settings) as client:
            return await self.backend.search(client, term)

    async def reparse(
        self, root: Optional[str] = None, kind: Optional[BackendKind] = None
    ) -> "Project":
        """Re-read the files and fetch metadata only for names not cached yet.

        Cached metadata is reused only when the ecosystem is unchanged.
        """
        root = root or self.root
        kind = kind or self.kind
        known = self.metadata if kind == self.kind else None
        return await _build(root, kind, self.settings, known)


async def _build(
    root: str,
    kind: BackendKind,
    settings: Optional[EngineSettings],
    known: Optional[Dict[str, DepInfo]],
) -> Project:
    backend = get_backend(kind, settings)
    config = backend.parse_config(root)
    lockfile = backend.parse_lockfile(root, config)
    metadata = await fetch_metadata(backend, config, backend.settings, known)
    return Project(backend, root, config, lockfile, metadata)


async def parse(
    root: str, kind: BackendKind, settings: Optional[EngineSettings] = None
) -> Project:
    """Build a Project: one manifest parse, one lockfile parse, one fetch pass.

    Raises:
        ManifestError: If the manifest is missing or invalid.
        UnsupportedProjectError: If ``kind`` has no backend.
    """
    return await _build(root, kind, settings, None)


async def reparse(
    project: Project, root: Optional[str] = None, kind: Optional[BackendKind] = None
) -> Project:
    """Module-level form of :meth:`Project.reparse`."""
    return await project.reparse(root, kind)
