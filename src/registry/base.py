"""Abstract base class for ecosystem backends."""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import List, Optional

from common.errors import ManifestError
from common.fileio import atomic_write, read_text
from common.http_client import RegistryClient
from common.settings import EngineSettings
from constants import BackendKind

from .models import Config, DepInfo, InstallCandidate, Lockfile, SearchResult

logger = logging.getLogger(__name__)


class Backend(ABC):
    """Manifest, lockfile, registry and mutation support for one ecosystem.

    Subclasses implement parsing and editing for their file formats and the
    registry wire format; file plumbing for read-edit-write lives here.
    """

    manifest_file: str = ""
    lockfile_file: str = ""

    def __init__(self, settings: Optional[EngineSettings] = None):
        """Initialize the backend.

        Args:
            settings: Engine settings providing registry endpoints.
        """
        self.settings = settings or EngineSettings()

    @property
    @abstractmethod
    def kind(self) -> BackendKind:
        """Return the ecosystem this backend handles."""

    @abstractmethod
    def detect(self, root: str) -> bool:
        """Return True if the ecosystem's identifying file exists under root."""

    @abstractmethod
    def parse_config(self, root: str) -> Config:
        """Read the manifest. Raises ManifestError when missing or invalid."""

    @abstractmethod
    def parse_lockfile(self, root: str, config: Optional[Config] = None) -> Lockfile:
        """Read the lockfile. Returns an empty mapping when unavailable.

        ``config`` is the already-parsed manifest, for lockfiles that record
        one dependency at several versions.
        """

    @abstractmethod
    async def fetch_dep_info(self, client: RegistryClient, name: str) -> DepInfo:
        """Fetch registry metadata for one dependency. Raises RegistryError."""

    @abstractmethod
    async def search(self, client: RegistryClient, term: str) -> List[SearchResult]:
        """Free-text registry search. Raises RegistryError."""

    @abstractmethod
    def _set_version(self, text: str, candidate: InstallCandidate) -> str:
        """Return manifest text with the candidate's version written in."""

    @abstractmethod
    def _remove_dep(self, text: str, group: str, name: str) -> str:
        """Return manifest text with the dependency entry removed."""

    def manifest_path(self, root: str) -> str:
        """Path of the manifest file under root."""
        return os.path.join(root, self.manifest_file)

    def lockfile_path(self, root: str) -> str:
        """Path of the lockfile under root."""
        return os.path.join(root, self.lockfile_file)

    def install(self, candidate: InstallCandidate, root: str) -> None:
        """Write the candidate's version into the manifest on disk."""
        self._edit_manifest(root, lambda text: self._set_version(text, candidate))
        logger.info("Set %s in %s to %s", candidate.name, candidate.group, candidate.version)

    def delete(self, group: str, name: str, root: str) -> None:
        """Remove a dependency entry from the manifest on disk."""
        self._edit_manifest(root, lambda text: self._remove_dep(text, group, name))
        logger.info("Removed %s from %s", name, group)

    def _edit_manifest(self, root: str, edit) -> None:
        """Read the manifest, apply ``edit`` in memory, then replace the file.

        Nothing is written unless the edit and serialization succeed.
        """
        path = self.manifest_path(root)
        try:
            text = read_text(path)
        except OSError as e:
            raise ManifestError(f"Unable to read {path}: {e}", path=path) from e

        try:
            updated = edit(text)
        except ManifestError as e:
            if e.path is None:
                e.path = path
            raise

        try:
            atomic_write(path, updated)
        except OSError as e:
            raise ManifestError(f"Unable to write {path}: {e}", path=path) from e
