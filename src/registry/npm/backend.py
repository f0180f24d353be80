"""npm backend: package.json, package-lock.json and registry.npmjs.org."""

from __future__ import annotations

import os
from typing import List, Optional

from common.http_client import RegistryClient
from constants import BackendKind, Constants
from registry.base import Backend
from registry.models import Config, DepInfo, InstallCandidate, Lockfile, SearchResult

from . import client, manifest
from .lockfile_parser import parse_package_lock


class NpmBackend(Backend):
    """Backend for npm projects."""

    manifest_file = Constants.PACKAGE_JSON_FILE
    lockfile_file = Constants.PACKAGE_LOCK_FILE

    @property
    def kind(self) -> BackendKind:
        return BackendKind.NPM

    def detect(self, root: str) -> bool:
        return os.path.isfile(self.lockfile_path(root))

    def parse_config(self, root: str) -> Config:
        return manifest.parse_package_json(self.manifest_path(root))

    def parse_lockfile(self, root: str, config: Optional[Config] = None) -> Lockfile:
        return parse_package_lock(self.lockfile_path(root))

    async def fetch_dep_info(self, client_: RegistryClient, name: str) -> DepInfo:
        return await client.get_package_details(client_, name)

    async def search(self, client_: RegistryClient, term: str) -> List[SearchResult]:
        return await client.search_packages(client_, term)

    def _set_version(self, text: str, candidate: InstallCandidate) -> str:
        return manifest.set_version(text, candidate)

    def _remove_dep(self, text: str, group: str, name: str) -> str:
        return manifest.remove_dep(text, group, name)
