"""Cargo backend: Cargo.toml, Cargo.lock and crates.io."""

from __future__ import annotations

import os
from typing import List, Optional

from common.http_client import RegistryClient
from constants import BackendKind, Constants
from registry.base import Backend
from registry.models import Config, DepInfo, InstallCandidate, Lockfile, SearchResult

from . import client, manifest
from .lockfile_parser import parse_cargo_lock


class CargoBackend(Backend):
    """Backend for Rust projects managed by Cargo."""

    manifest_file = Constants.CARGO_TOML_FILE
    lockfile_file = Constants.CARGO_LOCK_FILE

    @property
    def kind(self) -> BackendKind:
        return BackendKind.CARGO

    def detect(self, root: str) -> bool:
        return os.path.isfile(self.manifest_path(root))

    def parse_config(self, root: str) -> Config:
        return manifest.parse_cargo_toml(self.manifest_path(root))

    def parse_lockfile(self, root: str, config: Optional[Config] = None) -> Lockfile:
        return parse_cargo_lock(self.lockfile_path(root), config)

    async def fetch_dep_info(self, client_: RegistryClient, name: str) -> DepInfo:
        return await client.get_crate_details(client_, name)

    async def search(self, client_: RegistryClient, term: str) -> List[SearchResult]:
        return await client.search_crates(client_, term)

    def _set_version(self, text: str, candidate: InstallCandidate) -> str:
        return manifest.set_version(text, candidate)

    def _remove_dep(self, text: str, group: str, name: str) -> str:
        return manifest.remove_dep(text, group, name)
