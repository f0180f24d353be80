"""Cargo.toml reading and format-preserving editing.

Reads go through tomllib into the simplified Config; edits go through tomlkit
so comments, ordering and unrelated entries survive a rewrite.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any, Dict, Optional

import tomlkit
from tomlkit.exceptions import TOMLKitError

from common.errors import ManifestError
from constants import Constants
from registry.models import Config, DependencyGroup, InstallCandidate
from versioning.models import VersionRequirement
from versioning.parser import parse_cargo_requirement, parse_version

try:
    import tomllib as toml  # type: ignore
except Exception:  # pylint: disable=broad-exception-caught
    import tomli as toml  # type: ignore

logger = logging.getLogger(__name__)


def _requirement(entry: Any) -> Optional[VersionRequirement]:
    """Entry is "1.2" or a table with a "version" key; path/git tables have none."""
    if isinstance(entry, str):
        return parse_cargo_requirement(entry)
    if isinstance(entry, dict):
        return parse_cargo_requirement(entry.get("version"))
    return None


def parse_cargo_toml(cargo_toml_path: str) -> Config:
    """Parse Cargo.toml into a Config.

    Args:
        cargo_toml_path: Path to Cargo.toml

    Returns:
        Config with the dependency tables present, in manifest order.

    Raises:
        ManifestError: If the file is missing, unreadable or not valid TOML.
    """
    try:
        with open(cargo_toml_path, "rb") as f:
            data = toml.load(f)
    except OSError as e:
        raise ManifestError(f"Unable to read {cargo_toml_path}: {e}", path=cargo_toml_path) from e
    except ValueError as e:
        raise ManifestError(f"Unable to parse {cargo_toml_path}: {e}", path=cargo_toml_path) from e

    groups: Dict[str, DependencyGroup] = {}
    for key, section in data.items():
        if key not in Constants.CARGO_GROUPS:
            continue
        if not isinstance(section, dict):
            logger.warning("Ignoring [%s] in %s: not a table", key, cargo_toml_path)
            continue
        groups[key] = {dep_name: _requirement(entry) for dep_name, entry in section.items()}

    package = data.get("package")
    name = version = None
    if isinstance(package, dict):
        name = package.get("name") if isinstance(package.get("name"), str) else None
        version = parse_version(package.get("version"))
    return Config(name=name, version=version, groups=groups)


def _load(text: str) -> tomlkit.TOMLDocument:
    try:
        return tomlkit.parse(text)
    except TOMLKitError as e:
        raise ManifestError(f"Invalid Cargo.toml: {e}") from e


def set_version(text: str, candidate: InstallCandidate) -> str:
    """Return Cargo.toml text with the candidate's version written in.

    A string entry is replaced by the bare version; a table entry only gets
    its "version" key set. A missing table is appended to the document.
    """
    doc = _load(text)
    if candidate.group not in doc:
        doc[candidate.group] = tomlkit.table()
    section = doc[candidate.group]
    if not isinstance(section, MutableMapping):
        raise ManifestError(f"[{candidate.group}] in Cargo.toml is not a table")

    entry = section.get(candidate.name)
    if isinstance(entry, MutableMapping):
        entry["version"] = candidate.version
    else:
        section[candidate.name] = candidate.version
    return tomlkit.dumps(doc)


def remove_dep(text: str, group: str, name: str) -> str:
    """Return Cargo.toml text without ``group``/``name``."""
    doc = _load(text)
    section = doc.get(group)
    if not isinstance(section, MutableMapping) or name not in section:
        raise ManifestError(f"'{name}' is not declared in [{group}]")
    del section[name]
    return tomlkit.dumps(doc)
