"""Lockfile parser for the npm ecosystem (package-lock.json).

Extracts the resolved version of every top-level installed package. Nested
``node_modules`` entries are transitive copies and are ignored.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

from registry.models import Lockfile
from versioning.parser import parse_version

logger = logging.getLogger(__name__)

_PREFIX = "node_modules/"


def _name_from_path(pkg_path: str) -> str | None:
    """Return the package name for a top-level install path, else None.

    "node_modules/lodash" -> "lodash", "node_modules/@types/node" -> "@types/node",
    "node_modules/a/node_modules/b" -> None.
    """
    if not pkg_path.startswith(_PREFIX):
        return None
    rest = pkg_path[len(_PREFIX):]
    if "/node_modules/" in rest or not rest:
        return None
    parts = rest.split("/")
    if parts[0].startswith("@"):
        return rest if len(parts) == 2 else None
    return rest if len(parts) == 1 else None


def _versions_from_packages(packages: Any) -> Dict[str, str]:
    """Collect versions from the lockfileVersion 2/3 "packages" section."""
    found: Dict[str, str] = {}
    if not isinstance(packages, dict):
        return found
    for pkg_path, pkg_info in packages.items():
        name = _name_from_path(pkg_path)
        if name and isinstance(pkg_info, dict) and isinstance(pkg_info.get("version"), str):
            found[name] = pkg_info["version"]
    return found


def _versions_from_dependencies(deps: Any) -> Dict[str, str]:
    """Collect versions from the lockfileVersion 1 "dependencies" section."""
    found: Dict[str, str] = {}
    if not isinstance(deps, dict):
        return found
    for pkg_name, pkg_info in deps.items():
        if isinstance(pkg_info, dict) and isinstance(pkg_info.get("version"), str):
            found[pkg_name] = pkg_info["version"]
    return found


def parse_package_lock(lockfile_path: str) -> Lockfile:
    """Extract resolved versions of direct installs from package-lock.json.

    Supports lockfileVersion 1, 2, and 3. The "packages" section wins where
    both are present; the v1 "dependencies" section fills the gaps.

    Args:
        lockfile_path: Path to package-lock.json file

    Returns:
        Mapping of package name to resolved version. Empty when the file is
        missing or unreadable. Entries whose version is not semver (git, file
        or link installs) are skipped.
    """
    try:
        with open(lockfile_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning("package-lock.json not found at %s; current versions unknown", lockfile_path)
        return {}
    except (IOError, json.JSONDecodeError) as e:
        logger.warning("Failed to parse package-lock.json: %s", e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Failed to parse package-lock.json: top level is not an object")
        return {}

    raw = _versions_from_dependencies(data.get("dependencies"))
    raw.update(_versions_from_packages(data.get("packages")))

    lockfile: Lockfile = {}
    for name, raw_version in raw.items():
        version = parse_version(raw_version)
        if version is None:
            logger.debug("Skipping non-semver lockfile version %s@%s", name, raw_version)
            continue
        lockfile[name] = version
    return lockfile
