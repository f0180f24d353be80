"""Lockfile parser for the Cargo ecosystem (Cargo.lock)."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from registry.models import Config, Lockfile
from versioning.models import Version
from versioning.parser import parse_version

logger = logging.getLogger(__name__)


def _select(name: str, locked: List[Version], config: Optional[Config]) -> Version:
    """Pick the copy the manifest's own requirement resolved to.

    Transitive duplicates are usually newer than the direct dependency, so the
    highest locked version satisfying a declared requirement wins; without
    one, the highest locked version does.
    """
    candidates = sorted(locked, reverse=True)
    if config is not None:
        requirements = [
            group[name] for group in config.groups.values()
            if name in group and group[name] is not None
        ]
        for version in candidates:
            if any(req.matches(version) for req in requirements):
                return version
    return candidates[0]


def parse_cargo_lock(lockfile_path: str, config: Optional[Config] = None) -> Lockfile:
    """Extract resolved versions from Cargo.lock.

    Cargo.lock is a TOML file with [[package]] sections, each carrying "name"
    and "version". A crate can be locked at several versions at once; see
    ``_select`` for which one is reported.

    Args:
        lockfile_path: Path to Cargo.lock file
        config: Parsed Cargo.toml, used to tell direct copies from transitive ones

    Returns:
        Mapping of crate name to resolved version; empty when the file is
        missing or unreadable.
    """
    try:
        try:
            import tomllib as toml  # type: ignore
        except Exception:  # pylint: disable=broad-exception-caught
            import tomli as toml  # type: ignore

        with open(lockfile_path, "rb") as f:
            data = toml.load(f) or {}
    except FileNotFoundError:
        logger.warning("Cargo.lock not found at %s; current versions unknown", lockfile_path)
        return {}
    except IOError as e:
        logger.warning("Failed to read Cargo.lock file: %s", e)
        return {}
    except ValueError as e:
        # tomllib.TOMLDecodeError is a ValueError
        logger.warning("Failed to parse Cargo.lock (invalid format): %s", e)
        return {}

    package_list = data.get("package", [])
    if not isinstance(package_list, list):
        return {}
    locked: Dict[str, List[Version]] = {}
    for pkg in package_list:
        if not isinstance(pkg, dict):
            continue
        name = pkg.get("name")
        version = parse_version(pkg.get("version"))
        if not isinstance(name, str) or version is None:
            continue
        locked.setdefault(name, []).append(version)

    lockfile: Lockfile = {}
    for name, versions in locked.items():
        lockfile[name] = _select(name, versions, config)
        if len(versions) > 1:
            logger.debug("cargo: %s locked at %d versions, using %s", name, len(versions), lockfile[name])
    return lockfile
