"""Version model: semantic versions, requirements and upgrade classification."""

from .models import Version, VersionRequirement
from .parser import (
    matches,
    parse_cargo_requirement,
    parse_npm_requirement,
    parse_version,
    parse_versions,
    sort_versions,
)
from .upgrade import best_compatible_version, classify_upgrade

__all__ = [
    "Version",
    "VersionRequirement",
    "matches",
    "parse_cargo_requirement",
    "parse_npm_requirement",
    "parse_version",
    "parse_versions",
    "sort_versions",
    "best_compatible_version",
    "classify_upgrade",
]
