"""Data models produced by backends and consumed by the project engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from versioning.models import Version, VersionRequirement

# group name -> dependency name -> declared requirement (None when unparsable)
DependencyGroup = Dict[str, Optional[VersionRequirement]]

# dependency name -> version recorded in the lockfile
Lockfile = Dict[str, Version]


@dataclass
class Config:
    """Simplified, read-only view of a manifest."""

    name: Optional[str] = None
    version: Optional[Version] = None
    groups: Dict[str, DependencyGroup] = field(default_factory=dict)

    def dependency_names(self):
        """Distinct dependency names across all groups, first-seen order."""
        seen = {}
        for group in self.groups.values():
            for dep_name in group:
                seen.setdefault(dep_name, None)
        return list(seen)


@dataclass(frozen=True)
class DepInfo:
    """Registry metadata for one dependency."""

    name: str
    author: Optional[str] = None
    homepage: Optional[str] = None
    repository: Optional[str] = None
    license: Optional[str] = None
    description: Optional[str] = None
    versions: Tuple[Version, ...] = ()


@dataclass(frozen=True)
class InstallCandidate:
    """A user-selected target version for one dependency."""

    name: str
    version: str
    group: str


@dataclass(frozen=True)
class SearchResult:
    """One registry search hit."""

    name: str
    version: str
