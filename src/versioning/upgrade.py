"""Upgrade target selection and upgrade classification."""

from __future__ import annotations

from typing import Optional, Sequence

from constants import UpgradeType

from .models import Version, VersionRequirement


def best_compatible_version(
    current: Optional[Version],
    requirement: Optional[VersionRequirement],
    versions: Sequence[Version],
) -> Optional[Version]:
    """Climb from the installed version toward newer ones while they stay compatible.

    ``versions`` must be sorted newest first. The walk starts at the entry just
    newer than ``current`` and stops at the first entry the requirement rejects,
    so a compatible release sitting beyond an incompatible one is never
    reached. This is not "highest version matching the requirement".

    Returns None when ``current`` is unknown or not listed by the registry.
    """
    if current is None:
        return None
    try:
        index = versions.index(current)
    except ValueError:
        return None

    best = current
    if requirement is None:
        return best
    for candidate in reversed(versions[:index]):
        if not requirement.matches(candidate):
            break
        best = candidate
    return best


def classify_upgrade(
    current: Optional[Version],
    best: Optional[Version],
    latest: Optional[Version],
) -> UpgradeType:
    """Classify how far ``current`` trails ``best`` and ``latest``."""
    if current is None or best is None:
        return UpgradeType.NONE
    if current.major != best.major:
        return UpgradeType.MAJOR
    if current.minor != best.minor:
        return UpgradeType.MINOR
    if current.patch != best.patch:
        return UpgradeType.PATCH
    if latest is not None and latest > current:
        return UpgradeType.BREAKING
    return UpgradeType.NONE
