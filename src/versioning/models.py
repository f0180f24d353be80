"""Data models for versions and version requirements."""

from __future__ import annotations

from dataclasses import dataclass, field

import semantic_version
from semantic_version.base import BaseSpec

Version = semantic_version.Version


@dataclass(frozen=True)
class VersionRequirement:
    """A parsed version range expression.

    ``raw`` keeps the text exactly as declared in the manifest; ``spec`` is the
    compiled semantic_version spec used for matching.
    """

    raw: str
    spec: BaseSpec = field(compare=False, repr=False)

    def matches(self, version: Version) -> bool:
        """Return True when ``version`` satisfies this requirement."""
        return self.spec.match(version)

    def __str__(self) -> str:
        return self.raw
