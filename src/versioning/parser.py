"""Parsing utilities for versions and ecosystem requirement strings.

Nothing in here raises on bad input: unparsable text yields None so an exotic
version string degrades to "unknown" instead of aborting a whole parse.
"""

import re
from typing import Iterable, Optional, Tuple

import semantic_version

from .models import Version, VersionRequirement

_WHITESPACE = re.compile(r"\s+")
_CARGO_BLOCK = re.compile(r"^(?P<op><=|>=|<|>|=|\^|~|)(?P<version>[0-9xX*][0-9A-Za-z.*+-]*)$")


def parse_version(text: Optional[str]) -> Optional[Version]:
    """Parse a strict semantic version, or return None."""
    if not isinstance(text, str):
        return None
    try:
        return Version(text.strip())
    except ValueError:
        return None


def sort_versions(versions: Iterable[Version]) -> Tuple[Version, ...]:
    """Deduplicate and sort versions, newest first."""
    return tuple(sorted(set(versions), key=lambda v: v.precedence_key, reverse=True))


def parse_versions(raw_versions: Iterable[str]) -> Tuple[Version, ...]:
    """Parse version strings, skipping invalid ones, newest first."""
    parsed = []
    for raw in raw_versions:
        version = parse_version(raw)
        if version is not None:
            parsed.append(version)
    return sort_versions(parsed)


def matches(requirement: Optional[VersionRequirement], version: Optional[Version]) -> bool:
    """Return True when both are known and the version satisfies the requirement."""
    if requirement is None or version is None:
        return False
    return requirement.matches(version)


def _normalize_npm_spec(spec_str: str) -> str:
    """Normalize npm range syntax (hyphen, x-ranges) into SimpleSpec-compatible form."""
    s = spec_str.strip()

    # Hyphen ranges: "1.2.3 - 1.4.5" => ">=1.2.3,<=1.4.5"
    m = re.match(r'^\s*([0-9A-Za-z\.\-\+]+)\s*-\s*([0-9A-Za-z\.\-\+]+)\s*$', s)
    if m:
        return f">={m.group(1)},<={m.group(2)}"

    # x-ranges: 1.2.x or 1.x or 1.* -> comparator pairs
    s2 = s.replace('*', 'x').lower()
    m = re.match(r'^\s*(\d+)\.(\d+)\.x\s*$', s2)
    if m:
        major, minor = int(m.group(1)), int(m.group(2))
        return f">={major}.{minor}.0,<{major}.{minor + 1}.0"

    m = re.match(r'^\s*(\d+)\.x\s*$', s2)
    if m:
        major = int(m.group(1))
        return f">={major}.0.0,<{major + 1}.0.0"

    return spec_str


def parse_npm_requirement(text: Optional[str]) -> Optional[VersionRequirement]:
    """Parse an npm range (``^1.2.0``, ``~1.2``, ``1.x``, ``>=1 <2 || 3``).

    Non-registry specifiers such as ``git+https://...`` or ``file:../lib``
    yield None.
    """
    if not isinstance(text, str):
        return None
    collapsed = _WHITESPACE.sub(" ", text.strip())
    try:
        return VersionRequirement(raw=text, spec=semantic_version.NpmSpec(collapsed))
    except ValueError:
        pass
    # NpmSpec cannot parse it; try the normalized SimpleSpec form
    try:
        return VersionRequirement(raw=text, spec=semantic_version.SimpleSpec(_normalize_npm_spec(collapsed)))
    except ValueError:
        return None


def _cargo_block(block: str) -> Optional[str]:
    """Translate one Cargo comparator into npm range syntax.

    npm's caret, tilde, wildcard and pre-release rules are the same as
    Cargo's; only the bare form differs (caret in Cargo, exact in npm).
    """
    block = _WHITESPACE.sub("", block)
    m = _CARGO_BLOCK.match(block)
    if not m:
        return None
    op, version = m.group("op"), m.group("version")
    core = re.split(r"[-+]", version, maxsplit=1)[0]
    if op == "" and not any(c in core for c in "*xX"):
        op = "^"
    return op + version


def parse_cargo_requirement(text: Optional[str]) -> Optional[VersionRequirement]:
    """Parse a Cargo requirement (``1.2``, ``^0.3``, ``>= 1.2, < 1.5``, ``1.*``).

    ``1.0.0-beta`` admits ``1.0.0-rc.1``, ``1.0.0`` and ``1.4.2`` but not
    ``1.1.0-alpha``: pre-releases only match on the comparator's own patch.
    """
    if not isinstance(text, str) or not text.strip():
        return None
    blocks = []
    for block in text.split(","):
        translated = _cargo_block(block)
        if translated is None:
            return None
        blocks.append(translated)
    try:
        return VersionRequirement(raw=text, spec=semantic_version.NpmSpec(" ".join(blocks)))
    except ValueError:
        return None
