"""package.json reading and format-preserving editing.

Edits splice the new text into the original at the offsets of the affected
member, so inline arrays, escapes and number spellings elsewhere in the file
survive byte for byte.
"""

from __future__ import annotations

import json
import logging
import re
from collections import OrderedDict
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from common.errors import ManifestError
from common.fileio import read_text
from constants import Constants
from registry.models import Config, DependencyGroup, InstallCandidate
from versioning.parser import parse_npm_requirement, parse_version

logger = logging.getLogger(__name__)

_INDENT = re.compile(r'^([ \t]+)"', re.MULTILINE)
_SPACE = re.compile(r"[ \t\n\r]*")
_DECODER = json.JSONDecoder()


def _load(text: str) -> "OrderedDict[str, Any]":
    """Decode package.json keeping key order."""
    try:
        data = json.loads(text, object_pairs_hook=OrderedDict)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid package.json: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError("Invalid package.json: top level is not an object")
    return data


class _Member(NamedTuple):
    """Offsets of one ``"key": value`` pair in the document text."""

    key: str
    key_start: int
    key_end: int
    value_start: int
    value_end: int


def _skip(text: str, pos: int) -> int:
    return _SPACE.match(text, pos).end()


def _members(text: str, start: int) -> Tuple[List[_Member], int]:
    """Scan the object whose ``{`` is at ``start``.

    The text must already have passed ``_load``. Returns the members in
    document order and the offset just past the closing ``}``.
    """
    members: List[_Member] = []
    pos = _skip(text, start + 1)
    if text.startswith("}", pos):
        return members, pos + 1
    while True:
        key, key_end = _DECODER.raw_decode(text, pos)
        value_start = _skip(text, _skip(text, key_end) + 1)
        _, value_end = _DECODER.raw_decode(text, value_start)
        members.append(_Member(key, pos, key_end, value_start, value_end))
        pos = _skip(text, value_end)
        if text.startswith("}", pos):
            return members, pos + 1
        pos = _skip(text, pos + 1)


def _find(members: List[_Member], key: str) -> Optional[_Member]:
    # json.loads keeps the last of duplicate keys
    for member in reversed(members):
        if member.key == key:
            return member
    return None


def _layout(text: str) -> Tuple[str, str]:
    """Indent unit and line ending of the document; both empty when minified."""
    m = _INDENT.search(text)
    if "\r\n" in text:
        newline = "\r\n"
    elif "\n" in text.strip():
        newline = "\n"
    else:
        newline = ""
    return (m.group(1) if m else ""), newline


def _object_text(text: str, key: str, value: str, depth: int) -> str:
    """A one-member object nested ``depth`` levels deep, in the document's layout."""
    unit, newline = _layout(text)
    key = json.dumps(key, ensure_ascii=False)
    return "{" + newline + unit * (depth + 1) + key + ": " + value + newline + unit * depth + "}"


def _insert(text: str, start: int, end: int, members: List[_Member], key: str, value: str, depth: int) -> str:
    """Add ``key: value`` as the last member of the object spanning ``start:end``."""
    if not members:
        return text[:start] + _object_text(text, key, value, depth) + text[end:]
    last = members[-1]
    if len(members) > 1:
        lead_start = text.index(",", members[-2].value_end) + 1
    else:
        lead_start = start + 1
    lead = text[lead_start:last.key_start]
    colon = text[last.key_end:last.value_start]
    entry = "," + lead + json.dumps(key, ensure_ascii=False) + colon + value
    return text[:last.value_end] + entry + text[last.value_end:]


def parse_package_json(package_json_path: str) -> Config:
    """Parse package.json into a Config.

    Args:
        package_json_path: Path to package.json

    Returns:
        Config with one group per dependency section present, in fixed order.

    Raises:
        ManifestError: If the file is missing, unreadable or not a JSON object.
    """
    try:
        text = read_text(package_json_path)
    except OSError as e:
        raise ManifestError(f"Unable to read {package_json_path}: {e}", path=package_json_path) from e
    try:
        data = _load(text)
    except ManifestError as e:
        e.path = package_json_path
        raise

    groups: Dict[str, DependencyGroup] = {}
    for group_name in Constants.NPM_GROUPS:
        section = data.get(group_name)
        if section is None:
            continue
        if not isinstance(section, dict):
            logger.warning("Ignoring %s in %s: not an object", group_name, package_json_path)
            continue
        groups[group_name] = {
            dep_name: parse_npm_requirement(spec) for dep_name, spec in section.items()
        }

    name = data.get("name")
    return Config(
        name=name if isinstance(name, str) else None,
        version=parse_version(data.get("version")),
        groups=groups,
    )


def set_version(text: str, candidate: InstallCandidate) -> str:
    """Return package.json text with ``^<version>`` written for the candidate.

    Only the entry's value is rewritten. A missing entry is added after the
    last one in its group and a missing group after the last top-level key,
    both laid out like their neighbours.
    """
    data = _load(text)
    section = data.get(candidate.group)
    if section is not None and not isinstance(section, dict):
        raise ManifestError(f"'{candidate.group}' in package.json is not an object")
    value = json.dumps("^" + candidate.version, ensure_ascii=False)

    top_start = _skip(text, 0)
    top, top_end = _members(text, top_start)
    group = _find(top, candidate.group)
    if group is None:
        group_text = _object_text(text, candidate.name, value, depth=1)
        return _insert(text, top_start, top_end, top, candidate.group, group_text, depth=0)

    entries, group_end = _members(text, group.value_start)
    entry = _find(entries, candidate.name)
    if entry is None:
        return _insert(text, group.value_start, group_end, entries, candidate.name, value, depth=1)
    return text[:entry.value_start] + value + text[entry.value_end:]


def remove_dep(text: str, group: str, name: str) -> str:
    """Return package.json text without ``group``/``name``.

    The entry is cut out together with its separating comma; removing the
    only entry leaves ``{}``.
    """
    data = _load(text)
    section = data.get(group)
    if not isinstance(section, dict) or name not in section:
        raise ManifestError(f"'{name}' is not declared in '{group}'")

    top, _ = _members(text, _skip(text, 0))
    group_member = _find(top, group)
    entries, group_end = _members(text, group_member.value_start)
    index = max(i for i, m in enumerate(entries) if m.key == name)
    entry = entries[index]
    if len(entries) == 1:
        return text[:group_member.value_start] + "{}" + text[group_end:]
    if index + 1 < len(entries):
        # take the trailing comma and the whitespace up to the next key
        return text[:entry.key_start] + text[entries[index + 1].key_start:]
    return text[:entries[index - 1].value_end] + text[entry.value_end:]
