"""crates.io API client: crate metadata and search."""

from __future__ import annotations

import logging
import urllib.parse
from typing import Any, List, Optional

from common.errors import RegistryError
from common.http_client import RegistryClient
from constants import Constants
from registry.models import DepInfo, SearchResult
from versioning.parser import parse_versions

logger = logging.getLogger(__name__)


def crate_url(base_url: str, name: str) -> str:
    return f"{base_url}crates/{urllib.parse.quote(name, safe='')}"


def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def parse_crate_document(name: str, data: Any) -> DepInfo:
    """Convert a crates.io /crates/<name> response into DepInfo.

    The API carries no author field; yanked releases are still listed.

    Raises:
        RegistryError: If "crate" or "versions" is missing.
    """
    crate = data.get("crate") if isinstance(data, dict) else None
    versions = data.get("versions") if isinstance(data, dict) else None
    if not isinstance(crate, dict) or not isinstance(versions, list):
        raise RegistryError(f"crates.io response for {name} is missing crate/versions")

    nums = [v.get("num") for v in versions if isinstance(v, dict)]
    return DepInfo(
        name=_str_or_none(crate.get("name")) or name,
        author=None,
        homepage=_str_or_none(crate.get("homepage")),
        repository=_str_or_none(crate.get("repository")) or Constants.PACKAGE_PAGE_CRATES + name,
        license=_str_or_none(crate.get("license")),
        description=_str_or_none(crate.get("description")),
        versions=parse_versions(nums),
    )


async def get_crate_details(client: RegistryClient, name: str) -> DepInfo:
    """Get the details of a crate from crates.io."""
    data = await client.get_json(crate_url(client.settings.crates_api_url, name), context="cargo")
    info = parse_crate_document(name, data)
    logger.debug("cargo: %s has %d versions", name, len(info.versions))
    return info


async def search_crates(client: RegistryClient, term: str) -> List[SearchResult]:
    """Search crates.io; each result carries the crate's newest version."""
    data = await client.get_json(
        client.settings.crates_api_url + "crates",
        context="cargo",
        params={"page": 1, "per_page": client.settings.search_size, "q": term},
    )
    crates = data.get("crates") if isinstance(data, dict) else None
    if not isinstance(crates, list):
        raise RegistryError("crates.io search response has no crates list")

    results = []
    for crate in crates:
        if not isinstance(crate, dict):
            continue
        crate_name, newest = crate.get("name"), crate.get("newest_version")
        if isinstance(crate_name, str) and isinstance(newest, str):
            results.append(SearchResult(name=crate_name, version=newest))
    return results
