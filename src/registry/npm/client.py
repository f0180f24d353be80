"""NPM registry client: package metadata and search."""

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


def package_url(base_url: str, name: str) -> str:
    """Registry document URL; scoped names keep '@' and encode '/'."""
    return base_url + urllib.parse.quote(name, safe="@")


def _author(value: Any) -> Optional[str]:
    """Author is either "Name <email> (url)" or {"name", "email", "url"}."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, dict) and isinstance(value.get("name"), str):
        if isinstance(value.get("email"), str):
            return f"{value['name']} <{value['email']}>"
        return value["name"]
    return None


def _license(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and isinstance(value.get("type"), str):
        return value["type"]
    return None


def _repository(value: Any) -> Optional[str]:
    url = value.get("url") if isinstance(value, dict) else value
    if not isinstance(url, str) or not url:
        return None
    if url.startswith("git+"):
        url = url[len("git+"):]
    return url


def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def parse_package_document(name: str, data: Any) -> DepInfo:
    """Convert a registry packument into DepInfo.

    Raises:
        RegistryError: If the document is not an object with a "versions" map.
    """
    if not isinstance(data, dict) or not isinstance(data.get("versions"), dict):
        raise RegistryError(f"npm registry document for {name} has no versions map")

    return DepInfo(
        name=_str_or_none(data.get("name")) or name,
        author=_author(data.get("author")),
        homepage=_str_or_none(data.get("homepage")),
        repository=_repository(data.get("repository")) or Constants.PACKAGE_PAGE_NPM + name,
        license=_license(data.get("license")),
        description=_str_or_none(data.get("description")),
        versions=parse_versions(data["versions"].keys()),
    )


async def get_package_details(client: RegistryClient, name: str) -> DepInfo:
    """Get the details of a package from the NPM registry.

    Args:
        client: Open registry client.
        name: Package name.

    Returns:
        DepInfo for the package.
    """
    url = package_url(client.settings.npm_registry_url, name)
    data = await client.get_json(url, context="npm")
    info = parse_package_document(name, data)
    logger.debug("npm: %s has %d versions", name, len(info.versions))
    return info


async def search_packages(client: RegistryClient, term: str) -> List[SearchResult]:
    """Search the NPM registry.

    Args:
        client: Open registry client.
        term: Free-text query.

    Returns:
        Matching packages with their latest version.
    """
    data = await client.get_json(
        client.settings.npm_search_url,
        context="npm",
        params={"text": term, "size": client.settings.search_size},
    )
    objects = data.get("objects") if isinstance(data, dict) else None
    if not isinstance(objects, list):
        raise RegistryError("npm search response has no objects list")

    results = []
    for obj in objects:
        package = obj.get("package") if isinstance(obj, dict) else None
        if not isinstance(package, dict):
            continue
        pkg_name, version = package.get("name"), package.get("version")
        if isinstance(pkg_name, str) and isinstance(version, str):
            results.append(SearchResult(name=pkg_name, version=version))
    return results
