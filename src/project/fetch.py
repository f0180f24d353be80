"""Concurrent registry metadata retrieval for a parsed manifest.

One fetch is started per distinct dependency name over a single shared
session. Concurrency is capped by a semaphore, every request is bounded by
the client timeout, and the whole pass is bounded by a deadline. Failed or
timed-out fetches are logged and dropped; the caller only sees successes.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Mapping, Optional

from common.errors import RegistryError
from common.http_client import RegistryClient
from common.logging_utils import Timer, extra_context
from common.settings import EngineSettings
from registry.base import Backend
from registry.models import Config, DepInfo

logger = logging.getLogger(__name__)


async def fetch_metadata(
    backend: Backend,
    config: Config,
    settings: Optional[EngineSettings] = None,
    known: Optional[Mapping[str, DepInfo]] = None,
) -> Dict[str, DepInfo]:
    """Fetch registry metadata for every dependency not already known.

    Args:
        backend: Backend used to fetch each dependency.
        config: Parsed manifest; all groups contribute names.
        settings: Network tunables; defaults to the backend's settings.
        known: Previously fetched metadata to reuse instead of refetching.

    Returns:
        ``known`` (restricted to names still declared) merged with every
        successful fresh fetch.
    """
    settings = settings or backend.settings
    declared = config.dependency_names()
    known = known or {}
    result: Dict[str, DepInfo] = {name: known[name] for name in declared if name in known}
    missing = [name for name in declared if name not in result]
    if not missing:
        logger.debug("All %d dependencies already cached; nothing to fetch", len(result))
        return result

    semaphore = asyncio.Semaphore(settings.max_concurrency)

    with Timer() as t:
        async with RegistryClient(settings) as client:

            async def fetch_one(name: str) -> DepInfo:
                async with semaphore:
                    return await backend.fetch_dep_info(client, name)

            tasks = {asyncio.ensure_future(fetch_one(name)): name for name in missing}
            _done, pending = await asyncio.wait(list(tasks), timeout=settings.fetch_deadline)
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

    failures = 0
    for task, name in tasks.items():
        if task in pending:
            failures += 1
            logger.warning(
                "Metadata fetch for %s did not finish within %ss", name, settings.fetch_deadline
            )
            continue
        exc = task.exception()
        if exc is None:
            result[name] = task.result()
            continue
        failures += 1
        if isinstance(exc, RegistryError):
            logger.warning("Unable to fetch metadata for %s: %s", name, exc)
        else:
            logger.warning(
                "Unexpected error fetching metadata for %s: %s: %s", name, type(exc).__name__, exc
            )

    logger.info(
        "Fetched metadata for %d of %d dependencies",
        len(missing) - failures,
        len(missing),
        extra=extra_context(
            event="fetch_pass",
            component="fetch",
            outcome="partial" if failures else "success",
            duration_ms=t.duration_ms(),
            backend=backend.kind.value,
        ),
    )
    return result
