"""Backend selection: detect a directory's ecosystem and map an ecosystem to its backend."""

from __future__ import annotations

import logging
from typing import Optional

from common.errors import UnsupportedProjectError
from common.settings import EngineSettings
from constants import BackendKind

from .base import Backend
from .cargo import CargoBackend
from .npm import NpmBackend

logger = logging.getLogger(__name__)

# Detection order; the first backend whose identifying file exists wins.
_DETECTION_ORDER = (BackendKind.NPM, BackendKind.CARGO)


def get_backend(kind: BackendKind, settings: Optional[EngineSettings] = None) -> Backend:
    """Return the backend implementation for ``kind``.

    Raises:
        UnsupportedProjectError: If ``kind`` is not a known ecosystem.
    """
    if kind == BackendKind.NPM:
        return NpmBackend(settings)
    if kind == BackendKind.CARGO:
        return CargoBackend(settings)
    raise UnsupportedProjectError(f"Unsupported project kind: {kind!r}")


def detect_kind(root: str, settings: Optional[EngineSettings] = None) -> Optional[BackendKind]:
    """Return the ecosystem of the project at ``root``, or None if unsupported."""
    for kind in _DETECTION_ORDER:
        if get_backend(kind, settings).detect(root):
            logger.debug("Detected %s project in %s", kind.value, root)
            return kind
    logger.debug("No supported project found in %s", root)
    return None
