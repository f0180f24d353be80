"""Ecosystem backends and the selector that picks one for a directory."""

from .base import Backend
from .models import Config, DepInfo, InstallCandidate, Lockfile, SearchResult
from .selector import detect_kind, get_backend

__all__ = [
    "Backend",
    "Config",
    "DepInfo",
    "InstallCandidate",
    "Lockfile",
    "SearchResult",
    "detect_kind",
    "get_backend",
]
