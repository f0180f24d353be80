"""Exception types shared by backends and the project engine."""

from __future__ import annotations

from typing import Optional


class DepmanError(Exception):
    """Base class for all depman errors."""


class ManifestError(DepmanError):
    """Manifest could not be read, parsed, edited or written."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class UnsupportedProjectError(DepmanError):
    """No backend recognizes the project directory."""


class RegistryError(DepmanError):
    """A registry request failed or returned something unusable."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
