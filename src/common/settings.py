"""Engine settings: registry endpoints and network tunables.

Endpoints are passed explicitly into backends so tests can point them at a
local server without touching process-wide state.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Optional

import yaml

from constants import Constants
from common.errors import DepmanError

logger = logging.getLogger(__name__)

_CASTS = {"str": str, "int": int, "float": float}


def _coerce(key: str, type_name: str, value: Any) -> Any:
    """Convert a YAML scalar to the field's declared type.

    Quoted numbers (``'4'``) are accepted; booleans, nulls and collections
    are not, and neither are numbers where a string is expected.
    """
    cast = _CASTS[type_name]
    if isinstance(value, (bool, dict, list)) or value is None:
        raise DepmanError(f"Config key {key} must be a {type_name}, got {value!r}")
    if cast is str:
        if not isinstance(value, str):
            raise DepmanError(f"Config key {key} must be a string, got {value!r}")
        return value
    try:
        return cast(value)
    except (TypeError, ValueError) as e:
        raise DepmanError(f"Config key {key} must be a {type_name}, got {value!r}") from e


@dataclass(frozen=True)
class EngineSettings:
    """Configuration for registry access."""

    npm_registry_url: str = Constants.REGISTRY_URL_NPM
    npm_search_url: str = Constants.REGISTRY_URL_NPM_SEARCH
    crates_api_url: str = Constants.REGISTRY_URL_CRATES
    request_timeout: float = Constants.REQUEST_TIMEOUT
    fetch_deadline: float = Constants.FETCH_DEADLINE
    max_concurrency: int = Constants.MAX_CONCURRENCY
    search_size: int = Constants.SEARCH_SIZE
    user_agent: str = Constants.USER_AGENT

    def __post_init__(self):
        # Registry URLs are joined with plain concatenation.
        for name in ("npm_registry_url", "crates_api_url"):
            value = getattr(self, name)
            if not value.endswith("/"):
                object.__setattr__(self, name, value + "/")
        if self.max_concurrency < 1:
            raise DepmanError("max_concurrency must be at least 1")

    @classmethod
    def from_file(cls, config_path: Optional[str]) -> "EngineSettings":
        """Load settings from a YAML file.

        Values are read from a top-level ``registry`` mapping when present,
        otherwise from the document root. Unknown keys are ignored with a
        warning. A missing path yields the defaults.

        Args:
            config_path: Path to the YAML file, or None.

        Returns:
            EngineSettings instance.
        """
        if not config_path:
            return cls()
        if not os.path.isfile(config_path):
            logger.warning("Config file not found: %s", config_path)
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise DepmanError(f"Failed to load config {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise DepmanError(f"Config {config_path} must contain a mapping")
        section = data.get("registry", data)
        if not isinstance(section, dict):
            raise DepmanError(f"'registry' section in {config_path} must be a mapping")

        known = {f.name: f.type for f in fields(cls)}
        values = {}
        for key, value in section.items():
            key = str(key).replace("-", "_")
            if key not in known:
                logger.warning("Ignoring unknown config key: %s", key)
                continue
            values[key] = _coerce(key, known[key], value)
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "EngineSettings":
        """Return a copy with every non-None override applied."""
        applied = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **applied) if applied else self

    @classmethod
    def from_args(cls, args: Any) -> "EngineSettings":
        """Create settings from CLI arguments (config file first, flags on top).

        Args:
            args: Parsed CLI arguments namespace.

        Returns:
            EngineSettings instance.
        """
        settings = cls.from_file(getattr(args, "CONFIG", None))
        return settings.with_overrides(
            request_timeout=getattr(args, "REQUEST_TIMEOUT", None),
            max_concurrency=getattr(args, "MAX_CONCURRENCY", None),
        )
