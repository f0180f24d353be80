"""Shared async HTTP helpers used by every registry backend.

Encapsulates session lifecycle, request timeouts and error translation so
backends only deal with decoded JSON or a RegistryError. This module is
dependency-light and can be imported by any backend without cycles.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp

from common.errors import RegistryError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from common.settings import EngineSettings

logger = logging.getLogger(__name__)


class RegistryClient:
    """Async JSON client for package registries.

    One client (and one underlying session) is meant to serve a whole fetch
    pass; use it as an async context manager.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        """Initialize the client.

        Args:
            settings: Engine settings providing timeout and user agent.
        """
        self._settings = settings or EngineSettings()
        self._timeout = aiohttp.ClientTimeout(total=self._settings.request_timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def settings(self) -> EngineSettings:
        """Settings this client was built with."""
        return self._settings

    async def start(self) -> None:
        """Start the HTTP session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers={
                    "User-Agent": self._settings.user_agent,
                    "Accept": "application/json",
                },
            )

    async def stop(self) -> None:
        """Stop the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "RegistryClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def get_json(
        self,
        url: str,
        *,
        context: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Perform a GET request and decode the JSON body.

        Args:
            url: Target URL.
            context: Human-readable source tag for logs (e.g., "npm").
            params: Optional query parameters.
            headers: Optional extra request headers.

        Returns:
            Decoded JSON document.

        Raises:
            RegistryError: On connection errors, timeouts, non-200 responses
                or bodies that are not valid JSON.
        """
        if self._session is None:
            await self.start()
        assert self._session is not None

        safe_target = safe_url(url)
        with Timer() as t:
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP request",
                    extra=extra_context(
                        event="http_request",
                        component="http_client",
                        action="GET",
                        target=safe_target,
                        context=context,
                    ),
                )
            try:
                async with self._session.get(url, params=params, headers=headers) as res:
                    status = res.status
                    text = await res.text()
            except asyncio.TimeoutError as exc:
                raise RegistryError(
                    f"{context} request timed out after {self._settings.request_timeout} seconds",
                    url=safe_target,
                ) from exc
            except aiohttp.ClientError as exc:
                raise RegistryError(f"{context} connection error: {exc}", url=safe_target) from exc

        if status != 200:
            logger.debug(
                "HTTP non-200 response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    outcome="handled_non_200",
                    status_code=status,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context,
                ),
            )
            raise RegistryError(
                f"{context} registry returned HTTP {status}",
                url=safe_target,
                status_code=status,
            )

        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RegistryError(
                f"{context} registry returned malformed JSON",
                url=safe_target,
                status_code=status,
            ) from exc

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response ok",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success",
                    status_code=status,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context,
                ),
            )
        return parsed
