"""Script sources backed by the filesystem, HTTP, or an in-memory mapping."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)


class FileScriptSource:
    """Read scripts from files under one root directory."""

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, location: str) -> Path:
        root = self._root.resolve()
        path = (root / location).resolve()
        if not path.is_relative_to(root):
            raise FileNotFoundError(f"{location} resolves outside script root {root}")
        return path

    async def fetch(self, location: str) -> str:
        path = self._resolve(location)
        return await asyncio.to_thread(path.read_text, encoding="utf-8")


class HttpScriptSource:
    """Fetch scripts relative to a base URL on every call."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_s: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    async def fetch(self, location: str) -> str:
        url = f"{self._base_url}/{location.lstrip('/')}"
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout_s), transport=self._transport
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
        logger.debug("script.fetch url=%s bytes=%s", url, len(response.content))
        return response.text


class MappingScriptSource:
    """Hold script bodies in memory, keyed by location."""

    def __init__(self, scripts: Mapping[str, str] | None = None) -> None:
        self._scripts: dict[str, str] = dict(scripts or {})

    def set(self, location: str, source: str) -> None:
        self._scripts[location] = source

    async def fetch(self, location: str) -> str:
        try:
            return self._scripts[location]
        except KeyError:
            raise FileNotFoundError(f"No script registered at {location}") from None
