"""Ports for script retrieval."""

from __future__ import annotations

from typing import Protocol


class ScriptSource(Protocol):
    """Returns the source text stored at a script location."""

    async def fetch(self, location: str) -> str:
        ...
