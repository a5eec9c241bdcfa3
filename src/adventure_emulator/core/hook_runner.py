"""Named hook entry points bound to fixed script locations."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from adventure_emulator.core.script_loader import HookResult, ScriptLoader
from adventure_emulator.domain.models import HookName


@dataclass(frozen=True)
class HookLocations:
    """Where the library and each hook script live within a script source."""

    library: str = "library.py"
    input: str = "input.py"
    context: str = "context.py"
    output: str = "output.py"

    def for_hook(self, hook: HookName) -> str:
        return {"input": self.input, "context": self.context, "output": self.output}[hook]


class HookRunner:
    """Maps hook names to `ScriptLoader.load` calls."""

    def __init__(self, loader: ScriptLoader, locations: HookLocations | None = None) -> None:
        self._loader = loader
        self._locations = locations or HookLocations()

    @property
    def locations(self) -> HookLocations:
        return self._locations

    async def run(self, hook: HookName, bindings: Mapping[str, object]) -> HookResult:
        return await self._loader.load(
            self._locations.library, self._locations.for_hook(hook), bindings
        )

    async def run_input_modifier(self, bindings: Mapping[str, object]) -> HookResult:
        return await self.run("input", bindings)

    async def run_context_modifier(self, bindings: Mapping[str, object]) -> HookResult:
        return await self.run("context", bindings)

    async def run_output_modifier(self, bindings: Mapping[str, object]) -> HookResult:
        return await self.run("output", bindings)
