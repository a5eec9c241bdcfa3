from __future__ import annotations

from collections.abc import Callable

import pytest

from adventure_emulator.adapters.script_sources import MappingScriptSource
from adventure_emulator.core.hook_runner import HookRunner
from adventure_emulator.core.script_loader import ScriptLoader
from adventure_emulator.core.turn_engine import TurnEngine

IDENTITY_HOOK = "def modifier(text):\n    return text\n\nmodifier(text)\n"


def hook_scripts(
    *,
    library: str = "",
    input: str = IDENTITY_HOOK,
    context: str = IDENTITY_HOOK,
    output: str = IDENTITY_HOOK,
) -> dict[str, str]:
    return {
        "library.py": library,
        "input.py": input,
        "context.py": context,
        "output.py": output,
    }


@pytest.fixture
def make_engine() -> Callable[..., TurnEngine]:
    def _make(**scripts: str) -> TurnEngine:
        source = MappingScriptSource(hook_scripts(**scripts))
        return TurnEngine(HookRunner(ScriptLoader(source)))

    return _make


@pytest.fixture
def make_source() -> Callable[..., MappingScriptSource]:
    def _make(**scripts: str) -> MappingScriptSource:
        return MappingScriptSource(hook_scripts(**scripts))

    return _make
