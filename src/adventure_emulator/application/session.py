"""Settings resolution and wiring for one emulator session."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path

from adventure_emulator.adapters.env import env_float, env_int, env_list, env_str
from adventure_emulator.adapters.script_sources import FileScriptSource, HttpScriptSource
from adventure_emulator.core.hook_runner import HookLocations, HookRunner
from adventure_emulator.core.script_loader import ScriptLoader
from adventure_emulator.core.turn_engine import DEFAULT_CONSOLE_LINES, TurnEngine
from adventure_emulator.core.world_state import SharedWorldState
from adventure_emulator.domain.models import parse_action_mode
from adventure_emulator.domain.ports import ScriptSource

DEFAULT_SCRIPT_ROOT = Path("hook_scripts")
DEFAULT_CORS_ORIGINS = ["http://127.0.0.1:5173", "http://localhost:5173"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmulatorSettings:
    """Runtime configuration for scripts, console and API."""

    script_root: Path = DEFAULT_SCRIPT_ROOT
    script_base_url: str = ""
    fetch_timeout_s: float = 10.0
    default_mode: str = "say"
    console_lines: int = DEFAULT_CONSOLE_LINES
    max_chars: int = 8000
    locations: HookLocations = field(default_factory=HookLocations)
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    def with_script_root(self, script_root: Path) -> EmulatorSettings:
        """Return a copy reading scripts from `script_root` on disk."""
        return replace(self, script_root=script_root, script_base_url="")


def load_settings_from_env() -> EmulatorSettings:
    """Resolve settings from ADVENTURE_EMULATOR_* variables."""
    default_mode = env_str("ADVENTURE_EMULATOR_DEFAULT_MODE", "say")
    try:
        default_mode = parse_action_mode(default_mode)
    except ValueError:
        logger.warning("settings.invalid_default_mode value=%s fallback=say", default_mode)
        default_mode = "say"
    return EmulatorSettings(
        script_root=Path(env_str("ADVENTURE_EMULATOR_SCRIPT_ROOT", str(DEFAULT_SCRIPT_ROOT))),
        script_base_url=env_str("ADVENTURE_EMULATOR_SCRIPT_BASE_URL", ""),
        fetch_timeout_s=env_float(
            "ADVENTURE_EMULATOR_FETCH_TIMEOUT_S", 10.0, minimum=0.1, maximum=300.0
        ),
        default_mode=default_mode,
        console_lines=env_int(
            "ADVENTURE_EMULATOR_CONSOLE_LINES", DEFAULT_CONSOLE_LINES, minimum=1, maximum=10_000
        ),
        max_chars=env_int("ADVENTURE_EMULATOR_MAX_CHARS", 8000, minimum=0, maximum=10_000_000),
        cors_origins=env_list("ADVENTURE_EMULATOR_CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
    )


def build_script_source(settings: EmulatorSettings) -> ScriptSource:
    if settings.script_base_url:
        return HttpScriptSource(settings.script_base_url, timeout_s=settings.fetch_timeout_s)
    return FileScriptSource(settings.script_root)


def build_turn_engine(
    settings: EmulatorSettings,
    *,
    source: ScriptSource | None = None,
) -> TurnEngine:
    """Wire a script source, loader, runner, world and engine together."""
    effective_source = source if source is not None else build_script_source(settings)
    runner = HookRunner(ScriptLoader(effective_source), settings.locations)
    engine = TurnEngine(
        runner,
        SharedWorldState(max_chars=settings.max_chars),
        selected_mode=settings.default_mode,
        console_lines=settings.console_lines,
    )
    logger.info(
        "session.start source=%s default_mode=%s console_lines=%s",
        type(effective_source).__name__,
        settings.default_mode,
        settings.console_lines,
    )
    return engine
