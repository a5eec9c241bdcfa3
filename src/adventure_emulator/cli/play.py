"""Interactive terminal session: type user turns, then paste AI turns."""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from adventure_emulator.adapters.observability import configure_runtime_logging
from adventure_emulator.application.session import build_turn_engine, load_settings_from_env
from adventure_emulator.core.projections import build_snapshot, render_main_view
from adventure_emulator.core.turn_engine import TurnEngine
from adventure_emulator.domain.models import ACTION_MODES

HELP_TEXT = """Commands:
  /mode <start|continue|do|say|story|see>  select the default user mode
  /cards                                   list story cards
  /console                                 show the emulator console
  /reset                                   start a fresh session
  /quit                                    leave
Any other line is submitted as a turn for the active side."""


def build_arg_parser() -> argparse.ArgumentParser:
    """Define CLI flags for an interactive session."""
    parser = argparse.ArgumentParser(description="Play through hook scripts turn by turn.")
    parser.add_argument(
        "--scripts",
        default="",
        help="Directory holding library.py and the hook scripts.",
    )
    parser.add_argument(
        "--mode",
        choices=ACTION_MODES,
        default=None,
        help="Initial default mode for user turns.",
    )
    return parser


def _print_cards(engine: TurnEngine, out: TextIO) -> None:
    if not engine.story_cards:
        print("(no story cards)", file=out)
        return
    for card in engine.story_cards:
        print(f"[{card.id}] {', '.join(card.keys)} ({card.type}): {card.entry}", file=out)


def _run_command(engine: TurnEngine, command: str, argument: str, out: TextIO) -> bool:
    """Handle a slash command. Returns False when the session should end."""
    if command in {"quit", "exit"}:
        return False
    if command == "mode":
        try:
            mode = engine.set_selected_mode(argument)
        except ValueError as exc:
            print(str(exc), file=out)
        else:
            print(f"Mode selected: {mode}", file=out)
    elif command == "cards":
        _print_cards(engine, out)
    elif command == "console":
        for line in engine.console:
            print(line, file=out)
    else:
        print(HELP_TEXT, file=out)
    return True


async def run_session(engine: TurnEngine, lines: Iterable[str], out: TextIO) -> None:
    """Feed input lines to the engine until they run out or /quit."""
    print(render_main_view(build_snapshot(engine)), file=out)
    for raw_line in lines:
        line = raw_line.rstrip("\n")
        if line.startswith("/"):
            command, _, argument = line[1:].partition(" ")
            command = command.strip().lower()
            if command == "reset":
                await engine.reset()
                print("Session reset.", file=out)
            elif not _run_command(engine, command, argument.strip(), out):
                break
            continue
        report = await engine.handle_input(None, line)
        if report.ignored:
            print("(Ignored empty input)", file=out)
            continue
        for outcome in report.hook_outcomes:
            if outcome.fallback:
                print(f"(Hook {outcome.hook} failed; using identity)", file=out)
        print(render_main_view(build_snapshot(engine)), file=out)


def main(
    argv: list[str] | None = None,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> None:
    """Start an interactive session over stdin/stdout."""
    configure_runtime_logging(console=False)
    parser = build_arg_parser()
    parsed = parser.parse_args(argv)
    settings = load_settings_from_env()
    scripts = str(parsed.scripts).strip()
    if scripts:
        settings = settings.with_script_root(Path(scripts))
    engine = build_turn_engine(settings)
    if parsed.mode:
        engine.set_selected_mode(str(parsed.mode))
    asyncio.run(run_session(engine, stdin or sys.stdin, stdout or sys.stdout))


if __name__ == "__main__":
    main()
