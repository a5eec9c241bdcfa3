from __future__ import annotations

import asyncio
from pathlib import Path

from adventure_emulator.application.session import EmulatorSettings, build_turn_engine
from adventure_emulator.core.turn_engine import TurnEngine

ROOT = Path(__file__).resolve().parents[1]


def _engine(max_chars: int = 8000) -> TurnEngine:
    settings = EmulatorSettings(script_root=ROOT / "hook_scripts", max_chars=max_chars)
    return build_turn_engine(settings)


def test_shipped_scripts_run_a_full_round() -> None:
    engine = _engine()

    user = asyncio.run(engine.handle_input("do", "  open   the   gate "))
    ai = asyncio.run(engine.handle_input(None, "\n The gate groans open.  \n"))

    assert not any(outcome.fallback for outcome in user.hook_outcomes + ai.hook_outcomes)
    assert [entry.text for entry in engine.history] == [
        "open the gate",
        "The gate groans open.",
    ]


def test_remember_command_files_a_story_card_used_by_context() -> None:
    engine = _engine()
    asyncio.run(engine.handle_input("say", "remember dragon: Breathes blue fire"))
    asyncio.run(engine.handle_input(None, "Noted."))
    asyncio.run(engine.handle_input("do", "look for the Dragon"))

    assert [card.keys for card in engine.story_cards] == [["dragon"]]
    assert engine.story_cards[0].entry == "Breathes blue fire"
    assert engine.transformed_context.startswith("[dragon] Breathes blue fire\n")
    assert engine.transformed_context.endswith("look for the Dragon")


def test_duplicate_remember_is_logged_to_console() -> None:
    engine = _engine()
    asyncio.run(engine.handle_input("say", "remember inn: Warm"))
    asyncio.run(engine.handle_input(None, "ok"))
    asyncio.run(engine.handle_input("say", "remember inn: Cold"))

    assert len(engine.story_cards) == 1
    assert any(line.endswith("story card already exists: inn") for line in engine.console)


def test_context_includes_authors_note_and_respects_max_chars() -> None:
    engine = _engine(max_chars=12)
    engine.world.memory.authors_note = "grim"
    asyncio.run(engine.handle_input("story", "a long opening line"))

    assert engine.transformed_context == "opening line"
    assert len(engine.transformed_context) == 12
