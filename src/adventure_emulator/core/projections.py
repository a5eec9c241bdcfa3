"""Read-only views of an emulator session for rendering surfaces."""

from __future__ import annotations

from dataclasses import dataclass

from adventure_emulator.core.turn_engine import TurnEngine
from adventure_emulator.domain.models import ActionMode, HistoryEntry, Side, StoryCard

USER_VIEW_ENTRIES = 10


@dataclass(frozen=True)
class EmulatorSnapshot:
    """Point-in-time copy of everything a renderer may show."""

    current_side: Side
    selected_mode: ActionMode
    history: tuple[HistoryEntry, ...]
    context: str
    transformed_context: str
    front_memory: str
    authors_note: str
    story_cards: tuple[StoryCard, ...]
    action_count: int


def build_snapshot(engine: TurnEngine) -> EmulatorSnapshot:
    memory = engine.world.memory
    return EmulatorSnapshot(
        current_side=engine.current_side,
        selected_mode=engine.selected_mode,
        history=engine.history,
        context=engine.context,
        transformed_context=memory.transformed_context,
        front_memory=memory.front_memory,
        authors_note=memory.authors_note,
        story_cards=tuple(
            StoryCard(id=card.id, keys=list(card.keys), entry=card.entry, type=card.type)
            for card in engine.story_cards
        ),
        action_count=engine.world.info.action_count,
    )


def format_history_entry(entry: HistoryEntry) -> str:
    if entry.mode:
        return f"user({entry.mode}) {entry.text}"
    return f"ai {entry.text}"


def render_main_view(snapshot: EmulatorSnapshot, *, max_entries: int = USER_VIEW_ENTRIES) -> str:
    """Render the main text window for whichever side is about to act.

    On the user side this is the tail of the history; on the AI side it is
    the AI-facing context followed by front memory.
    """
    if snapshot.current_side == "user":
        recent = snapshot.history[-max_entries:] if max_entries > 0 else ()
        lines = [f"User View (last {max_entries}):"]
        lines.extend(format_history_entry(entry) for entry in recent)
        lines.append("-" * 40)
        lines.append(f"User Input ({snapshot.selected_mode}):")
        return "\n".join(lines)

    ai_context = snapshot.transformed_context or snapshot.context
    lines = ["=== AI Context View ===", ai_context, "-" * 40, "FrontMemory:"]
    if snapshot.front_memory:
        lines.append(snapshot.front_memory)
    lines.append("AI output will go here...")
    return "\n".join(lines)
