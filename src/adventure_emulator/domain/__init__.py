"""Domain models and ports for the adventure emulator."""

from adventure_emulator.domain.models import (
    ACTION_MODES,
    HOOK_NAMES,
    ActionMode,
    EntryMode,
    HistoryEntry,
    HookName,
    MemoryState,
    ScriptState,
    SessionInfo,
    Side,
    StoryCard,
    coerce_history_entry,
    history_entry_text,
    join_history_text,
    parse_action_mode,
)
from adventure_emulator.domain.ports import ScriptSource

__all__ = [
    "ACTION_MODES",
    "HOOK_NAMES",
    "ActionMode",
    "EntryMode",
    "HistoryEntry",
    "HookName",
    "MemoryState",
    "ScriptSource",
    "ScriptState",
    "SessionInfo",
    "Side",
    "StoryCard",
    "coerce_history_entry",
    "history_entry_text",
    "join_history_text",
    "parse_action_mode",
]
