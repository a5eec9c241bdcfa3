"""Core world-state models shared by the engine and hook scripts."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Final, Literal, get_args

ActionMode = Literal["start", "continue", "do", "say", "story", "see"]
EntryMode = Literal["start", "continue", "do", "say", "story", "see", ""]
Side = Literal["user", "ai"]
HookName = Literal["input", "context", "output"]

ACTION_MODES: Final[tuple[str, ...]] = get_args(ActionMode)
HOOK_NAMES: Final[tuple[str, ...]] = get_args(HookName)
DEFAULT_CARD_TYPE: Final[str] = "general"
MEMORY_FIELDS: Final[tuple[str, ...]] = ("authors_note", "front_memory", "transformed_context")


def parse_action_mode(value: str) -> ActionMode:
    """Validate a user-facing action mode name."""
    normalized = value.strip().lower()
    if normalized not in ACTION_MODES:
        expected = ", ".join(ACTION_MODES)
        raise ValueError(f"Unknown action mode {value!r}; expected one of {expected}")
    return normalized  # type: ignore[return-value]


def _entry_field(entry: object, name: str) -> object:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


def history_entry_text(entry: object) -> str:
    """Text of one history item, including items hooks appended by hand."""
    if isinstance(entry, str):
        return entry
    text = _entry_field(entry, "text")
    return str(entry) if text is None else str(text)


def coerce_history_entry(entry: object) -> HistoryEntry:
    """Return `entry` as a `HistoryEntry` without touching the original item."""
    if isinstance(entry, HistoryEntry):
        return entry
    mode = _entry_field(entry, "mode")
    return HistoryEntry(
        mode=mode if mode in ACTION_MODES else "",  # type: ignore[arg-type]
        text=history_entry_text(entry),
    )


def join_history_text(history: Iterable[object]) -> str:
    """Join history entry texts in order, one entry per line."""
    return "\n".join(history_entry_text(entry) for entry in history)


@dataclass(frozen=True)
class HistoryEntry:
    """One appended turn. AI turns carry the empty mode."""

    mode: EntryMode
    text: str


@dataclass
class StoryCard:
    """A keyed lore entry. `id` always equals the card's registry index."""

    id: int
    keys: list[str]
    entry: str
    type: str = DEFAULT_CARD_TYPE


@dataclass
class MemoryState:
    """Memory fields visible to hooks as `state.memory`.

    `context` is derived from the bound history on every read and cannot be
    assigned. `transformed_context` holds the latest context-hook output.
    """

    authors_note: str = ""
    front_memory: str = ""
    transformed_context: str = ""
    _history: list[HistoryEntry] = field(default_factory=list, repr=False, compare=False)

    @property
    def context(self) -> str:
        return join_history_text(self._history)


class ScriptState:
    """The `state` binding. Hooks may hang extra attributes off it.

    `memory` is never rebound. Assigning a `MemoryState` or a mapping to it
    replaces the memory fields of the bound instance, so `context` keeps
    following the session history.
    """

    def __init__(self, memory: MemoryState | None = None) -> None:
        self._memory = memory if memory is not None else MemoryState()

    @property
    def memory(self) -> MemoryState:
        return self._memory

    @memory.setter
    def memory(self, value: object) -> None:
        if isinstance(value, MemoryState):
            fields = {name: getattr(value, name) for name in MEMORY_FIELDS}
        elif isinstance(value, Mapping):
            fields = {name: value.get(name, "") for name in MEMORY_FIELDS}
        else:
            raise TypeError(
                f"state.memory accepts a MemoryState or a mapping, not {type(value).__name__}"
            )
        for name, field_value in fields.items():
            setattr(self._memory, name, "" if field_value is None else str(field_value))


@dataclass
class SessionInfo:
    """The `info` binding: read-mostly session counters."""

    character_names: list[str] = field(default_factory=list)
    action_count: int = 0
    max_chars: int = 0
    memory_length: int = 0
