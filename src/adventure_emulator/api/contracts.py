"""Typed contracts shared by API handlers and the Python client."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from adventure_emulator.domain.models import ActionMode, EntryMode, HookName, Side


class ContractModel(BaseModel):
    """Base model config used by all API contracts."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class TurnRequest(ContractModel):
    """One submission to the turn entry point. Text is kept verbatim."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=False)

    mode: ActionMode | None = None
    text: str = Field(default="", max_length=100_000)


class ModeRequest(ContractModel):
    """Selects the default mode for user turns submitted without one."""

    mode: ActionMode


class HistoryEntryResponse(ContractModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=False)

    mode: EntryMode
    text: str


class HookOutcomeResponse(ContractModel):
    """Effective text and fallback status for one hook run."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=False)

    hook: HookName
    text: str
    fallback: bool
    error_code: str | None = None
    error_message: str | None = None


class SessionResponse(ContractModel):
    """Read-only projection of the running session."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=False)

    current_side: Side
    selected_mode: ActionMode
    history: list[HistoryEntryResponse] = Field(default_factory=list)
    context: str = ""
    transformed_context: str = ""
    front_memory: str = ""
    authors_note: str = ""
    action_count: int = 0
    story_card_count: int = 0


class TurnResponse(ContractModel):
    """Outcome of a turn plus the session state after it."""

    ignored: bool
    side_before: Side
    side_after: Side
    entry: HistoryEntryResponse | None = None
    hook_outcomes: list[HookOutcomeResponse] = Field(default_factory=list)
    session: SessionResponse


class StoryCardRequest(ContractModel):
    """Story card payload for create and update calls."""

    keys: list[str] = Field(min_length=1, max_length=200)
    entry: str = Field(default="", max_length=100_000)
    type: str = Field(default="general", min_length=1, max_length=120)

    @field_validator("keys")
    @classmethod
    def _normalize_keys(cls, values: list[str]) -> list[str]:
        normalized = [value.strip() for value in values if value.strip()]
        if not normalized:
            raise ValueError("Story card keys must contain at least one non-blank key.")
        return normalized


class StoryCardResponse(ContractModel):
    """Story card as stored; `id` is its current registry index."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=False)

    id: int
    keys: list[str]
    entry: str
    type: str


class ConsoleResponse(ContractModel):
    lines: list[str] = Field(default_factory=list)


class HealthResponse(ContractModel):
    """Simple liveness payload for /healthz."""

    status: Literal["ok"] = "ok"
    service: str = "adventure_emulator"
