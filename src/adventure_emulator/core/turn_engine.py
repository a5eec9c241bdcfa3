"""Two-party turn state machine driving the hook pipeline."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime

from adventure_emulator.core.errors import HookError
from adventure_emulator.core.hook_runner import HookRunner
from adventure_emulator.core.script_loader import HookResult
from adventure_emulator.core.world_state import SharedWorldState
from adventure_emulator.domain.models import (
    DEFAULT_CARD_TYPE,
    ActionMode,
    HistoryEntry,
    HookName,
    Side,
    StoryCard,
    coerce_history_entry,
    parse_action_mode,
)

DEFAULT_CONSOLE_LINES = 200

logger = logging.getLogger(__name__)
hook_logger = logging.getLogger("adventure_emulator.hooks")


@dataclass(frozen=True)
class HookOutcome:
    """What one hook contributed to a turn."""

    hook: HookName
    text: str
    fallback: bool
    error_code: str | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class TurnReport:
    """Result of one `handle_input` call."""

    ignored: bool
    side_before: Side
    side_after: Side
    entry: HistoryEntry | None = None
    hook_outcomes: tuple[HookOutcome, ...] = ()


class TurnEngine:
    """Alternates user and AI turns over one shared world.

    A user turn runs the input hook, appends the result, rebuilds the context
    from the full history and runs the context hook on it. An AI turn runs the
    output hook and appends the result with an empty mode. Turns are
    serialized: a call that arrives while another is running waits for it.
    """

    def __init__(
        self,
        runner: HookRunner,
        world: SharedWorldState | None = None,
        *,
        selected_mode: str = "say",
        console_lines: int = DEFAULT_CONSOLE_LINES,
    ) -> None:
        self._runner = runner
        self.world = world if world is not None else SharedWorldState()
        self._current_side: Side = "user"
        self._default_mode: ActionMode = parse_action_mode(selected_mode)
        self._selected_mode: ActionMode = self._default_mode
        self._console: deque[str] = deque(maxlen=max(1, console_lines))
        self._lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None
        self._dispatch: dict[HookName, Callable[[Mapping[str, object]], Awaitable[HookResult]]] = {
            "input": runner.run_input_modifier,
            "context": runner.run_context_modifier,
            "output": runner.run_output_modifier,
        }
        self._console_write("Adventure emulator initialized.")

    @property
    def current_side(self) -> Side:
        return self._current_side

    @property
    def selected_mode(self) -> ActionMode:
        return self._selected_mode

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(coerce_history_entry(entry) for entry in self.world.history)

    @property
    def story_cards(self) -> tuple[StoryCard, ...]:
        return tuple(self.world.story_cards)

    @property
    def context(self) -> str:
        return self.world.context

    @property
    def transformed_context(self) -> str:
        return self.world.memory.transformed_context

    @property
    def front_memory(self) -> str:
        return self.world.memory.front_memory

    @property
    def console(self) -> tuple[str, ...]:
        return tuple(self._console)

    def _turn_lock(self) -> asyncio.Lock:
        # asyncio locks bind to the loop that first waits on them.
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def _console_write(self, message: str) -> None:
        stamp = datetime.now().strftime("%H:%M:%S")
        self._console.append(f"[{stamp}] {message}")

    def _hook_log(self, *values: object) -> None:
        message = " ".join(str(value) for value in values)
        hook_logger.info("hook.log %s", message)
        self._console_write(message)

    def _bindings(self, text: str) -> dict[str, object]:
        world = self.world
        return {
            "text": text,
            "state": world.state,
            "info": world.info,
            "history": world.history,
            "story_cards": world.story_cards,
            "world_info": world.story_cards,
            "add_story_card": world.add_story_card,
            "remove_story_card": world.remove_story_card,
            "update_story_card": world.update_story_card,
            "log": self._hook_log,
        }

    async def _call_hook(self, hook: HookName, text: str) -> HookOutcome:
        try:
            result = await self._dispatch[hook](self._bindings(text))
        except HookError as exc:
            logger.warning(
                "hook.fallback hook=%s code=%s location=%s message=%s",
                hook,
                exc.code,
                exc.location,
                exc.message,
            )
            self._console_write(f"(Hook {hook} failed; using identity) {exc.message}")
            return HookOutcome(
                hook=hook,
                text=text,
                fallback=True,
                error_code=exc.code,
                error_message=exc.message,
            )
        return HookOutcome(hook=hook, text=result.text, fallback=False)

    async def _rebuild_context(self) -> HookOutcome:
        raw_context = self.world.rebuild_context()
        self.world.info.memory_length = len(raw_context)
        outcome = await self._call_hook("context", raw_context)
        self.world.memory.transformed_context = outcome.text
        self._console_write("Context rebuilt and transformed.")
        return outcome

    async def _process_user_turn(
        self, mode: ActionMode, text: str
    ) -> tuple[HistoryEntry, tuple[HookOutcome, ...]]:
        self._console_write(f"Processing user input (mode={mode})...")
        input_outcome = await self._call_hook("input", text)
        entry = self.world.append_entry(mode, input_outcome.text)
        context_outcome = await self._rebuild_context()
        self._console_write(f"User -> {entry.text}")
        return entry, (input_outcome, context_outcome)

    async def _process_ai_turn(self, text: str) -> tuple[HistoryEntry, tuple[HookOutcome, ...]]:
        self._console_write("Processing AI output...")
        output_outcome = await self._call_hook("output", text)
        entry = self.world.append_entry("", output_outcome.text)
        self._console_write(f"AI -> {entry.text}")
        return entry, (output_outcome,)

    async def handle_input(self, mode: str | None = None, text: str | None = "") -> TurnReport:
        """Run one turn for whichever side is active.

        Blank text is ignored without touching history or the active side.
        A user turn without a mode uses the selected mode. Raises
        `ValueError` for an unknown mode before doing any work.
        """
        requested_mode = parse_action_mode(mode) if mode else None
        raw_text = "" if text is None else str(text)

        async with self._turn_lock():
            side_before = self._current_side
            if not raw_text.strip():
                logger.info("turn.ignored side=%s reason=blank_input", side_before)
                self._console_write("(Ignored empty input)")
                return TurnReport(ignored=True, side_before=side_before, side_after=side_before)

            if side_before == "user":
                entry, outcomes = await self._process_user_turn(
                    requested_mode or self._selected_mode, raw_text
                )
                self._current_side = "ai"
            else:
                entry, outcomes = await self._process_ai_turn(raw_text)
                self._current_side = "user"

            self.world.info.action_count += 1
            logger.info(
                "turn.complete side=%s mode=%s history=%s fallbacks=%s",
                side_before,
                entry.mode or "-",
                len(self.world.history),
                sum(1 for outcome in outcomes if outcome.fallback),
            )
            return TurnReport(
                ignored=False,
                side_before=side_before,
                side_after=self._current_side,
                entry=entry,
                hook_outcomes=outcomes,
            )

    def set_selected_mode(self, mode: str) -> ActionMode:
        """Change the default mode for user turns submitted without one."""
        self._selected_mode = parse_action_mode(mode)
        self._console_write(f"Mode selected: {self._selected_mode}")
        return self._selected_mode

    async def add_story_card(
        self,
        keys: str | Sequence[str],
        entry: str,
        type: str = DEFAULT_CARD_TYPE,
    ) -> StoryCard | None:
        """Add a card between turns. Returns None when the keys already exist."""
        async with self._turn_lock():
            index = self.world.add_story_card(keys, entry, type)
            if index is False:
                return None
            card = self.world.get_story_card(index)
            self._console_write(f"Story card {index} added: {', '.join(card.keys)}")
            return card

    async def update_story_card(
        self,
        index: int,
        keys: str | Sequence[str],
        entry: str,
        type: str = DEFAULT_CARD_TYPE,
    ) -> StoryCard:
        async with self._turn_lock():
            self.world.update_story_card(index, keys, entry, type)
            self._console_write(f"Story card {index} updated.")
            return self.world.get_story_card(index)

    async def remove_story_card(self, index: int) -> None:
        """Remove a card between turns; later cards are renumbered."""
        async with self._turn_lock():
            self.world.remove_story_card(index)
            self._console_write(f"Story card {index} removed.")

    async def reset(self) -> None:
        """Start a fresh session once any running turn has finished."""
        async with self._turn_lock():
            self.world.reset()
            self._current_side = "user"
            self._selected_mode = self._default_mode
            self._console.clear()
            logger.info("turn_engine.reset")
            self._console_write("Session reset.")
