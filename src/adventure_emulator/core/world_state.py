"""Mutable session world: history, story-card registry, memory and info."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Literal

from adventure_emulator.core.errors import DuplicateStoryCardError, StoryCardRangeError
from adventure_emulator.domain.models import (
    DEFAULT_CARD_TYPE,
    EntryMode,
    HistoryEntry,
    MemoryState,
    ScriptState,
    SessionInfo,
    StoryCard,
    join_history_text,
)

logger = logging.getLogger(__name__)


def normalize_card_keys(keys: str | Sequence[str]) -> list[str]:
    """Return keys as an ordered list; a single string is comma-separated."""
    if isinstance(keys, str):
        return [part.strip() for part in keys.split(",") if part.strip()]
    return [str(key) for key in keys]


class SharedWorldState:
    """World data shared by the turn engine and the hooks it runs.

    The lists are handed to hooks by reference, so they are only ever
    cleared or mutated in place, never rebound.
    """

    def __init__(self, *, max_chars: int = 0) -> None:
        self.history: list[HistoryEntry] = []
        self.story_cards: list[StoryCard] = []
        self.state = ScriptState(memory=MemoryState(_history=self.history))
        self.info = SessionInfo(max_chars=max_chars)

    @property
    def memory(self) -> MemoryState:
        return self.state.memory

    @property
    def context(self) -> str:
        return join_history_text(self.history)

    def rebuild_context(self) -> str:
        """Recompute the full context from history."""
        return join_history_text(self.history)

    def append_entry(self, mode: EntryMode, text: str) -> HistoryEntry:
        entry = HistoryEntry(mode=mode, text=text)
        self.history.append(entry)
        return entry

    def reset(self) -> None:
        """Clear the session while keeping list identities stable."""
        self.history.clear()
        self.story_cards.clear()
        self.state = ScriptState(memory=MemoryState(_history=self.history))
        self.info = SessionInfo(max_chars=self.info.max_chars)
        logger.info("world.reset")

    def _find_keys(self, keys: list[str], *, skip: int | None = None) -> int | None:
        for index, card in enumerate(self.story_cards):
            if index != skip and list(card.keys) == keys:
                return index
        return None

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self.story_cards):
            raise StoryCardRangeError(index, len(self.story_cards))

    def add_story_card(
        self,
        keys: str | Sequence[str],
        entry: str,
        type: str = DEFAULT_CARD_TYPE,
    ) -> int | Literal[False]:
        """Append a card and return its index, or False if its keys exist."""
        normalized = normalize_card_keys(keys)
        if self._find_keys(normalized) is not None:
            logger.debug("story_card.add rejected duplicate keys=%s", normalized)
            return False
        index = len(self.story_cards)
        self.story_cards.append(StoryCard(id=index, keys=normalized, entry=entry, type=type))
        logger.debug("story_card.add index=%s keys=%s", index, normalized)
        return index

    def remove_story_card(self, index: int) -> None:
        """Delete a card; every later card moves down one id."""
        self._check_index(index)
        del self.story_cards[index]
        for position in range(index, len(self.story_cards)):
            self.story_cards[position].id = position
        logger.debug("story_card.remove index=%s", index)

    def update_story_card(
        self,
        index: int,
        keys: str | Sequence[str],
        entry: str,
        type: str = DEFAULT_CARD_TYPE,
    ) -> None:
        """Overwrite the card at `index` in place."""
        self._check_index(index)
        normalized = normalize_card_keys(keys)
        clash = self._find_keys(normalized, skip=index)
        if clash is not None:
            raise DuplicateStoryCardError(normalized, clash)
        self.story_cards[index] = StoryCard(id=index, keys=normalized, entry=entry, type=type)
        logger.debug("story_card.update index=%s keys=%s", index, normalized)

    def get_story_card(self, index: int) -> StoryCard:
        self._check_index(index)
        return self.story_cards[index]
