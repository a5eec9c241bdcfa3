"""Error taxonomy for hook execution and story-card management."""

from __future__ import annotations

from typing import Final

LOAD_ERROR: Final[str] = "load_error"
SCRIPT_ERROR: Final[str] = "script_error"
SHAPE_ERROR: Final[str] = "shape_error"


class HookError(RuntimeError):
    """Base for every failure raised at the script-loader boundary."""

    code: str = "hook_error"

    def __init__(self, message: str, *, location: str | None = None) -> None:
        super().__init__(message)
        self.message = str(message)
        self.location = location


class LoadError(HookError):
    """A library or hook source could not be fetched."""

    code = LOAD_ERROR


class ScriptError(HookError):
    """Library or hook code failed to compile or raised while running."""

    code = SCRIPT_ERROR


class ShapeError(HookError):
    """The captured `modifier` value is not a string or `{"text": str}`."""

    code = SHAPE_ERROR

    def __init__(
        self, message: str, *, location: str | None = None, value: object = None
    ) -> None:
        super().__init__(message, location=location)
        self.value = value


class StoryCardRangeError(IndexError):
    """A story-card index does not address an existing card."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Story card {index} does not exist (registry size {size})")
        self.index = index
        self.size = size


class DuplicateStoryCardError(ValueError):
    """An update would give two cards the same key sequence."""

    def __init__(self, keys: list[str], existing_index: int) -> None:
        super().__init__(f"Story card keys {keys!r} already used by card {existing_index}")
        self.keys = keys
        self.existing_index = existing_index
