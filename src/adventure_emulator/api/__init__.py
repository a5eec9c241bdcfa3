"""Public API surface for HTTP serving and Python-first interfaces."""

from adventure_emulator.api.app import create_app
from adventure_emulator.api.contracts import (
    SessionResponse,
    StoryCardRequest,
    StoryCardResponse,
    TurnRequest,
    TurnResponse,
)
from adventure_emulator.api.python_interface import EmulatorApiClient

__all__ = [
    "EmulatorApiClient",
    "SessionResponse",
    "StoryCardRequest",
    "StoryCardResponse",
    "TurnRequest",
    "TurnResponse",
    "create_app",
]
