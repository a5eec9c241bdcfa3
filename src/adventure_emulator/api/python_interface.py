"""Python client for a running emulator API."""

from __future__ import annotations

import httpx

from adventure_emulator.api.contracts import (
    ConsoleResponse,
    ModeRequest,
    SessionResponse,
    StoryCardRequest,
    StoryCardResponse,
    TurnRequest,
    TurnResponse,
)


class EmulatorApiClient:
    """Tiny typed API client for scripting emulator sessions."""

    def __init__(
        self, api_base_url: str = "http://127.0.0.1:8000", *, timeout: float = 30.0
    ) -> None:
        """Initialize client with an API base URL."""
        self._api_base_url = api_base_url.rstrip("/")
        self._timeout = timeout

    @property
    def api_base_url(self) -> str:
        """Return normalized API base URL."""
        return self._api_base_url

    def _url(self, path: str) -> str:
        return f"{self._api_base_url}{path}"

    def submit_turn(self, text: str, *, mode: str | None = None) -> TurnResponse:
        """Submit text for whichever side is active."""
        request = TurnRequest.model_validate({"mode": mode, "text": text})
        response = httpx.post(
            self._url("/api/v1/turns"),
            json=request.model_dump(mode="json"),
            timeout=self._timeout,
        )
        response.raise_for_status()
        return TurnResponse.model_validate(response.json())

    def session(self) -> SessionResponse:
        response = httpx.get(self._url("/api/v1/session"), timeout=self._timeout)
        response.raise_for_status()
        return SessionResponse.model_validate(response.json())

    def set_mode(self, mode: str) -> SessionResponse:
        request = ModeRequest.model_validate({"mode": mode})
        response = httpx.put(
            self._url("/api/v1/session/mode"),
            json=request.model_dump(mode="json"),
            timeout=self._timeout,
        )
        response.raise_for_status()
        return SessionResponse.model_validate(response.json())

    def reset(self) -> SessionResponse:
        response = httpx.post(self._url("/api/v1/session/reset"), timeout=self._timeout)
        response.raise_for_status()
        return SessionResponse.model_validate(response.json())

    def console(self) -> list[str]:
        response = httpx.get(self._url("/api/v1/console"), timeout=self._timeout)
        response.raise_for_status()
        return ConsoleResponse.model_validate(response.json()).lines

    def list_story_cards(self) -> list[StoryCardResponse]:
        response = httpx.get(self._url("/api/v1/story-cards"), timeout=self._timeout)
        response.raise_for_status()
        return [StoryCardResponse.model_validate(item) for item in response.json()]

    def add_story_card(
        self, keys: list[str], entry: str, card_type: str = "general"
    ) -> StoryCardResponse | None:
        """Create a card; returns None when the key sequence already exists."""
        request = StoryCardRequest(keys=keys, entry=entry, type=card_type)
        response = httpx.post(
            self._url("/api/v1/story-cards"),
            json=request.model_dump(mode="json"),
            timeout=self._timeout,
        )
        if response.status_code == 409:
            return None
        response.raise_for_status()
        return StoryCardResponse.model_validate(response.json())

    def update_story_card(
        self, index: int, keys: list[str], entry: str, card_type: str = "general"
    ) -> StoryCardResponse:
        request = StoryCardRequest(keys=keys, entry=entry, type=card_type)
        response = httpx.put(
            self._url(f"/api/v1/story-cards/{index}"),
            json=request.model_dump(mode="json"),
            timeout=self._timeout,
        )
        response.raise_for_status()
        return StoryCardResponse.model_validate(response.json())

    def remove_story_card(self, index: int) -> None:
        response = httpx.delete(self._url(f"/api/v1/story-cards/{index}"), timeout=self._timeout)
        response.raise_for_status()
