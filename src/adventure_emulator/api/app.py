"""FastAPI application exposing one emulator session."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Literal

from fastapi import FastAPI, HTTPException, Response, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from adventure_emulator.api.contracts import (
    ConsoleResponse,
    HealthResponse,
    HistoryEntryResponse,
    HookOutcomeResponse,
    ModeRequest,
    SessionResponse,
    StoryCardRequest,
    StoryCardResponse,
    TurnRequest,
    TurnResponse,
)
from adventure_emulator.application.session import (
    EmulatorSettings,
    build_turn_engine,
    load_settings_from_env,
)
from adventure_emulator.core.errors import DuplicateStoryCardError, StoryCardRangeError
from adventure_emulator.core.projections import build_snapshot
from adventure_emulator.core.turn_engine import TurnEngine, TurnReport
from adventure_emulator.domain.models import HistoryEntry, StoryCard
from adventure_emulator.domain.ports import ScriptSource

logger = logging.getLogger(__name__)


class ApiRootResponse(BaseModel):
    """Lists the endpoints this local emulator serves."""

    name: str = "adventure_emulator"
    stage: Literal["local-preview"] = "local-preview"
    persistence: Literal["in-memory"] = "in-memory"
    endpoints: list[str] = Field(
        default_factory=lambda: [
            "/healthz",
            "/api/v1",
            "/api/v1/session",
            "/api/v1/session/reset",
            "/api/v1/session/mode",
            "/api/v1/turns",
            "/api/v1/console",
            "/api/v1/story-cards",
            "/api/v1/story-cards/{index}",
        ]
    )


def _entry_response(entry: HistoryEntry) -> HistoryEntryResponse:
    return HistoryEntryResponse(mode=entry.mode, text=entry.text)


def _card_response(card: StoryCard) -> StoryCardResponse:
    return StoryCardResponse(id=card.id, keys=list(card.keys), entry=card.entry, type=card.type)


def _session_response(engine: TurnEngine) -> SessionResponse:
    snapshot = build_snapshot(engine)
    return SessionResponse(
        current_side=snapshot.current_side,
        selected_mode=snapshot.selected_mode,
        history=[_entry_response(entry) for entry in snapshot.history],
        context=snapshot.context,
        transformed_context=snapshot.transformed_context,
        front_memory=snapshot.front_memory,
        authors_note=snapshot.authors_note,
        action_count=snapshot.action_count,
        story_card_count=len(snapshot.story_cards),
    )


def _turn_response(report: TurnReport, engine: TurnEngine) -> TurnResponse:
    return TurnResponse(
        ignored=report.ignored,
        side_before=report.side_before,
        side_after=report.side_after,
        entry=_entry_response(report.entry) if report.entry is not None else None,
        hook_outcomes=[
            HookOutcomeResponse(
                hook=outcome.hook,
                text=outcome.text,
                fallback=outcome.fallback,
                error_code=outcome.error_code,
                error_message=outcome.error_message,
            )
            for outcome in report.hook_outcomes
        ],
        session=_session_response(engine),
    )


def create_app(
    settings: EmulatorSettings | None = None,
    *,
    source: ScriptSource | None = None,
) -> FastAPI:
    """Create the API application around a fresh emulator session."""
    effective_settings = settings if settings is not None else load_settings_from_env()
    engine = build_turn_engine(effective_settings, source=source)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "api.start script_root=%s script_base_url=%s",
            effective_settings.script_root,
            effective_settings.script_base_url or "-",
        )
        yield

    app = FastAPI(
        title="adventure_emulator API",
        version="0.1.0",
        description="Local testbed for text-adventure hook scripts.",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "system", "description": "Service health and capability listing."},
            {"name": "session", "description": "Turn submission and session projections."},
            {"name": "story-cards", "description": "Story card registry management."},
        ],
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=effective_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.engine = engine

    def story_card_or_404(index: int) -> StoryCard:
        try:
            return engine.world.get_story_card(index)
        except StoryCardRangeError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    @app.get("/healthz", response_model=HealthResponse, tags=["system"])
    def healthz() -> HealthResponse:
        return HealthResponse()

    @app.get("/api/v1", response_model=ApiRootResponse, tags=["system"])
    def api_v1_root() -> ApiRootResponse:
        return ApiRootResponse()

    @app.get("/api/v1/session", response_model=SessionResponse, tags=["session"])
    async def get_session() -> SessionResponse:
        return _session_response(engine)

    @app.post("/api/v1/session/reset", response_model=SessionResponse, tags=["session"])
    async def reset_session() -> SessionResponse:
        await engine.reset()
        return _session_response(engine)

    @app.put("/api/v1/session/mode", response_model=SessionResponse, tags=["session"])
    async def set_mode(payload: ModeRequest) -> SessionResponse:
        engine.set_selected_mode(payload.mode)
        return _session_response(engine)

    @app.post("/api/v1/turns", response_model=TurnResponse, tags=["session"])
    async def submit_turn(payload: TurnRequest) -> TurnResponse:
        report = await engine.handle_input(payload.mode, payload.text)
        return _turn_response(report, engine)

    @app.get("/api/v1/console", response_model=ConsoleResponse, tags=["session"])
    async def get_console() -> ConsoleResponse:
        return ConsoleResponse(lines=list(engine.console))

    @app.get("/api/v1/story-cards", response_model=list[StoryCardResponse], tags=["story-cards"])
    async def list_story_cards() -> list[StoryCardResponse]:
        return [_card_response(card) for card in engine.story_cards]

    @app.post(
        "/api/v1/story-cards",
        response_model=StoryCardResponse,
        tags=["story-cards"],
        status_code=201,
    )
    async def add_story_card(payload: StoryCardRequest) -> StoryCardResponse:
        card = await engine.add_story_card(payload.keys, payload.entry, payload.type)
        if card is None:
            raise HTTPException(status_code=409, detail="Story card keys already exist")
        return _card_response(card)

    @app.get(
        "/api/v1/story-cards/{index}",
        response_model=StoryCardResponse,
        tags=["story-cards"],
    )
    async def get_story_card(index: int) -> StoryCardResponse:
        return _card_response(story_card_or_404(index))

    @app.put(
        "/api/v1/story-cards/{index}",
        response_model=StoryCardResponse,
        tags=["story-cards"],
    )
    async def update_story_card(index: int, payload: StoryCardRequest) -> StoryCardResponse:
        try:
            card = await engine.update_story_card(
                index, payload.keys, payload.entry, payload.type
            )
        except StoryCardRangeError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except DuplicateStoryCardError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _card_response(card)

    @app.delete(
        "/api/v1/story-cards/{index}",
        status_code=status.HTTP_204_NO_CONTENT,
        tags=["story-cards"],
    )
    async def remove_story_card(index: int) -> Response:
        try:
            await engine.remove_story_card(index)
        except StoryCardRangeError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


app = create_app()
