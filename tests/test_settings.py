from __future__ import annotations

import logging
from pathlib import Path

import pytest

from adventure_emulator.adapters.env import env_float, env_int, env_list, env_str
from adventure_emulator.adapters.script_sources import FileScriptSource, HttpScriptSource
from adventure_emulator.application.session import (
    EmulatorSettings,
    build_script_source,
    build_turn_engine,
    load_settings_from_env,
)

_SETTINGS_ENV = (
    "ADVENTURE_EMULATOR_SCRIPT_ROOT",
    "ADVENTURE_EMULATOR_SCRIPT_BASE_URL",
    "ADVENTURE_EMULATOR_FETCH_TIMEOUT_S",
    "ADVENTURE_EMULATOR_DEFAULT_MODE",
    "ADVENTURE_EMULATOR_CONSOLE_LINES",
    "ADVENTURE_EMULATOR_MAX_CHARS",
    "ADVENTURE_EMULATOR_CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_environment() -> None:
    settings = load_settings_from_env()
    assert settings.script_root == Path("hook_scripts")
    assert settings.script_base_url == ""
    assert settings.default_mode == "say"
    assert settings.console_lines == 200
    assert settings.max_chars == 8000
    assert "http://127.0.0.1:5173" in settings.cors_origins


def test_environment_overrides_are_parsed_and_clamped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ADVENTURE_EMULATOR_SCRIPT_ROOT", "work/scripts")
    monkeypatch.setenv("ADVENTURE_EMULATOR_FETCH_TIMEOUT_S", "9999")
    monkeypatch.setenv("ADVENTURE_EMULATOR_DEFAULT_MODE", " Story ")
    monkeypatch.setenv("ADVENTURE_EMULATOR_CONSOLE_LINES", "0")
    monkeypatch.setenv("ADVENTURE_EMULATOR_MAX_CHARS", "not-a-number")
    monkeypatch.setenv("ADVENTURE_EMULATOR_CORS_ORIGINS", "http://a.local, ,http://b.local")

    settings = load_settings_from_env()

    assert settings.script_root == Path("work/scripts")
    assert settings.fetch_timeout_s == 300.0
    assert settings.default_mode == "story"
    assert settings.console_lines == 1
    assert settings.max_chars == 8000
    assert settings.cors_origins == ["http://a.local", "http://b.local"]
    assert build_turn_engine(settings).selected_mode == "story"


def test_invalid_default_mode_falls_back_with_warning(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("ADVENTURE_EMULATOR_DEFAULT_MODE", "shout")
    with caplog.at_level(logging.WARNING, logger="adventure_emulator.application.session"):
        settings = load_settings_from_env()
    assert settings.default_mode == "say"
    assert "settings.invalid_default_mode value=shout" in caplog.text


def test_base_url_selects_http_source() -> None:
    assert isinstance(build_script_source(EmulatorSettings()), FileScriptSource)
    http_settings = EmulatorSettings(script_base_url="http://scripts.local")
    assert isinstance(build_script_source(http_settings), HttpScriptSource)
    local = http_settings.with_script_root(Path("elsewhere"))
    assert local.script_base_url == ""
    assert isinstance(build_script_source(local), FileScriptSource)


def test_engine_carries_max_chars_into_session_info() -> None:
    engine = build_turn_engine(EmulatorSettings(max_chars=123))
    assert engine.world.info.max_chars == 123


def test_env_helpers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EMU_TEST_STR", "   ")
    monkeypatch.setenv("EMU_TEST_INT", "-5")
    monkeypatch.setenv("EMU_TEST_FLOAT", "2.5")
    monkeypatch.delenv("EMU_TEST_LIST", raising=False)

    assert env_str("EMU_TEST_STR", "fallback") == "fallback"
    assert env_int("EMU_TEST_INT", 10, minimum=0, maximum=20) == 0
    assert env_float("EMU_TEST_FLOAT", 1.0, minimum=0.0, maximum=2.0) == 2.0
    assert env_list("EMU_TEST_LIST", ["x"]) == ["x"]
