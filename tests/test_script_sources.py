from __future__ import annotations

import asyncio
from pathlib import Path

import httpx
import pytest

from adventure_emulator.adapters.script_sources import (
    FileScriptSource,
    HttpScriptSource,
    MappingScriptSource,
)
from adventure_emulator.core.errors import LoadError
from adventure_emulator.core.script_loader import ScriptLoader


def test_file_source_reads_scripts_under_root(tmp_path: Path) -> None:
    (tmp_path / "input.py").write_text("# hook\n", encoding="utf-8")
    source = FileScriptSource(tmp_path)
    assert asyncio.run(source.fetch("input.py")) == "# hook\n"


def test_file_source_rejects_paths_outside_root(tmp_path: Path) -> None:
    root = tmp_path / "scripts"
    root.mkdir()
    (tmp_path / "secret.py").write_text("x = 1\n", encoding="utf-8")
    source = FileScriptSource(root)
    with pytest.raises(FileNotFoundError, match="outside script root"):
        asyncio.run(source.fetch("../secret.py"))


def test_file_source_rereads_on_every_fetch(tmp_path: Path) -> None:
    script = tmp_path / "output.py"
    script.write_text("first", encoding="utf-8")
    source = FileScriptSource(tmp_path)
    assert asyncio.run(source.fetch("output.py")) == "first"
    script.write_text("second", encoding="utf-8")
    assert asyncio.run(source.fetch("output.py")) == "second"


def test_http_source_fetches_relative_to_base_url() -> None:
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, text="def modifier(text):\n    return text\n")

    source = HttpScriptSource(
        "http://scripts.local/adventure/", transport=httpx.MockTransport(handler)
    )
    body = asyncio.run(source.fetch("/input.py"))

    assert source.base_url == "http://scripts.local/adventure"
    assert requested == ["http://scripts.local/adventure/input.py"]
    assert body.startswith("def modifier")


def test_http_error_status_becomes_load_error() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(404, text="missing"))
    loader = ScriptLoader(HttpScriptSource("http://scripts.local", transport=transport))

    with pytest.raises(LoadError) as exc_info:
        asyncio.run(loader.load("library.py", "input.py", {"text": "x"}))
    assert exc_info.value.code == "load_error"


def test_mapping_source_set_and_missing() -> None:
    source = MappingScriptSource({"library.py": ""})
    source.set("input.py", "body")
    assert asyncio.run(source.fetch("input.py")) == "body"
    with pytest.raises(FileNotFoundError):
        asyncio.run(source.fetch("context.py"))
