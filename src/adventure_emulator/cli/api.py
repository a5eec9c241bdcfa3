"""Serve one in-memory emulator session over HTTP."""

from __future__ import annotations

import argparse
import os

import uvicorn

from adventure_emulator.adapters.observability import configure_runtime_logging
from adventure_emulator.domain.models import ACTION_MODES

APP_PATH = "adventure_emulator.api.app:app"

# Flag destination -> settings variable read by application.session.
_ENV_FLAGS = {
    "scripts": "ADVENTURE_EMULATOR_SCRIPT_ROOT",
    "script_base_url": "ADVENTURE_EMULATOR_SCRIPT_BASE_URL",
    "default_mode": "ADVENTURE_EMULATOR_DEFAULT_MODE",
}


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the adventure emulator API.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true")
    parser.add_argument(
        "--scripts",
        default="",
        help="Directory holding library.py and the hook scripts (default: hook_scripts).",
    )
    parser.add_argument(
        "--script-base-url",
        default="",
        help="Fetch scripts over HTTP from this base URL instead of a directory.",
    )
    parser.add_argument("--default-mode", choices=ACTION_MODES, default="")
    return parser


def _export_settings_env(parsed: argparse.Namespace) -> None:
    # uvicorn imports the app by path, so settings travel through the environment.
    for dest, variable in _ENV_FLAGS.items():
        value = str(getattr(parsed, dest)).strip()
        if value:
            os.environ[variable] = value


def main(argv: list[str] | None = None) -> None:
    """Parse flags, export settings and hand the app path to uvicorn."""
    configure_runtime_logging()
    parsed = build_arg_parser().parse_args(argv)
    _export_settings_env(parsed)
    uvicorn.run(
        APP_PATH,
        host=str(parsed.host),
        port=int(parsed.port),
        reload=bool(parsed.reload),
    )


if __name__ == "__main__":
    main()
