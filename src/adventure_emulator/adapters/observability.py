"""Process-wide logging setup for the emulator surfaces."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from adventure_emulator.adapters.env import env_int, env_str

DEFAULT_LOG_PATH = "work/logs/adventure_emulator.log"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_CONFIGURED = False


def _level(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip().upper()
    value = logging.getLevelName(raw) if raw else default
    return value if isinstance(value, int) else default


def configure_runtime_logging(*, console: bool = True) -> None:
    """Install rotating file logs, plus stderr logs when `console` is set.

    The interactive player passes ``console=False`` so log lines do not
    interleave with the story text it prints. Runs once per process.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    log_path = Path(env_str("ADVENTURE_EMULATOR_LOG_PATH", DEFAULT_LOG_PATH))
    log_path.parent.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")

    file_handler = RotatingFileHandler(
        filename=log_path,
        maxBytes=env_int(
            "ADVENTURE_EMULATOR_LOG_MAX_BYTES",
            5 * 1024 * 1024,
            minimum=64 * 1024,
            maximum=100 * 1024 * 1024,
        ),
        backupCount=env_int("ADVENTURE_EMULATOR_LOG_BACKUP_COUNT", 10, minimum=1, maximum=120),
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(_level("ADVENTURE_EMULATOR_LOG_LEVEL", logging.INFO))
    root.handlers.clear()
    root.addHandler(file_handler)
    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        root.addHandler(stream_handler)

    logging.getLogger("adventure_emulator.hooks").setLevel(
        _level("ADVENTURE_EMULATOR_HOOK_LOG_LEVEL", logging.INFO)
    )
    logging.getLogger("uvicorn.access").setLevel(
        _level("ADVENTURE_EMULATOR_ACCESS_LOG_LEVEL", logging.WARNING)
    )
    logging.getLogger(__name__).info("logging.configured path=%s console=%s", log_path, console)
    _CONFIGURED = True
