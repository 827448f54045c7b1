"""Process-wide logging setup for entry points."""
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def resolve_level(name: str | None, default: int = logging.WARNING) -> int:
    """Map a level name like 'debug' to its logging constant."""
    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def configure_logging(level: str | None = None, *, debug: bool = False) -> None:
    """Configure the root logger; library modules only call getLogger."""
    logging.basicConfig(
        level=logging.DEBUG if debug else resolve_level(level),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
