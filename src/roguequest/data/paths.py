"""Helpers for resolving data file locations."""
from __future__ import annotations

from pathlib import Path


def get_package_root() -> Path:
    """Return the directory of the installed roguequest package."""
    return Path(__file__).resolve().parents[1]


def get_definitions_path(base_path: Path | str | None = None) -> Path:
    """Return the directory containing JSON definition files.

    Definitions ship inside the package so an installed wheel can find them;
    tests pass ``base_path`` to point repositories at fixture files.
    """
    if base_path is not None:
        return Path(base_path)
    return Path(__file__).resolve().parent / "definitions"
