"""Catch-up buff definitions applied to enemy waves."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

BuffTarget = Literal["hp", "attack", "defense", "crit_rate", "speed"]
BuffMode = Literal["percent", "flat"]


@dataclass(frozen=True, slots=True)
class EnemyBuffDef:
    id: str
    name: str
    stat: BuffTarget
    mode: BuffMode
    value: float
    elite: bool = False
