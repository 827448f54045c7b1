"""Stat models for runtime combat units."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Stats:
    """Resolved combat stats for one battle unit."""

    max_hp: int
    hp: int
    attack: int
    defense: int
    speed: int
    crit_rate: float = 0.0
    crit_damage: float = 1.5

    def __post_init__(self) -> None:
        assert self.max_hp > 0, "max_hp must be positive"
        assert 0 <= self.hp <= self.max_hp, "hp must stay within [0, max_hp]"
