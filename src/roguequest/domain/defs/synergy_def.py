"""Racial synergy definition structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SynergyBonus:
    """Fractional stat bonuses (0.10 == +10%)."""

    attack: float = 0.0
    defense: float = 0.0
    hp: float = 0.0
    speed: float = 0.0


@dataclass(frozen=True, slots=True)
class SynergyLevelDef:
    """Bonus granted once a race reaches the tier threshold."""

    tier: int
    bonus: SynergyBonus
    special: str | None = None
