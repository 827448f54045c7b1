"""Creature definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from roguequest.core.types import Position, Race


@dataclass(frozen=True, slots=True)
class CreatureBaseStats:
    hp: int
    attack: int
    defense: int
    speed: int


@dataclass(frozen=True, slots=True)
class StarBonus:
    """Additive stat delta unlocked at a star level."""

    hp: int
    attack: int
    defense: int


@dataclass(frozen=True, slots=True)
class CreatureDef:
    """Immutable catalog entry for a recruitable creature."""

    id: str
    name: str
    race: Race
    tier: int
    position: Position
    base: CreatureBaseStats
    star_bonus: Dict[int, StarBonus]
    abilities: Dict[int, str]
