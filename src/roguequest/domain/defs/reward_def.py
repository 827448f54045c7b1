"""Generic stage/level-up reward definitions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple

from roguequest.core.types import RewardPool

RewardKind = Literal[
    "heal_full",
    "heal_percent",
    "attack_pct",
    "hp_pct",
    "speed_pct",
    "crit_rate",
    "lifesteal",
    "double_attack",
    "rage",
    "skill_damage",
    "grant_skill",
    "team_slot",
]


@dataclass(frozen=True, slots=True)
class RewardDef:
    """A non-creature reward offered between stages or on level up."""

    id: str
    name: str
    rarity: str
    description: str
    kind: RewardKind
    value: float = 0.0
    skill_id: str | None = None
    pools: Tuple[RewardPool, ...] = ("stage",)
