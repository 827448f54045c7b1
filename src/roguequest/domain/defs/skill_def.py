"""Skill definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

BuffStat = Literal["attack", "defense", "speed", "crit_rate"]


@dataclass(frozen=True, slots=True)
class DamageMultiplierEffect:
    multiplier: float
    kind: Literal["damage_multiplier"] = "damage_multiplier"


@dataclass(frozen=True, slots=True)
class HealEffect:
    percent: float
    kind: Literal["heal"] = "heal"


@dataclass(frozen=True, slots=True)
class StatBuffEffect:
    stat: BuffStat
    value: float
    kind: Literal["stat_buff"] = "stat_buff"


SkillEffect = Union[DamageMultiplierEffect, HealEffect, StatBuffEffect]


@dataclass(frozen=True, slots=True)
class SkillDef:
    """Describes a triggered skill the allied side can learn during a run."""

    id: str
    name: str
    trigger_chance: float
    cooldown: int
    effect: SkillEffect
    starting: bool = False
