"""Effective creature stat helpers (star bonuses, then synergy)."""
from __future__ import annotations

import math
from dataclasses import dataclass

from roguequest.domain.defs import CreatureDef, SynergyBonus


@dataclass(frozen=True, slots=True)
class EffectiveStats:
    hp: int
    attack: int
    defense: int
    speed: int


def star_adjusted_stats(creature_def: CreatureDef, star: int) -> EffectiveStats:
    hp = creature_def.base.hp
    attack = creature_def.base.attack
    defense = creature_def.base.defense
    for bonus_star in (2, 3):
        if star >= bonus_star:
            bonus = creature_def.star_bonus[bonus_star]
            hp += bonus.hp
            attack += bonus.attack
            defense += bonus.defense
    return EffectiveStats(hp=hp, attack=attack, defense=defense, speed=creature_def.base.speed)


def apply_synergy_bonus(stats: EffectiveStats, bonus: SynergyBonus | None) -> EffectiveStats:
    if bonus is None:
        return stats
    # Floor conversion happens once per stat, after the multiplier.
    return EffectiveStats(
        hp=math.floor(stats.hp * (1 + bonus.hp)),
        attack=math.floor(stats.attack * (1 + bonus.attack)),
        defense=math.floor(stats.defense * (1 + bonus.defense)),
        speed=math.floor(stats.speed * (1 + bonus.speed)),
    )


def effective_creature_stats(creature_def: CreatureDef, star: int, bonus: SynergyBonus | None) -> EffectiveStats:
    return apply_synergy_bonus(star_adjusted_stats(creature_def, star), bonus)
