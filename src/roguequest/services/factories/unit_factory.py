"""Factories turning the hero and roster creatures into battle units."""
from __future__ import annotations

import math

from roguequest.domain.battle_models import BattleUnit
from roguequest.domain.creature_scaling import EffectiveStats
from roguequest.domain.defs import CreatureDef
from roguequest.domain.entities import Stats
from roguequest.domain.hero_progression import hero_stats_for_level
from roguequest.domain.roster import RosterCreature
from roguequest.domain.state import RunModifiers

HERO_ID = "hero_0"
FRONT_ROW = 0
BACK_ROW = 1
CREATURE_CRIT_RATE = 0.05
CREATURE_CRIT_DAMAGE = 1.5


def create_hero_unit(level: int, modifiers: RunModifiers, *, name: str = "Hero") -> BattleUnit:
    unit = BattleUnit(
        instance_id=HERO_ID,
        display_name=name,
        side="allies",
        index=FRONT_ROW,
        level=level,
        stats=hero_stats_for_level(level),
        source_id="hero",
    )
    apply_run_modifiers(unit, modifiers)
    return unit


def create_creature_unit(
    member: RosterCreature,
    creature_def: CreatureDef,
    stats: EffectiveStats,
    modifiers: RunModifiers,
) -> BattleUnit:
    unit = BattleUnit(
        instance_id=f"creature_{member.creature_id}",
        display_name=f"{creature_def.name} {'*' * member.star}",
        side="allies",
        index=FRONT_ROW if creature_def.position == "front" else BACK_ROW,
        level=creature_def.tier,
        stats=Stats(
            max_hp=stats.hp,
            hp=stats.hp,
            attack=stats.attack,
            defense=stats.defense,
            speed=stats.speed,
            crit_rate=CREATURE_CRIT_RATE,
            crit_damage=CREATURE_CRIT_DAMAGE,
        ),
        source_id=creature_def.id,
    )
    apply_run_modifiers(unit, modifiers)
    return unit


def apply_run_modifiers(unit: BattleUnit, modifiers: RunModifiers) -> None:
    stats = unit.stats
    stats.max_hp = max(1, math.floor(stats.max_hp * modifiers.hp_multiplier))
    stats.hp = stats.max_hp
    stats.attack = math.floor(stats.attack * modifiers.attack_multiplier)
    stats.speed = math.floor(stats.speed * modifiers.speed_multiplier)
    stats.crit_rate = min(1.0, stats.crit_rate + modifiers.crit_rate_bonus)
    unit.lifesteal = modifiers.lifesteal
    unit.double_attack_chance = modifiers.double_attack_chance
    unit.rage = modifiers.rage
