"""Hero level curve and level-up bonuses."""
from __future__ import annotations

from typing import Iterable

from roguequest.domain.battle_models import BattleUnit
from roguequest.domain.entities import Stats

EXP_PER_LEVEL = 100
LEVEL_UP_HP = 10
LEVEL_UP_ATTACK = 2

HERO_BASE_HP = 100
HERO_HP_PER_LEVEL = 10
HERO_BASE_ATTACK = 10
HERO_ATTACK_PER_LEVEL = 2
HERO_DEFENSE = 5
HERO_SPEED = 10
HERO_CRIT_RATE = 0.1
HERO_CRIT_DAMAGE = 2.0


def exp_to_next_level(level: int) -> int:
    return max(1, level) * EXP_PER_LEVEL


def hero_stats_for_level(level: int) -> Stats:
    hp = HERO_BASE_HP + level * HERO_HP_PER_LEVEL
    return Stats(
        max_hp=hp,
        hp=hp,
        attack=HERO_BASE_ATTACK + level * HERO_ATTACK_PER_LEVEL,
        defense=HERO_DEFENSE,
        speed=HERO_SPEED,
        crit_rate=HERO_CRIT_RATE,
        crit_damage=HERO_CRIT_DAMAGE,
    )


def check_level_up(level: int, exp: int) -> tuple[int, int, bool]:
    """Return (level, exp, leveled) after at most one threshold crossing."""
    needed = exp_to_next_level(level)
    if exp < needed:
        return level, exp, False
    return level + 1, exp - needed, True


def apply_level_up_bonus(units: Iterable[BattleUnit]) -> None:
    """Raise max hp and attack of every allied unit and refill hp to the new max.

    Fallen allies are included, so a level-up brings them back at full hp.
    """
    for unit in units:
        unit.stats.max_hp += LEVEL_UP_HP
        unit.stats.hp = unit.stats.max_hp
        unit.stats.attack += LEVEL_UP_ATTACK
