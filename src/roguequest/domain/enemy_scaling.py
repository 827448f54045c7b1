"""Deterministic enemy wave scaling helpers."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from roguequest.domain.battle_models import BattleUnit
from roguequest.domain.defs import EnemyBuffDef
from roguequest.domain.entities import Stats
from roguequest.domain.roster import RosterCreature

# Baseline wave formulas, before catch-up buffs:
# - count grows by one every three chapters, capped at five.
# - hp/attack grow linearly with chapter and stage.
# - speed creeps up every two chapters; defense and crit stay flat.
MAX_BASE_ENEMIES = 5
BASE_HP = 50
HP_PER_CHAPTER = 30
HP_PER_STAGE = 5
BASE_ATTACK = 5
ATTACK_PER_CHAPTER = 3
ATTACK_PER_STAGE = 1
BASE_SPEED = 8
BASE_DEFENSE = 2
BASE_CRIT_RATE = 0.05
BASE_CRIT_DAMAGE = 1.5

MAX_RANDOM_BUFFS = 8
BUFFS_PER_EXTRA_ENEMY = 3
MAX_ENEMY_CRIT_RATE = 0.5
# (power threshold, elite buff id); every exceeded threshold adds its buff.
ELITE_THRESHOLDS = ((500, "elite_vigor"), (800, "elite_fury"))

CREATURE_POWER_FLAT = 50
CREATURE_POWER_PER_STAR = 30


@dataclass(frozen=True, slots=True)
class WaveBaseline:
    count: int
    hp: int
    attack: int
    defense: int
    speed: int
    crit_rate: float
    crit_damage: float


def wave_baseline(chapter: int, stage: int) -> WaveBaseline:
    return WaveBaseline(
        count=min(1 + chapter // 3, MAX_BASE_ENEMIES),
        hp=BASE_HP + chapter * HP_PER_CHAPTER + stage * HP_PER_STAGE,
        attack=BASE_ATTACK + chapter * ATTACK_PER_CHAPTER + stage * ATTACK_PER_STAGE,
        defense=BASE_DEFENSE,
        speed=BASE_SPEED + chapter // 2,
        crit_rate=BASE_CRIT_RATE,
        crit_damage=BASE_CRIT_DAMAGE,
    )


def random_buff_count(stage: int) -> int:
    return max(0, min(stage, MAX_RANDOM_BUFFS))


def elite_buff_ids(player_power: int) -> list[str]:
    return [buff_id for threshold, buff_id in ELITE_THRESHOLDS if player_power > threshold]


def extra_enemy_count(buff_count: int) -> int:
    return buff_count // BUFFS_PER_EXTRA_ENEMY


def compute_player_power(allies: Iterable[BattleUnit], team: Sequence[RosterCreature]) -> int:
    """Score the allied side so waves can catch up with strong teams."""
    unit_power = sum(unit.stats.hp + unit.stats.attack * 10 + unit.stats.defense * 5 for unit in allies)
    team_power = len(team) * CREATURE_POWER_FLAT + sum(member.star * CREATURE_POWER_PER_STAR for member in team)
    return unit_power + team_power


def baseline_stats(baseline: WaveBaseline) -> Stats:
    return Stats(
        max_hp=baseline.hp,
        hp=baseline.hp,
        attack=baseline.attack,
        defense=baseline.defense,
        speed=baseline.speed,
        crit_rate=baseline.crit_rate,
        crit_damage=baseline.crit_damage,
    )


def apply_enemy_buff(stats: Stats, buff: EnemyBuffDef) -> None:
    """Apply one buff in place: percent buffs multiply, flat buffs add."""
    if buff.stat == "crit_rate":
        if buff.mode == "percent":
            stats.crit_rate *= 1 + buff.value
        else:
            stats.crit_rate += buff.value
        stats.crit_rate = min(stats.crit_rate, MAX_ENEMY_CRIT_RATE)
        return

    current = stats.max_hp if buff.stat == "hp" else getattr(stats, buff.stat)
    if buff.mode == "percent":
        updated = math.floor(current * (1 + buff.value))
    else:
        updated = math.floor(current + buff.value)
    if buff.stat == "hp":
        stats.max_hp = max(1, updated)
        stats.hp = stats.max_hp
    else:
        setattr(stats, buff.stat, max(0, updated))


def apply_enemy_buffs(stats: Stats, buffs: Sequence[EnemyBuffDef]) -> None:
    for buff in buffs:
        apply_enemy_buff(stats, buff)
    stats.crit_rate = min(stats.crit_rate, MAX_ENEMY_CRIT_RATE)
