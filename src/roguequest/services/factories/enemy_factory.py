"""Factory for generating scaled enemy waves."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from roguequest.core.rng import RNG
from roguequest.data.repositories import EnemyBuffsRepository
from roguequest.domain.battle_models import BattleUnit
from roguequest.domain.defs import EnemyBuffDef
from roguequest.domain.enemy_scaling import (
    apply_enemy_buffs,
    baseline_stats,
    elite_buff_ids,
    extra_enemy_count,
    random_buff_count,
    wave_baseline,
)
from roguequest.services.errors import FactoryError

logger = logging.getLogger(__name__)

ENEMY_NAMES = ("Marauder", "Brute", "Wraith", "Bonewalker", "Ghoul")


@dataclass(slots=True)
class EnemyWave:
    units: List[BattleUnit]
    buffs: List[EnemyBuffDef]
    player_power: int


def roll_enemy_buffs(stage: int, player_power: int, buffs_repo: EnemyBuffsRepository, rng: RNG) -> List[EnemyBuffDef]:
    """Draw min(stage, 8) random buffs, then append elite buffs for strong teams."""
    pool = buffs_repo.random_pool()
    buffs = [rng.choice(pool) for _ in range(random_buff_count(stage))]
    for buff_id in elite_buff_ids(player_power):
        try:
            buffs.append(buffs_repo.get(buff_id))
        except KeyError as exc:
            raise FactoryError(f"Elite buff '{buff_id}' is missing from enemy_buffs.json.") from exc
    return buffs


def create_enemy_wave(
    chapter: int,
    stage: int,
    player_power: int,
    buffs_repo: EnemyBuffsRepository,
    rng: RNG,
) -> EnemyWave:
    baseline = wave_baseline(chapter, stage)
    buffs = roll_enemy_buffs(stage, player_power, buffs_repo, rng)
    count = baseline.count + extra_enemy_count(len(buffs))

    units: List[BattleUnit] = []
    for index in range(count):
        stats = baseline_stats(baseline)
        apply_enemy_buffs(stats, buffs)
        units.append(
            BattleUnit(
                instance_id=f"enemy_{index}",
                display_name=f"{ENEMY_NAMES[index % len(ENEMY_NAMES)]} {index + 1}",
                side="enemies",
                index=index,
                level=chapter,
                stats=stats,
            )
        )
    logger.debug(
        "Wave %d-%d: %d enemies, power=%d, buffs=%s",
        chapter,
        stage,
        count,
        player_power,
        [buff.id for buff in buffs],
    )
    return EnemyWave(units=units, buffs=buffs, player_power=player_power)
