"""Factories for runtime battle units."""

from .enemy_factory import EnemyWave, create_enemy_wave, roll_enemy_buffs
from .id_factory import make_instance_id
from .unit_factory import BACK_ROW, FRONT_ROW, HERO_ID, apply_run_modifiers, create_creature_unit, create_hero_unit

__all__ = [
    "BACK_ROW",
    "EnemyWave",
    "FRONT_ROW",
    "HERO_ID",
    "apply_run_modifiers",
    "create_creature_unit",
    "create_enemy_wave",
    "create_hero_unit",
    "make_instance_id",
    "roll_enemy_buffs",
]
