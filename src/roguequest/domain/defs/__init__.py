"""Domain definition exports."""

from .creature_def import CreatureBaseStats, CreatureDef, StarBonus
from .enemy_buff_def import EnemyBuffDef
from .reward_def import RewardDef
from .skill_def import DamageMultiplierEffect, HealEffect, SkillDef, SkillEffect, StatBuffEffect
from .synergy_def import SynergyBonus, SynergyLevelDef

__all__ = [
    "CreatureBaseStats",
    "CreatureDef",
    "DamageMultiplierEffect",
    "EnemyBuffDef",
    "HealEffect",
    "RewardDef",
    "SkillDef",
    "SkillEffect",
    "StarBonus",
    "StatBuffEffect",
    "SynergyBonus",
    "SynergyLevelDef",
]
