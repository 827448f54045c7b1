"""Repository exports."""

from .creatures_repo import CreaturesRepository
from .enemy_buffs_repo import EnemyBuffsRepository
from .rewards_repo import RewardsRepository
from .skills_repo import SkillsRepository
from .synergies_repo import SynergiesRepository

__all__ = [
    "CreaturesRepository",
    "EnemyBuffsRepository",
    "RewardsRepository",
    "SkillsRepository",
    "SynergiesRepository",
]
