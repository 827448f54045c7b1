"""Account and run state tracking."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from roguequest.core.types import RunStatus
from roguequest.domain.roster import Team
from roguequest.domain.skills import Skill

STAGES_PER_CHAPTER = 16


@dataclass
class RunModifiers:
    """Permanent (for this run) bonuses applied to every allied unit."""

    attack_multiplier: float = 1.0
    hp_multiplier: float = 1.0
    speed_multiplier: float = 1.0
    crit_rate_bonus: float = 0.0
    lifesteal: float = 0.0
    double_attack_chance: float = 0.0
    rage: bool = False


@dataclass
class AccountStatistics:
    total_runs: int = 0
    best_chapter: int = 0
    total_gold: int = 0


@dataclass
class AccountState:
    """Persistent player account."""

    user_id: str
    name: str = "Hero"
    level: int = 1
    gold: int = 0
    statistics: AccountStatistics = field(default_factory=AccountStatistics)


@dataclass
class RunState:
    """One roguelite playthrough from chapter start to settlement."""

    run_id: str
    seed: int
    chapter: int = 1
    stage: int = 1
    gold: int = 0
    exp: int = 0
    hero_level: int = 1
    team: Team = field(default_factory=Team)
    skills: List[Skill] = field(default_factory=list)
    modifiers: RunModifiers = field(default_factory=RunModifiers)
    status: RunStatus = "ongoing"
    stage_gold: int = 0
    stage_exp: int = 0
    current_hp: int = 0
    max_hp: int = 0

    @property
    def is_final_stage(self) -> bool:
        return self.stage >= STAGES_PER_CHAPTER

    def find_skill(self, skill_id: str) -> Skill | None:
        return next((skill for skill in self.skills if skill.id == skill_id), None)
