"""Reward option generation and application."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Union

from roguequest.core.rng import RNG
from roguequest.core.types import RewardPool
from roguequest.data.repositories import RewardsRepository, SkillsRepository
from roguequest.domain.battle_models import BattleUnit
from roguequest.domain.defs import RewardDef
from roguequest.domain.roster import MAX_TEAM_CAP
from roguequest.domain.skills import Skill
from roguequest.domain.state import RunState
from roguequest.services.roster_service import CreatureChoice, RosterService

logger = logging.getLogger(__name__)

OPTION_COUNT = 3
# Chance to show two creature options instead of one when creatures are on offer.
TWO_CREATURE_CHANCE = 0.7


@dataclass(slots=True)
class CreatureOption:
    choice: CreatureChoice

    @property
    def label(self) -> str:
        creature = self.choice.creature
        if self.choice.kind == "new":
            return f"Recruit {creature.name} (tier {creature.tier} {creature.race})"
        return f"Upgrade {creature.name} {self.choice.from_star}* -> {self.choice.to_star}*"


@dataclass(slots=True)
class StatRewardOption:
    reward: RewardDef

    @property
    def label(self) -> str:
        return f"{self.reward.name}: {self.reward.description}"


RewardOption = Union[CreatureOption, StatRewardOption]


class RewardService:
    """Builds reward choices and applies generic rewards to a run."""

    def __init__(self, rewards_repo: RewardsRepository, skills_repo: SkillsRepository) -> None:
        self._rewards_repo = rewards_repo
        self._skills_repo = skills_repo

    def stage_options(self, run: RunState, roster: RosterService, rng: RNG) -> List[RewardOption]:
        """Mix one or two creature choices with generic rewards, up to three options."""
        options: List[RewardOption] = []
        creature_choices = roster.generate_reward_choices(rng)
        if creature_choices:
            wanted = 2 if rng.random() < TWO_CREATURE_CHANCE else 1
            picks = creature_choices if len(creature_choices) <= wanted else rng.sample(creature_choices, wanted)
            options.extend(CreatureOption(choice=choice) for choice in picks)
        options.extend(self._generic_options(run, "stage", rng, OPTION_COUNT - len(options)))
        return options

    def level_up_options(self, run: RunState, rng: RNG) -> List[StatRewardOption]:
        return self._generic_options(run, "level_up", rng, OPTION_COUNT)

    def is_eligible(self, run: RunState, reward: RewardDef) -> bool:
        if reward.kind == "skill_damage":
            return run.find_skill(reward.skill_id or "") is not None
        if reward.kind == "grant_skill":
            return run.find_skill(reward.skill_id or "") is None
        if reward.kind == "team_slot":
            return run.team.cap < MAX_TEAM_CAP
        if reward.kind == "rage":
            return not run.modifiers.rage
        return True

    def _generic_options(self, run: RunState, pool: RewardPool, rng: RNG, count: int) -> List[StatRewardOption]:
        if count <= 0:
            return []
        candidates = [reward for reward in self._rewards_repo.for_pool(pool) if self.is_eligible(run, reward)]
        return [StatRewardOption(reward=reward) for reward in rng.sample(candidates, count)]

    def apply_reward(
        self,
        run: RunState,
        reward: RewardDef,
        live_units: Iterable[BattleUnit] = (),
        roster: RosterService | None = None,
    ) -> str:
        """Apply a generic reward to the run and to any live allied units.

        Run modifiers keep the effect for every later battle; live units get
        the same delta immediately (used by mid-battle level-up rewards).
        """
        units = [unit for unit in live_units if unit.is_alive]
        modifiers = run.modifiers
        value = reward.value
        kind = reward.kind

        if kind == "heal_full":
            for unit in units:
                unit.stats.hp = unit.stats.max_hp
        elif kind == "heal_percent":
            for unit in units:
                unit.stats.hp = min(unit.stats.max_hp, unit.stats.hp + math.floor(unit.stats.max_hp * value))
        elif kind == "attack_pct":
            modifiers.attack_multiplier *= 1 + value
            for unit in units:
                unit.stats.attack = math.floor(unit.stats.attack * (1 + value))
        elif kind == "hp_pct":
            modifiers.hp_multiplier *= 1 + value
            for unit in units:
                unit.stats.max_hp = math.floor(unit.stats.max_hp * (1 + value))
                unit.stats.hp = unit.stats.max_hp
        elif kind == "speed_pct":
            modifiers.speed_multiplier *= 1 + value
            for unit in units:
                unit.stats.speed = math.floor(unit.stats.speed * (1 + value))
        elif kind == "crit_rate":
            modifiers.crit_rate_bonus += value
            for unit in units:
                unit.stats.crit_rate = min(1.0, unit.stats.crit_rate + value)
        elif kind == "lifesteal":
            modifiers.lifesteal += value
            for unit in units:
                unit.lifesteal = modifiers.lifesteal
        elif kind == "double_attack":
            modifiers.double_attack_chance = min(1.0, modifiers.double_attack_chance + value)
            for unit in units:
                unit.double_attack_chance = modifiers.double_attack_chance
        elif kind == "rage":
            modifiers.rage = True
            for unit in units:
                unit.rage = True
        elif kind == "skill_damage":
            skill = run.find_skill(reward.skill_id or "")
            if skill is None or not skill.add_damage_multiplier(value):
                return f"{reward.name} had no effect."
        elif kind == "grant_skill":
            if run.find_skill(reward.skill_id or "") is None:
                run.skills.append(Skill.from_def(self._skills_repo.get(reward.skill_id or "")))
        elif kind == "team_slot":
            if roster is None:
                raise ValueError("team_slot rewards need the run roster.")
            roster.set_team_cap(run.team.cap + int(value))
        else:
            raise ValueError(f"Unknown reward kind '{kind}'.")

        logger.debug("Applied reward %s to run %s", reward.id, run.run_id)
        return f"{reward.name} acquired."
