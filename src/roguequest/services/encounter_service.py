"""Chapter/stage progression: wave setup, kill rewards, leveling and settlement."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Literal, Sequence, Tuple

from roguequest.core.rng import RNG
from roguequest.data.repositories import (
    CreaturesRepository,
    EnemyBuffsRepository,
    RewardsRepository,
    SkillsRepository,
    SynergiesRepository,
)
from roguequest.domain.battle_models import BattleState, BattleUnit
from roguequest.domain.enemy_scaling import compute_player_power
from roguequest.domain.hero_progression import apply_level_up_bonus, check_level_up
from roguequest.domain.skills import Skill
from roguequest.domain.state import AccountState, RunModifiers, RunState
from roguequest.services.battle_service import (
    BattleEvent,
    BattleService,
    LevelUpEvent,
    RewardGrantedEvent,
)
from roguequest.services.controllers import BattleController
from roguequest.services.errors import FactoryError, RunStateError
from roguequest.services.factories import (
    EnemyWave,
    create_creature_unit,
    create_enemy_wave,
    create_hero_unit,
    make_instance_id,
)
from roguequest.services.reward_service import (
    CreatureOption,
    RewardOption,
    RewardService,
    StatRewardOption,
)
from roguequest.services.roster_service import RosterService

logger = logging.getLogger(__name__)

KILL_GOLD_BASE = 10
KILL_GOLD_PER_CHAPTER = 5
KILL_EXP_BASE = 5
KILL_EXP_PER_CHAPTER = 3


def stage_kill_reward(chapter: int, stage: int) -> Tuple[int, int]:
    """Return (gold, exp) granted for each enemy defeated at this stage."""
    gold = KILL_GOLD_BASE + chapter * KILL_GOLD_PER_CHAPTER + stage
    exp = KILL_EXP_BASE + chapter * KILL_EXP_PER_CHAPTER + stage
    return gold, exp


@dataclass(slots=True)
class StageSession:
    """One stage battle in progress plus its pending level-up prompts."""

    run: RunState
    account: AccountState
    wave: EnemyWave
    opening_events: List[BattleEvent]
    controller: BattleController = field(init=False)
    pending_level_ups: int = 0

    @property
    def battle(self) -> BattleState:
        return self.controller.state


@dataclass(slots=True)
class StageResult:
    outcome: Literal["victory", "defeat"]
    rounds: int
    gold: int
    exp: int
    options: List[RewardOption] = field(default_factory=list)
    chapter_complete: bool = False
    halted: bool = False

    @property
    def run_over(self) -> bool:
        return self.chapter_complete or self.outcome == "defeat"


@dataclass(slots=True)
class ChoiceOutcome:
    accepted: bool
    message: str


class EncounterService:
    """Owns the current run record and drives it stage by stage."""

    def __init__(
        self,
        creatures_repo: CreaturesRepository,
        synergies_repo: SynergiesRepository,
        skills_repo: SkillsRepository,
        rewards_repo: RewardsRepository,
        enemy_buffs_repo: EnemyBuffsRepository,
        battle_service: BattleService | None = None,
        reward_service: RewardService | None = None,
    ) -> None:
        self._creatures_repo = creatures_repo
        self._synergies_repo = synergies_repo
        self._skills_repo = skills_repo
        self._enemy_buffs_repo = enemy_buffs_repo
        self._battle_service = battle_service or BattleService()
        self._reward_service = reward_service or RewardService(rewards_repo, skills_repo)

    def roster_for(self, run: RunState) -> RosterService:
        return RosterService(run.team, self._creatures_repo, self._synergies_repo)

    # -----------------------
    # Run lifecycle
    # -----------------------
    def start_run(self, account: AccountState, rng: RNG, chapter: int | None = None) -> RunState:
        """Begin a fresh run at stage 1 with the starting skills."""
        target_chapter = chapter if chapter is not None else account.statistics.best_chapter + 1
        if target_chapter < 1:
            raise RunStateError(f"Invalid chapter {target_chapter}.")
        run = RunState(
            run_id=make_instance_id("run", rng),
            seed=rng.seed,
            chapter=target_chapter,
            hero_level=account.level,
            skills=[Skill.from_def(skill_def) for skill_def in self._skills_repo.starting_skills()],
        )
        allies = self.build_allies(run, account)
        run.max_hp = run.current_hp = sum(unit.stats.max_hp for unit in allies)
        logger.info("Run %s started at chapter %d for %s", run.run_id, run.chapter, account.user_id)
        return run

    def build_allies(self, run: RunState, account: AccountState | None = None) -> List[BattleUnit]:
        name = account.name if account is not None else "Hero"
        allies = [create_hero_unit(run.hero_level, run.modifiers, name=name)]
        roster = self.roster_for(run)
        try:
            for member, creature_def, stats in roster.iter_members():
                allies.append(create_creature_unit(member, creature_def, stats, run.modifiers))
        except KeyError as exc:
            raise FactoryError(f"Unknown creature in team: {exc}") from exc
        return allies

    def build_enemy_wave(self, run: RunState, allies: Sequence[BattleUnit], rng: RNG) -> EnemyWave:
        power = compute_player_power(allies, run.team.members)
        return create_enemy_wave(run.chapter, run.stage, power, self._enemy_buffs_repo, rng)

    # -----------------------
    # Stage flow
    # -----------------------
    def begin_stage(self, run: RunState, account: AccountState, rng: RNG) -> StageSession:
        """Build both sides at full hp and return a session with a ready controller."""
        self._require_ongoing(run)
        run.stage_gold = 0
        run.stage_exp = 0
        allies = self.build_allies(run, account)
        wave = self.build_enemy_wave(run, allies, rng)
        state, events = self._battle_service.start_battle(allies, wave.units, run.skills, rng)
        session = StageSession(run=run, account=account, wave=wave, opening_events=events)
        session.controller = BattleController(
            self._battle_service,
            state,
            rng,
            on_enemy_defeated=lambda battle, enemy: self._on_enemy_defeated(session, battle, enemy),
            should_pause=lambda: session.pending_level_ups > 0,
        )
        logger.info("Stage %d-%d begins against %d enemies", run.chapter, run.stage, len(wave.units))
        return session

    def _on_enemy_defeated(self, session: StageSession, battle: BattleState, enemy: BattleUnit) -> List[BattleEvent]:
        run = session.run
        gold, exp = stage_kill_reward(run.chapter, run.stage)
        run.gold += gold
        run.exp += exp
        run.stage_gold += gold
        run.stage_exp += exp
        events: List[BattleEvent] = [RewardGrantedEvent(source_id=enemy.instance_id, gold=gold, exp=exp)]

        level, remaining, leveled = check_level_up(session.account.level, run.exp)
        if leveled:
            session.account.level = level
            run.hero_level = level
            run.exp = remaining
            apply_level_up_bonus(battle.allies)
            session.pending_level_ups += 1
            events.append(LevelUpEvent(level=level))
            logger.info("Hero reached level %d", level)
        return events

    def level_up_options(self, session: StageSession, rng: RNG) -> List[StatRewardOption]:
        return self._reward_service.level_up_options(session.run, rng)

    def choose_level_up_reward(
        self,
        run: RunState,
        option: StatRewardOption,
        live_units: Sequence[BattleUnit],
    ) -> str:
        return self._reward_service.apply_reward(run, option.reward, live_units, roster=self.roster_for(run))

    def resolve_level_up(self, session: StageSession, option: StatRewardOption) -> str:
        """Apply one pending level-up reward and resume once none remain."""
        if session.pending_level_ups <= 0:
            raise RunStateError("No level-up reward is pending.")
        message = self.choose_level_up_reward(session.run, option, session.battle.allies)
        session.pending_level_ups -= 1
        if session.pending_level_ups == 0:
            session.controller.resume()
        return message

    def finish_stage(self, session: StageSession, rng: RNG) -> StageResult:
        """Settle a finished battle: offer rewards, complete the chapter, or end the run."""
        controller = session.controller
        if not controller.is_over:
            raise RunStateError("Battle is still in progress.")
        if session.pending_level_ups:
            raise RunStateError("Level-up rewards must be chosen first.")

        run = session.run
        state = controller.state
        run.max_hp = sum(unit.stats.max_hp for unit in state.allies)
        run.current_hp = sum(unit.stats.hp for unit in state.allies)
        result = StageResult(
            outcome="victory" if state.status == "victory" else "defeat",
            rounds=state.round_number,
            gold=run.stage_gold,
            exp=run.stage_exp,
            halted=state.halted,
        )
        if result.outcome == "defeat":
            self.settle_defeat(run, session.account)
        elif run.is_final_stage:
            self.complete_chapter(run, session.account)
            result.chapter_complete = True
        else:
            result.options = self._reward_service.stage_options(run, self.roster_for(run), rng)
        return result

    def choose_stage_reward(self, run: RunState, option: RewardOption) -> ChoiceOutcome:
        """Apply a stage-clear option; accepted choices advance to the next stage."""
        self._require_ongoing(run)
        roster = self.roster_for(run)
        if isinstance(option, CreatureOption):
            acquired = roster.acquire(option.choice.creature.id)
            if not acquired.accepted:
                return ChoiceOutcome(accepted=False, message=acquired.message)
            message = acquired.message
        else:
            message = self._reward_service.apply_reward(run, option.reward, roster=roster)

        run.stage += 1
        run.stage_gold = 0
        run.stage_exp = 0
        return ChoiceOutcome(accepted=True, message=message)

    # -----------------------
    # Settlement
    # -----------------------
    def complete_chapter(self, run: RunState, account: AccountState) -> None:
        stats = account.statistics
        self._bank_gold(run, account)
        stats.best_chapter = max(stats.best_chapter, run.chapter)
        self._reset_progression(run)
        run.status = "completed"
        logger.info("Chapter %d completed; best chapter is %d", run.chapter, stats.best_chapter)

    def settle_defeat(self, run: RunState, account: AccountState) -> None:
        self._bank_gold(run, account)
        self._reset_progression(run)
        run.status = "failed"
        logger.info("Run %s failed at %d-%d", run.run_id, run.chapter, run.stage)

    def abandon_run(self, run: RunState, account: AccountState) -> RunState:
        """Snapshot an ongoing run for resumption at the same stage with full hp."""
        self._require_ongoing(run)
        run.stage_gold = 0
        run.stage_exp = 0
        run.max_hp = run.current_hp = sum(unit.stats.max_hp for unit in self.build_allies(run, account))
        logger.info("Run %s saved at %d-%d", run.run_id, run.chapter, run.stage)
        return run

    def _bank_gold(self, run: RunState, account: AccountState) -> None:
        account.gold += run.gold
        account.statistics.total_gold += run.gold
        account.statistics.total_runs += 1
        logger.debug("Banked %d gold for %s", run.gold, account.user_id)

    def _reset_progression(self, run: RunState) -> None:
        self.roster_for(run).clear()
        run.skills.clear()
        run.modifiers = RunModifiers()

    def _require_ongoing(self, run: RunState) -> None:
        if run.status != "ongoing":
            raise RunStateError(f"Run {run.run_id} is {run.status}.")
