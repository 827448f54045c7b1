"""Battle service resolving deterministic automatic combat."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterable, List, Literal, Sequence, Tuple

from roguequest.core.rng import RNG
from roguequest.domain.battle_models import BattleState, BattleUnit, BattleUnitView
from roguequest.domain.combat_rules import RAGE_MULTIPLIER, apply_critical, calculate_damage, is_enraged
from roguequest.domain.defs import HealEffect, StatBuffEffect
from roguequest.domain.skills import Skill
from roguequest.services.factories import make_instance_id

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROUNDS = 200


@dataclass(slots=True)
class BattleView:
    """Presentation view for the current battle state."""

    battle_id: str
    round_number: int
    allies: List[BattleUnitView]
    enemies: List[BattleUnitView]


@dataclass(slots=True)
class BattleEvent:
    """Base battle event."""


@dataclass(slots=True)
class BattleStartedEvent(BattleEvent):
    battle_id: str
    ally_names: List[str]
    enemy_names: List[str]


@dataclass(slots=True)
class AttackResolvedEvent(BattleEvent):
    attacker_id: str
    attacker_name: str
    target_id: str
    target_name: str
    damage: int
    target_hp: int
    was_critical: bool = False
    skill_id: str | None = None
    is_follow_up: bool = False


@dataclass(slots=True)
class SkillTriggeredEvent(BattleEvent):
    combatant_id: str
    combatant_name: str
    skill_id: str
    skill_name: str


@dataclass(slots=True)
class HealEvent(BattleEvent):
    combatant_id: str
    combatant_name: str
    amount: int
    hp: int


@dataclass(slots=True)
class CombatantDefeatedEvent(BattleEvent):
    combatant_id: str
    combatant_name: str
    side: str


@dataclass(slots=True)
class RewardGrantedEvent(BattleEvent):
    source_id: str
    gold: int
    exp: int


@dataclass(slots=True)
class LevelUpEvent(BattleEvent):
    level: int


@dataclass(slots=True)
class RoundEndedEvent(BattleEvent):
    round_number: int


@dataclass(slots=True)
class BattleResolvedEvent(BattleEvent):
    outcome: Literal["victory", "defeat"]
    rounds: int
    halted: bool = False


# Called once for every enemy that drops to 0 hp; returned events join the log.
EnemyDefeatedHook = Callable[[BattleState, BattleUnit], List[BattleEvent]]


class BattleService:
    """Deterministic round-based auto-battle resolver.

    Every round the living units act once in speed order. Allies may trigger
    one ready shared skill per action; enemies only basic-attack. The battle
    ends as soon as one side has no living units at the end of a round.
    """

    # -----------------------
    # Battle Lifecycle
    # -----------------------
    def start_battle(
        self,
        allies: Sequence[BattleUnit],
        enemies: Sequence[BattleUnit],
        skills: List[Skill],
        rng: RNG,
    ) -> Tuple[BattleState, List[BattleEvent]]:
        """Create a fresh battle state.

        The skills list is shared with the caller, so cooldowns and skills
        learned mid-battle carry back into the run.
        """
        state = BattleState(
            battle_id=make_instance_id("battle", rng),
            allies=list(allies),
            enemies=list(enemies),
            skills=skills,
            status="running",
        )
        events: List[BattleEvent] = [
            BattleStartedEvent(
                battle_id=state.battle_id,
                ally_names=[unit.display_name for unit in state.allies],
                enemy_names=[unit.display_name for unit in state.enemies],
            )
        ]
        resolved = self._update_outcome(state)
        if resolved:
            events.append(resolved)
        state.event_log.extend(events)
        logger.debug(
            "Battle %s started: %d allies vs %d enemies",
            state.battle_id,
            len(state.allies),
            len(state.enemies),
        )
        return state, events

    def run_round(
        self,
        state: BattleState,
        rng: RNG,
        *,
        on_enemy_defeated: EnemyDefeatedHook | None = None,
    ) -> List[BattleEvent]:
        """Resolve one full round; a finished battle returns no events."""
        if state.status == "not_started":
            raise ValueError("Battle has not been started.")
        if state.is_over:
            return []

        events: List[BattleEvent] = []
        try:
            self._execute_round(state, rng, on_enemy_defeated, events)
        except Exception:
            logger.exception("Battle %s failed during round %d; halting", state.battle_id, state.round_number)
            events.append(self.halt(state))
        state.event_log.extend(events)
        return events

    def run_to_completion(
        self,
        state: BattleState,
        rng: RNG,
        *,
        max_rounds: int | None = None,
        on_enemy_defeated: EnemyDefeatedHook | None = None,
    ) -> List[BattleEvent]:
        """Resolve rounds until the battle ends or the round cap halts it."""
        limit = DEFAULT_MAX_ROUNDS if max_rounds is None else max_rounds
        events: List[BattleEvent] = []
        while not state.is_over:
            if state.round_number >= limit:
                resolved = self.halt(state)
                state.event_log.append(resolved)
                events.append(resolved)
                break
            events.extend(self.run_round(state, rng, on_enemy_defeated=on_enemy_defeated))
        return events

    def halt(self, state: BattleState) -> BattleResolvedEvent:
        """Force a defeat-equivalent terminal state."""
        logger.warning("Battle %s halted after %d rounds", state.battle_id, state.round_number)
        state.status = "defeat"
        state.halted = True
        return BattleResolvedEvent(outcome="defeat", rounds=state.round_number, halted=True)

    def get_battle_view(self, state: BattleState) -> BattleView:
        """Return structured information for rendering."""
        return BattleView(
            battle_id=state.battle_id,
            round_number=state.round_number,
            allies=[self._to_view(unit) for unit in state.allies],
            enemies=[self._to_view(unit) for unit in state.enemies],
        )

    # -----------------------
    # Ordering and Targeting
    # -----------------------
    def action_order(self, state: BattleState, rng: RNG) -> List[BattleUnit]:
        """Living units by speed desc, then level desc, then a random tiebreak."""
        living = [unit for unit in state.iter_units() if unit.is_alive]
        tiebreak = {unit.instance_id: rng.random() for unit in living}
        return sorted(
            living,
            key=lambda unit: (-unit.stats.speed, -unit.level, tiebreak[unit.instance_id]),
        )

    def select_target(self, attacker: BattleUnit, opponents: Iterable[BattleUnit], rng: RNG) -> BattleUnit | None:
        """Pick an opponent from the front-most living row.

        Within that row a unit at the attacker's own index is preferred,
        otherwise the closest index wins. Remaining ties are broken randomly.
        """
        alive = [unit for unit in opponents if unit.is_alive]
        if not alive:
            return None
        front_index = min(unit.index for unit in alive)
        front_row = [unit for unit in alive if unit.index == front_index]
        candidates = [unit for unit in front_row if unit.index == attacker.index]
        if not candidates:
            nearest = min(abs(unit.index - attacker.index) for unit in front_row)
            candidates = [unit for unit in front_row if abs(unit.index - attacker.index) == nearest]
        if len(candidates) == 1:
            return candidates[0]
        return rng.choice(candidates)

    # -----------------------
    # Internal helpers
    # -----------------------
    def _execute_round(
        self,
        state: BattleState,
        rng: RNG,
        on_enemy_defeated: EnemyDefeatedHook | None,
        events: List[BattleEvent],
    ) -> None:
        state.round_number += 1
        for unit in self.action_order(state, rng):
            if not unit.is_alive:
                continue
            events.extend(self._take_action(state, unit, rng, on_enemy_defeated))

        for skill in state.skills:
            skill.tick()
        events.append(RoundEndedEvent(round_number=state.round_number))

        resolved = self._update_outcome(state)
        if resolved:
            events.append(resolved)
            logger.info(
                "Battle %s ended in %s after %d rounds",
                state.battle_id,
                resolved.outcome,
                state.round_number,
            )

    def _take_action(
        self,
        state: BattleState,
        unit: BattleUnit,
        rng: RNG,
        on_enemy_defeated: EnemyDefeatedHook | None,
    ) -> List[BattleEvent]:
        opponents = state.enemies if unit.side == "allies" else state.allies
        target = self.select_target(unit, opponents, rng)
        if target is None:
            return []

        events: List[BattleEvent] = []
        skill = self._roll_skill(state, rng) if unit.side == "allies" else None
        if skill is not None:
            skill.start_cooldown()
            events.append(
                SkillTriggeredEvent(
                    combatant_id=unit.instance_id,
                    combatant_name=unit.display_name,
                    skill_id=skill.id,
                    skill_name=skill.name,
                )
            )
            if skill.damage_multiplier is None:
                events.extend(self._apply_support_skill(unit, skill))
                skill = None

        events.extend(self._attack(state, unit, target, rng, on_enemy_defeated, skill=skill))

        if unit.is_alive and unit.double_attack_chance > 0 and rng.random() < unit.double_attack_chance:
            follow_up = self.select_target(unit, opponents, rng)
            if follow_up is not None:
                events.extend(self._attack(state, unit, follow_up, rng, on_enemy_defeated, is_follow_up=True))
        return events

    def _roll_skill(self, state: BattleState, rng: RNG) -> Skill | None:
        for skill in state.skills:
            if skill.is_ready and rng.random() < skill.trigger_chance:
                return skill
        return None

    def _apply_support_skill(self, unit: BattleUnit, skill: Skill) -> List[BattleEvent]:
        effect = skill.effect
        if isinstance(effect, HealEffect):
            before = unit.stats.hp
            unit.stats.hp = min(unit.stats.max_hp, unit.stats.hp + math.floor(unit.stats.max_hp * effect.percent))
            return [
                HealEvent(
                    combatant_id=unit.instance_id,
                    combatant_name=unit.display_name,
                    amount=unit.stats.hp - before,
                    hp=unit.stats.hp,
                )
            ]
        if isinstance(effect, StatBuffEffect):
            if effect.stat == "crit_rate":
                unit.stats.crit_rate = min(1.0, unit.stats.crit_rate + effect.value)
            else:
                current = getattr(unit.stats, effect.stat)
                setattr(unit.stats, effect.stat, math.floor(current * (1 + effect.value)))
        return []

    def _attack(
        self,
        state: BattleState,
        attacker: BattleUnit,
        target: BattleUnit,
        rng: RNG,
        on_enemy_defeated: EnemyDefeatedHook | None,
        *,
        skill: Skill | None = None,
        is_follow_up: bool = False,
    ) -> List[BattleEvent]:
        multiplier = skill.damage_multiplier if skill is not None else 1.0
        if attacker.rage and is_enraged(attacker.stats.hp, attacker.stats.max_hp):
            multiplier *= RAGE_MULTIPLIER
        damage = calculate_damage(attacker.stats.attack, target.stats.defense, multiplier=multiplier)

        was_critical = False
        if skill is None and attacker.stats.crit_rate > 0 and rng.random() < attacker.stats.crit_rate:
            damage = apply_critical(damage, attacker.stats.crit_damage)
            was_critical = True

        target.stats.hp = max(0, target.stats.hp - damage)
        events: List[BattleEvent] = [
            AttackResolvedEvent(
                attacker_id=attacker.instance_id,
                attacker_name=attacker.display_name,
                target_id=target.instance_id,
                target_name=target.display_name,
                damage=damage,
                target_hp=target.stats.hp,
                was_critical=was_critical,
                skill_id=skill.id if skill is not None else None,
                is_follow_up=is_follow_up,
            )
        ]

        healed = math.floor(damage * attacker.lifesteal)
        if healed > 0 and attacker.is_alive:
            before = attacker.stats.hp
            attacker.stats.hp = min(attacker.stats.max_hp, attacker.stats.hp + healed)
            if attacker.stats.hp > before:
                events.append(
                    HealEvent(
                        combatant_id=attacker.instance_id,
                        combatant_name=attacker.display_name,
                        amount=attacker.stats.hp - before,
                        hp=attacker.stats.hp,
                    )
                )

        if not target.is_alive:
            events.append(
                CombatantDefeatedEvent(
                    combatant_id=target.instance_id,
                    combatant_name=target.display_name,
                    side=target.side,
                )
            )
            if target.is_enemy and on_enemy_defeated is not None:
                events.extend(on_enemy_defeated(state, target))
        return events

    def _update_outcome(self, state: BattleState) -> BattleResolvedEvent | None:
        if not state.living("allies"):
            state.status = "defeat"
            return BattleResolvedEvent(outcome="defeat", rounds=state.round_number)
        if not state.living("enemies"):
            state.status = "victory"
            return BattleResolvedEvent(outcome="victory", rounds=state.round_number)
        return None

    def _to_view(self, unit: BattleUnit) -> BattleUnitView:
        return BattleUnitView(
            instance_id=unit.instance_id,
            name=unit.display_name,
            side=unit.side,
            index=unit.index,
            is_alive=unit.is_alive,
            current_hp=unit.stats.hp,
            max_hp=unit.stats.max_hp,
            attack=unit.stats.attack,
            speed=unit.stats.speed,
        )
