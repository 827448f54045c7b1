"""Run-scoped creature roster: acquisition, reward choices, synergy and stats."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Literal, Tuple

from roguequest.core.rng import RNG
from roguequest.data.repositories import CreaturesRepository, SynergiesRepository
from roguequest.domain.creature_scaling import EffectiveStats, effective_creature_stats
from roguequest.domain.defs import CreatureDef, SynergyBonus
from roguequest.domain.roster import MAX_STAR, MAX_TEAM_CAP, RosterCreature, Team
from roguequest.domain.synergy import Synergy, compute_synergies

logger = logging.getLogger(__name__)

DEFAULT_CHOICE_COUNT = 3

AcquireReason = Literal["new", "upgraded", "maxed", "team full"]


@dataclass(slots=True)
class AcquireResult:
    """Outcome of an acquisition attempt; rejections are never raised."""

    accepted: bool
    reason: AcquireReason
    creature_id: str
    message: str
    new_star: int | None = None


@dataclass(slots=True)
class CreatureChoice:
    """A creature reward option: recruit a new creature or upgrade an owned one."""

    kind: Literal["new", "upgrade"]
    creature: CreatureDef
    from_star: int = 0
    to_star: int = 1


class RosterService:
    """Owns one run's team and derives creature power from it."""

    def __init__(
        self,
        team: Team,
        creatures_repo: CreaturesRepository,
        synergies_repo: SynergiesRepository,
    ) -> None:
        self._team = team
        self._creatures_repo = creatures_repo
        self._synergies_repo = synergies_repo

    @property
    def team(self) -> Team:
        return self._team

    # -----------------------
    # Acquisition
    # -----------------------
    def acquire(self, creature_id: str) -> AcquireResult:
        """Recruit or upgrade a creature; unknown ids raise KeyError."""
        creature_def = self._creatures_repo.get(creature_id)
        member = self._team.find(creature_id)
        if member is not None:
            if member.is_maxed:
                return AcquireResult(
                    accepted=False,
                    reason="maxed",
                    creature_id=creature_id,
                    message=f"{creature_def.name} is already at {MAX_STAR} stars.",
                )
            star = member.upgrade()
            self._team.check_invariants()
            logger.debug("Upgraded %s to star %d", creature_id, star)
            return AcquireResult(
                accepted=True,
                reason="upgraded",
                creature_id=creature_id,
                message=f"{creature_def.name} upgraded to {star} stars.",
                new_star=star,
            )

        if self._team.is_full:
            return AcquireResult(
                accepted=False,
                reason="team full",
                creature_id=creature_id,
                message=f"Team is full ({self._team.cap} creatures).",
            )

        self._team.add(creature_id)
        self._team.check_invariants()
        logger.debug("Recruited %s (%d/%d)", creature_id, len(self._team), self._team.cap)
        return AcquireResult(
            accepted=True,
            reason="new",
            creature_id=creature_id,
            message=f"{creature_def.name} joined the team.",
            new_star=1,
        )

    def generate_reward_choices(self, rng: RNG, count: int = DEFAULT_CHOICE_COUNT) -> List[CreatureChoice]:
        """Offer creature options.

        A full team only gets upgrades, one per non-maxed member and never
        truncated, so there is always a valid pick. Otherwise a random sample
        of catalog creatures that can still be recruited or upgraded.
        """
        if self._team.is_full:
            return [
                self._choice_for(self._creatures_repo.get(member.creature_id))
                for member in self._team
                if not member.is_maxed
            ]
        available = self.available_definitions()
        return [self._choice_for(creature_def) for creature_def in rng.sample(available, count)]

    def available_definitions(self) -> List[CreatureDef]:
        """Catalog entries that are not already owned at max star."""
        maxed = {member.creature_id for member in self._team if member.is_maxed}
        return [creature_def for creature_def in self._creatures_repo.all() if creature_def.id not in maxed]

    def _choice_for(self, creature_def: CreatureDef) -> CreatureChoice:
        member = self._team.find(creature_def.id)
        if member is None:
            return CreatureChoice(kind="new", creature=creature_def)
        return CreatureChoice(kind="upgrade", creature=creature_def, from_star=member.star, to_star=member.star + 1)

    # -----------------------
    # Derived power
    # -----------------------
    def active_synergies(self) -> List[Synergy]:
        races = [self._creatures_repo.get(member.creature_id).race for member in self._team]
        return compute_synergies(races, self._synergies_repo.get_level)

    def effective_stats(self, member: RosterCreature) -> EffectiveStats:
        """Base + star bonuses, then the race synergy multiplier, floored."""
        creature_def = self._creatures_repo.get(member.creature_id)
        return effective_creature_stats(creature_def, member.star, self._synergy_bonus_for(creature_def))

    def iter_members(self) -> Iterable[Tuple[RosterCreature, CreatureDef, EffectiveStats]]:
        bonuses: Dict[str, SynergyBonus] = {synergy.race: synergy.bonus for synergy in self.active_synergies()}
        for member in self._team:
            creature_def = self._creatures_repo.get(member.creature_id)
            yield member, creature_def, effective_creature_stats(creature_def, member.star, bonuses.get(creature_def.race))

    def _synergy_bonus_for(self, creature_def: CreatureDef) -> SynergyBonus | None:
        for synergy in self.active_synergies():
            if synergy.race == creature_def.race:
                return synergy.bonus
        return None

    # -----------------------
    # Capacity and lifecycle
    # -----------------------
    def is_full(self) -> bool:
        return self._team.is_full

    def set_team_cap(self, size: int) -> int:
        """Clamp the cap into [1, 7]; lowering below the current size is refused."""
        cap = max(1, min(size, MAX_TEAM_CAP))
        self._team.cap = max(cap, len(self._team))
        self._team.check_invariants()
        return self._team.cap

    def clear(self) -> None:
        self._team.clear()
        logger.debug("Team cleared")

    def snapshot(self) -> Tuple[List[Tuple[str, int]], int]:
        return [(member.creature_id, member.star) for member in self._team], self._team.cap

    def restore(self, entries: Iterable[Tuple[str, int]], cap: int) -> None:
        """Replace the team with persisted entries; unknown ids raise KeyError."""
        members = []
        for creature_id, star in entries:
            self._creatures_repo.get(creature_id)
            members.append(RosterCreature(creature_id=creature_id, star=star))
        self._team.members[:] = members
        self._team.cap = cap
        self._team.check_invariants()
