"""Run-scoped creature roster models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List

MIN_STAR = 1
MAX_STAR = 3
DEFAULT_TEAM_CAP = 5
MAX_TEAM_CAP = 7


@dataclass(slots=True)
class RosterCreature:
    """A creature owned for the current run."""

    creature_id: str
    star: int = MIN_STAR

    def __post_init__(self) -> None:
        assert MIN_STAR <= self.star <= MAX_STAR, f"star out of range: {self.star}"

    @property
    def is_maxed(self) -> bool:
        return self.star >= MAX_STAR

    def upgrade(self) -> int:
        assert not self.is_maxed, f"{self.creature_id} is already at max star"
        self.star += 1
        return self.star


@dataclass(slots=True)
class Team:
    """Ordered, duplicate-free creature collection bounded by a cap."""

    members: List[RosterCreature] = field(default_factory=list)
    cap: int = DEFAULT_TEAM_CAP

    def __post_init__(self) -> None:
        self.check_invariants()

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[RosterCreature]:
        return iter(self.members)

    @property
    def is_full(self) -> bool:
        return len(self.members) >= self.cap

    def find(self, creature_id: str) -> RosterCreature | None:
        return next((member for member in self.members if member.creature_id == creature_id), None)

    def add(self, creature_id: str) -> RosterCreature:
        assert self.find(creature_id) is None, f"duplicate creature '{creature_id}'"
        assert not self.is_full, "team is full"
        member = RosterCreature(creature_id=creature_id)
        self.members.append(member)
        return member

    def clear(self) -> None:
        self.members.clear()
        self.cap = DEFAULT_TEAM_CAP

    def check_invariants(self) -> None:
        ids = [member.creature_id for member in self.members]
        assert len(ids) == len(set(ids)), "duplicate creature ids in team"
        assert 1 <= self.cap <= MAX_TEAM_CAP, f"team cap out of range: {self.cap}"
        assert len(self.members) <= self.cap, "team exceeds its cap"
        for member in self.members:
            assert MIN_STAR <= member.star <= MAX_STAR, f"star out of range: {member.star}"
