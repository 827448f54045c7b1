"""Battle domain models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List

from roguequest.core.types import BattleStatus, Side
from roguequest.domain.entities import Stats
from roguequest.domain.skills import Skill

if TYPE_CHECKING:
    from roguequest.services.battle_service import BattleEvent


@dataclass(slots=True)
class BattleUnit:
    """Represents an individual participant in battle."""

    instance_id: str
    display_name: str
    side: Side
    index: int  # row ordinal, lower is closer to the front
    level: int  # hero level, creature tier or enemy chapter; breaks speed ties
    stats: Stats
    source_id: str | None = None  # creature/hero definition id
    lifesteal: float = 0.0
    double_attack_chance: float = 0.0
    rage: bool = False

    @property
    def is_alive(self) -> bool:
        return self.stats.hp > 0

    @property
    def is_enemy(self) -> bool:
        return self.side == "enemies"


@dataclass(slots=True)
class BattleState:
    """Tracks the state of one single-use battle."""

    battle_id: str
    allies: List[BattleUnit]
    enemies: List[BattleUnit]
    skills: List[Skill] = field(default_factory=list)
    status: BattleStatus = "not_started"
    round_number: int = 0
    halted: bool = False
    event_log: List["BattleEvent"] = field(default_factory=list)

    @property
    def is_over(self) -> bool:
        return self.status in ("victory", "defeat")

    def iter_units(self) -> Iterator[BattleUnit]:
        yield from self.allies
        yield from self.enemies

    def living(self, side: Side) -> List[BattleUnit]:
        units = self.allies if side == "allies" else self.enemies
        return [unit for unit in units if unit.is_alive]


@dataclass(slots=True)
class BattleUnitView:
    """Read-only snapshot of a unit for presentation."""

    instance_id: str
    name: str
    side: Side
    index: int
    is_alive: bool
    current_hp: int
    max_hp: int
    attack: int
    speed: int
