"""Runtime skill state shared by the allied side during a run."""
from __future__ import annotations

from dataclasses import dataclass

from roguequest.domain.defs import DamageMultiplierEffect, SkillDef, SkillEffect


@dataclass(slots=True)
class Skill:
    """Triggered skill: a cooldown/trigger envelope around one effect."""

    id: str
    name: str
    trigger_chance: float
    cooldown: int
    effect: SkillEffect
    current_cooldown: int = 0

    @classmethod
    def from_def(cls, skill_def: SkillDef) -> "Skill":
        return cls(
            id=skill_def.id,
            name=skill_def.name,
            trigger_chance=skill_def.trigger_chance,
            cooldown=skill_def.cooldown,
            effect=skill_def.effect,
        )

    @property
    def is_ready(self) -> bool:
        return self.current_cooldown == 0

    @property
    def damage_multiplier(self) -> float | None:
        if isinstance(self.effect, DamageMultiplierEffect):
            return self.effect.multiplier
        return None

    def start_cooldown(self) -> None:
        self.current_cooldown = self.cooldown

    def tick(self) -> None:
        self.current_cooldown = max(0, self.current_cooldown - 1)

    def add_damage_multiplier(self, amount: float) -> bool:
        """Raise the multiplier of a damage skill; returns False for other kinds."""
        if not isinstance(self.effect, DamageMultiplierEffect):
            return False
        self.effect = DamageMultiplierEffect(multiplier=self.effect.multiplier + amount)
        return True
