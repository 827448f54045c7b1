"""Skills repository."""
from __future__ import annotations

from typing import Dict, List

from roguequest.data.errors import DataValidationError
from roguequest.data.repositories.base import RepositoryBase
from roguequest.domain.defs import DamageMultiplierEffect, HealEffect, SkillDef, SkillEffect, StatBuffEffect

VALID_EFFECT_KINDS = ("damage_multiplier", "heal", "stat_buff")
VALID_BUFF_STATS = ("attack", "defense", "speed", "crit_rate")


class SkillsRepository(RepositoryBase[SkillDef]):
    """Loads triggered skills."""

    def __init__(self, base_path=None) -> None:
        super().__init__("skills.json", base_path)

    def starting_skills(self) -> List[SkillDef]:
        return [skill for skill in self.all() if skill.starting]

    def _build(self, raw: dict[str, object]) -> Dict[str, SkillDef]:
        skills: Dict[str, SkillDef] = {}
        for raw_id, payload in raw.items():
            context = f"skill '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                data,
                {"name", "trigger_chance", "cooldown", "effect"},
                context,
                optional_fields={"starting"},
            )
            cooldown = self._require_int(data["cooldown"], f"{context} cooldown")
            if cooldown < 0:
                raise DataValidationError(f"{context} cooldown must be non-negative.")
            starting = data.get("starting", False)
            if not isinstance(starting, bool):
                raise DataValidationError(f"{context} starting must be a boolean.")
            skills[raw_id] = SkillDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                trigger_chance=self._require_probability(data["trigger_chance"], f"{context} trigger_chance"),
                cooldown=cooldown,
                effect=self._parse_effect(data["effect"], context),
                starting=starting,
            )
        return skills

    def _parse_effect(self, raw_value: object, context: str) -> SkillEffect:
        effect_context = f"{context} effect"
        data = self._require_mapping(raw_value, effect_context)
        kind = self._require_choice(data.get("kind"), VALID_EFFECT_KINDS, f"{effect_context} kind")
        if kind == "damage_multiplier":
            self._assert_exact_fields(data, {"kind", "multiplier"}, effect_context)
            multiplier = self._require_number(data["multiplier"], f"{effect_context} multiplier")
            if multiplier <= 0:
                raise DataValidationError(f"{effect_context} multiplier must be positive.")
            return DamageMultiplierEffect(multiplier=multiplier)
        if kind == "heal":
            self._assert_exact_fields(data, {"kind", "percent"}, effect_context)
            return HealEffect(percent=self._require_probability(data["percent"], f"{effect_context} percent"))
        self._assert_exact_fields(data, {"kind", "stat", "value"}, effect_context)
        return StatBuffEffect(
            stat=self._require_choice(data["stat"], VALID_BUFF_STATS, f"{effect_context} stat"),  # type: ignore[arg-type]
            value=self._require_number(data["value"], f"{effect_context} value"),
        )
