"""Racial synergy level repository."""
from __future__ import annotations

from typing import Dict, List

from roguequest.data.errors import DataValidationError
from roguequest.data.repositories.base import RepositoryBase
from roguequest.domain.defs import SynergyBonus, SynergyLevelDef

_BONUS_KEYS = {"attack", "defense", "hp", "speed"}


class SynergiesRepository(RepositoryBase[SynergyLevelDef]):
    """Loads synergy bonuses keyed by their tier threshold."""

    def __init__(self, base_path=None) -> None:
        super().__init__("synergies.json", base_path)

    def get_level(self, tier: int) -> SynergyLevelDef:
        return self.get(str(tier))

    def tiers(self) -> List[int]:
        return sorted(level.tier for level in self.all())

    def _build(self, raw: dict[str, object]) -> Dict[str, SynergyLevelDef]:
        levels: Dict[str, SynergyLevelDef] = {}
        for raw_tier, payload in raw.items():
            context = f"synergy tier '{raw_tier}'"
            if not raw_tier.isdigit() or int(raw_tier) < 2:
                raise DataValidationError(f"{context} must be an integer threshold of at least 2.")
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(data, {"bonus"}, context, optional_fields={"special"})
            bonus_data = self._require_mapping(data["bonus"], f"{context} bonus")
            unknown = set(bonus_data) - _BONUS_KEYS
            if unknown:
                raise DataValidationError(f"{context} bonus has unknown fields: {sorted(unknown)}")
            bonus = SynergyBonus(
                **{key: self._require_number(value, f"{context} bonus.{key}") for key, value in bonus_data.items()}
            )
            special = data.get("special")
            levels[raw_tier] = SynergyLevelDef(
                tier=int(raw_tier),
                bonus=bonus,
                special=self._require_str(special, f"{context} special") if special is not None else None,
            )
        return levels
