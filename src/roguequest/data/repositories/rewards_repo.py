"""Generic reward pool repository."""
from __future__ import annotations

from typing import Dict, List

from roguequest.core.types import RewardPool
from roguequest.data.errors import DataReferenceError, DataValidationError
from roguequest.data.repositories.base import RepositoryBase
from roguequest.data.repositories.skills_repo import SkillsRepository
from roguequest.domain.defs import RewardDef

VALID_KINDS = (
    "heal_full",
    "heal_percent",
    "attack_pct",
    "hp_pct",
    "speed_pct",
    "crit_rate",
    "lifesteal",
    "double_attack",
    "rage",
    "skill_damage",
    "grant_skill",
    "team_slot",
)
VALID_POOLS = ("stage", "level_up")
_VALUELESS_KINDS = {"heal_full", "rage", "grant_skill"}
_SKILL_KINDS = {"skill_damage", "grant_skill"}


class RewardsRepository(RepositoryBase[RewardDef]):
    """Loads stat/skill rewards and validates skill references."""

    def __init__(self, skills_repo: SkillsRepository | None = None, base_path=None) -> None:
        super().__init__("rewards.json", base_path)
        self._skills_repo = skills_repo

    def for_pool(self, pool: RewardPool) -> List[RewardDef]:
        return [reward for reward in self.all() if pool in reward.pools]

    def _build(self, raw: dict[str, object]) -> Dict[str, RewardDef]:
        rewards: Dict[str, RewardDef] = {}
        for raw_id, payload in raw.items():
            context = f"reward '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                data,
                {"name", "rarity", "description", "kind", "pools"},
                context,
                optional_fields={"value", "skill_id"},
            )
            kind = self._require_choice(data["kind"], VALID_KINDS, f"{context} kind")
            value = 0.0
            if kind not in _VALUELESS_KINDS:
                if "value" not in data:
                    raise DataValidationError(f"{context} requires a value for kind '{kind}'.")
                value = self._require_number(data["value"], f"{context} value")
            skill_id = None
            if kind in _SKILL_KINDS:
                skill_id = self._require_str(data.get("skill_id"), f"{context} skill_id")
                self._validate_skill_reference(skill_id, context)
            pools = self._require_str_list(data["pools"], f"{context} pools")
            if not pools:
                raise DataValidationError(f"{context} pools must not be empty.")
            for pool in pools:
                self._require_choice(pool, VALID_POOLS, f"{context} pools")
            rewards[raw_id] = RewardDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                rarity=self._require_str(data["rarity"], f"{context} rarity"),
                description=self._require_str(data["description"], f"{context} description"),
                kind=kind,  # type: ignore[arg-type]
                value=value,
                skill_id=skill_id,
                pools=tuple(pools),  # type: ignore[arg-type]
            )
        return rewards

    def _validate_skill_reference(self, skill_id: str, context: str) -> None:
        if self._skills_repo is None:
            return
        if not self._skills_repo.has(skill_id):
            raise DataReferenceError(f"{context} references unknown skill '{skill_id}'.")
