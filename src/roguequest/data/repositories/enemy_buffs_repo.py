"""Catch-up enemy buff pool repository."""
from __future__ import annotations

from typing import Dict, List

from roguequest.data.errors import DataValidationError
from roguequest.data.repositories.base import RepositoryBase
from roguequest.domain.defs import EnemyBuffDef

VALID_STATS = ("hp", "attack", "defense", "crit_rate", "speed")
VALID_MODES = ("percent", "flat")


class EnemyBuffsRepository(RepositoryBase[EnemyBuffDef]):
    """Loads the random and elite buff pools used to scale enemy waves."""

    def __init__(self, base_path=None) -> None:
        super().__init__("enemy_buffs.json", base_path)

    def random_pool(self) -> List[EnemyBuffDef]:
        return [buff for buff in self.all() if not buff.elite]

    def _build(self, raw: dict[str, object]) -> Dict[str, EnemyBuffDef]:
        buffs: Dict[str, EnemyBuffDef] = {}
        for raw_id, payload in raw.items():
            context = f"enemy buff '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(data, {"name", "stat", "mode", "value"}, context, optional_fields={"elite"})
            elite = data.get("elite", False)
            if not isinstance(elite, bool):
                raise DataValidationError(f"{context} elite must be a boolean.")
            buffs[raw_id] = EnemyBuffDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                stat=self._require_choice(data["stat"], VALID_STATS, f"{context} stat"),  # type: ignore[arg-type]
                mode=self._require_choice(data["mode"], VALID_MODES, f"{context} mode"),  # type: ignore[arg-type]
                value=self._require_number(data["value"], f"{context} value"),
                elite=elite,
            )
        if not any(not buff.elite for buff in buffs.values()):
            raise DataValidationError("enemy_buffs.json must define at least one non-elite buff.")
        return buffs
