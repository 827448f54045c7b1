"""Creature catalog repository."""
from __future__ import annotations

from typing import Dict, List

from roguequest.core.types import POSITIONS, RACES, Race
from roguequest.data.errors import DataValidationError
from roguequest.data.repositories.base import RepositoryBase
from roguequest.domain.defs import CreatureBaseStats, CreatureDef, StarBonus

MIN_TIER = 1
MAX_TIER = 7
BONUS_STARS = (2, 3)


class CreaturesRepository(RepositoryBase[CreatureDef]):
    """Loads and validates the creature roster."""

    def __init__(self, base_path=None) -> None:
        super().__init__("creatures.json", base_path)

    def by_race(self, race: Race) -> List[CreatureDef]:
        """Return the creatures of one race ordered by tier."""
        return sorted((c for c in self.all() if c.race == race), key=lambda c: (c.tier, c.id))

    def _build(self, raw: dict[str, object]) -> Dict[str, CreatureDef]:
        creatures: Dict[str, CreatureDef] = {}
        for raw_id, payload in raw.items():
            context = f"creature '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                data,
                {"name", "race", "tier", "position", "base", "star_bonus"},
                context,
                optional_fields={"abilities"},
            )
            tier = self._require_int(data["tier"], f"{context} tier")
            if not MIN_TIER <= tier <= MAX_TIER:
                raise DataValidationError(f"{context} tier must be between {MIN_TIER} and {MAX_TIER}.")
            creatures[raw_id] = CreatureDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                race=self._require_choice(data["race"], RACES, f"{context} race"),  # type: ignore[arg-type]
                tier=tier,
                position=self._require_choice(data["position"], POSITIONS, f"{context} position"),  # type: ignore[arg-type]
                base=self._parse_base(data["base"], context),
                star_bonus=self._parse_star_bonus(data["star_bonus"], context),
                abilities=self._parse_abilities(data.get("abilities", {}), context),
            )
        return creatures

    def _parse_base(self, raw_value: object, context: str) -> CreatureBaseStats:
        mapping = self._require_mapping(raw_value, f"{context} base")
        self._assert_exact_fields(mapping, {"hp", "attack", "defense", "speed"}, f"{context} base")
        stats = {key: self._require_int(mapping[key], f"{context} base.{key}") for key in mapping}
        if stats["hp"] <= 0:
            raise DataValidationError(f"{context} base.hp must be positive.")
        if min(stats.values()) < 0:
            raise DataValidationError(f"{context} base stats must be non-negative.")
        return CreatureBaseStats(**stats)

    def _parse_star_bonus(self, raw_value: object, context: str) -> Dict[int, StarBonus]:
        mapping = self._require_mapping(raw_value, f"{context} star_bonus")
        self._assert_exact_fields(mapping, {str(star) for star in BONUS_STARS}, f"{context} star_bonus")
        bonuses: Dict[int, StarBonus] = {}
        for star in BONUS_STARS:
            entry_context = f"{context} star_bonus.{star}"
            entry = self._require_mapping(mapping[str(star)], entry_context)
            self._assert_exact_fields(entry, {"hp", "attack", "defense"}, entry_context)
            bonuses[star] = StarBonus(
                hp=self._require_int(entry["hp"], f"{entry_context}.hp"),
                attack=self._require_int(entry["attack"], f"{entry_context}.attack"),
                defense=self._require_int(entry["defense"], f"{entry_context}.defense"),
            )
        return bonuses

    def _parse_abilities(self, raw_value: object, context: str) -> Dict[int, str]:
        mapping = self._require_mapping(raw_value, f"{context} abilities")
        abilities: Dict[int, str] = {}
        for key, text in mapping.items():
            if not key.isdigit() or not 1 <= int(key) <= 3:
                raise DataValidationError(f"{context} abilities keys must be star levels 1-3.")
            abilities[int(key)] = self._require_str(text, f"{context} abilities.{key}")
        return abilities
