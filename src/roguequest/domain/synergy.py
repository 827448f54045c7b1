"""Racial synergy rules."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List

from roguequest.core.types import Race
from roguequest.domain.defs import SynergyBonus, SynergyLevelDef

# Thresholds are non-contiguous on purpose: the shipped table only defines
# tiers 2, 3, 4, 5 and 7, so six creatures of one race still sit at tier 5.
SYNERGY_THRESHOLDS = (7, 5, 4, 3, 2)


@dataclass(frozen=True, slots=True)
class Synergy:
    race: Race
    count: int
    tier: int
    bonus: SynergyBonus


def synergy_tier_for_count(count: int) -> int | None:
    """Map a same-race head count to its synergy tier (None below two)."""
    for threshold in SYNERGY_THRESHOLDS:
        if count >= threshold:
            return threshold
    return None


def compute_synergies(
    races: Iterable[Race],
    level_lookup: Callable[[int], SynergyLevelDef],
) -> List[Synergy]:
    """Group races and emit one synergy per race that reaches a tier."""
    counts: Dict[Race, int] = Counter(races)
    synergies: List[Synergy] = []
    for race in sorted(counts):
        count = counts[race]
        tier = synergy_tier_for_count(count)
        if tier is None:
            continue
        synergies.append(Synergy(race=race, count=count, tier=tier, bonus=level_lookup(tier).bonus))
    return synergies
