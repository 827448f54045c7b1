"""Pure damage rules used by the battle simulator."""
from __future__ import annotations

import math

DEFENSE_FACTOR = 0.5
MIN_DAMAGE = 1
RAGE_HP_THRESHOLD = 0.3
RAGE_MULTIPLIER = 1.5


def calculate_damage(attack: float, defense: float, *, multiplier: float = 1.0) -> int:
    """Return max(1, floor((attack - defense * 0.5) * multiplier))."""
    raw = (attack - defense * DEFENSE_FACTOR) * multiplier
    return max(MIN_DAMAGE, math.floor(raw))


def apply_critical(damage: int, crit_damage: float) -> int:
    return max(MIN_DAMAGE, math.floor(damage * crit_damage))


def is_enraged(hp: int, max_hp: int) -> bool:
    return hp < max_hp * RAGE_HP_THRESHOLD
