"""Shared type aliases for the core and domain layers."""
from typing import Literal

Race = Literal["castle", "necropolis", "inferno", "rampart", "stronghold"]
Position = Literal["front", "back"]
Side = Literal["allies", "enemies"]
BattleStatus = Literal["not_started", "running", "victory", "defeat"]
RunStatus = Literal["ongoing", "completed", "failed"]
RewardPool = Literal["stage", "level_up"]

RACES: tuple[Race, ...] = ("castle", "necropolis", "inferno", "rampart", "stronghold")
POSITIONS: tuple[Position, ...] = ("front", "back")

__all__ = [
    "BattleStatus",
    "POSITIONS",
    "Position",
    "RACES",
    "Race",
    "RewardPool",
    "RunStatus",
    "Side",
]
