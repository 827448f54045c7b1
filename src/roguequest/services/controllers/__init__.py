"""Controllers driving service state without rendering."""

from .battle_controller import BattleController

__all__ = ["BattleController"]
