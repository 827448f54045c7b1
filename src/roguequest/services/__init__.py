"""Service layer exports."""

from .errors import FactoryError, RunStateError, SaveLoadError
from .battle_service import BattleEvent, BattleService, BattleView
from .controllers import BattleController
from .roster_service import AcquireResult, CreatureChoice, RosterService
from .reward_service import CreatureOption, RewardOption, RewardService, StatRewardOption
from .encounter_service import ChoiceOutcome, EncounterService, StageResult, StageSession, stage_kill_reward
from .save_service import SaveService

__all__ = [
    "AcquireResult",
    "BattleController",
    "BattleEvent",
    "BattleService",
    "BattleView",
    "ChoiceOutcome",
    "CreatureChoice",
    "CreatureOption",
    "EncounterService",
    "FactoryError",
    "RewardOption",
    "RewardService",
    "RosterService",
    "RunStateError",
    "SaveLoadError",
    "SaveService",
    "StageResult",
    "StageSession",
    "StatRewardOption",
    "stage_kill_reward",
]
