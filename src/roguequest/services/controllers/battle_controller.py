"""UI-agnostic battle controller that separates state progression from rendering."""
from __future__ import annotations

import logging
from typing import Callable, List

from roguequest.core.rng import RNG
from roguequest.domain.battle_models import BattleState
from roguequest.services.battle_service import (
    BattleEvent,
    BattleService,
    BattleView,
    EnemyDefeatedHook,
)

logger = logging.getLogger(__name__)


class BattleController:
    """
    UI-agnostic controller for one running battle.

    This controller wraps BattleService and exposes round stepping plus a
    pause gate. It does NOT handle rendering, formatting, or input prompts.

    Responsibilities:
    - Step the battle one round at a time and return the produced events
    - Hold the battle while a pause is requested (e.g. a level-up choice)
    - Report the terminal outcome

    A round is never interrupted: pausing only takes effect before the next
    round starts.
    """

    def __init__(
        self,
        battle_service: BattleService,
        state: BattleState,
        rng: RNG,
        *,
        on_enemy_defeated: EnemyDefeatedHook | None = None,
        should_pause: Callable[[], bool] | None = None,
    ) -> None:
        self._service = battle_service
        self._state = state
        self._rng = rng
        self._on_enemy_defeated = on_enemy_defeated
        self._should_pause = should_pause
        self._paused = False

    @property
    def state(self) -> BattleState:
        return self._state

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_over(self) -> bool:
        return self._state.is_over

    @property
    def outcome(self) -> str | None:
        """Return 'victory' or 'defeat' once the battle has ended."""
        return self._state.status if self._state.is_over else None

    def get_battle_view(self) -> BattleView:
        return self._service.get_battle_view(self._state)

    def pause(self) -> None:
        if not self._paused:
            logger.debug("Battle %s paused at round %d", self._state.battle_id, self._state.round_number)
        self._paused = True

    def resume(self) -> None:
        if self._paused:
            logger.debug("Battle %s resumed", self._state.battle_id)
        self._paused = False

    def step(self) -> List[BattleEvent]:
        """Resolve one round unless paused or finished."""
        if self._paused or self._state.is_over:
            return []
        events = self._service.run_round(self._state, self._rng, on_enemy_defeated=self._on_enemy_defeated)
        if not self._state.is_over and self._should_pause is not None and self._should_pause():
            self.pause()
        return events

    def run_until_blocked(self, max_rounds: int) -> List[BattleEvent]:
        """Step until the battle ends, pauses, or reaches the round cap."""
        events: List[BattleEvent] = []
        while not self._paused and not self._state.is_over:
            if self._state.round_number >= max_rounds:
                resolved = self._service.halt(self._state)
                self._state.event_log.append(resolved)
                events.append(resolved)
                break
            events.extend(self.step())
        return events
