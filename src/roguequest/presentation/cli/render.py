"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
from typing import Iterable, List, Sequence

from roguequest.domain.battle_models import BattleUnitView
from roguequest.domain.synergy import Synergy
from roguequest.services.battle_service import (
    AttackResolvedEvent,
    BattleEvent,
    BattleResolvedEvent,
    BattleStartedEvent,
    BattleView,
    CombatantDefeatedEvent,
    HealEvent,
    LevelUpEvent,
    RewardGrantedEvent,
    RoundEndedEvent,
    SkillTriggeredEvent,
)

# Events shown when the battle log is in "summary" mode.
_SUMMARY_EVENTS = (
    BattleStartedEvent,
    CombatantDefeatedEvent,
    LevelUpEvent,
    BattleResolvedEvent,
)


def debug_enabled() -> bool:
    """Return True only when ROGUEQUEST_DEBUG is explicitly set to '1'."""
    return os.getenv("ROGUEQUEST_DEBUG") == "1"


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_menu(title: str, options: Sequence[str]) -> None:
    """Display a menu section with numbered options."""
    render_heading(title)
    for idx, label in enumerate(options, start=1):
        print(f"{idx}. {label}")


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        print(f"- {line}")


def format_event(event: BattleEvent) -> str | None:
    """Return a one-line description of a battle event, or None to skip it."""
    if isinstance(event, BattleStartedEvent):
        return f"{', '.join(event.ally_names)} vs {', '.join(event.enemy_names)}"
    if isinstance(event, AttackResolvedEvent):
        verb = "strikes again at" if event.is_follow_up else "hits"
        suffix = " (critical!)" if event.was_critical else ""
        if event.skill_id:
            suffix += f" [{event.skill_id}]"
        return f"{event.attacker_name} {verb} {event.target_name} for {event.damage}{suffix} ({event.target_hp} hp left)"
    if isinstance(event, SkillTriggeredEvent):
        return f"{event.combatant_name} uses {event.skill_name}"
    if isinstance(event, HealEvent):
        return f"{event.combatant_name} recovers {event.amount} hp ({event.hp})"
    if isinstance(event, CombatantDefeatedEvent):
        return f"{event.combatant_name} is defeated"
    if isinstance(event, RewardGrantedEvent):
        return f"+{event.gold} gold, +{event.exp} exp"
    if isinstance(event, LevelUpEvent):
        return f"Level up! Hero is now level {event.level}"
    if isinstance(event, RoundEndedEvent):
        return None
    if isinstance(event, BattleResolvedEvent):
        note = " (halted)" if event.halted else ""
        return f"{event.outcome.capitalize()} after {event.rounds} rounds{note}"
    return None


def render_events(events: Sequence[BattleEvent], *, mode: str = "summary") -> None:
    for event in events:
        if mode != "full" and not isinstance(event, _SUMMARY_EVENTS):
            continue
        line = format_event(event)
        if line:
            print(f"- {line}")


def _unit_line(unit: BattleUnitView) -> str:
    status = f"{unit.current_hp}/{unit.max_hp}" if unit.is_alive else "down"
    return f"[{unit.index}] {unit.name:<22} HP {status:<10} ATK {unit.attack:<4} SPD {unit.speed}"


def render_battle_view(view: BattleView) -> None:
    render_heading(f"Round {view.round_number}")
    lines: List[str] = ["Allies:"]
    lines.extend(f"  {_unit_line(unit)}" for unit in view.allies)
    lines.append("Enemies:")
    lines.extend(f"  {_unit_line(unit)}" for unit in view.enemies)
    print("\n".join(lines))


def render_synergies(synergies: Sequence[Synergy]) -> None:
    if not synergies:
        print("No active synergies.")
        return
    render_bullet_lines(
        f"{synergy.race} x{synergy.count}: tier {synergy.tier} "
        f"(atk +{synergy.bonus.attack:.0%}, def +{synergy.bonus.defense:.0%}, hp +{synergy.bonus.hp:.0%})"
        for synergy in synergies
    )
