"""Console-driven auto-battle loop."""
from __future__ import annotations

import logging
import secrets
from typing import Any, Dict, Sequence, Tuple

from roguequest.core.logging_config import configure_logging
from roguequest.core.rng import RNG
from roguequest.data.repositories import (
    CreaturesRepository,
    EnemyBuffsRepository,
    RewardsRepository,
    SkillsRepository,
    SynergiesRepository,
)
from roguequest.domain.state import STAGES_PER_CHAPTER, AccountState, RunState
from roguequest.presentation.cli import config, render
from roguequest.presentation.cli.profile_store import ProfileStore
from roguequest.services import (
    EncounterService,
    RewardOption,
    SaveLoadError,
    SaveService,
    StageSession,
)

logger = logging.getLogger(__name__)

_MAX_RANDOM_SEED = 2**31 - 1


def main() -> None:
    """Start the interactive CLI session."""
    settings = config.load_config()
    configure_logging(settings["log_level"], debug=render.debug_enabled())

    creatures_repo = CreaturesRepository()
    synergies_repo = SynergiesRepository()
    skills_repo = SkillsRepository()
    encounter = EncounterService(
        creatures_repo=creatures_repo,
        synergies_repo=synergies_repo,
        skills_repo=skills_repo,
        rewards_repo=RewardsRepository(skills_repo=skills_repo),
        enemy_buffs_repo=EnemyBuffsRepository(),
    )
    save_service = SaveService(
        creatures_repo=creatures_repo,
        skills_repo=skills_repo,
        synergies_repo=synergies_repo,
    )
    store = ProfileStore()

    print("=== Rogue Quest ===")
    _render_profiles(store)
    user_id = _prompt_user_id()
    account, run, rng = _load_profile(store, save_service, user_id)

    while True:
        label = f"Continue run (chapter {run.chapter}, stage {run.stage})" if run else "Start a new run"
        render.render_menu("Main Menu", [label, "View account", "Delete profile", "Quit"])
        choice = input("Select an option: ").strip()
        if choice == "1":
            if run is None:
                rng = RNG(_prompt_seed())
                run = encounter.start_run(account, rng)
            run = _play_run(encounter, save_service, store, account, run, rng, settings)
            if run is None:
                rng = None
        elif choice == "2":
            _render_account(account)
        elif choice == "3":
            if _confirm(f"Delete profile '{user_id}'? (y/n): "):
                store.delete(user_id)
                print(f"Profile '{user_id}' deleted.")
                account, run, rng = AccountState(user_id=user_id), None, None
        elif choice == "4":
            break
        else:
            print("Invalid selection. Please enter 1, 2, 3 or 4.")
    print("Goodbye!")


def _render_profiles(store: ProfileStore) -> None:
    profiles = store.list_profiles()
    if not profiles:
        return
    render.render_heading("Profiles")
    lines = []
    for profile in profiles:
        if profile.is_corrupt:
            lines.append(f"{profile.user_id} (corrupt)")
            continue
        metadata = profile.metadata or {}
        if metadata.get("chapter") is not None:
            lines.append(f"{profile.user_id} (run at {metadata['chapter']}-{metadata.get('stage')})")
        else:
            lines.append(profile.user_id)
    render.render_bullet_lines(lines)


def _confirm(prompt: str) -> bool:
    return input(prompt).strip().lower() in ("y", "yes")


def _prompt_user_id() -> str:
    while True:
        raw_value = input("Enter user id (default player): ").strip() or "player"
        if raw_value.replace("_", "").replace("-", "").isalnum() and len(raw_value) <= 32:
            return raw_value
        print("User id may only contain letters, digits, '_' or '-'.")


def _prompt_seed() -> int:
    while True:
        raw_value = input("Enter seed (blank for random): ").strip()
        if not raw_value:
            return secrets.randbelow(_MAX_RANDOM_SEED)
        try:
            return int(raw_value)
        except ValueError:
            print("Invalid seed. Please enter a valid integer.")


def _prompt_index(count: int, *, allow_back: bool = False) -> int | None:
    low = 0 if allow_back else 1
    while True:
        raw_value = input("Choose: ").strip()
        if raw_value.isdigit() and low <= int(raw_value) <= count:
            value = int(raw_value)
            return None if value == 0 else value - 1
        print(f"Please enter a number between {low} and {count}.")


def _load_profile(
    store: ProfileStore, save_service: SaveService, user_id: str
) -> Tuple[AccountState, RunState | None, RNG | None]:
    if not store.exists(user_id):
        print(f"Created new profile '{user_id}'.")
        return AccountState(user_id=user_id), None, None
    try:
        account, run, rng = save_service.deserialize(store.read(user_id))
    except (SaveLoadError, ValueError) as exc:
        logger.error("Profile %s could not be loaded: %s", user_id, exc)
        print(f"Profile could not be loaded ({exc}). Starting fresh.")
        return AccountState(user_id=user_id), None, None
    if run is not None and run.status != "ongoing":
        run, rng = None, None
    print(f"Welcome back, {account.name} (level {account.level}, {account.gold} gold).")
    return account, run, rng


def _save(
    store: ProfileStore,
    save_service: SaveService,
    account: AccountState,
    run: RunState | None,
    rng: RNG | None,
) -> None:
    try:
        store.write(account.user_id, save_service.serialize(account, run, rng))
    except OSError as exc:
        logger.error("Saving profile %s failed: %s", account.user_id, exc)
        print("Warning: progress could not be saved.")


def _play_run(
    encounter: EncounterService,
    save_service: SaveService,
    store: ProfileStore,
    account: AccountState,
    run: RunState,
    rng: RNG,
    settings: Dict[str, Any],
) -> RunState | None:
    """Play stages until the run ends (None) or the player returns to the menu."""
    mode = settings["battle_log"]
    while run.status == "ongoing":
        render.render_heading(f"Chapter {run.chapter} - Stage {run.stage}/{STAGES_PER_CHAPTER}")
        render.render_synergies(encounter.roster_for(run).active_synergies())
        session = encounter.begin_stage(run, account, rng)
        render.render_events(session.opening_events, mode=mode)
        _run_battle(encounter, session, rng, settings)
        if mode == "full":
            render.render_battle_view(session.controller.get_battle_view())

        result = encounter.finish_stage(session, rng)
        print(f"Stage rewards: {result.gold} gold, {result.exp} exp.")
        if result.chapter_complete:
            print(f"Chapter {run.chapter} complete! {run.gold} gold banked.")
        elif result.outcome == "defeat":
            print(f"Defeated at stage {run.stage}. {run.gold} gold banked.")
        if result.run_over:
            _save(store, save_service, account, None, None)
            return None

        if not _choose_stage_reward(encounter, run, result.options):
            encounter.abandon_run(run, account)
            _save(store, save_service, account, run, rng)
            print("Run saved. You can continue it from the main menu.")
            return run
        _save(store, save_service, account, run, rng)
    return None


def _run_battle(encounter: EncounterService, session: StageSession, rng: RNG, settings: Dict[str, Any]) -> None:
    controller = session.controller
    while not controller.is_over or session.pending_level_ups:
        if session.pending_level_ups:
            options = encounter.level_up_options(session, rng)
            render.render_menu("Level Up Reward", [option.label for option in options])
            index = _prompt_index(len(options))
            print(encounter.resolve_level_up(session, options[index or 0]))
            continue
        render.render_events(controller.run_until_blocked(settings["max_rounds"]), mode=settings["battle_log"])


def _choose_stage_reward(encounter: EncounterService, run: RunState, options: Sequence[RewardOption]) -> bool:
    """Prompt until a reward is accepted; returns False when the player leaves."""
    while True:
        render.render_menu("Choose a Reward (0 to return to menu)", [option.label for option in options])
        index = _prompt_index(len(options), allow_back=True)
        if index is None:
            return False
        outcome = encounter.choose_stage_reward(run, options[index])
        print(outcome.message)
        if outcome.accepted:
            return True


def _render_account(account: AccountState) -> None:
    stats = account.statistics
    render.render_heading("Account")
    render.render_bullet_lines(
        [
            f"Name: {account.name}",
            f"Level: {account.level}",
            f"Gold: {account.gold}",
            f"Runs: {stats.total_runs}",
            f"Best chapter: {stats.best_chapter}",
            f"Total gold earned: {stats.total_gold}",
        ]
    )
