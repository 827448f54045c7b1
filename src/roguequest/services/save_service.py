"""Serialization helpers for the account and run records."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Tuple

from roguequest.core.rng import RNG, RNGStatePayload
from roguequest.core.types import RunStatus
from roguequest.data.repositories import CreaturesRepository, SkillsRepository, SynergiesRepository
from roguequest.domain.defs import DamageMultiplierEffect
from roguequest.domain.roster import MAX_STAR, MAX_TEAM_CAP, MIN_STAR, Team
from roguequest.domain.skills import Skill
from roguequest.domain.state import AccountState, AccountStatistics, RunModifiers, RunState
from roguequest.services.errors import SaveLoadError
from roguequest.services.roster_service import RosterService

SavePayload = Dict[str, Any]
_VALID_RUN_STATUSES: tuple[RunStatus, ...] = ("ongoing", "completed", "failed")
_MODIFIER_FLOATS = (
    "attack_multiplier",
    "hp_multiplier",
    "speed_multiplier",
    "crit_rate_bonus",
    "lifesteal",
    "double_attack_chance",
)


class SaveService:
    """Converts account/run state to/from a validated, versioned payload."""

    SAVE_VERSION = 1

    def __init__(
        self,
        *,
        creatures_repo: CreaturesRepository,
        skills_repo: SkillsRepository,
        synergies_repo: SynergiesRepository,
    ) -> None:
        self._creatures_repo = creatures_repo
        self._skills_repo = skills_repo
        self._synergies_repo = synergies_repo

    def _roster(self, team: Team) -> RosterService:
        return RosterService(team, self._creatures_repo, self._synergies_repo)

    # -----------------------
    # Profile payload
    # -----------------------
    def serialize(self, account: AccountState, run: RunState | None = None, rng: RNG | None = None) -> SavePayload:
        """Return a JSON-serializable payload for disk persistence."""
        return {
            "save_version": self.SAVE_VERSION,
            "metadata": {
                "user_id": account.user_id,
                "chapter": run.chapter if run else None,
                "stage": run.stage if run else None,
                "saved_at": datetime.now(timezone.utc).isoformat(),
            },
            "account": self.serialize_account(account),
            "run": self.serialize_run(run) if run is not None else None,
            "rng": rng.export_state() if rng is not None and run is not None else None,
        }

    def deserialize(self, payload: Mapping[str, Any]) -> Tuple[AccountState, RunState | None, RNG | None]:
        """Rehydrate the account, the ongoing run (if any) and its RNG."""
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")
        if payload.get("save_version") != self.SAVE_VERSION:
            raise SaveLoadError("Save format changed. Please start a new profile.")
        account = self.deserialize_account(payload.get("account"))
        run_payload = payload.get("run")
        if run_payload is None:
            return account, None, None
        run = self.deserialize_run(run_payload)
        rng = RNG(run.seed)
        rng_payload = payload.get("rng")
        if rng_payload is not None:
            if not isinstance(rng_payload, Mapping):
                raise SaveLoadError("rng must be an object.")
            try:
                rng.restore_state(self._coerce_rng_payload(rng_payload))
            except ValueError as exc:
                raise SaveLoadError(f"Invalid RNG state: {exc}") from exc
        return account, run, rng

    # -----------------------
    # Account
    # -----------------------
    def serialize_account(self, account: AccountState) -> SavePayload:
        stats = account.statistics
        return {
            "user_id": account.user_id,
            "name": account.name,
            "level": account.level,
            "gold": account.gold,
            "statistics": {
                "total_runs": stats.total_runs,
                "best_chapter": stats.best_chapter,
                "total_gold": stats.total_gold,
            },
        }

    def deserialize_account(self, payload: Any) -> AccountState:
        data = self._require_mapping(payload, "account")
        stats = self._require_mapping(data.get("statistics"), "account.statistics")
        level = self._require_positive_int(data.get("level"), "account.level")
        return AccountState(
            user_id=self._require_str(data.get("user_id"), "account.user_id"),
            name=self._require_str(data.get("name"), "account.name"),
            level=level,
            gold=self._require_non_negative_int(data.get("gold"), "account.gold"),
            statistics=AccountStatistics(
                total_runs=self._require_non_negative_int(stats.get("total_runs"), "account.statistics.total_runs"),
                best_chapter=self._require_non_negative_int(
                    stats.get("best_chapter"), "account.statistics.best_chapter"
                ),
                total_gold=self._require_non_negative_int(stats.get("total_gold"), "account.statistics.total_gold"),
            ),
        )

    # -----------------------
    # Run
    # -----------------------
    def serialize_run(self, run: RunState) -> SavePayload:
        skills_payload: List[Dict[str, Any]] = []
        for skill in run.skills:
            entry: Dict[str, Any] = {"id": skill.id, "current_cooldown": skill.current_cooldown}
            if skill.damage_multiplier is not None:
                entry["multiplier"] = skill.damage_multiplier
            skills_payload.append(entry)
        entries, cap = self._roster(run.team).snapshot()
        modifiers = run.modifiers
        modifiers_payload: Dict[str, Any] = {name: getattr(modifiers, name) for name in _MODIFIER_FLOATS}
        modifiers_payload["rage"] = modifiers.rage
        return {
            "run_id": run.run_id,
            "seed": run.seed,
            "status": run.status,
            "chapter": run.chapter,
            "stage": run.stage,
            "gold": run.gold,
            "exp": run.exp,
            "hero_level": run.hero_level,
            "current_hp": run.current_hp,
            "max_hp": run.max_hp,
            "team": {
                "cap": cap,
                "members": [{"creature_id": creature_id, "star": star} for creature_id, star in entries],
            },
            "skills": skills_payload,
            "modifiers": modifiers_payload,
        }

    def deserialize_run(self, payload: Any) -> RunState:
        data = self._require_mapping(payload, "run")
        status = data.get("status")
        if status not in _VALID_RUN_STATUSES:
            raise SaveLoadError(f"Invalid run status: {status}")
        chapter = self._require_non_negative_int(data.get("chapter"), "run.chapter")
        stage = self._require_non_negative_int(data.get("stage"), "run.stage")
        if chapter < 1 or stage < 1:
            raise SaveLoadError("run.chapter and run.stage must be at least 1.")
        current_hp = self._require_non_negative_int(data.get("current_hp"), "run.current_hp")
        max_hp = self._require_non_negative_int(data.get("max_hp"), "run.max_hp")
        if current_hp > max_hp:
            raise SaveLoadError("run.current_hp cannot exceed run.max_hp.")
        return RunState(
            run_id=self._require_str(data.get("run_id"), "run.run_id"),
            seed=self._require_int(data.get("seed"), "run.seed"),
            status=status,
            chapter=chapter,
            stage=stage,
            gold=self._require_non_negative_int(data.get("gold"), "run.gold"),
            exp=self._require_non_negative_int(data.get("exp"), "run.exp"),
            hero_level=self._require_positive_int(data.get("hero_level"), "run.hero_level"),
            current_hp=current_hp,
            max_hp=max_hp,
            team=self._coerce_team(data.get("team")),
            skills=self._coerce_skills(data.get("skills")),
            modifiers=self._coerce_modifiers(data.get("modifiers")),
        )

    def _coerce_team(self, value: Any) -> Team:
        data = self._require_mapping(value, "run.team")
        cap = self._require_int(data.get("cap"), "run.team.cap")
        if not 1 <= cap <= MAX_TEAM_CAP:
            raise SaveLoadError(f"run.team.cap must be between 1 and {MAX_TEAM_CAP}.")
        members_raw = data.get("members")
        if not isinstance(members_raw, list):
            raise SaveLoadError("run.team.members must be a list.")
        if len(members_raw) > cap:
            raise SaveLoadError("run.team.members exceeds the team cap.")
        entries: List[Tuple[str, int]] = []
        seen: set[str] = set()
        for index, entry in enumerate(members_raw):
            context = f"run.team.members[{index}]"
            member = self._require_mapping(entry, context)
            creature_id = self._require_str(member.get("creature_id"), f"{context}.creature_id")
            star = self._require_int(member.get("star"), f"{context}.star")
            if creature_id in seen:
                raise SaveLoadError(f"{context} duplicates creature '{creature_id}'.")
            if not MIN_STAR <= star <= MAX_STAR:
                raise SaveLoadError(f"{context}.star must be between {MIN_STAR} and {MAX_STAR}.")
            seen.add(creature_id)
            entries.append((creature_id, star))
        team = Team()
        try:
            self._roster(team).restore(entries, cap)
        except KeyError as exc:
            raise SaveLoadError(f"Unknown creature id in save: {exc}") from exc
        return team

    def _coerce_skills(self, value: Any) -> List[Skill]:
        if not isinstance(value, list):
            raise SaveLoadError("run.skills must be a list.")
        skills: List[Skill] = []
        for index, entry in enumerate(value):
            context = f"run.skills[{index}]"
            data = self._require_mapping(entry, context)
            skill_id = self._require_str(data.get("id"), f"{context}.id")
            try:
                skill = Skill.from_def(self._skills_repo.get(skill_id))
            except KeyError as exc:
                raise SaveLoadError(f"Unknown skill id in save: {skill_id}") from exc
            cooldown = self._require_non_negative_int(data.get("current_cooldown"), f"{context}.current_cooldown")
            skill.current_cooldown = min(cooldown, skill.cooldown)
            multiplier = data.get("multiplier")
            if multiplier is not None and skill.damage_multiplier is not None:
                saved = self._require_number(multiplier, f"{context}.multiplier")
                skill.effect = DamageMultiplierEffect(multiplier=saved)
            skills.append(skill)
        return skills

    def _coerce_modifiers(self, value: Any) -> RunModifiers:
        data = self._require_mapping(value, "run.modifiers")
        modifiers = RunModifiers()
        for name in _MODIFIER_FLOATS:
            setattr(modifiers, name, self._require_number(data.get(name), f"run.modifiers.{name}"))
        rage = data.get("rage")
        if not isinstance(rage, bool):
            raise SaveLoadError("run.modifiers.rage must be a boolean.")
        modifiers.rage = rage
        return modifiers

    def _coerce_rng_payload(self, payload: Mapping[str, Any]) -> RNGStatePayload:
        version = self._require_int(payload.get("version"), "rng.version")
        internal = payload.get("internal")
        if not isinstance(internal, list):
            raise SaveLoadError("Invalid RNG state payload.")
        return {"version": version, "internal": internal, "gauss_next": payload.get("gauss_next")}

    # -----------------------
    # Primitive validation
    # -----------------------
    @staticmethod
    def _require_mapping(value: Any, context: str) -> Mapping[str, Any]:
        if not isinstance(value, Mapping):
            raise SaveLoadError(f"{context} must be an object.")
        return value

    @staticmethod
    def _require_str(value: Any, context: str) -> str:
        if not isinstance(value, str):
            raise SaveLoadError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: Any, context: str) -> int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise SaveLoadError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_number(value: Any, context: str) -> float:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise SaveLoadError(f"{context} must be a number.")
        return float(value)

    def _require_non_negative_int(self, value: Any, context: str) -> int:
        value_int = self._require_int(value, context)
        if value_int < 0:
            raise SaveLoadError(f"{context} must be a non-negative integer.")
        return value_int

    def _require_positive_int(self, value: Any, context: str) -> int:
        value_int = self._require_int(value, context)
        if value_int < 1:
            raise SaveLoadError(f"{context} must be at least 1.")
        return value_int
