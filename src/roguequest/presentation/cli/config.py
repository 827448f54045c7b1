"""CLI configuration helpers for options persistence."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

_DEFAULT_LOG_LEVEL = "WARNING"
_DEFAULT_MAX_ROUNDS = 200
_DEFAULT_BATTLE_LOG = "summary"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "RogueQuest"
        return Path.home() / "RogueQuest"
    return Path.home() / ".config" / "rogue_quest"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_profiles_dir() -> Path:
    """Return the per-user profile directory."""
    return get_user_data_dir() / "profiles"


def default_config() -> Dict[str, Any]:
    return {
        "log_level": _DEFAULT_LOG_LEVEL,
        "max_rounds": _DEFAULT_MAX_ROUNDS,
        "battle_log": _DEFAULT_BATTLE_LOG,
    }


def _normalize(raw: Dict[str, Any]) -> Dict[str, Any]:
    config = default_config()
    log_level = raw.get("log_level")
    if isinstance(log_level, str) and log_level.upper() in _LOG_LEVELS:
        config["log_level"] = log_level.upper()
    max_rounds = raw.get("max_rounds")
    if isinstance(max_rounds, int) and not isinstance(max_rounds, bool) and max_rounds > 0:
        config["max_rounds"] = max_rounds
    if raw.get("battle_log") == "full":
        config["battle_log"] = "full"
    return config


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return default_config()
    except (OSError, ValueError):
        logger.warning("Ignoring unreadable config at %s", config_path)
        return default_config()
    if not isinstance(raw, dict):
        return default_config()
    return _normalize(raw)


def save_config(config: Dict[str, Any], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = _normalize(config)
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
