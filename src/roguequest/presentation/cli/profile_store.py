"""File-system helpers for per-user profile storage."""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from roguequest.presentation.cli import config

_USER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,32}$")


@dataclass(slots=True)
class ProfileMetadata:
    """Describes a stored profile for menu display."""

    user_id: str
    metadata: Dict[str, Any] | None = None
    is_corrupt: bool = False


class ProfileStore:
    """Persists one JSON payload per user id."""

    def __init__(self, base_dir: Path | str | None = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else config.get_profiles_dir()

    def list_profiles(self) -> List[ProfileMetadata]:
        """Return metadata for every stored profile, sorted by user id."""
        if not self._base_dir.exists():
            return []
        profiles: List[ProfileMetadata] = []
        for path in sorted(self._base_dir.glob("*.json")):
            try:
                payload = json.loads(path.read_text(encoding="utf-8"))
                raw_metadata = payload.get("metadata") if isinstance(payload, dict) else None
                metadata = raw_metadata if isinstance(raw_metadata, dict) else None
                profiles.append(ProfileMetadata(user_id=path.stem, metadata=metadata))
            except (OSError, ValueError):
                profiles.append(ProfileMetadata(user_id=path.stem, is_corrupt=True))
        return profiles

    def exists(self, user_id: str) -> bool:
        return self._profile_path(user_id).exists()

    def read(self, user_id: str) -> Dict[str, Any]:
        """Load and parse the payload stored for the user."""
        text = self._profile_path(user_id).read_text(encoding="utf-8")
        return json.loads(text)

    def write(self, user_id: str, payload: Dict[str, Any]) -> None:
        """Persist the payload for the user."""
        path = self._profile_path(user_id)
        self._base_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")

    def delete(self, user_id: str) -> None:
        path = self._profile_path(user_id)
        try:
            path.unlink()
        except FileNotFoundError:
            return

    def _profile_path(self, user_id: str) -> Path:
        if not _USER_ID_PATTERN.match(user_id):
            raise ValueError("User id may only contain letters, digits, '_' or '-' (max 32).")
        return self._base_dir / f"{user_id}.json"
