"""
Match persistence.

The engine itself never touches disk. The lifecycle hands the serialized
match to a MatchStorage after each accepted action and asks it to clear
the slot on reset. One slot holds the one active match.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from livescore.config import DEFAULT_STORAGE_KEY

logger = logging.getLogger(__name__)


class MatchStorage(ABC):
    """Single-slot store for the serialized MatchState."""

    key: str = DEFAULT_STORAGE_KEY

    @abstractmethod
    def save(self, data: dict[str, Any]) -> None:
        ...

    @abstractmethod
    def load(self) -> Optional[dict[str, Any]]:
        """Return the saved match, or None if nothing usable is stored."""

    @abstractmethod
    def clear(self) -> None:
        ...


class InMemoryStorage(MatchStorage):
    """Keeps the saved match in process. Used by tests and the demo."""

    def __init__(self, key: str = DEFAULT_STORAGE_KEY):
        self.key = key
        self._slots: dict[str, str] = {}

    def save(self, data: dict[str, Any]) -> None:
        self._slots[self.key] = json.dumps(data)

    def load(self) -> Optional[dict[str, Any]]:
        raw = self._slots.get(self.key)
        return json.loads(raw) if raw is not None else None

    def clear(self) -> None:
        self._slots.pop(self.key, None)


class JsonFileStorage(MatchStorage):
    """Saves the match as ``<data_dir>/<key>.json``."""

    def __init__(self, data_dir: Path, key: str = DEFAULT_STORAGE_KEY):
        self.key = key
        self.path = Path(data_dir) / f"{key}.json"

    def save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"state": data, "saved_at": datetime.now(timezone.utc).isoformat()}
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(payload, indent=2, default=str))
        tmp.replace(self.path)

    def load(self) -> Optional[dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            payload = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read saved match from %s: %s", self.path, e)
            return None
        state = payload.get("state") if isinstance(payload, dict) else None
        if not isinstance(state, dict):
            logger.warning("Saved match at %s has no state record", self.path)
            return None
        return state

    def clear(self) -> None:
        try:
            self.path.unlink()
            logger.info("Cleared saved match %s", self.path)
        except FileNotFoundError:
            pass
