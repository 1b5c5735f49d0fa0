"""
Configuration management for the Live Scoring Engine.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Single persistence slot for the active match
DEFAULT_STORAGE_KEY = "cricket_match_v1"

BALLS_PER_OVER = 6
MAX_WICKETS = 10
VALID_RUN_VALUES = frozenset({0, 1, 2, 3, 4, 6})


@dataclass(frozen=True)
class ScorerConfig:
    """Top-level scorer configuration."""

    data_dir: Path = field(default_factory=lambda: Path("data"))
    storage_key: str = DEFAULT_STORAGE_KEY
    autosave: bool = True  # Persist after every accepted action
    log_level: str = "INFO"

    @property
    def storage_path(self) -> Path:
        return self.data_dir / f"{self.storage_key}.json"

    @classmethod
    def from_env(cls) -> "ScorerConfig":
        """Load configuration from environment variables."""
        return cls(
            data_dir=Path(os.getenv("LIVESCORE_DATA_DIR", "data")),
            storage_key=os.getenv("LIVESCORE_STORAGE_KEY", DEFAULT_STORAGE_KEY),
            autosave=os.getenv("LIVESCORE_AUTOSAVE", "true").lower() != "false",
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
