"""Innings score and the players currently in the middle."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

from livescore.config import BALLS_PER_OVER


@dataclass
class Score:
    """Score for the innings in progress. ``balls`` counts legal deliveries."""

    runs: int = 0
    wickets: int = 0
    balls: int = 0

    @property
    def overs_str(self) -> str:
        return f"{self.balls // BALLS_PER_OVER}.{self.balls % BALLS_PER_OVER}"

    def copy(self) -> "Score":
        return replace(self)

    def to_dict(self) -> dict[str, int]:
        return {"runs": self.runs, "wickets": self.wickets, "balls": self.balls}

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "Score":
        data = data or {}
        return cls(
            runs=int(data.get("runs", 0)),
            wickets=int(data.get("wickets", 0)),
            balls=int(data.get("balls", 0)),
        )


@dataclass
class CurrentPlayers:
    striker: str = ""
    non_striker: str = ""
    bowler: str = ""

    @property
    def has_batters(self) -> bool:
        return bool(self.striker and self.non_striker)

    def swap_strike(self) -> None:
        self.striker, self.non_striker = self.non_striker, self.striker

    def copy(self) -> "CurrentPlayers":
        return replace(self)

    def to_dict(self) -> dict[str, str]:
        return {"striker": self.striker, "nonStriker": self.non_striker, "bowler": self.bowler}

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "CurrentPlayers":
        data = data or {}
        return cls(
            striker=str(data.get("striker", "")),
            non_striker=str(data.get("nonStriker", "")),
            bowler=str(data.get("bowler", "")),
        )
