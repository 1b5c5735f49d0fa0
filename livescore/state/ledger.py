"""
Player ledger.

Running per-player aggregates for the innings in progress. Pure data
and mutation helpers: the scoring rules that decide *what* to credit
live in the ball processor.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional


@dataclass
class Batter:
    """Batting figures for a single player."""

    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0

    @property
    def is_blank(self) -> bool:
        """True while the batter has not faced or scored anything."""
        return self.runs == 0 and self.balls == 0 and self.fours == 0 and self.sixes == 0

    def credit(self, runs: int, faced: bool = True, boundaries: bool = True) -> None:
        self.runs += runs
        if faced:
            self.balls += 1
        if boundaries:
            if runs == 4:
                self.fours += 1
            elif runs == 6:
                self.sixes += 1

    def copy(self) -> "Batter":
        return replace(self)

    def to_dict(self) -> dict[str, int]:
        return {"runs": self.runs, "balls": self.balls, "fours": self.fours, "sixes": self.sixes}

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "Batter":
        data = data or {}
        return cls(
            runs=int(data.get("runs", 0)),
            balls=int(data.get("balls", 0)),
            fours=int(data.get("fours", 0)),
            sixes=int(data.get("sixes", 0)),
        )


@dataclass
class Bowler:
    """Bowling figures for a single player.

    ``fours`` and ``sixes`` count boundaries conceded off legal
    deliveries only; extras never register as a bowler boundary.
    """

    runs: int = 0
    balls: int = 0
    wickets: int = 0
    maidens: int = 0
    fours: int = 0
    sixes: int = 0

    @property
    def overs_str(self) -> str:
        """Overs bowled in the usual ``O.B`` notation, e.g. '3.4'."""
        return f"{self.balls // 6}.{self.balls % 6}"

    def copy(self) -> "Bowler":
        return replace(self)

    def to_dict(self) -> dict[str, int]:
        return {
            "runs": self.runs,
            "balls": self.balls,
            "wickets": self.wickets,
            "maidens": self.maidens,
            "fours": self.fours,
            "sixes": self.sixes,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "Bowler":
        data = data or {}
        return cls(
            runs=int(data.get("runs", 0)),
            balls=int(data.get("balls", 0)),
            wickets=int(data.get("wickets", 0)),
            maidens=int(data.get("maidens", 0)),
            fours=int(data.get("fours", 0)),
            sixes=int(data.get("sixes", 0)),
        )


class PlayerLedger:
    """Batter and bowler aggregates keyed by player name.

    Player identity is the name string. Entries are created lazily with
    zeroed figures the first time a name is used.
    """

    def __init__(
        self,
        batters: Optional[dict[str, Batter]] = None,
        bowlers: Optional[dict[str, Bowler]] = None,
    ):
        self.batters: dict[str, Batter] = batters if batters is not None else {}
        self.bowlers: dict[str, Bowler] = bowlers if bowlers is not None else {}

    def batter(self, name: str) -> Batter:
        if name not in self.batters:
            self.batters[name] = Batter()
        return self.batters[name]

    def bowler(self, name: str) -> Bowler:
        if name not in self.bowlers:
            self.bowlers[name] = Bowler()
        return self.bowlers[name]

    def has_batter(self, name: str) -> bool:
        return name in self.batters

    def put_batter(self, name: str, stats: Batter) -> None:
        self.batters[name] = stats.copy()

    def put_bowler(self, name: str, stats: Bowler) -> None:
        self.bowlers[name] = stats.copy()

    def remove_batter(self, name: str) -> bool:
        """Drop a batter entry. Returns True if an entry was removed."""
        return self.batters.pop(name, None) is not None

    def reseed(self, batters: list[str], bowlers: list[str]) -> None:
        """Replace every entry with zeroed figures for the given names."""
        self.batters.clear()
        self.bowlers.clear()
        for name in batters:
            self.batters[name] = Batter()
        for name in bowlers:
            self.bowlers[name] = Bowler()

    def clear(self) -> None:
        self.batters.clear()
        self.bowlers.clear()

    def clone(self) -> "PlayerLedger":
        return PlayerLedger(
            batters={k: v.copy() for k, v in self.batters.items()},
            bowlers={k: v.copy() for k, v in self.bowlers.items()},
        )
