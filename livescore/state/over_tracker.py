"""
Over tracking.

Keeps the run values of the legal deliveries bowled so far in the over
in progress, and who bowled each of them. Illegal deliveries (wides,
no-balls) never reach the tracker.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple, Optional

from livescore.config import BALLS_PER_OVER


@dataclass
class OverState:
    """Legal-delivery run values in the current over."""

    balls: list[int] = field(default_factory=list)
    ball_number: int = 0  # 0-5, number of legal balls bowled in this over
    bowlers: list[str] = field(default_factory=list)  # Bowler of each entry in balls

    def copy(self) -> "OverState":
        return OverState(
            balls=list(self.balls),
            ball_number=self.ball_number,
            bowlers=list(self.bowlers),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "balls": list(self.balls),
            "ballNumber": self.ball_number,
            "bowlers": list(self.bowlers),
        }

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "OverState":
        data = data or {}
        balls = [int(b) for b in data.get("balls", [])]
        return cls(
            balls=balls,
            ball_number=int(data.get("ballNumber", len(balls))),
            bowlers=[str(b) for b in data.get("bowlers", [])],
        )


class OverOutcome(NamedTuple):
    completed: bool
    maiden: bool


class OverTracker:
    """Advances an OverState one legal delivery at a time."""

    def __init__(self, state: Optional[OverState] = None):
        self.state = state if state is not None else OverState()

    @property
    def runs_this_over(self) -> int:
        return sum(self.state.balls)

    @property
    def single_bowler(self) -> bool:
        """True unless the bowler was changed part-way through the over."""
        return len(set(self.state.bowlers)) <= 1

    def record(self, runs: int, bowler: str = "") -> OverOutcome:
        """Record a legal delivery worth ``runs`` to the over.

        When this is the sixth legal ball the over is closed: it is a
        maiden if none of its deliveries conceded a run and one bowler
        bowled all of them. The state is then cleared for the next over.
        """
        self.state.balls.append(runs)
        self.state.bowlers.append(bowler)
        if len(self.state.balls) < BALLS_PER_OVER:
            self.state.ball_number = len(self.state.balls)
            return OverOutcome(completed=False, maiden=False)

        maiden = self.runs_this_over == 0 and self.single_bowler
        self.reset()
        return OverOutcome(completed=True, maiden=maiden)

    def reset(self) -> None:
        self.state.balls.clear()
        self.state.bowlers.clear()
        self.state.ball_number = 0
