"""
Match State.

The single shared state of the match being scored: teams, innings,
score, the over in progress, the players in the middle, the player
ledger and the innings history. Also the frozen per-innings records
kept for the scorecard once an innings ends.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from livescore.config import BALLS_PER_OVER, MAX_WICKETS
from livescore.data.ball_event import BallEvent, MatchStatus
from livescore.state.ledger import Batter, Bowler, PlayerLedger
from livescore.state.over_tracker import OverState
from livescore.state.score import CurrentPlayers, Score

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InningsRecord:
    """Immutable copy of a finished innings, kept for scorecard display.

    The figures are held in serialized form. Every read builds fresh
    objects, so nothing handed out can change the stored innings.
    """

    batting_team: str
    bowling_team: str
    innings: int
    figures: str = field(repr=False)  # JSON of score, batters, bowlers, history

    @classmethod
    def capture(cls, state: "MatchState") -> "InningsRecord":
        data = state.to_dict()
        return cls.from_dict(
            {
                "battingTeam": data["battingTeam"],
                "bowlingTeam": data["bowlingTeam"],
                "innings": data["innings"],
                "score": data["score"],
                "batters": data["batters"],
                "bowlers": data["bowlers"],
                "history": data["history"],
            }
        )

    def _load(self) -> dict[str, Any]:
        return json.loads(self.figures)

    @property
    def score(self) -> Score:
        return Score.from_dict(self._load()["score"])

    @property
    def batters(self) -> Mapping[str, Batter]:
        return MappingProxyType({k: Batter.from_dict(v) for k, v in self._load()["batters"].items()})

    @property
    def bowlers(self) -> Mapping[str, Bowler]:
        return MappingProxyType({k: Bowler.from_dict(v) for k, v in self._load()["bowlers"].items()})

    @property
    def history(self) -> tuple[BallEvent, ...]:
        return tuple(BallEvent.from_dict(e) for e in self._load()["history"])

    def to_dict(self) -> dict[str, Any]:
        return {
            "battingTeam": self.batting_team,
            "bowlingTeam": self.bowling_team,
            "innings": self.innings,
            **self._load(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InningsRecord":
        # Normalize through the model classes so partial records gain zeroed fields
        figures = {
            "score": Score.from_dict(data.get("score")).to_dict(),
            "batters": {k: Batter.from_dict(v).to_dict() for k, v in (data.get("batters") or {}).items()},
            "bowlers": {k: Bowler.from_dict(v).to_dict() for k, v in (data.get("bowlers") or {}).items()},
            "history": [BallEvent.from_dict(e).to_dict() for e in data.get("history", [])],
        }
        return cls(
            batting_team=data.get("battingTeam", ""),
            bowling_team=data.get("bowlingTeam", ""),
            innings=int(data.get("innings", 1)),
            figures=json.dumps(figures),
        )


@dataclass
class MatchState:
    """Complete match state at any point during scoring.

    Mutated only by the engine components; the UI reads it.
    """

    team_a: str = ""
    team_b: str = ""
    overs_limit: int = 0
    batting_team: str = ""
    bowling_team: str = ""
    innings: int = 1
    target_score: int = 0
    match_status: MatchStatus = MatchStatus.SETUP

    score: Score = field(default_factory=Score)
    over: OverState = field(default_factory=OverState)
    players: CurrentPlayers = field(default_factory=CurrentPlayers)
    ledger: PlayerLedger = field(default_factory=PlayerLedger)

    history: list[BallEvent] = field(default_factory=list)
    innings_records: list[InningsRecord] = field(default_factory=list)

    @property
    def batters(self) -> dict[str, Batter]:
        return self.ledger.batters

    @property
    def bowlers(self) -> dict[str, Bowler]:
        return self.ledger.bowlers

    @property
    def max_balls(self) -> int:
        return self.overs_limit * BALLS_PER_OVER

    @property
    def balls_remaining(self) -> int:
        return max(0, self.max_balls - self.score.balls)

    @property
    def runs_needed(self) -> Optional[int]:
        if self.innings != 2 or self.target_score <= 0:
            return None
        return max(0, self.target_score - self.score.runs)

    @property
    def target_reached(self) -> bool:
        return self.innings == 2 and self.target_score > 0 and self.score.runs >= self.target_score

    @property
    def innings_complete(self) -> bool:
        """Overs exhausted, all out, or (second innings) target reached."""
        if self.overs_limit > 0 and self.score.balls >= self.max_balls:
            return True
        if self.score.wickets >= MAX_WICKETS:
            return True
        return self.target_reached

    @property
    def match_complete(self) -> bool:
        return self.innings == 2 and self.innings_complete

    def is_resumable(self) -> bool:
        """A saved match is only worth resuming if it was actually set up."""
        return bool(self.team_a and self.team_b and self.batting_team and self.overs_limit > 0)

    def clone(self) -> "MatchState":
        return MatchState.from_dict(self.to_dict())

    def to_dict(self) -> dict[str, Any]:
        return {
            "teams": {"teamA": self.team_a, "teamB": self.team_b},
            "oversLimit": self.overs_limit,
            "battingTeam": self.batting_team,
            "bowlingTeam": self.bowling_team,
            "innings": self.innings,
            "targetScore": self.target_score,
            "matchStatus": self.match_status.value,
            "score": self.score.to_dict(),
            "currentOver": self.over.to_dict(),
            "currentPlayers": self.players.to_dict(),
            "batters": {k: v.to_dict() for k, v in self.ledger.batters.items()},
            "bowlers": {k: v.to_dict() for k, v in self.ledger.bowlers.items()},
            "history": [e.to_dict() for e in self.history],
            "inningsRecords": [r.to_dict() for r in self.innings_records],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MatchState":
        teams = data.get("teams") or {}
        try:
            status = MatchStatus(data.get("matchStatus", MatchStatus.SETUP.value))
        except ValueError:
            logger.warning("Unknown match status %r, treating as SETUP", data.get("matchStatus"))
            status = MatchStatus.SETUP

        return cls(
            team_a=teams.get("teamA", ""),
            team_b=teams.get("teamB", ""),
            overs_limit=int(data.get("oversLimit", 0) or 0),
            batting_team=data.get("battingTeam", ""),
            bowling_team=data.get("bowlingTeam", ""),
            innings=int(data.get("innings", 1)),
            target_score=int(data.get("targetScore", 0)),
            match_status=status,
            score=Score.from_dict(data.get("score")),
            over=OverState.from_dict(data.get("currentOver")),
            players=CurrentPlayers.from_dict(data.get("currentPlayers")),
            ledger=PlayerLedger(
                batters={k: Batter.from_dict(v) for k, v in (data.get("batters") or {}).items()},
                bowlers={k: Bowler.from_dict(v) for k, v in (data.get("bowlers") or {}).items()},
            ),
            history=[BallEvent.from_dict(e) for e in data.get("history", [])],
            innings_records=[InningsRecord.from_dict(r) for r in data.get("inningsRecords", [])],
        )
