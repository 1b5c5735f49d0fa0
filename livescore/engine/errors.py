"""
Action results.

Scoring actions never raise on bad input. They leave the match state
untouched and hand back an ActionResult naming what was wrong, so the
caller can tell the scorer why nothing happened.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from livescore.data.ball_event import BallEvent


class ScoringError(Enum):
    INVALID_RUN_VALUE = "invalid_run_value"
    MISSING_BATTER_NAME = "missing_batter_name"
    DUPLICATE_BATTER_NAME = "duplicate_batter_name"
    ILLEGAL_EXTRA_WICKET_COMBO = "illegal_extra_wicket_combo"
    WRONG_INNINGS_FOR_SKIP = "wrong_innings_for_skip"
    NON_POSITIVE_TARGET = "non_positive_target"
    EMPTY_HISTORY_ON_UNDO = "empty_history_on_undo"
    MATCH_NOT_IN_PROGRESS = "match_not_in_progress"
    INNINGS_COMPLETE = "innings_complete"
    INNINGS_NOT_COMPLETE = "innings_not_complete"
    MISSING_BOWLER_NAME = "missing_bowler_name"
    UNKNOWN_BATTER = "unknown_batter"
    INVALID_OVERS_LIMIT = "invalid_overs_limit"
    MISSING_TEAM_NAME = "missing_team_name"
    UNKNOWN_KIND = "unknown_kind"


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a single action on the match."""

    ok: bool
    error: Optional[ScoringError] = None
    message: str = ""
    event: Optional[BallEvent] = None

    @classmethod
    def success(cls, event: Optional[BallEvent] = None, message: str = "") -> "ActionResult":
        return cls(ok=True, event=event, message=message)

    @classmethod
    def failure(cls, error: ScoringError, message: str = "") -> "ActionResult":
        return cls(ok=False, error=error, message=message or error.value.replace("_", " "))
