"""
Innings transitions.

Closes the first innings, either because it ran its course or because
the scorer overrides it with an explicit target, freezes it into an
InningsRecord for the scorecard and sets the state up for the chase.
"""

from __future__ import annotations

import logging
from typing import Optional

from livescore.data.ball_event import MatchStatus
from livescore.engine.errors import ActionResult, ScoringError
from livescore.state.match_state import InningsRecord, MatchState
from livescore.state.over_tracker import OverState
from livescore.state.score import CurrentPlayers, Score

logger = logging.getLogger(__name__)


def check_opening_players(striker: str, non_striker: str, bowler: str) -> Optional[ActionResult]:
    """Validate the three players named to start an innings."""
    if not striker or not non_striker:
        return ActionResult.failure(ScoringError.MISSING_BATTER_NAME, "both opening batters must be named")
    if not bowler:
        return ActionResult.failure(ScoringError.MISSING_BOWLER_NAME, "an opening bowler must be named")
    if striker.lower() == non_striker.lower():
        return ActionResult.failure(
            ScoringError.DUPLICATE_BATTER_NAME, "striker and non-striker must be different players"
        )
    return None


class InningsTransitionManager:
    """Moves a match from its first innings to its second."""

    def __init__(self, state: MatchState):
        self._state = state

    def start_second_innings(self, striker: str, non_striker: str, bowler: str) -> ActionResult:
        """Begin the chase once the first innings has ended naturally.

        Target is first-innings runs + 1.
        """
        state = self._state
        blocked = self._check_first_innings()
        if blocked is not None:
            return blocked
        if not state.innings_complete:
            return self._reject(
                ScoringError.INNINGS_NOT_COMPLETE,
                f"first innings still live at {state.score.runs}/{state.score.wickets} "
                f"({state.score.overs_str} ov)",
            )
        names = (striker or "").strip(), (non_striker or "").strip(), (bowler or "").strip()
        error = check_opening_players(*names)
        if error is not None:
            return self._log_rejection(error)

        self._begin_chase(state.score.runs + 1, CurrentPlayers(*names))
        return ActionResult.success(message=f"target {state.target_score}")

    def force_skip_first_innings(self, target: int) -> ActionResult:
        """End the first innings now with an explicit target.

        The second innings starts with nobody in the middle; openers and
        bowler are named afterwards.
        """
        blocked = self._check_skip(target)
        if blocked is not None:
            return blocked
        self._begin_chase(target, CurrentPlayers())
        return ActionResult.success(message=f"target {target}")

    def skip_first_innings_with_setup(
        self,
        target: int,
        striker: str,
        non_striker: str,
        bowler: str,
    ) -> ActionResult:
        """End the first innings now with an explicit target and openers."""
        blocked = self._check_skip(target)
        if blocked is not None:
            return blocked
        names = (striker or "").strip(), (non_striker or "").strip(), (bowler or "").strip()
        error = check_opening_players(*names)
        if error is not None:
            return self._log_rejection(error)

        self._begin_chase(target, CurrentPlayers(*names))
        return ActionResult.success(message=f"target {target}")

    # ── Internals ────────────────────────────────────────────────────

    def _begin_chase(self, target: int, players: CurrentPlayers) -> None:
        state = self._state
        record = InningsRecord.capture(state)
        state.innings_records.append(record)

        logger.info(
            "Innings %d closed: %s %d/%d (%s ov). %s need %d",
            record.innings,
            record.batting_team,
            record.score.runs,
            record.score.wickets,
            record.score.overs_str,
            record.bowling_team,
            target,
        )

        state.innings = 2
        state.target_score = target
        state.batting_team, state.bowling_team = state.bowling_team, state.batting_team
        state.score = Score()
        state.over = OverState()
        state.players = players
        state.history = []
        state.match_status = MatchStatus.IN_PROGRESS

        batters = [n for n in (players.striker, players.non_striker) if n]
        bowlers = [players.bowler] if players.bowler else []
        state.ledger.reseed(batters, bowlers)

    def _check_first_innings(self) -> Optional[ActionResult]:
        state = self._state
        if state.match_status != MatchStatus.IN_PROGRESS:
            return self._reject(
                ScoringError.MATCH_NOT_IN_PROGRESS,
                f"match is {state.match_status.value}, not in progress",
            )
        if state.innings != 1:
            return self._reject(
                ScoringError.WRONG_INNINGS_FOR_SKIP, f"already in innings {state.innings}"
            )
        return None

    def _check_skip(self, target: int) -> Optional[ActionResult]:
        blocked = self._check_first_innings()
        if blocked is not None:
            return blocked
        return self._check_target(target)

    def _check_target(self, target: int) -> Optional[ActionResult]:
        if isinstance(target, bool) or not isinstance(target, int) or target <= 0:
            return self._reject(ScoringError.NON_POSITIVE_TARGET, f"target {target!r} must be positive")
        return None

    @staticmethod
    def _log_rejection(result: ActionResult) -> ActionResult:
        logger.warning("Rejected: %s (%s)", result.message, result.error.value)
        return result

    @classmethod
    def _reject(cls, error: ScoringError, message: str) -> ActionResult:
        return cls._log_rejection(ActionResult.failure(error, message))
