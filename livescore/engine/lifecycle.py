"""
Match Lifecycle - the action surface.

The one object a scoring UI talks to. It owns the MatchState, wires the
ball processor, snapshot manager and innings transitions to it, and
serializes every action behind a single lock so one action's
read-modify-write never interleaves with another's.

After each accepted action the completion rules are re-evaluated and,
if a storage port was injected, the new state is saved.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Union

from livescore.config import MAX_WICKETS, ScorerConfig
from livescore.data.ball_event import ExtraKind, MatchStatus, WicketKind
from livescore.engine.ball_processor import BallProcessor, Delivery
from livescore.engine.errors import ActionResult, ScoringError
from livescore.engine.innings import InningsTransitionManager, check_opening_players
from livescore.state.ledger import Batter
from livescore.state.match_state import MatchState
from livescore.state.snapshots import SnapshotManager
from livescore.storage.match_store import JsonFileStorage, MatchStorage

logger = logging.getLogger(__name__)


class MatchLifecycle:
    """Start, score, undo, transition, abandon and reset a single match."""

    def __init__(
        self,
        state: Optional[MatchState] = None,
        storage: Optional[MatchStorage] = None,
        autosave: bool = True,
    ):
        self._lock = threading.RLock()
        self._storage = storage
        self._autosave = autosave
        self._bind(state if state is not None else MatchState())

    @classmethod
    def resume(cls, storage: MatchStorage, autosave: bool = True) -> "MatchLifecycle":
        """Reload the saved match, or start from setup if there is none.

        A record without teams, a batting team or a positive overs limit
        counts as no match at all.
        """
        data = storage.load()
        if data is None:
            return cls(storage=storage, autosave=autosave)
        try:
            state = MatchState.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Discarding unreadable saved match: %s", e)
            return cls(storage=storage, autosave=autosave)
        if not state.is_resumable():
            logger.info("Saved match is incomplete, starting from setup")
            return cls(storage=storage, autosave=autosave)

        logger.info(
            "Resumed %s v %s, innings %d: %d/%d (%s ov)",
            state.team_a, state.team_b, state.innings,
            state.score.runs, state.score.wickets, state.score.overs_str,
        )
        return cls(state=state, storage=storage, autosave=autosave)

    @classmethod
    def from_config(cls, config: ScorerConfig) -> "MatchLifecycle":
        storage = JsonFileStorage(config.data_dir, config.storage_key)
        return cls.resume(storage, autosave=config.autosave)

    @property
    def state(self) -> MatchState:
        return self._state

    @property
    def can_undo(self) -> bool:
        return self._snapshots.can_undo and self._state.match_status in (
            MatchStatus.IN_PROGRESS,
            MatchStatus.COMPLETE,
        )

    # ── Match setup and status ───────────────────────────────────────

    def start_match(
        self,
        team_a: str,
        team_b: str,
        overs_limit: int,
        striker: str,
        non_striker: str,
        bowler: str,
    ) -> ActionResult:
        """Set up a new match. Team A always bats first."""
        team_a, team_b = (team_a or "").strip(), (team_b or "").strip()
        names = (striker or "").strip(), (non_striker or "").strip(), (bowler or "").strip()

        if not team_a or not team_b:
            return self._reject(ScoringError.MISSING_TEAM_NAME, "both teams must be named")
        if isinstance(overs_limit, bool) or not isinstance(overs_limit, int) or overs_limit <= 0:
            return self._reject(ScoringError.INVALID_OVERS_LIMIT, f"overs limit {overs_limit!r} must be positive")
        error = check_opening_players(*names)
        if error is not None:
            return self._reject(error.error, error.message)

        with self._lock:
            if self._state.match_status == MatchStatus.IN_PROGRESS:
                logger.warning("Starting a new match over one still in progress")

            state = MatchState(
                team_a=team_a,
                team_b=team_b,
                overs_limit=overs_limit,
                batting_team=team_a,
                bowling_team=team_b,
                match_status=MatchStatus.IN_PROGRESS,
            )
            state.players.striker, state.players.non_striker, state.players.bowler = names
            state.ledger.reseed([names[0], names[1]], [names[2]])
            self._bind(state)

            logger.info("Match started: %s v %s, %d overs", team_a, team_b, overs_limit)
            self._save()
            return ActionResult.success()

    def set_match_status(self, status: Union[MatchStatus, str]) -> ActionResult:
        try:
            status = MatchStatus(status)
        except ValueError as e:
            return self._reject(ScoringError.UNKNOWN_KIND, str(e))
        with self._lock:
            self._state.match_status = status
            self._save()
        return ActionResult.success()

    def abandon_match(self) -> ActionResult:
        """Stop scoring for good. Everything recorded so far stays viewable."""
        with self._lock:
            self._state.match_status = MatchStatus.ABANDONED
            logger.info("Match abandoned at %s", self._score_line())
            self._save()
        return ActionResult.success()

    def reset_match(self) -> ActionResult:
        """Discard the match and clear any saved copy."""
        with self._lock:
            self._bind(MatchState())
            if self._storage is not None:
                self._storage.clear()
            logger.info("Match reset")
        return ActionResult.success()

    # ── Players ──────────────────────────────────────────────────────

    def swap_batters(self) -> ActionResult:
        with self._lock:
            players = self._state.players
            if self._state.match_status != MatchStatus.IN_PROGRESS:
                return self._reject(ScoringError.MATCH_NOT_IN_PROGRESS, "match is not in progress")
            if not players.has_batters:
                return self._reject(ScoringError.MISSING_BATTER_NAME, "both batters must be set")
            players.swap_strike()
            self._save()
            return ActionResult.success()

    def set_bowler(self, name: str) -> ActionResult:
        """Bring on a bowler, adding them to the ledger if new."""
        name = (name or "").strip()
        if not name:
            return self._reject(ScoringError.MISSING_BOWLER_NAME, "no bowler named")
        with self._lock:
            if self._state.match_status != MatchStatus.IN_PROGRESS:
                return self._reject(ScoringError.MATCH_NOT_IN_PROGRESS, "match is not in progress")
            self._state.ledger.bowler(name)
            self._state.players.bowler = name
            self._save()
            return ActionResult.success()

    def set_openers(self, striker: str, non_striker: str) -> ActionResult:
        """Name the opening pair, before the first ball of an innings."""
        striker, non_striker = (striker or "").strip(), (non_striker or "").strip()
        with self._lock:
            state = self._state
            if state.match_status != MatchStatus.IN_PROGRESS:
                return self._reject(ScoringError.MATCH_NOT_IN_PROGRESS, "match is not in progress")
            if state.history:
                return self._reject(ScoringError.INNINGS_COMPLETE, "openers can only be set before the first ball")
            if not striker or not non_striker:
                return self._reject(ScoringError.MISSING_BATTER_NAME, "both opening batters must be named")
            if striker.lower() == non_striker.lower():
                return self._reject(
                    ScoringError.DUPLICATE_BATTER_NAME, "striker and non-striker must be different players"
                )
            for old in (state.players.striker, state.players.non_striker):
                if old and old not in (striker, non_striker) and state.ledger.batters.get(old, Batter()).is_blank:
                    state.ledger.remove_batter(old)
            state.players.striker, state.players.non_striker = striker, non_striker
            state.ledger.batter(striker)
            state.ledger.batter(non_striker)
            self._save()
            return ActionResult.success()

    def retire_batter(
        self, retiring_batter: str, new_batter_name: str, reason: Optional[str] = None
    ) -> ActionResult:
        return self._apply(self._balls.retire_batter, retiring_batter, new_batter_name, reason)

    # ── Scoring ──────────────────────────────────────────────────────

    def add_run(self, runs: int) -> ActionResult:
        return self._apply(self._balls.add_run, runs)

    def add_extra(
        self,
        kind: Union[ExtraKind, str],
        additional_runs: int = 0,
        byes: Optional[Union[ExtraKind, str]] = None,
    ) -> ActionResult:
        return self._apply(self._balls.add_extra, kind, additional_runs, byes)

    def add_wicket(
        self,
        kind: Union[WicketKind, str],
        new_batter_name: str,
        run_out_batter: Optional[str] = None,
        runs: int = 0,
        extras: frozenset = frozenset(),
    ) -> ActionResult:
        return self._apply(self._balls.add_wicket, kind, new_batter_name, run_out_batter, runs, extras)

    def record_delivery(self, delivery: Delivery) -> ActionResult:
        return self._apply(self._balls.record_delivery, delivery)

    def undo_last_ball(self) -> ActionResult:
        with self._lock:
            state = self._state
            if state.match_status not in (MatchStatus.IN_PROGRESS, MatchStatus.COMPLETE):
                return self._reject(
                    ScoringError.MATCH_NOT_IN_PROGRESS,
                    f"match is {state.match_status.value}, nothing to undo",
                )
            event = self._snapshots.undo()
            if event is None:
                return self._reject(ScoringError.EMPTY_HISTORY_ON_UNDO, "no deliveries to undo")

            if state.match_status == MatchStatus.COMPLETE and not state.match_complete:
                state.match_status = MatchStatus.IN_PROGRESS
                logger.info("Match re-opened by undo")
            self._save()
            return ActionResult.success(event=event)

    # ── Innings ──────────────────────────────────────────────────────

    def start_second_innings(self, striker: str, non_striker: str, bowler: str) -> ActionResult:
        return self._apply(self._innings.start_second_innings, striker, non_striker, bowler)

    def force_skip_first_innings(self, target: int) -> ActionResult:
        return self._apply(self._innings.force_skip_first_innings, target)

    def skip_first_innings_with_setup(
        self, target: int, striker: str, non_striker: str, bowler: str
    ) -> ActionResult:
        return self._apply(
            self._innings.skip_first_innings_with_setup, target, striker, non_striker, bowler
        )

    # ── Derived display state ────────────────────────────────────────

    def result_summary(self) -> Optional[str]:
        """Human-readable result once the match is complete."""
        state = self._state
        if state.match_status != MatchStatus.COMPLETE or state.innings != 2:
            return None
        par = state.target_score - 1
        if state.score.runs >= state.target_score:
            wickets_left = MAX_WICKETS - state.score.wickets
            unit = "wicket" if wickets_left == 1 else "wickets"
            return f"{state.batting_team} won by {wickets_left} {unit}"
        if state.score.runs == par:
            return "Match tied"
        margin = par - state.score.runs
        unit = "run" if margin == 1 else "runs"
        return f"{state.bowling_team} won by {margin} {unit}"

    # ── Internals ────────────────────────────────────────────────────

    def _bind(self, state: MatchState) -> None:
        self._state = state
        self._snapshots = SnapshotManager(state)
        self._balls = BallProcessor(state, self._snapshots)
        self._innings = InningsTransitionManager(state)

    def _apply(self, action: Callable[..., ActionResult], *args) -> ActionResult:
        with self._lock:
            was_complete = self._state.innings_complete
            result = action(*args)
            if result.ok:
                self._evaluate_completion(was_complete)
                self._save()
            return result

    def _evaluate_completion(self, was_complete: bool) -> None:
        state = self._state
        if state.match_status != MatchStatus.IN_PROGRESS or not state.innings_complete:
            return
        if state.match_complete:
            state.match_status = MatchStatus.COMPLETE
            logger.info("Match complete: %s", self.result_summary())
        elif not was_complete:
            logger.info("Innings %d complete: %s", state.innings, self._score_line())

    def _score_line(self) -> str:
        s = self._state.score
        return f"{self._state.batting_team} {s.runs}/{s.wickets} ({s.overs_str} ov)"

    def _save(self) -> None:
        if self._storage is not None and self._autosave:
            self._storage.save(self._state.to_dict())

    @staticmethod
    def _reject(error: ScoringError, message: str) -> ActionResult:
        logger.warning("Rejected: %s (%s)", message, error.value)
        return ActionResult.failure(error, message)
