"""
Ball Processor - the scoring engine.

Applies one scoring action at a time to the shared MatchState: checks
that the action is legal, credits runs and balls to the score and the
player ledger, advances the over, rotates the strike and appends a
snapshot-backed event to the innings history.

Every delivery, whatever button produced it, goes through the same
path. A delivery is described by the set of extras called on it, the
runs taken, and optionally a dismissal; the rule tables in
``livescore.data.ball_event`` decide what each of those means.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from livescore.config import MAX_WICKETS, VALID_RUN_VALUES
from livescore.data.ball_event import (
    BallEvent,
    EventType,
    ExtraKind,
    MatchStatus,
    WicketKind,
    combination_error,
)
from livescore.engine.errors import ActionResult, ScoringError
from livescore.state.match_state import MatchState
from livescore.state.over_tracker import OverTracker
from livescore.state.snapshots import SnapshotManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Delivery:
    """One delivery as the scorer entered it: run value plus any extras
    and dismissal ticked for it."""

    runs: int = 0
    wide: bool = False
    no_ball: bool = False
    byes: bool = False
    leg_byes: bool = False
    wicket: Optional[WicketKind] = None
    new_batter: str = ""
    run_out_batter: Optional[str] = None
    extras: frozenset = field(init=False)

    def __post_init__(self) -> None:
        flags = {
            ExtraKind.WIDE: self.wide,
            ExtraKind.NO_BALL: self.no_ball,
            ExtraKind.BYES: self.byes,
            ExtraKind.LEG_BYES: self.leg_byes,
        }
        object.__setattr__(self, "extras", frozenset(k for k, on in flags.items() if on))


@dataclass
class _Outcome:
    """Bookkeeping for a delivery once its rules have been resolved."""

    extras: frozenset
    runs: int  # Runs taken, excluding penalty
    total: int  # Runs added to the score
    legal: bool
    bat_runs: bool  # Runs go to the batter's own tally


def _resolve(extras: frozenset, runs: int) -> _Outcome:
    penalty = sum(k.penalty_runs for k in extras)
    return _Outcome(
        extras=extras,
        runs=runs,
        total=penalty + runs,
        legal=all(k.is_legal_delivery for k in extras),
        bat_runs=all(k.credits_batter for k in extras),
    )


def _ordered(extras: frozenset) -> tuple[ExtraKind, ...]:
    return tuple(k for k in ExtraKind if k in extras)


class BallProcessor:
    """Scores runs, extras, wickets and retirements against a MatchState."""

    def __init__(self, state: MatchState, snapshots: SnapshotManager):
        self._state = state
        self._snapshots = snapshots

    # ── Public actions ───────────────────────────────────────────────

    def add_run(self, runs: int) -> ActionResult:
        """Runs off the bat from a legal delivery."""
        if isinstance(runs, bool) or runs not in VALID_RUN_VALUES:
            return self._reject(ScoringError.INVALID_RUN_VALUE, f"{runs!r} is not a valid run value")
        blocked = self._check_can_bowl()
        if blocked is not None:
            return blocked

        snapshot = self._snapshots.capture()
        outcome = _resolve(frozenset(), runs)
        over_complete = self._bowl(outcome, self._state.players.striker)
        if runs % 2 == 1 or over_complete:
            self._state.players.swap_strike()

        event = BallEvent(type=EventType.RUN, snapshot=snapshot, value=runs)
        return self._commit(event)

    def add_extra(
        self,
        kind: Union[ExtraKind, str],
        additional_runs: int = 0,
        byes: Optional[Union[ExtraKind, str]] = None,
    ) -> ActionResult:
        """Wide, no-ball, byes or leg byes.

        ``additional_runs`` are the runs taken on top of any penalty. A
        no-ball whose runs were byes or leg byes passes that as ``byes``.
        """
        try:
            kind = ExtraKind(kind)
            extras = {kind}
            if byes is not None:
                extras.add(ExtraKind(byes))
        except ValueError as e:
            return self._reject(ScoringError.UNKNOWN_KIND, str(e))
        extras = frozenset(extras)

        if isinstance(additional_runs, bool) or not isinstance(additional_runs, int) or additional_runs < 0:
            return self._reject(ScoringError.INVALID_RUN_VALUE, f"{additional_runs!r} is not a valid run count")
        reason = combination_error(extras)
        if reason:
            return self._reject(ScoringError.ILLEGAL_EXTRA_WICKET_COMBO, reason)
        blocked = self._check_can_bowl()
        if blocked is not None:
            return blocked

        snapshot = self._snapshots.capture()
        outcome = _resolve(extras, additional_runs)
        over_complete = self._bowl(outcome, self._state.players.striker)
        if additional_runs % 2 == 1 or over_complete:
            self._state.players.swap_strike()

        event = BallEvent(
            type=EventType.EXTRA,
            snapshot=snapshot,
            value=outcome.total,
            kind=kind.value,
            extras=_ordered(extras),
        )
        return self._commit(event)

    def add_wicket(
        self,
        kind: Union[WicketKind, str],
        new_batter_name: str,
        run_out_batter: Optional[str] = None,
        runs: int = 0,
        extras: frozenset = frozenset(),
    ) -> ActionResult:
        """A dismissal, optionally with runs completed before it.

        For run-outs the dismissed batter is ``run_out_batter`` when
        given, otherwise the end the kind names. Every other dismissal
        is the striker.
        """
        try:
            kind = WicketKind(kind)
            extras = frozenset(ExtraKind(k) for k in extras)
        except ValueError as e:
            return self._reject(ScoringError.UNKNOWN_KIND, str(e))
        state = self._state
        players = state.players

        if isinstance(runs, bool) or not isinstance(runs, int) or runs < 0:
            return self._reject(ScoringError.INVALID_RUN_VALUE, f"{runs!r} is not a valid run count")
        reason = combination_error(extras, kind)
        if reason:
            return self._reject(ScoringError.ILLEGAL_EXTRA_WICKET_COMBO, reason)
        blocked = self._check_can_bowl()
        if blocked is not None:
            return blocked

        if kind.is_run_out and run_out_batter:
            if run_out_batter not in (players.striker, players.non_striker):
                return self._reject(
                    ScoringError.UNKNOWN_BATTER, f"{run_out_batter!r} is not at the crease"
                )
            fallen = run_out_batter
        elif kind == WicketKind.RUN_OUT_NON_STRIKER:
            fallen = players.non_striker
        else:
            fallen = players.striker

        last_wicket = state.score.wickets + 1 >= MAX_WICKETS
        new_batter = (new_batter_name or "").strip()
        if new_batter:
            error = self._check_new_batter(new_batter)
            if error is not None:
                return error
        elif not last_wicket:
            return self._reject(ScoringError.MISSING_BATTER_NAME, "a new batter must be named")

        snapshot = self._snapshots.capture(
            fallen_batter=fallen, new_batter=new_batter or None
        )
        outcome = _resolve(extras, runs)
        over_complete = self._bowl(outcome, fallen)

        state.score.wickets += 1
        if kind.credits_bowler:
            state.ledger.bowler(players.bowler).wickets += 1

        if new_batter:
            state.ledger.batter(new_batter)
        remaining = players.non_striker if fallen == players.striker else players.striker

        if kind.is_run_out:
            # Incoming batter takes the end that was run out
            if fallen == players.striker:
                players.striker = new_batter
            else:
                players.non_striker = new_batter
        elif runs % 2 == 1:
            players.striker, players.non_striker = remaining, new_batter
        else:
            players.striker, players.non_striker = new_batter, remaining

        if over_complete:
            players.swap_strike()

        event = BallEvent(
            type=EventType.WICKET,
            snapshot=snapshot,
            value=outcome.total,
            kind=kind.value,
            extras=_ordered(extras),
        )
        logger.info(
            "WICKET: %s %s | %d/%d",
            fallen, kind.value, state.score.runs, state.score.wickets,
        )
        return self._commit(event)

    def retire_batter(
        self,
        retiring_batter: str,
        new_batter_name: str,
        reason: Optional[str] = None,
    ) -> ActionResult:
        """Replace a batter without a ball or a wicket."""
        state = self._state
        players = state.players

        if state.match_status != MatchStatus.IN_PROGRESS:
            return self._reject(ScoringError.MATCH_NOT_IN_PROGRESS, "match is not in progress")
        if state.innings_complete:
            return self._reject(ScoringError.INNINGS_COMPLETE, "the innings is over")
        if not retiring_batter:
            return self._reject(ScoringError.MISSING_BATTER_NAME, "no retiring batter given")
        if retiring_batter not in (players.striker, players.non_striker):
            return self._reject(ScoringError.UNKNOWN_BATTER, f"{retiring_batter!r} is not at the crease")
        new_batter = (new_batter_name or "").strip()
        if not new_batter:
            return self._reject(ScoringError.MISSING_BATTER_NAME, "a new batter must be named")
        error = self._check_new_batter(new_batter)
        if error is not None:
            return error

        snapshot = self._snapshots.capture(fallen_batter=retiring_batter, new_batter=new_batter)
        state.ledger.batter(new_batter)
        if players.striker == retiring_batter:
            players.striker = new_batter
        else:
            players.non_striker = new_batter

        event = BallEvent(
            type=EventType.RETIRE,
            snapshot=snapshot,
            kind=(reason or "").strip() or "retire",
        )
        logger.info("%s retired (%s), replaced by %s", retiring_batter, event.kind, new_batter)
        return self._commit(event)

    def record_delivery(self, delivery: Delivery) -> ActionResult:
        """Score a delivery entered as a run value with extras/wicket ticked.

        A ticked wicket takes priority, then any extras, then plain runs.
        """
        reason = combination_error(delivery.extras, delivery.wicket)
        if reason:
            return self._reject(ScoringError.ILLEGAL_EXTRA_WICKET_COMBO, reason)

        if delivery.wicket is not None:
            return self.add_wicket(
                delivery.wicket,
                delivery.new_batter,
                run_out_batter=delivery.run_out_batter,
                runs=delivery.runs,
                extras=delivery.extras,
            )
        if delivery.wide:
            return self.add_extra(ExtraKind.WIDE, delivery.runs)
        if delivery.no_ball:
            byes = ExtraKind.BYES if delivery.byes else ExtraKind.LEG_BYES if delivery.leg_byes else None
            return self.add_extra(ExtraKind.NO_BALL, delivery.runs, byes=byes)
        if delivery.byes:
            return self.add_extra(ExtraKind.BYES, delivery.runs)
        if delivery.leg_byes:
            return self.add_extra(ExtraKind.LEG_BYES, delivery.runs)
        return self.add_run(delivery.runs)

    # ── Internals ────────────────────────────────────────────────────

    def _bowl(self, outcome: _Outcome, batter_name: str) -> bool:
        """Credit one delivery to score, batter, bowler and over.

        Returns True if the delivery completed the over.
        """
        state = self._state
        batter = state.ledger.batter(batter_name)
        bowler = state.ledger.bowler(state.players.bowler)

        state.score.runs += outcome.total
        bowler.runs += outcome.total

        if outcome.bat_runs:
            batter.credit(outcome.runs, faced=outcome.legal)
        elif outcome.legal:
            batter.balls += 1

        if not outcome.legal:
            return False

        if not outcome.extras:
            if outcome.runs == 4:
                bowler.fours += 1
            elif outcome.runs == 6:
                bowler.sixes += 1

        state.score.balls += 1
        bowler.balls += 1
        result = OverTracker(state.over).record(outcome.total, state.players.bowler)
        if result.maiden:
            bowler.maidens += 1
            logger.info("Maiden over by %s", state.players.bowler)
        return result.completed

    def _check_can_bowl(self) -> Optional[ActionResult]:
        state = self._state
        if state.match_status != MatchStatus.IN_PROGRESS:
            return self._reject(
                ScoringError.MATCH_NOT_IN_PROGRESS,
                f"match is {state.match_status.value}, not in progress",
            )
        if state.innings_complete:
            return self._reject(ScoringError.INNINGS_COMPLETE, "the innings is over")
        if not state.players.has_batters:
            return self._reject(ScoringError.MISSING_BATTER_NAME, "both batters must be set")
        if not state.players.bowler:
            return self._reject(ScoringError.MISSING_BOWLER_NAME, "no bowler set")
        return None

    def _check_new_batter(self, name: str) -> Optional[ActionResult]:
        players = self._state.players
        at_crease = {players.striker.lower(), players.non_striker.lower()}
        if name.lower() in at_crease:
            return self._reject(ScoringError.DUPLICATE_BATTER_NAME, f"{name!r} is already batting")
        return None

    def _commit(self, event: BallEvent) -> ActionResult:
        state = self._state
        state.history.append(event)
        logger.debug(
            "%s %s%s -> %d/%d (%s ov)",
            event.type.value,
            event.kind or "",
            f" {event.value}" if event.value is not None else "",
            state.score.runs,
            state.score.wickets,
            state.score.overs_str,
        )
        return ActionResult.success(event=event)

    @staticmethod
    def _reject(error: ScoringError, message: str) -> ActionResult:
        logger.warning("Rejected: %s (%s)", message, error.value)
        return ActionResult.failure(error, message)
