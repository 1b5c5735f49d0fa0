"""Tests for snapshot-based undo."""

from __future__ import annotations

import pytest

from livescore.data.ball_event import BallEvent, EventType, ExtraKind, MatchStatus, WicketKind
from livescore.engine.ball_processor import Delivery
from livescore.engine.errors import ScoringError
from livescore.engine.lifecycle import MatchLifecycle
from livescore.state.match_state import MatchState
from livescore.state.score import CurrentPlayers
from livescore.state.snapshots import SnapshotManager


ACTIONS = {
    "dot": lambda m: m.add_run(0),
    "single": lambda m: m.add_run(1),
    "four": lambda m: m.add_run(4),
    "six": lambda m: m.add_run(6),
    "wide": lambda m: m.add_extra(ExtraKind.WIDE, 2),
    "no_ball_four": lambda m: m.add_extra(ExtraKind.NO_BALL, 4),
    "no_ball_byes": lambda m: m.add_extra(ExtraKind.NO_BALL, 1, byes=ExtraKind.BYES),
    "byes": lambda m: m.add_extra(ExtraKind.BYES, 1),
    "leg_byes": lambda m: m.add_extra(ExtraKind.LEG_BYES, 4),
    "bowled": lambda m: m.add_wicket(WicketKind.BOWLED, "Cal"),
    "caught_single": lambda m: m.add_wicket(WicketKind.CAUGHT, "Cal", runs=1),
    "run_out": lambda m: m.add_wicket(WicketKind.RUN_OUT_NON_STRIKER, "Cal", "Ben", 1),
    "retire": lambda m: m.retire_batter("Ali", "Cal", "retired hurt"),
    "delivery": lambda m: m.record_delivery(Delivery(runs=2, leg_byes=True)),
}


class TestExactUndo:
    @pytest.mark.parametrize("name", sorted(ACTIONS))
    def test_undo_restores_prior_state(self, match: MatchLifecycle, name: str):
        # Get some figures on the board first so the restore is not trivially zero
        for r in (1, 4, 0, 2):
            match.add_run(r)
        before = match.state.to_dict()

        assert ACTIONS[name](match).ok
        assert match.state.to_dict() != before

        assert match.undo_last_ball().ok
        assert match.state.to_dict() == before

    @pytest.mark.parametrize("name", sorted(ACTIONS))
    def test_undo_at_end_of_over(self, match: MatchLifecycle, name: str):
        for _ in range(5):
            match.add_run(0)
        before = match.state.to_dict()

        ACTIONS[name](match)
        match.undo_last_ball()

        assert match.state.to_dict() == before
        assert match.state.bowlers["Sam"].maidens == 0

    def test_undo_maiden_over(self, match: MatchLifecycle):
        for _ in range(6):
            match.add_run(0)
        assert match.state.bowlers["Sam"].maidens == 1

        match.undo_last_ball()
        assert match.state.bowlers["Sam"].maidens == 0
        assert match.state.over.balls == [0, 0, 0, 0, 0]
        assert match.state.players.striker == "Ali"

    def test_successive_undos_are_lifo(self, match: MatchLifecycle):
        states = []
        for r in (1, 2, 3):
            states.append(match.state.to_dict())
            match.add_run(r)

        for expected in reversed(states):
            match.undo_last_ball()
            assert match.state.to_dict() == expected

    def test_undo_returns_event(self, match: MatchLifecycle):
        match.add_extra(ExtraKind.WIDE, 0)
        result = match.undo_last_ball()
        assert result.event is not None
        assert result.event.type == EventType.EXTRA

    def test_undo_after_bowler_change(self, match: MatchLifecycle):
        for _ in range(6):
            match.add_run(1)
        match.set_bowler("Tom")
        match.add_run(4)

        match.undo_last_ball()
        assert match.state.players.bowler == "Tom"
        assert match.state.bowlers["Tom"].runs == 0
        assert match.state.bowlers["Sam"].runs == 6


class TestNewBatterOnUndo:
    def test_undone_wicket_removes_new_batter(self, match: MatchLifecycle):
        match.add_wicket(WicketKind.BOWLED, "Cal")
        assert "Cal" in match.state.batters

        match.undo_last_ball()
        assert "Cal" not in match.state.batters
        assert match.state.players.striker == "Ali"
        assert match.state.score.wickets == 0

    def test_undone_retirement_removes_new_batter(self, match: MatchLifecycle):
        match.retire_batter("Ben", "Cal")
        match.undo_last_ball()
        assert "Cal" not in match.state.batters
        assert match.state.players.non_striker == "Ben"

    def test_returning_batter_keeps_figures(self, match: MatchLifecycle):
        match.add_run(4)
        match.retire_batter("Ali", "Cal", "retired hurt")
        match.add_wicket(WicketKind.BOWLED, "Ali")
        assert match.state.batters["Ali"].runs == 4
        assert match.state.players.striker == "Ali"

        match.undo_last_ball()
        assert match.state.batters["Ali"].runs == 4
        assert match.state.batters["Ali"].fours == 1
        assert match.state.players.striker == "Cal"

    def test_undo_tenth_wicket_without_new_batter(self, match: MatchLifecycle):
        for i in range(9):
            match.add_wicket(WicketKind.BOWLED, f"Bat{i}")
        before = match.state.to_dict()
        match.add_wicket(WicketKind.CAUGHT, "")
        assert match.state.innings_complete

        match.undo_last_ball()
        assert match.state.to_dict() == before
        assert not match.state.innings_complete


class TestUndoRejections:
    def test_empty_history(self, match: MatchLifecycle):
        before = match.state.to_dict()
        result = match.undo_last_ball()
        assert result.error == ScoringError.EMPTY_HISTORY_ON_UNDO
        assert match.state.to_dict() == before
        assert not match.can_undo

    def test_before_match_started(self):
        result = MatchLifecycle().undo_last_ball()
        assert result.error == ScoringError.MATCH_NOT_IN_PROGRESS

    def test_after_abandon(self, match: MatchLifecycle):
        match.add_run(1)
        match.abandon_match()
        result = match.undo_last_ball()
        assert result.error == ScoringError.MATCH_NOT_IN_PROGRESS
        assert len(match.state.history) == 1

    def test_history_cleared_by_new_innings(self, short_match: MatchLifecycle):
        for _ in range(6):
            short_match.add_run(1)
        short_match.start_second_innings("Dev", "Eli", "Ali")

        result = short_match.undo_last_ball()
        assert result.error == ScoringError.EMPTY_HISTORY_ON_UNDO
        assert short_match.state.innings == 2


class TestUndoReopensMatch:
    def test_undo_winning_run(self, short_match: MatchLifecycle):
        for _ in range(6):
            short_match.add_run(1)
        short_match.start_second_innings("Dev", "Eli", "Ali")
        short_match.add_run(4)
        short_match.add_run(2)
        short_match.add_run(1)
        assert short_match.state.match_status == MatchStatus.COMPLETE
        assert short_match.can_undo

        assert short_match.undo_last_ball().ok
        assert short_match.state.match_status == MatchStatus.IN_PROGRESS
        assert short_match.state.score.runs == 6
        assert short_match.add_run(6).ok
        assert short_match.state.match_status == MatchStatus.COMPLETE


class TestSnapshotManager:
    def test_empty_crease_slot_not_restored_as_player(self):
        state = MatchState(overs_limit=20)
        state.players = CurrentPlayers("", "Ben", "Sam")
        state.ledger.reseed(["Ben"], ["Sam"])
        snapshots = SnapshotManager(state)

        state.history.append(BallEvent(type=EventType.RETIRE, snapshot=snapshots.capture(), kind="retire"))
        state.ledger.batter("Ben").runs = 5
        snapshots.undo()

        assert "" not in state.batters
        assert state.batters["Ben"].runs == 0
        assert state.players.striker == ""
