"""Tests for the match state, over tracker and delivery rule tables."""

from __future__ import annotations

import pytest

from livescore.data.ball_event import (
    BOWLER_WICKET_CREDIT,
    BallEvent,
    EventType,
    ExtraKind,
    WicketKind,
    combination_error,
)
from livescore.state.ledger import Batter, Bowler, PlayerLedger
from livescore.state.match_state import MatchState
from livescore.state.over_tracker import OverState, OverTracker
from livescore.state.score import CurrentPlayers, Score


@pytest.fixture
def chase() -> MatchState:
    return MatchState(
        team_a="Thunder",
        team_b="Strikers",
        overs_limit=2,
        batting_team="Strikers",
        bowling_team="Thunder",
        innings=2,
        target_score=20,
    )


class TestOverTracker:
    def test_partial_over(self):
        tracker = OverTracker()
        for r in (1, 0, 4):
            outcome = tracker.record(r)
            assert not outcome.completed
        assert tracker.state.balls == [1, 0, 4]
        assert tracker.state.ball_number == 3
        assert tracker.runs_this_over == 5

    def test_sixth_ball_closes_over(self):
        tracker = OverTracker(OverState(balls=[0, 0, 0, 0, 0], ball_number=5))
        outcome = tracker.record(0)
        assert outcome.completed
        assert outcome.maiden
        assert tracker.state.balls == []
        assert tracker.state.ball_number == 0

    def test_over_with_runs_not_maiden(self):
        tracker = OverTracker(OverState(balls=[0, 0, 1, 0, 0], ball_number=5))
        assert tracker.record(0) == (True, False)

    def test_tracker_writes_through_to_state(self):
        over = OverState()
        OverTracker(over).record(2)
        assert over.balls == [2]

    def test_over_state_from_dict_defaults_ball_number(self):
        over = OverState.from_dict({"balls": [1, 2]})
        assert over.ball_number == 2


class TestRuleTables:
    @pytest.mark.parametrize(
        "kind,legal,penalty,bat",
        [
            (ExtraKind.WIDE, False, 1, False),
            (ExtraKind.NO_BALL, False, 1, True),
            (ExtraKind.BYES, True, 0, False),
            (ExtraKind.LEG_BYES, True, 0, False),
        ],
    )
    def test_extra_kinds(self, kind, legal, penalty, bat):
        assert kind.is_legal_delivery is legal
        assert kind.penalty_runs == penalty
        assert kind.credits_batter is bat

    def test_every_wicket_kind_has_credit_rule(self):
        assert set(BOWLER_WICKET_CREDIT) == set(WicketKind)
        assert [k for k in WicketKind if not k.credits_bowler] == [
            WicketKind.RUN_OUT_STRIKER,
            WicketKind.RUN_OUT_NON_STRIKER,
        ]


class TestCombinationRules:
    @pytest.mark.parametrize(
        "extras,wicket",
        [
            ({ExtraKind.WIDE, ExtraKind.NO_BALL}, None),
            ({ExtraKind.BYES, ExtraKind.LEG_BYES}, None),
            ({ExtraKind.WIDE, ExtraKind.BYES}, None),
            ({ExtraKind.WIDE, ExtraKind.LEG_BYES}, None),
            ({ExtraKind.WIDE}, WicketKind.STUMPING),
            ({ExtraKind.WIDE}, WicketKind.RUN_OUT_STRIKER),
            ({ExtraKind.NO_BALL}, WicketKind.BOWLED),
            ({ExtraKind.NO_BALL}, WicketKind.CAUGHT),
        ],
    )
    def test_rejected(self, extras, wicket):
        assert combination_error(frozenset(extras), wicket) is not None

    @pytest.mark.parametrize(
        "extras,wicket",
        [
            (set(), None),
            ({ExtraKind.NO_BALL, ExtraKind.BYES}, None),
            ({ExtraKind.NO_BALL, ExtraKind.LEG_BYES}, None),
            ({ExtraKind.NO_BALL}, WicketKind.RUN_OUT_NON_STRIKER),
            ({ExtraKind.BYES}, WicketKind.RUN_OUT_STRIKER),
            (set(), WicketKind.HIT_WICKET),
        ],
    )
    def test_allowed(self, extras, wicket):
        assert combination_error(frozenset(extras), wicket) is None


class TestMatchStateProperties:
    def test_chase_progress(self, chase: MatchState):
        chase.score = Score(runs=12, wickets=3, balls=7)
        assert chase.runs_needed == 8
        assert chase.balls_remaining == 5
        assert not chase.innings_complete

    def test_target_reached(self, chase: MatchState):
        chase.score = Score(runs=20, wickets=0, balls=3)
        assert chase.target_reached
        assert chase.innings_complete
        assert chase.match_complete

    def test_overs_exhausted(self, chase: MatchState):
        chase.score = Score(runs=5, wickets=2, balls=12)
        assert chase.innings_complete
        assert chase.runs_needed == 15

    def test_all_out(self, chase: MatchState):
        chase.score = Score(runs=5, wickets=10, balls=8)
        assert chase.innings_complete

    def test_first_innings_has_no_target(self):
        state = MatchState(overs_limit=20)
        state.score = Score(runs=300, balls=50)
        assert state.runs_needed is None
        assert not state.innings_complete
        assert not state.match_complete

    def test_is_resumable(self, chase: MatchState):
        assert chase.is_resumable()
        assert not MatchState().is_resumable()
        assert not MatchState(team_a="A", team_b="B", batting_team="A").is_resumable()


class TestSerialization:
    def test_persisted_key_names(self, chase: MatchState):
        chase.players = CurrentPlayers("Dev", "Eli", "Ali")
        data = chase.to_dict()
        assert data["teams"] == {"teamA": "Thunder", "teamB": "Strikers"}
        assert data["oversLimit"] == 2
        assert data["targetScore"] == 20
        assert data["matchStatus"] == "SETUP"
        assert data["currentPlayers"] == {"striker": "Dev", "nonStriker": "Eli", "bowler": "Ali"}
        assert data["currentOver"] == {"balls": [], "ballNumber": 0, "bowlers": []}
        assert data["inningsRecords"] == []

    def test_event_round_trip_keeps_extras(self, match):
        match.add_extra(ExtraKind.NO_BALL, 2, byes=ExtraKind.BYES)
        event = match.state.history[-1]

        data = event.to_dict()
        assert data["extras"] == ["noBall", "byes"]
        assert data["snapshot"]["strikerId"] == "Ali"

        restored = BallEvent.from_dict(data)
        assert restored.type == EventType.EXTRA
        assert restored.value == 3
        assert restored.extras == event.extras
        assert restored.snapshot == event.snapshot


class TestPlayerLedger:
    def test_lazy_entries(self):
        ledger = PlayerLedger()
        ledger.batter("Ali").runs += 4
        ledger.bowler("Sam").balls += 1
        assert ledger.batters["Ali"] == Batter(runs=4)
        assert ledger.bowlers["Sam"] == Bowler(balls=1)

    def test_put_copies(self):
        ledger = PlayerLedger()
        stats = Batter(runs=10)
        ledger.put_batter("Ali", stats)
        stats.runs = 99
        assert ledger.batters["Ali"].runs == 10

    def test_reseed(self):
        ledger = PlayerLedger({"Old": Batter(runs=5)}, {"Bow": Bowler(runs=3)})
        ledger.reseed(["Dev", "Eli"], ["Ali"])
        assert set(ledger.batters) == {"Dev", "Eli"}
        assert set(ledger.bowlers) == {"Ali"}

    def test_bowler_overs(self):
        assert Bowler(balls=15).overs_str == "2.3"
