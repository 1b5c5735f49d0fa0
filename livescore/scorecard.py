"""
Scorecard tables.

Turns ledger figures into batting and bowling tables for display. Strike
rate, economy and run rate are derived here at display time and are
never stored on the match.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Mapping, Union

import pandas as pd

from livescore.config import BALLS_PER_OVER
from livescore.data.ball_event import BallEvent, EventType, ExtraKind
from livescore.state.ledger import Batter, Bowler
from livescore.state.match_state import InningsRecord, MatchState

BATTING_COLUMNS = ["batter", "runs", "balls", "fours", "sixes", "strike_rate"]
BOWLING_COLUMNS = ["bowler", "overs", "maidens", "runs", "wickets", "economy", "fours", "sixes"]


def batting_card(batters: Mapping[str, Batter]) -> pd.DataFrame:
    rows = [
        {
            "batter": name,
            "runs": b.runs,
            "balls": b.balls,
            "fours": b.fours,
            "sixes": b.sixes,
            "strike_rate": round(b.runs / b.balls * 100, 2) if b.balls > 0 else 0.0,
        }
        for name, b in batters.items()
    ]
    return pd.DataFrame(rows, columns=BATTING_COLUMNS)


def bowling_card(bowlers: Mapping[str, Bowler]) -> pd.DataFrame:
    rows = [
        {
            "bowler": name,
            "overs": b.overs_str,
            "maidens": b.maidens,
            "runs": b.runs,
            "wickets": b.wickets,
            "economy": round(b.runs / (b.balls / BALLS_PER_OVER), 2) if b.balls > 0 else 0.0,
            "fours": b.fours,
            "sixes": b.sixes,
        }
        for name, b in bowlers.items()
        if b.balls > 0 or b.runs > 0
    ]
    return pd.DataFrame(rows, columns=BOWLING_COLUMNS)


def extras_breakdown(history: Iterable[BallEvent]) -> dict[str, int]:
    """Runs conceded as extras, by kind.

    Penalty runs go to the wide/no-ball they were called for; runs taken
    as byes or leg byes go to those, including byes run off a no-ball.
    """
    totals: Counter = Counter({k.value: 0 for k in ExtraKind})
    for event in history:
        if event.type not in (EventType.EXTRA, EventType.WICKET) or not event.extras:
            continue
        runs_taken = (event.value or 0) - sum(k.penalty_runs for k in event.extras)
        for kind in event.extras:
            totals[kind.value] += kind.penalty_runs
        for kind in (ExtraKind.BYES, ExtraKind.LEG_BYES):
            if kind in event.extras:
                totals[kind.value] += runs_taken
        if ExtraKind.WIDE in event.extras:
            totals[ExtraKind.WIDE.value] += runs_taken
    return dict(totals)


def innings_summary(innings: Union[MatchState, InningsRecord]) -> dict[str, object]:
    score = innings.score
    overs = score.balls / BALLS_PER_OVER
    extras = extras_breakdown(innings.history)
    return {
        "innings": innings.innings,
        "batting_team": innings.batting_team,
        "bowling_team": innings.bowling_team,
        "runs": score.runs,
        "wickets": score.wickets,
        "overs": score.overs_str,
        "run_rate": round(score.runs / overs, 2) if overs > 0 else 0.0,
        "extras": sum(extras.values()),
    }


def format_innings(innings: Union[MatchState, InningsRecord]) -> str:
    """Plain-text scorecard for one innings."""
    summary = innings_summary(innings)
    batters = innings.batters if isinstance(innings, InningsRecord) else innings.ledger.batters
    bowlers = innings.bowlers if isinstance(innings, InningsRecord) else innings.ledger.bowlers
    lines = [
        f"Innings {summary['innings']}: {summary['batting_team']} "
        f"{summary['runs']}/{summary['wickets']} ({summary['overs']} ov, RR {summary['run_rate']:.2f})",
        "",
        batting_card(batters).to_string(index=False),
        "",
        f"Extras: {summary['extras']}",
        "",
        bowling_card(bowlers).to_string(index=False),
    ]
    return "\n".join(lines)
