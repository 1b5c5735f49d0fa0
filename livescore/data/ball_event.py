"""
Ball-by-ball event data model.

Defines the closed set of delivery kinds the scorer understands, the
rule tables keyed by them, and the event record appended to the innings
history for every scoring action.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from livescore.state.ledger import Batter, Bowler
from livescore.state.over_tracker import OverState
from livescore.state.score import Score


class ExtraKind(Enum):
    WIDE = "wide"
    NO_BALL = "noBall"
    BYES = "byes"
    LEG_BYES = "legByes"

    @property
    def is_legal_delivery(self) -> bool:
        return LEGAL_DELIVERY[self]

    @property
    def penalty_runs(self) -> int:
        return PENALTY_RUNS[self]

    @property
    def credits_batter(self) -> bool:
        return BATTER_CREDIT[self]


class WicketKind(Enum):
    BOWLED = "bowled"
    CAUGHT = "caught"
    LBW = "lbw"
    STUMPING = "stumping"
    HIT_WICKET = "hitWicket"
    RUN_OUT_STRIKER = "runOutStriker"
    RUN_OUT_NON_STRIKER = "runOutNonStriker"

    @property
    def is_run_out(self) -> bool:
        return self in (WicketKind.RUN_OUT_STRIKER, WicketKind.RUN_OUT_NON_STRIKER)

    @property
    def credits_bowler(self) -> bool:
        return BOWLER_WICKET_CREDIT[self]


class EventType(Enum):
    RUN = "run"
    EXTRA = "extra"
    WICKET = "wicket"
    RETIRE = "retire"


class MatchStatus(Enum):
    SETUP = "SETUP"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETE = "COMPLETE"
    ABANDONED = "ABANDONED"


# Deliveries that count toward the six-ball over
LEGAL_DELIVERY: dict[ExtraKind, bool] = {
    ExtraKind.WIDE: False,
    ExtraKind.NO_BALL: False,
    ExtraKind.BYES: True,
    ExtraKind.LEG_BYES: True,
}

# One-run penalty awarded before any runs taken
PENALTY_RUNS: dict[ExtraKind, int] = {
    ExtraKind.WIDE: 1,
    ExtraKind.NO_BALL: 1,
    ExtraKind.BYES: 0,
    ExtraKind.LEG_BYES: 0,
}

# Whether runs taken off the delivery go to the striker's own tally
BATTER_CREDIT: dict[ExtraKind, bool] = {
    ExtraKind.WIDE: False,
    ExtraKind.NO_BALL: True,
    ExtraKind.BYES: False,
    ExtraKind.LEG_BYES: False,
}

# Run-outs are the only dismissals not credited to the bowler
BOWLER_WICKET_CREDIT: dict[WicketKind, bool] = {
    WicketKind.BOWLED: True,
    WicketKind.CAUGHT: True,
    WicketKind.LBW: True,
    WicketKind.STUMPING: True,
    WicketKind.HIT_WICKET: True,
    WicketKind.RUN_OUT_STRIKER: False,
    WicketKind.RUN_OUT_NON_STRIKER: False,
}

for _table, _enum in (
    (LEGAL_DELIVERY, ExtraKind),
    (PENALTY_RUNS, ExtraKind),
    (BATTER_CREDIT, ExtraKind),
    (BOWLER_WICKET_CREDIT, WicketKind),
):
    _missing = set(_enum) - set(_table)
    if _missing:
        raise RuntimeError(f"Rule table missing {_enum.__name__} members: {_missing}")


def combination_error(
    extras: frozenset[ExtraKind], wicket: Optional[WicketKind] = None
) -> Optional[str]:
    """Why this set of extras (and optional dismissal) cannot be one delivery.

    Returns None when the combination is allowed.
    """
    if ExtraKind.WIDE in extras and ExtraKind.NO_BALL in extras:
        return "a delivery cannot be both a wide and a no-ball"
    if ExtraKind.BYES in extras and ExtraKind.LEG_BYES in extras:
        return "byes and leg byes cannot be called on the same delivery"
    if ExtraKind.WIDE in extras and (ExtraKind.BYES in extras or ExtraKind.LEG_BYES in extras):
        return "a wide cannot be combined with byes or leg byes"
    if wicket is not None:
        if ExtraKind.WIDE in extras:
            return "a wicket cannot be taken off a wide"
        if ExtraKind.NO_BALL in extras and not wicket.is_run_out:
            return "only a run-out can be taken off a no-ball"
    return None


@dataclass
class BallEventSnapshot:
    """Everything a single action can touch, captured before it runs."""

    striker: str
    non_striker: str
    bowler: str
    striker_stats: Batter
    non_striker_stats: Batter
    bowler_stats: Bowler
    score: Score
    over: OverState

    # Wicket / retire events only
    fallen_batter: Optional[str] = None
    new_batter: Optional[str] = None
    new_batter_before: Optional[Batter] = None  # Figures of a returning batter

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "strikerId": self.striker,
            "nonStrikerId": self.non_striker,
            "bowlerId": self.bowler,
            "strikerBefore": self.striker_stats.to_dict(),
            "nonStrikerBefore": self.non_striker_stats.to_dict(),
            "bowlerBefore": self.bowler_stats.to_dict(),
            "scoreBefore": self.score.to_dict(),
            "currentOverBefore": self.over.to_dict(),
        }
        if self.fallen_batter is not None:
            data["fallenBatsmanId"] = self.fallen_batter
        if self.new_batter is not None:
            data["newBatterId"] = self.new_batter
        if self.new_batter_before is not None:
            data["newBatterBefore"] = self.new_batter_before.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BallEventSnapshot":
        return cls(
            striker=data.get("strikerId", ""),
            non_striker=data.get("nonStrikerId", ""),
            bowler=data.get("bowlerId", ""),
            striker_stats=Batter.from_dict(data.get("strikerBefore")),
            non_striker_stats=Batter.from_dict(data.get("nonStrikerBefore")),
            bowler_stats=Bowler.from_dict(data.get("bowlerBefore")),
            score=Score.from_dict(data.get("scoreBefore")),
            over=OverState.from_dict(data.get("currentOverBefore")),
            fallen_batter=data.get("fallenBatsmanId"),
            new_batter=data.get("newBatterId"),
            new_batter_before=(
                Batter.from_dict(data["newBatterBefore"]) if data.get("newBatterBefore") else None
            ),
        )


@dataclass
class BallEvent:
    """A single scoring action in the innings history.

    ``value`` is the run total the action carried; ``kind`` is the extra
    or dismissal kind (its enum value), or the free-text reason for a
    retirement.
    """

    type: EventType
    snapshot: BallEventSnapshot
    value: Optional[int] = None
    kind: Optional[str] = None
    extras: tuple[ExtraKind, ...] = ()  # Every extra called on the delivery

    @property
    def wicket_kind(self) -> Optional[WicketKind]:
        if self.type == EventType.WICKET and self.kind is not None:
            return WicketKind(self.kind)
        return None

    @property
    def is_legal_delivery(self) -> bool:
        if self.type == EventType.RETIRE:
            return False
        return all(k.is_legal_delivery for k in self.extras)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type.value, "snapshot": self.snapshot.to_dict()}
        if self.value is not None:
            data["value"] = self.value
        if self.kind is not None:
            data["kind"] = self.kind
        if self.extras:
            data["extras"] = [k.value for k in self.extras]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BallEvent":
        return cls(
            type=EventType(data["type"]),
            snapshot=BallEventSnapshot.from_dict(data.get("snapshot", {})),
            value=data.get("value"),
            kind=data.get("kind"),
            extras=tuple(ExtraKind(k) for k in data.get("extras", [])),
        )
