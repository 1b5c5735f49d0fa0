"""
Snapshot-based undo.

Before every scoring action the mutable quantities it can touch are
copied into a BallEventSnapshot. Undo pops the last event and writes
those copies back verbatim; nothing is recomputed from history.
"""

from __future__ import annotations

import logging
from typing import Optional

from livescore.data.ball_event import BallEvent, BallEventSnapshot
from livescore.state.ledger import Batter, Bowler
from livescore.state.match_state import MatchState

logger = logging.getLogger(__name__)


class SnapshotManager:
    """Captures and restores pre-event snapshots of a MatchState."""

    def __init__(self, state: MatchState):
        self._state = state

    def capture(
        self,
        fallen_batter: Optional[str] = None,
        new_batter: Optional[str] = None,
    ) -> BallEventSnapshot:
        state = self._state
        players = state.players
        ledger = state.ledger

        new_batter_before = None
        if new_batter is not None and ledger.has_batter(new_batter):
            new_batter_before = ledger.batters[new_batter].copy()

        return BallEventSnapshot(
            striker=players.striker,
            non_striker=players.non_striker,
            bowler=players.bowler,
            striker_stats=ledger.batters.get(players.striker, Batter()).copy(),
            non_striker_stats=ledger.batters.get(players.non_striker, Batter()).copy(),
            bowler_stats=ledger.bowlers.get(players.bowler, Bowler()).copy(),
            score=state.score.copy(),
            over=state.over.copy(),
            fallen_batter=fallen_batter,
            new_batter=new_batter,
            new_batter_before=new_batter_before,
        )

    @property
    def can_undo(self) -> bool:
        return bool(self._state.history)

    def undo(self) -> Optional[BallEvent]:
        """Pop the most recent event and restore the state it was taken from.

        Returns the undone event, or None if there was nothing to undo.
        """
        state = self._state
        if not state.history:
            return None

        event = state.history.pop()
        snap = event.snapshot

        state.score = snap.score.copy()
        state.over = snap.over.copy()
        state.players.striker = snap.striker
        state.players.non_striker = snap.non_striker
        state.players.bowler = snap.bowler

        # An empty slot (all out, or no one named yet) has no ledger entry
        if snap.striker:
            state.ledger.put_batter(snap.striker, snap.striker_stats)
        if snap.non_striker:
            state.ledger.put_batter(snap.non_striker, snap.non_striker_stats)
        if snap.bowler:
            state.ledger.put_bowler(snap.bowler, snap.bowler_stats)

        if snap.new_batter is not None:
            if snap.new_batter_before is not None:
                state.ledger.put_batter(snap.new_batter, snap.new_batter_before)
            elif state.ledger.has_batter(snap.new_batter) and state.ledger.batters[snap.new_batter].is_blank:
                state.ledger.remove_batter(snap.new_batter)

        logger.debug("Undid %s event (%d left in history)", event.type.value, len(state.history))
        return event
