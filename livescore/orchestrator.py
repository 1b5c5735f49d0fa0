"""
Live Scoring command line.

Inspect or clear the saved match, or play a short scripted match
through the engine to check everything is wired up.

Usage:
    python -m livescore.orchestrator --show
    python -m livescore.orchestrator --reset
    python -m livescore.orchestrator --demo
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from livescore.config import ScorerConfig
from livescore.data.ball_event import ExtraKind, MatchStatus, WicketKind
from livescore.engine.lifecycle import MatchLifecycle
from livescore.scorecard import format_innings
from livescore.storage.match_store import InMemoryStorage

logger = logging.getLogger("livescore.orchestrator")


def print_match(lifecycle: MatchLifecycle) -> None:
    state = lifecycle.state
    if state.match_status == MatchStatus.SETUP:
        print("No active match.")
        return

    print("=" * 60)
    print(f"{state.team_a} v {state.team_b} ({state.overs_limit} overs) - {state.match_status.value}")
    print("=" * 60)
    for record in state.innings_records:
        print(format_innings(record))
        print()
    print(format_innings(state))
    if state.runs_needed is not None and state.match_status == MatchStatus.IN_PROGRESS:
        print(f"\n{state.batting_team} need {state.runs_needed} from {state.balls_remaining} balls")
    result = lifecycle.result_summary()
    if result:
        print(f"\n{result}")


def run_show(config: ScorerConfig) -> None:
    lifecycle = MatchLifecycle.from_config(config)
    print_match(lifecycle)


def run_reset(config: ScorerConfig) -> None:
    lifecycle = MatchLifecycle.from_config(config)
    lifecycle.reset_match()
    logger.info("Saved match cleared from %s", config.storage_path)


def run_demo() -> None:
    """Two-over match scored through the full action surface."""
    logger.info("=" * 60)
    logger.info("LIVE SCORING - DEMO MODE")
    logger.info("=" * 60)

    lifecycle = MatchLifecycle(storage=InMemoryStorage())
    lifecycle.start_match("Thunder", "Strikers", 2, "Ali", "Ben", "Sam")

    for runs in (1, 4, 0, 0, 6, 2):
        lifecycle.add_run(runs)
    lifecycle.set_bowler("Tom")
    lifecycle.add_extra(ExtraKind.WIDE, 0)
    lifecycle.add_run(1)
    lifecycle.add_wicket(WicketKind.CAUGHT, "Cal")
    lifecycle.add_extra(ExtraKind.LEG_BYES, 1)
    lifecycle.add_run(3)
    lifecycle.add_run(4)
    lifecycle.undo_last_ball()
    lifecycle.add_run(2)
    lifecycle.add_run(0)

    lifecycle.start_second_innings("Dev", "Eli", "Ali")
    for runs in (4, 6, 1, 6, 4, 0):
        lifecycle.add_run(runs)
    lifecycle.set_bowler("Ben")
    for runs in (2, 1, 4):
        if lifecycle.state.match_status != MatchStatus.IN_PROGRESS:
            break
        lifecycle.add_run(runs)

    print_match(lifecycle)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Live Cricket Scoring Engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m livescore.orchestrator --show
  python -m livescore.orchestrator --reset --data-dir data/
  python -m livescore.orchestrator --demo
        """,
    )

    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--show", action="store_true", help="Print the saved match scorecard")
    mode.add_argument("--reset", action="store_true", help="Clear the saved match")
    mode.add_argument("--demo", action="store_true", help="Score a short scripted match")

    parser.add_argument("--data-dir", type=str, help="Directory holding the saved match")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    config = ScorerConfig.from_env()
    if args.data_dir:
        config = ScorerConfig(
            data_dir=Path(args.data_dir),
            storage_key=config.storage_key,
            autosave=config.autosave,
            log_level=config.log_level,
        )

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.demo:
        run_demo()
    elif args.show:
        run_show(config)
    elif args.reset:
        run_reset(config)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
