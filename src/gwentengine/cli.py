from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from gwentengine.engine.ai import AISpec
from gwentengine.engine.types import DIFFICULTIES
from gwentengine.paths import get_paths
from gwentengine.services.content import ContentService
from gwentengine.services.session import MatchSession
from gwentengine.services.telemetry import TelemetryService


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gwent-engine")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sim = sub.add_parser("simulate", help="Play a full AI-vs-AI match")
    sim.add_argument("--seed", type=int, default=None)
    sim.add_argument("--faction", default="nilfgaard")
    sim.add_argument("--opponent-faction", default=None)
    sim.add_argument("--player-ai", choices=DIFFICULTIES, default="medium")
    sim.add_argument("--opponent-ai", choices=DIFFICULTIES, default="hard")
    sim.add_argument("--max-steps", type=int, default=500)
    sim.add_argument("--telemetry", type=Path, default=None, help="JSONL output (default: userdata/telemetry.jsonl)")
    sim.add_argument("--no-telemetry", action="store_true")
    return parser


def simulate(args: argparse.Namespace) -> int:
    paths = get_paths()
    content = ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir)
    telemetry = None
    if not args.no_telemetry:
        telemetry = TelemetryService(args.telemetry or paths.telemetry_file)

    session = MatchSession.start(
        content,
        faction=args.faction,
        opponent_faction=args.opponent_faction,
        seed=args.seed,
        ai_spec=AISpec(difficulty=args.opponent_ai),
        telemetry=telemetry,
    )
    player_spec = AISpec(difficulty=args.player_ai)

    for _ in range(args.max_steps):
        state = session.state
        if state.is_game_over:
            break
        if state.current_player == session.ai_side:
            res = session.opponent_turn()
        else:
            res = session.submit(session.recommend("player", player_spec).action)
        if res is None:
            break
        ended = res.round_ended
        if ended is not None:
            print(
                f"Round {ended.round}: player {ended.powers['player']} - "
                f"opponent {ended.powers['opponent']} -> {ended.winner or 'tie'}"
            )
        if res.match_ended is not None:
            print(f"Winner: {res.match_ended.winner}")

    if not session.state.is_game_over:
        print(f"Stopped after {args.max_steps} steps without a winner.")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    if args.command == "simulate":
        return simulate(args)
    return 1
