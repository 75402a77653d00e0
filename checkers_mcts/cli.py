from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from .config import CheckersConfig, get_config, load_config_from_file, setup_logging
from .controller import GameSession
from .engine import format_move, parse_move
from .errors import RuleViolation
from .search import MonteCarloSearch
from .types import Color

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(prog="checkers-mcts", description="Play checkers against a Monte Carlo search engine")
    ap.add_argument("--config", default=None, help="JSON config file")
    ap.add_argument("--budget", type=float, default=None, help="Seconds the engine may think per move")
    ap.add_argument("--seed", type=int, default=None, help="Seed for rollout move selection")
    ap.add_argument("--max-iterations", type=int, default=None, help="Cap on search iterations per move")
    sub = ap.add_subparsers(dest="command")

    play = sub.add_parser("play", help="Play against the engine on the terminal")
    play.add_argument("--human-color", choices=["white", "black"], default="white",
                      help="Color you play (White moves first)")

    sub.add_parser("selfplay", help="Let the engine play both sides")
    args = ap.parse_args(argv)
    if args.command is None:
        args.command = "play"
        args.human_color = "white"
    return args


def build_config(args: argparse.Namespace) -> CheckersConfig:
    config = load_config_from_file(args.config) if args.config else get_config()
    search_updates = {}
    if args.budget is not None:
        search_updates["budget_seconds"] = args.budget
    if args.seed is not None:
        search_updates["seed"] = args.seed
    if args.max_iterations is not None:
        search_updates["max_iterations"] = args.max_iterations
    if search_updates:
        config.update_from_dict({"search": search_updates})
    return config


def _make_session(config: CheckersConfig, human_color: Color) -> GameSession:
    strategy = MonteCarloSearch(settings=config.search, rules=config.rules)
    return GameSession(human_color=human_color, strategy=strategy, rules=config.rules)


def run_selfplay(config: CheckersConfig) -> str:
    session = _make_session(config, Color.WHITE)
    ply = 0
    while not session.is_over:
        side = session.side_to_move
        move = session.play_engine_move()
        ply += 1
        logger.info("Ply %d: %s plays %s", ply, side, format_move(move))
    print(session.position)
    result = session.result_text()
    print(f"Result for White: {result} ({session.outcome})")
    return result


def run_play(config: CheckersConfig, human_color: Color) -> str:
    session = _make_session(config, human_color)
    print(f"You play {human_color}. Enter moves as x,y-x,y (e.g. 2,2-3,3); 'undo' or 'quit'.")
    while not session.is_over:
        print(session.position)
        if not session.is_human_turn():
            move = session.play_engine_move()
            print(f"Engine plays {format_move(move)}")
            continue

        movable = ", ".join(f"{x},{y}" for x, y in session.movable_squares())
        text = input(f"{session.side_to_move} to move (pieces: {movable}) > ").strip()
        if text == "quit":
            return "aborted"
        if text == "undo":
            # Take back the engine's reply and our own move
            while session.undo() and not session.is_human_turn():
                pass
            continue
        move = parse_move(text)
        if move is None:
            print("Could not read that move.")
            continue
        try:
            session.play_human_move(move)
        except RuleViolation as e:
            print(f"Illegal move: {e}")
    print(session.position)
    print(session.result_text())
    return session.result_text()


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    config = build_config(args)
    setup_logging(config.logging)

    if args.command == "selfplay":
        run_selfplay(config)
    else:
        human = Color.WHITE if args.human_color == "white" else Color.BLACK
        run_play(config, human)


if __name__ == "__main__":
    main()
