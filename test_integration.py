from __future__ import annotations

import pytest

from checkers_mcts.cli import build_config, parse_args, run_selfplay
from checkers_mcts.config import RulesSettings, SearchSettings, reset_config
from checkers_mcts.controller import validate_and_apply
from checkers_mcts.engine import initial_position, next_side
from checkers_mcts.search import request_move
from checkers_mcts.types import Color


@pytest.fixture(autouse=True)
def fresh_config():
    reset_config()
    yield
    reset_config()


def test_end_to_end_move_and_apply():
    board = initial_position()
    settings = SearchSettings(budget_seconds=5.0, max_iterations=20)

    best = request_move(board, Color.WHITE, 0, seed=7, settings=settings, rules=RulesSettings())
    new_board = validate_and_apply(board, Color.WHITE, best)
    assert new_board != board
    assert next_side(new_board, best, Color.WHITE) is Color.BLACK

    reply = request_move(new_board, Color.BLACK, 1, seed=7, settings=settings, rules=RulesSettings())
    assert validate_and_apply(new_board, Color.BLACK, reply) != new_board


def test_cli_overrides_reach_config():
    args = parse_args(["--budget", "0.5", "--seed", "4", "--max-iterations", "10", "selfplay"])
    assert args.command == "selfplay"
    config = build_config(args)
    assert config.search.budget_seconds == 0.5
    assert config.search.seed == 4
    assert config.search.max_iterations == 10


def test_selfplay_finishes_with_a_result(capsys):
    args = parse_args(["--budget", "5", "--seed", "1", "--max-iterations", "3", "selfplay"])
    config = build_config(args)
    config.rules.no_progress_limit = 10
    result = run_selfplay(config)
    assert result in ("WIN", "LOSS", "DRAW")
    assert result in capsys.readouterr().out
