from checkers_mcts.config import RulesSettings, SearchSettings, reset_config
from checkers_mcts.engine import initial_position, legal_moves
from checkers_mcts.search import MonteCarloSearch, SearchStrategy, get_search_strategy
from checkers_mcts.types import Color, Move


def test_monte_carlo_search_is_a_strategy():
    strat = MonteCarloSearch(SearchSettings(budget_seconds=1.0, max_iterations=5), RulesSettings(), seed=1)
    assert isinstance(strat, SearchStrategy)
    board = initial_position()
    move = strat.search(board, Color.WHITE)
    assert isinstance(move, Move)
    assert move in legal_moves(board, Color.WHITE)


def test_factory_reads_global_settings(monkeypatch):
    monkeypatch.setenv("CHECKERS_MAX_ITERATIONS", "3")
    monkeypatch.setenv("CHECKERS_BUDGET", "2.0")
    reset_config()
    try:
        strat = get_search_strategy(seed=0)
        assert isinstance(strat, MonteCarloSearch)
        assert strat.settings.max_iterations == 3
        strat.search(initial_position(), Color.BLACK)
        assert strat.last_stats.iterations == 3
    finally:
        reset_config()
