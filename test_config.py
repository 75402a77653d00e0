import pytest
from pydantic import ValidationError

from checkers_mcts import config as cfg
from checkers_mcts.config import (
    CheckersConfig,
    LoggingSettings,
    RulesSettings,
    SearchSettings,
)


@pytest.fixture(autouse=True)
def fresh_config():
    cfg.reset_config()
    yield
    cfg.reset_config()


def test_defaults():
    config = CheckersConfig()
    assert config.search.budget_seconds == 5.0
    assert config.search.exploration_weight == 1.0
    assert config.search.max_iterations is None
    assert config.rules.no_progress_limit == 40
    assert config.logging.log_level == "INFO"


def test_validation_rejects_bad_values():
    with pytest.raises(ValidationError):
        SearchSettings(budget_seconds=0)
    with pytest.raises(ValidationError):
        SearchSettings(max_iterations=0)
    with pytest.raises(ValidationError):
        RulesSettings(no_progress_limit=0)
    with pytest.raises(ValidationError):
        LoggingSettings(log_level="chatty")
    assert LoggingSettings(log_level="debug").log_level == "DEBUG"


def test_from_env(monkeypatch):
    monkeypatch.setenv("CHECKERS_BUDGET", "0.5")
    monkeypatch.setenv("CHECKERS_SEED", "17")
    monkeypatch.setenv("CHECKERS_MAX_ITERATIONS", "200")
    monkeypatch.setenv("CHECKERS_NO_PROGRESS_LIMIT", "60")
    monkeypatch.setenv("CHECKERS_LOG_LEVEL", "warning")
    config = CheckersConfig.from_env()
    assert config.search.budget_seconds == 0.5
    assert config.search.seed == 17
    assert config.search.max_iterations == 200
    assert config.rules.no_progress_limit == 60
    assert config.logging.log_level == "WARNING"


def test_save_and_load_round_trip(tmp_path):
    path = str(tmp_path / "checkers.json")
    config = CheckersConfig(search=SearchSettings(budget_seconds=2.5, seed=3),
                            rules=RulesSettings(no_progress_limit=30))
    config.save_to_file(path)
    loaded = cfg.load_config_from_file(path)
    assert loaded.search.budget_seconds == 2.5
    assert loaded.search.seed == 3
    assert loaded.rules.no_progress_limit == 30
    assert loaded.config_file == path
    assert cfg.get_config() is loaded


def test_update_from_dict_revalidates():
    config = CheckersConfig()
    config.update_from_dict({"search": {"budget_seconds": 1, "seed": 9}, "unknown": {"x": 1}})
    assert config.search.budget_seconds == 1.0
    assert config.search.seed == 9
    with pytest.raises(ValidationError):
        config.update_from_dict({"rules": {"no_progress_limit": -3}})


def test_global_config_is_cached(monkeypatch):
    monkeypatch.setenv("CHECKERS_BUDGET", "1.5")
    first = cfg.get_config()
    assert cfg.get_search_settings().budget_seconds == 1.5
    assert cfg.get_config() is first
    cfg.reset_config()
    assert cfg.get_config() is not first
