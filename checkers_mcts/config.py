"""
Central configuration for search budgets, rule parameters and logging.
Pydantic models give type-safe, validated settings.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class SearchSettings(BaseModel):
    """Monte Carlo search configuration."""

    budget_seconds: float = Field(default=5.0, gt=0, description="Wall-clock budget per engine move")
    exploration_weight: float = Field(default=1.0, ge=0, description="Weight of the UCB1 exploration term")
    max_iterations: Optional[int] = Field(default=None, ge=1, description="Optional cap on search iterations")
    seed: Optional[int] = Field(default=None, description="Seed for rollout move selection")

    @field_validator('budget_seconds', 'exploration_weight', mode='before')
    @classmethod
    def validate_float_fields(cls, v):
        return float(v)


class RulesSettings(BaseModel):
    """Game rule parameters."""

    no_progress_limit: int = Field(default=40, ge=1, description="Plies without a capture before the game is drawn")

    @field_validator('no_progress_limit', mode='before')
    @classmethod
    def validate_int_fields(cls, v):
        return int(v)


class LoggingSettings(BaseModel):
    """Logging configuration."""

    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_to_file: bool = Field(default=False, description="Write logs to file")
    log_file_path: str = Field(default="checkers.log", description="Log file path")

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR']
        v_upper = v.upper() if isinstance(v, str) else str(v).upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper


class CheckersConfig(BaseModel):
    """Main configuration model."""

    search: SearchSettings = Field(default_factory=SearchSettings)
    rules: RulesSettings = Field(default_factory=RulesSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    # Metadata
    version: str = Field(default="1.0.0", description="Configuration version")
    config_file: Optional[str] = Field(default=None, description="Path to config file")

    @classmethod
    def from_env(cls) -> 'CheckersConfig':
        """Create configuration from environment variables."""
        seed = os.getenv('CHECKERS_SEED')
        max_iterations = os.getenv('CHECKERS_MAX_ITERATIONS')
        return cls(
            search=SearchSettings(
                budget_seconds=os.getenv('CHECKERS_BUDGET', '5.0'),
                seed=int(seed) if seed else None,
                max_iterations=int(max_iterations) if max_iterations else None,
            ),
            rules=RulesSettings(
                no_progress_limit=os.getenv('CHECKERS_NO_PROGRESS_LIMIT', '40'),
            ),
            logging=LoggingSettings(
                log_level=os.getenv('CHECKERS_LOG_LEVEL', 'INFO'),
                log_to_file=os.getenv('CHECKERS_LOG_FILE', 'false').lower() == 'true',
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'search': self.search.model_dump(),
            'rules': self.rules.model_dump(),
            'logging': self.logging.model_dump(),
            'version': self.version,
            'config_file': self.config_file,
        }

    def save_to_file(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        config_dict = self.to_dict()
        config_dict['config_file'] = filepath

        with open(filepath, 'w') as f:
            json.dump(config_dict, f, indent=2)

    @classmethod
    def load_from_file(cls, filepath: str) -> 'CheckersConfig':
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)

        return cls(
            search=SearchSettings(**data.get('search', {})),
            rules=RulesSettings(**data.get('rules', {})),
            logging=LoggingSettings(**data.get('logging', {})),
            version=data.get('version', '1.0.0'),
            config_file=filepath,
        )

    def update_from_dict(self, updates: Dict[str, Any]) -> None:
        """Update configuration from dictionary; values are re-validated."""
        for section, settings in updates.items():
            if hasattr(self, section) and isinstance(settings, dict):
                section_model = getattr(self, section)
                merged = {**section_model.model_dump(), **settings}
                setattr(self, section, type(section_model)(**merged))


# Global configuration instance
_config: Optional[CheckersConfig] = None


def get_config() -> CheckersConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = CheckersConfig.from_env()
    return _config


def load_config_from_file(filepath: str) -> CheckersConfig:
    """Load configuration from file and update global instance."""
    global _config
    _config = CheckersConfig.load_from_file(filepath)
    return _config


def reset_config() -> None:
    """Reset the global configuration to defaults."""
    global _config
    _config = None


def get_search_settings() -> SearchSettings:
    return get_config().search


def get_rules_settings() -> RulesSettings:
    return get_config().rules


def get_logging_settings() -> LoggingSettings:
    return get_config().logging


def setup_logging(settings: Optional[LoggingSettings] = None) -> None:
    """Configure root logging once, from the logging settings."""
    if getattr(setup_logging, "_configured", False):
        return
    settings = settings or get_logging_settings()
    level: int = getattr(logging, settings.log_level, logging.INFO)
    kwargs: Dict[str, Any] = {}
    if settings.log_to_file:
        kwargs["filename"] = settings.log_file_path
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        **kwargs,
    )
    setup_logging._configured = True  # type: ignore[attr-defined]
