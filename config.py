"""
Central configuration for the draughts engine.
Pydantic models give type-safe settings for the AI, the game rules and logging.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

DIFFICULTIES = ("easy", "medium", "hard")
COLORS = ("red", "black")


class AISettings(BaseModel):
    """Search and evaluation tunables."""

    difficulty: str = Field(default="medium", description="Default difficulty (easy, medium, hard)")
    minimax_depth: int = Field(default=2, ge=1, le=6, description="Plies searched below each candidate move")
    score_tolerance: float = Field(default=10.0, ge=0, description="Hard AI picks randomly within this margin of the best score")
    top_k: int = Field(default=3, ge=1, description="Medium AI picks randomly among this many best quiet moves")
    danger_penalty: float = Field(default=30.0, ge=0, description="Medium AI penalty for a move that can be captured at once")
    man_value: float = Field(default=100.0, gt=0, description="Material value of a man")
    king_value: float = Field(default=160.0, gt=0, description="Material value of a king")
    vulnerable_penalty: float = Field(default=40.0, ge=0, description="Penalty per own piece en prise")
    vulnerable_bonus: float = Field(default=20.0, ge=0, description="Bonus per opponent piece en prise")
    terminal_score: float = Field(default=9999.0, gt=0, description="Score of a side left without moves")

    @field_validator('difficulty', mode='before')
    @classmethod
    def validate_difficulty(cls, v):
        v_lower = str(v).lower()
        if v_lower not in DIFFICULTIES:
            raise ValueError(f"difficulty must be one of {list(DIFFICULTIES)}")
        return v_lower


class GameRulesSettings(BaseModel):
    """Game rules and variant settings."""

    captures_mandatory: bool = Field(default=True, description="Require captures when available")
    max_moves_without_capture: int = Field(default=50, ge=1, description="Draw after this many quiet moves")
    first_player: str = Field(default="red", description="Color that moves first")

    @field_validator('captures_mandatory', mode='before')
    @classmethod
    def validate_bool_fields(cls, v):
        return bool(v)

    @field_validator('first_player', mode='before')
    @classmethod
    def validate_first_player(cls, v):
        v_lower = str(v).lower()
        if v_lower not in COLORS:
            raise ValueError(f"first_player must be one of {list(COLORS)}")
        return v_lower


class LoggingSettings(BaseModel):
    """Logging configuration."""

    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_to_file: bool = Field(default=False, description="Write logs to file")
    log_file_path: str = Field(default="draughts.log", description="Log file path")

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR']
        v_upper = v.upper() if isinstance(v, str) else str(v).upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper


class DraughtsConfig(BaseModel):
    """Main configuration model for the draughts engine."""

    ai: AISettings = Field(default_factory=AISettings)
    rules: GameRulesSettings = Field(default_factory=GameRulesSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    # Metadata
    version: str = Field(default="1.0.0", description="Configuration version")
    config_file: Optional[str] = Field(default=None, description="Path to config file")

    @classmethod
    def from_env(cls) -> 'DraughtsConfig':
        """Create configuration from environment variables."""
        return cls(
            ai=AISettings(
                difficulty=os.getenv('DRAUGHTS_DIFFICULTY', 'medium'),
                minimax_depth=int(os.getenv('DRAUGHTS_DEPTH', '2')),
            ),
            rules=GameRulesSettings(
                captures_mandatory=os.getenv('DRAUGHTS_MANDATORY', 'true').lower() == 'true',
                max_moves_without_capture=int(os.getenv('DRAUGHTS_MAX_QUIET_MOVES', '50')),
            ),
            logging=LoggingSettings(
                log_level=os.getenv('DRAUGHTS_LOG_LEVEL', 'INFO'),
                log_to_file=os.getenv('DRAUGHTS_LOG_FILE', 'false').lower() == 'true',
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'ai': self.ai.model_dump(),
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
    def load_from_file(cls, filepath: str) -> 'DraughtsConfig':
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)

        return cls(
            ai=AISettings(**data.get('ai', {})),
            rules=GameRulesSettings(**data.get('rules', {})),
            logging=LoggingSettings(**data.get('logging', {})),
            version=data.get('version', '1.0.0'),
            config_file=filepath,
        )


# Global configuration instance
_config: Optional[DraughtsConfig] = None


def get_config() -> DraughtsConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = DraughtsConfig.from_env()
    return _config


def load_config_from_file(filepath: str) -> DraughtsConfig:
    """Load configuration from file and update global instance."""
    global _config
    _config = DraughtsConfig.load_from_file(filepath)
    return _config


def reset_config() -> None:
    """Reset the global configuration to defaults."""
    global _config
    _config = None


def get_ai_settings() -> AISettings:
    """Get AI configuration settings."""
    return get_config().ai


def get_game_rules() -> GameRulesSettings:
    """Get game rules configuration settings."""
    return get_config().rules


def get_logging_settings() -> LoggingSettings:
    """Get logging configuration settings."""
    return get_config().logging


def setup_logging(settings: Optional[LoggingSettings] = None) -> None:
    """Configure root logging once, controlled by the logging settings."""
    if getattr(setup_logging, "_configured", False):
        return
    settings = settings or get_logging_settings()
    level: int = getattr(logging, settings.log_level, logging.INFO)
    handlers = [logging.StreamHandler()]
    if settings.log_to_file:
        handlers.append(logging.FileHandler(settings.log_file_path))
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
    )
    setup_logging._configured = True  # type: ignore[attr-defined]
