"""
Engine Configuration Module
===========================

Environment-driven runtime settings. Scoring thresholds and lexicons
live in aivisibility.scoring.scoring_config; this module only decides
where they come from and how the process logs.

Environment Variables:
    AIVIS_LOG_LEVEL: Root log level (default: INFO)
    AIVIS_LOG_JSON: "true" for JSON log lines (default: false)
    AIVIS_LOG_FILE: Optional rotating log file path
    AIVIS_SCORING_CONFIG: Optional JSON file of scoring overrides
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .scoring.scoring_config import DEFAULT_CONFIG, ScoringConfig, load_scoring_config


# Load environment variables from the project .env file if present
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_env(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    """
    Get environment variable with optional default and required validation.

    Raises:
        ValueError: If required=True and variable is not set
    """
    value = os.getenv(key, default)
    if required and value is None:
        raise ValueError(f"Required environment variable '{key}' is not set")
    return value


def get_env_bool(key: str, default: bool) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = field(default_factory=lambda: get_env("AIVIS_LOG_LEVEL", "INFO"))
    json_logs: bool = field(default_factory=lambda: get_env_bool("AIVIS_LOG_JSON", False))
    log_file: Optional[str] = field(default_factory=lambda: get_env("AIVIS_LOG_FILE"))

    def __post_init__(self):
        if self.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid AIVIS_LOG_LEVEL: {self.level}")


@dataclass
class Settings:
    """Main settings container."""

    logging: LoggingSettings = field(default_factory=LoggingSettings)
    scoring_config_path: Optional[str] = field(default_factory=lambda: get_env("AIVIS_SCORING_CONFIG"))

    def scoring_config(self) -> ScoringConfig:
        """Scoring config from AIVIS_SCORING_CONFIG, or the defaults."""
        if self.scoring_config_path:
            return load_scoring_config(self.scoring_config_path)
        return DEFAULT_CONFIG


# Global settings instance (lazy-loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings (tests, config reloads)."""
    global _settings
    _settings = None
