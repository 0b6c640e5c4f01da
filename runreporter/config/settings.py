"""Reporter settings via Pydantic BaseSettings."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings

from runreporter.exceptions import ConfigError


class Settings(BaseSettings):
    model_config = {
        "env_prefix": "RUNREPORTER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    # Reporter
    reporter_name: str = "spec"
    log_events: bool = False  # attach a LoggingObserver to every reporter

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            msg = f"Unknown log level: {value}"
            raise ValueError(msg)
        return level


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    try:
        return Settings()
    except ValidationError as exc:
        msg = f"Invalid runreporter settings: {exc}"
        raise ConfigError(msg) from exc
