"""
Runtime settings + logging setup for a host application embedding the engine.

Library code only ever calls `logging.getLogger(__name__)`. Installing handlers is left to whoever runs the application.
"""

import logging
import os
from typing import Self

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError

ENV_PREFIX = "CHESS_RULES_"
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseModel):
    log_level: str = "INFO"
    log_format: str = DEFAULT_LOG_FORMAT

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise InvalidRequestError(
                f"Unknown log level: {value!r}. Pick one from {','.join(LOG_LEVELS)}"
            )
        return level

    @classmethod
    def from_env(cls) -> Self:
        """Read CHESS_RULES_LOG_LEVEL / CHESS_RULES_LOG_FORMAT, falling back to the defaults."""
        overrides = {
            name: os.environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in os.environ
        }
        return cls(**overrides)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level, format=settings.log_format)
