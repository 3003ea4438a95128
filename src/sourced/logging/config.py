# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: sourced
"""
Settings for sourced loggers.

Every field can be set through a SOURCED_LOGGING_<FIELD> environment variable,
for example ``SOURCED_LOGGING_LEVEL=debug``. Library loggers hand records to
the application's root logger unless a console or file handler is enabled.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def stdlib_level(self) -> int:
        """The numeric level the standard library uses for this name."""
        return logging.getLevelNamesMapping()[self.value]


class LoggingSettings(BaseSettings):
    """Handler and format options applied by ``get_logger``."""

    model_config = SettingsConfigDict(
        env_prefix="SOURCED_LOGGING_",
        extra="ignore",
        case_sensitive=False,
    )

    level: LogLevel = Field(default=LogLevel.INFO, description="Minimum level emitted")

    # Output format
    json_format: bool = Field(default=False, description="One JSON object per line")
    include_timestamp: bool = Field(default=True, description="Prefix a timestamp")
    include_level: bool = Field(default=True, description="Show the level name")

    # Handlers
    console_enabled: bool = Field(default=False, description="Attach a stdout handler")
    file_enabled: bool = Field(default=False, description="Attach a file handler")
    file_path: str | None = Field(default=None, description="File for the file handler")
    propagate: bool = Field(default=True, description="Pass records to the root logger")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        # Names are case-insensitive; anything else is left to enum validation.
        return v.upper() if isinstance(v, str) else v

    @classmethod
    def load(cls) -> LoggingSettings:
        """Read settings from the environment."""
        return cls()
