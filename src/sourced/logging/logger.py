# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: sourced
"""
Logger implementation for sourced.

This module provides the default logger implementation based on Python's
standard logging module, enhanced with structured logging capabilities.
Aggregates log from inside synchronous code paths, so every call here is
synchronous.
"""

from __future__ import annotations

import contextlib
import copy
import datetime
import enum
import json
import logging
import sys
import uuid
from logging import StreamHandler
from typing import TYPE_CHECKING, Any

from sourced.logging.config import LogLevel, LoggingSettings

if TYPE_CHECKING:
    from collections.abc import Generator

CONTEXT_ATTR = "sourced_context"


class SourcedJsonEncoder(json.JSONEncoder):
    """JSON encoder that properly handles special types for logging.

    Unserializable objects fall back to their string form so a log call
    never fails because of its context values.
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (datetime.datetime, datetime.date)):
            return obj.isoformat()
        if isinstance(obj, uuid.UUID):
            return str(obj)
        if isinstance(obj, enum.Enum):
            return obj.value
        if isinstance(obj, BaseException):
            return str(obj)
        if hasattr(obj, "model_dump"):  # Pydantic v2 models
            return obj.model_dump(mode="json")
        if hasattr(obj, "__dict__"):
            return {k: v for k, v in vars(obj).items() if not k.startswith("_")}
        return str(obj)


class StructuredFormatter(logging.Formatter):
    """Formatter that supports structured logging with context data."""

    def __init__(
        self,
        json_format: bool = False,
        include_timestamp: bool = True,
        include_level: bool = True,
    ) -> None:
        """Initialize a structured formatter.

        Args:
            json_format: Whether to format logs as JSON
            include_timestamp: Whether to include timestamps in logs
            include_level: Whether to include log level in logs
        """
        self.json_format = json_format
        self.include_timestamp = include_timestamp
        self.include_level = include_level

        fmt = "%(message)s"
        if include_timestamp:
            fmt = "%(asctime)s " + fmt
        if include_level and not json_format:
            fmt = fmt + " [%(levelname)s]"

        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record with structured data.

        Args:
            record: The log record to format

        Returns:
            Formatted log string
        """
        extra: dict[str, Any] = dict(getattr(record, CONTEXT_ATTR, None) or {})

        if self.json_format:
            return self._format_json(record, extra)
        message = super().format(record)
        return self._format_text(message, extra)

    def _format_json(self, record: logging.LogRecord, extra: dict[str, Any]) -> str:
        log_data: dict[str, Any] = {
            "message": record.getMessage(),
            "name": record.name,
            **extra,
        }
        if self.include_level:
            log_data["level"] = record.levelname
        if self.include_timestamp:
            log_data["timestamp"] = self.formatTime(record, self.datefmt)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
            log_data["error"] = str(record.exc_info[1])

        return json.dumps(log_data, cls=SourcedJsonEncoder, ensure_ascii=False)

    def _format_text(self, message: str, extra: dict[str, Any]) -> str:
        if not extra:
            return message

        ctx_str = " ".join(f"{k}={self._format_value(v)}" for k, v in extra.items())
        return f"{message} {ctx_str}"

    def _format_value(self, value: Any) -> str:
        """Format a value for text output.

        Args:
            value: Value to format

        Returns:
            Formatted value string
        """
        if isinstance(value, str):
            # Quote strings that contain spaces
            if " " in value:
                return f'"{value}"'
            return value
        if isinstance(value, datetime.datetime | datetime.date):
            return value.isoformat()
        if isinstance(value, uuid.UUID):
            return str(value)
        if isinstance(value, enum.Enum):
            return value.name
        try:
            return json.dumps(value, cls=SourcedJsonEncoder, ensure_ascii=False)
        except (TypeError, ValueError):
            return str(value)


class SourcedLogger:
    """Default logger implementation for sourced.

    Wraps a standard library logger. Keyword arguments passed to the log
    methods become structured context on the emitted record.
    """

    def __init__(
        self,
        name: str,
        level: LogLevel | None = None,
        settings: LoggingSettings | None = None,
    ) -> None:
        """
        Initialize a new logger.

        Args:
            name: Logger name
            level: Log level override (defaults to the configured level)
            settings: Optional logger settings (loads from environment if None)
        """
        self.name = name
        self._settings = settings or LoggingSettings.load()
        self._logger = logging.getLogger(name)
        self._configure(level or self._settings.level)

        # Bound context values for this logger instance
        self._bound_context: dict[str, Any] = {}
        self._context: dict[str, Any] = {}

    @property
    def settings(self) -> LoggingSettings:
        return self._settings

    def _configure(self, level: LogLevel) -> None:
        self._logger.setLevel(level.stdlib_level)

        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)

        formatter = StructuredFormatter(
            json_format=self._settings.json_format,
            include_timestamp=self._settings.include_timestamp,
            include_level=self._settings.include_level,
        )

        if self._settings.console_enabled:
            console = StreamHandler(sys.stdout)
            console.setFormatter(formatter)
            console.setLevel(logging.NOTSET)
            self._logger.addHandler(console)

        if self._settings.file_enabled and self._settings.file_path:
            file_handler = logging.FileHandler(self._settings.file_path)
            file_handler.setFormatter(formatter)
            self._logger.addHandler(file_handler)

        self._logger.propagate = self._settings.propagate

    def is_enabled_for(self, level: LogLevel) -> bool:
        return self._logger.isEnabledFor(level.stdlib_level)

    def _log(self, level: int, msg: str, **kwargs: Any) -> None:
        """Log a message with the given level and context.

        Args:
            level: Log level (DEBUG, INFO, etc.)
            msg: Message to log
            **kwargs: Additional context values
        """
        if not self._logger.isEnabledFor(level):
            return

        exc_info = kwargs.pop("exc_info", None)

        combined_context = {**self._bound_context, **self._context, **kwargs}

        self._logger.log(
            level,
            msg,
            exc_info=exc_info,
            extra={CONTEXT_ATTR: combined_context},
            stacklevel=3,
        )

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, message, **kwargs)

    def set_level(self, level: LogLevel) -> None:
        """Set the logger's level.

        Args:
            level: New logging level
        """
        self._logger.setLevel(level.stdlib_level)

    @contextlib.contextmanager
    def context(self, **kwargs: Any) -> Generator[None]:
        """
        Context manager for adding contextual information to log messages.

        Args:
            **kwargs: Context key-value pairs to add to log messages
        """
        original_context = self._context.copy()
        self._context.update(kwargs)
        try:
            yield
        finally:
            self._context = original_context

    def bind(self, **kwargs: Any) -> SourcedLogger:
        """Create a new logger with bound context values.

        The new logger shares the underlying standard library logger, so
        handlers and level stay in sync with the original.

        Args:
            **kwargs: Context values to bind

        Returns:
            New logger instance with bound context
        """
        logger = copy.copy(self)
        logger._bound_context = {**self._bound_context, **kwargs}
        logger._context = self._context.copy()
        return logger


def get_logger(
    name: str,
    level: LogLevel | None = None,
    settings: LoggingSettings | None = None,
) -> SourcedLogger:
    """Get a logger for the specified name.

    Args:
        name: Logger name (typically __name__)
        level: Optional log level override
        settings: Optional settings (loads from environment if None)

    Returns:
        Configured logger instance
    """
    logger = SourcedLogger(name, settings=settings or LoggingSettings.load())

    if level is not None:
        logger.set_level(level)

    return logger
