# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: sourced

"""
Public API for the sourced logging system.
"""

from __future__ import annotations

from sourced.logging.config import LogLevel, LoggingSettings
from sourced.logging.logger import (
    SourcedJsonEncoder,
    SourcedLogger,
    StructuredFormatter,
    get_logger,
)

__all__ = [
    "LogLevel",
    "LoggingSettings",
    "SourcedJsonEncoder",
    "SourcedLogger",
    "StructuredFormatter",
    "get_logger",
]
