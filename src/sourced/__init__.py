# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: sourced
"""
sourced: in-memory event sourced aggregates and a fluent toolkit for testing
the events they produce.
"""

from sourced.domain import (
    AggregateRoot,
    DomainError,
    Event,
    EventNode,
    NodeMetadata,
    handles,
)
from sourced.testing import EventAssertionError, check
from sourced.utils import actualize_event, next_id

__version__ = "0.1.0"

__all__ = [
    "AggregateRoot",
    "DomainError",
    "Event",
    "EventAssertionError",
    "EventNode",
    "NodeMetadata",
    "actualize_event",
    "check",
    "handles",
    "next_id",
]
