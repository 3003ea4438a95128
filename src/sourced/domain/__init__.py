"""Domain layer for sourced.

Aggregates, events, and the event identity rules they share.
"""

from sourced.domain.aggregate import AggregateRoot, FailureHandler, handles
from sourced.domain.errors import DomainError, HydrationError
from sourced.domain.events import Event, EventNode, NodeMetadata
from sourced.domain.identity import event_fields, event_name, occurrences

__all__ = [
    "AggregateRoot",
    "DomainError",
    "Event",
    "EventNode",
    "FailureHandler",
    "HydrationError",
    "NodeMetadata",
    "event_fields",
    "event_name",
    "handles",
    "occurrences",
]
