"""Utilities shared across sourced."""

from sourced.utils.ids import IdProviderProtocol, UlidProvider, next_id
from sourced.utils.stream import actualize_event, delay, named_event_class

__all__ = [
    "IdProviderProtocol",
    "UlidProvider",
    "actualize_event",
    "delay",
    "named_event_class",
    "next_id",
]
