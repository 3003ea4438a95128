# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: sourced
"""
Event identity helpers shared by the aggregate and the assertion toolkit.

An event's identity is the name of its class. Two events are of the same kind
when their names match; fields are only compared when explicitly requested.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from typing import Any

_MISSING: Any = object()


def event_name(event: Any) -> str:
    """Return the identity of an event, an event class or an event name.

    Args:
        event: An event instance, an event class, or an event name

    Returns:
        The event type name
    """
    if isinstance(event, str):
        return event
    if isinstance(event, type):
        return event.__name__
    return type(event).__name__


def event_fields(event: Any) -> dict[str, Any]:
    """Return the public fields carried by an event instance.

    Pydantic models, dataclasses, named tuples, and objects with a
    ``__dict__`` or ``__slots__`` are supported. An object exposing none of
    these has no fields.
    """
    if hasattr(event, "model_dump"):
        return event.model_dump()
    if dataclasses.is_dataclass(event) and not isinstance(event, type):
        return dataclasses.asdict(event)
    if isinstance(event, tuple) and hasattr(event, "_asdict"):
        return dict(event._asdict())

    fields: dict[str, Any] = {}
    for name in _slot_names(type(event)):
        value = getattr(event, name, _MISSING)
        if value is not _MISSING:
            fields[name] = value
    if hasattr(event, "__dict__"):
        fields.update(vars(event))
    return {k: v for k, v in fields.items() if not k.startswith("_")}


def field_value(event: Any, name: str, default: Any = None) -> Any:
    """Return the value of one event field.

    Extra fields stored on a pydantic model are read before attributes, so a
    payload key that shares its name with a model attribute or property
    still yields the payload value.
    """
    extra = getattr(event, "__pydantic_extra__", None)
    if extra and name in extra:
        return extra[name]
    return getattr(event, name, default)


def _slot_names(cls: type) -> list[str]:
    names: list[str] = []
    for klass in cls.__mro__:
        slots = vars(klass).get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.extend(s for s in slots if s not in ("__dict__", "__weakref__"))
    return names


def event_names(events: Iterable[Any]) -> list[str]:
    return [event_name(event) for event in events]


def occurrences(names: Iterable[str], name: str) -> int:
    """Count how many times ``name`` appears in ``names``."""
    return sum(1 for candidate in names if candidate == name)
