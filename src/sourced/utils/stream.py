# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: sourced
"""
Helpers for working with stored event streams.
"""

from __future__ import annotations

import asyncio
import json
from functools import lru_cache
from typing import Any

from pydantic import create_model

from sourced.domain.errors import HydrationError
from sourced.domain.events import Event


@lru_cache(maxsize=256)
def named_event_class(name: str) -> type[Event]:
    """Return an empty ``Event`` subclass called ``name``.

    Classes are cached per name so repeated hydration yields instances of the
    same type.
    """
    return create_model(name, __base__=Event)


def actualize_event(name: str, payload: str) -> Event:
    """Rebuild an event of a type that is not known statically.

    Every top-level field of the JSON payload is copied onto a fresh instance
    of a class named ``name``, so the result dispatches like the original.

    Args:
        name: The event type name
        payload: The serialized event fields, a JSON object

    Returns:
        The hydrated event

    Raises:
        HydrationError: If the payload is not a JSON object
    """
    try:
        data: Any = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise HydrationError(
            f"Invalid payload for event '{name}': {e}", event_name=name
        ) from e

    if not isinstance(data, dict):
        raise HydrationError(
            f"Payload for event '{name}' must be a JSON object, got {type(data).__name__}",
            event_name=name,
        )

    return named_event_class(name)(**data)


async def delay(duration: float = 0.1) -> None:
    """Suspend for ``duration`` seconds."""
    await asyncio.sleep(duration)
