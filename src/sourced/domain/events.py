# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: sourced
"""
domain.events
Base event and event node models for sourced aggregates
"""

from __future__ import annotations

from typing import Any, ClassVar, Generic, Self, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from sourced.domain.identity import event_name

E = TypeVar("E")


class Event(BaseModel):
    """Base class for domain events.

    Events are immutable records of something that happened. The class name
    is the event's identity; every other attribute is a field. Extra fields
    are accepted so events rebuilt from a stored payload keep everything the
    payload carried.

    Example:
        class Created(Event):
            id: str
            created_at: str
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(
        frozen=True,
        extra="allow",
        arbitrary_types_allowed=True,
        populate_by_name=True,
    )

    @property
    def event_type(self) -> str:
        """Return the event's identity."""
        return event_name(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create an event from a dictionary."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        return f"{self.event_type}({self.model_dump()})"


class NodeMetadata(BaseModel):
    """Persistence metadata attached to a stored event."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    id: str
    index: int = Field(ge=0)


class EventNode(BaseModel, Generic[E]):
    """An event annotated with its persistence metadata."""

    model_config: ClassVar[ConfigDict] = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
    )

    event: E
    metadata: NodeMetadata
