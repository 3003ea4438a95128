# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: sourced
"""
Aggregate root base class with event sourcing support.

An aggregate owns a projected state, a buffer of events applied since the last
commit, and the history of events it was rebuilt from. Persistence, locking and
publishing belong to the caller: it reads the uncommitted buffer, stores it,
then calls ``commit``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, ClassVar, Generic, TypeVar

from sourced.domain.events import EventNode
from sourced.domain.identity import event_name
from sourced.logging import get_logger
from sourced.utils.ids import next_id

E = TypeVar("E")
F = TypeVar("F", bound=Callable[..., Any])

FailureHandler = Callable[[BaseException], None]

logger = get_logger(__name__)


def handles(*event_types: type | str) -> Callable[[F], F]:
    """Mark an aggregate method as the state handler for the given events.

    Use it when a handler cannot follow the ``on_<EventName>`` naming rule.

    Example:
        class Account(AggregateRoot):
            @handles(Opened, Reopened)
            def _mark_open(self, event):
                self.state["open"] = True
    """

    def decorator(method: F) -> F:
        method._handles_events = tuple(event_name(t) for t in event_types)  # type: ignore[attr-defined]
        return method

    return decorator


class AggregateRoot(Generic[E]):
    """Base class for all event sourced aggregates.

    Subclasses change state only from event handlers, methods named
    ``on_<EventName>`` where EventName is the class name of the event. The
    handler table is built once per class when the class is defined; only an
    exact name match is dispatched, and an event without a handler is still
    recorded.

    Example:
        class Created(Event):
            id: str

        class Account(AggregateRoot[Event]):
            def create(self) -> None:
                self.apply(Created(id=self.id))

            def on_Created(self, event: Created) -> None:
                self.state["id"] = event.id
    """

    handler_prefix: ClassVar[str] = "on_"
    # Historic node replay dispatched every node twice. Off by default.
    replay_nodes_twice: ClassVar[bool] = False

    _event_handlers: ClassVar[dict[str, str]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._event_handlers = cls._build_handler_table()

    @classmethod
    def _build_handler_table(cls) -> dict[str, str]:
        """Map event names to handler method names, walking the MRO base first."""
        table: dict[str, str] = {}
        prefix = cls.handler_prefix
        for klass in reversed(cls.__mro__):
            for attr_name, attr in vars(klass).items():
                if attr_name.startswith(prefix) and len(attr_name) > len(prefix):
                    name = attr_name[len(prefix) :]
                    if callable(attr):
                        table[name] = attr_name
                    else:
                        table.pop(name, None)
                for name in getattr(attr, "_handles_events", ()):
                    table[name] = attr_name
        return table

    def __init__(self, aggregate_id: str | None = None) -> None:
        """Create an aggregate with empty buffers and the initial state.

        Args:
            aggregate_id: Identifier to use, generated when omitted
        """
        self._id: str = aggregate_id or next_id()
        self._state: Any = self.initial_state()
        self._uncommitted_events: list[E] = []
        self._loaded_events: list[E] = []
        self._loaded_event_nodes: list[EventNode[E]] = []
        self._failure_handler: FailureHandler | None = None

    def initial_state(self) -> Any:
        """Return the state of an aggregate that has seen no events."""
        return {}

    @property
    def id(self) -> str:
        """Return the aggregate's unique identifier."""
        return self._id

    @property
    def state(self) -> Any:
        """Return the projected state."""
        return self._state

    def get_state(self) -> Any:
        return self._state

    def get_uncommitted_events(self) -> list[E]:
        """Return a copy of the events applied since the last commit, in order."""
        return list(self._uncommitted_events)

    def get_loaded_events(self) -> list[E]:
        """Return a copy of every event replayed into this aggregate."""
        return list(self._loaded_events)

    def get_loaded_event_nodes(self) -> list[EventNode[E]]:
        """Return a copy of every event node replayed into this aggregate."""
        return list(self._loaded_event_nodes)

    def apply(self, event: E, is_from_history: bool = False) -> None:
        """Record an event and dispatch it to its state handler.

        Args:
            event: The event to apply
            is_from_history: True while replaying; the event is then
                dispatched but not added to the uncommitted buffer

        Raises:
            Exception: Whatever the state handler raises, unchanged
        """
        if not is_from_history:
            self._uncommitted_events.append(event)

        handler = self.get_event_handler(event)
        logger.debug(
            "Applying event",
            aggregate_id=self._id,
            event_type=event_name(event),
            from_history=is_from_history,
            handled=handler is not None,
        )
        if handler is not None:
            handler(event)

    def get_event_handler(self, event: E) -> Callable[[E], None] | None:
        """Return the bound handler for an event, or None when there is none."""
        method_name = self._event_handlers.get(event_name(event))
        if method_name is None:
            return None
        method = getattr(self, method_name, None)
        return method if callable(method) else None

    def commit(self) -> None:
        """Clear the uncommitted buffer once its events have been persisted."""
        logger.debug(
            "Committing events",
            aggregate_id=self._id,
            count=len(self._uncommitted_events),
        )
        self._uncommitted_events.clear()

    def uncommit(self) -> None:
        """Discard the uncommitted buffer without persisting it."""
        logger.debug(
            "Discarding uncommitted events",
            aggregate_id=self._id,
            count=len(self._uncommitted_events),
        )
        self._uncommitted_events.clear()

    def load_from_history(self, events: Iterable[E]) -> None:
        """Rebuild state by replaying past events in order.

        Replayed events are dispatched to their handlers and appended to the
        loaded history, never to the uncommitted buffer. Calls accumulate.

        Args:
            events: Past events, oldest first; a snapshot event may lead
        """
        count = 0
        for event in events:
            self.apply(event, is_from_history=True)
            self._loaded_events.append(event)
            count += 1
        logger.debug("Loaded events from history", aggregate_id=self._id, count=count)

    def load_from_event_nodes(self, nodes: Iterable[EventNode[E]]) -> None:
        """Rebuild state by replaying events wrapped with persistence metadata.

        Each node's event is dispatched once, the node is recorded in the
        loaded node history, and the events are added to the loaded event
        history. With ``replay_nodes_twice`` set, the events are additionally
        replayed through ``load_from_history``, dispatching each one a second
        time as older releases did.

        Args:
            nodes: Event nodes, oldest first
        """
        nodes = list(nodes)
        for node in nodes:
            self.apply(node.event, is_from_history=True)
            self._loaded_event_nodes.append(node)

        events = [node.event for node in nodes]
        if self.replay_nodes_twice:
            self.load_from_history(events)
        else:
            self._loaded_events.extend(events)
        logger.debug(
            "Loaded event nodes",
            aggregate_id=self._id,
            count=len(nodes),
            replayed_twice=self.replay_nodes_twice,
        )

    def snapshot(self) -> E | None:
        """Return an event condensing the current state, or None.

        The aggregate never calls this itself. A persistence layer may store
        the result and feed it back as the first event of a later replay.
        """
        return None

    def set_failure_handler(self, handler: FailureHandler | None) -> None:
        """Install the callback that receives errors passed to ``fail``.

        Only one handler is kept; a later call replaces the earlier one.
        """
        self._failure_handler = handler

    def fail(self, error: BaseException) -> None:
        """Route an error to the failure handler, or raise it when none is set.

        Args:
            error: The error to escalate

        Raises:
            BaseException: ``error`` itself when no failure handler is installed
        """
        if self._failure_handler is not None:
            logger.debug(
                "Routing failure to handler",
                aggregate_id=self._id,
                error=error,
            )
            self._failure_handler(error)
            return

        logger.warning(
            "Aggregate failure without handler",
            aggregate_id=self._id,
            error=error,
        )
        raise error

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(id={self._id!r}, "
            f"uncommitted={len(self._uncommitted_events)})"
        )
