"""Tests for the aggregate check toolkit."""

from __future__ import annotations

import io
from typing import NamedTuple

import pytest
from rich.console import Console

from sourced.domain import AggregateRoot, DomainError, Event
from sourced.testing import (
    AggregateCheck,
    CheckFlag,
    CheckSettings,
    EventAssertionError,
    check,
)
from sourced.utils import actualize_event


class Created(Event):
    pass


class Updated(Event):
    pass


class First(Event):
    pass


class Middle(Event):
    pass


class Last(Event):
    pass


class Liked(Event):
    id: str
    name: str
    likes: list[str]


class Visited(Event):
    id: str
    name: str


class Moved(NamedTuple):
    steps: int


class Turned:
    __slots__ = ("degrees",)

    def __init__(self, degrees: int) -> None:
        self.degrees = degrees


class Pinged:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<ping>"


def apply_created(aggregate: AggregateRoot) -> None:
    aggregate.apply(Created())


def apply_updated(aggregate: AggregateRoot) -> None:
    aggregate.apply(Updated())


def apply_stream(aggregate: AggregateRoot) -> None:
    aggregate.apply(First())
    aggregate.apply(Middle())
    aggregate.apply(Last())


class TestPassingChecks:
    def test_included_event(self) -> None:
        check(AggregateRoot()).when(apply_created).has.event(Created)

    def test_event_is_excluded(self) -> None:
        check(AggregateRoot()).when(apply_updated).excludes.event(Created)

    def test_only_one_event(self) -> None:
        check(AggregateRoot()) \
            .when(apply_created) \
            .when(apply_updated) \
            .has.one.event(Created)

    def test_exactly_x_events(self) -> None:
        check(AggregateRoot()) \
            .when(apply_created) \
            .when(apply_updated) \
            .when(apply_updated) \
            .has.exactly(2).events(Updated)

    def test_first_event(self) -> None:
        check(AggregateRoot()).when(apply_stream).has.first.event(First)

    def test_last_event(self) -> None:
        check(AggregateRoot()).when(apply_stream).has.last.event(Last)

    def test_first_and_last_event(self) -> None:
        check(AggregateRoot()) \
            .when(apply_stream) \
            .has.first.event(First) \
            .and_.has.last.event(Last)

    def test_several_targets(self) -> None:
        check(AggregateRoot()).when(apply_stream).has.events([First, Middle, Last])

    def test_event_includes(self) -> None:
        def apply_liked(aggregate: AggregateRoot) -> None:
            aggregate.apply(Liked(id="3", name="Marz", likes=["film", "tech"]))

        def apply_visited(aggregate: AggregateRoot) -> None:
            aggregate.apply(Visited(id="2", name="Earth"))

        check(AggregateRoot()) \
            .when(apply_liked) \
            .when(apply_visited) \
            .has.event(Liked).that.includes({
                "id": "3",
                "name": "Marz",
                "likes": ["film", "tech"],
            })

    def test_includes_list_subset(self) -> None:
        check(AggregateRoot()) \
            .when(lambda a: a.apply(Liked(id="1", name="n", likes=["a", "b", "c"]))) \
            .has.event(Liked).includes(likes=["c", "a"])

    def test_last_event_includes(self) -> None:
        check(AggregateRoot()) \
            .when(lambda a: a.apply(Visited(id="1", name="Mars"))) \
            .when(lambda a: a.apply(Visited(id="2", name="Earth"))) \
            .has.last.event(Visited).includes(id="2", name="Earth")

    def test_target_by_name_or_instance(self) -> None:
        check(AggregateRoot()).when(apply_created).has.event("Created")
        check(AggregateRoot()).when(apply_created).has.event(Created())

    def test_loads_history_without_recording(self) -> None:
        aggregate = AggregateRoot()

        check(aggregate).loads([Created(), Updated()]).when(apply_updated) \
            .has.exactly(1).event(Updated)

        assert len(aggregate.get_loaded_events()) == 2

    def test_get_aggregate(self) -> None:
        aggregate = AggregateRoot()

        assert check(aggregate).it.get_aggregate() is aggregate

    def test_connectors_return_the_chain(self) -> None:
        chain = check(AggregateRoot())

        assert chain.that is chain
        assert chain.it is chain
        assert chain.has is chain
        assert isinstance(chain.and_, AggregateCheck)
        assert chain.and_ is not chain


class TestFlags:
    def test_flags_accumulate(self) -> None:
        chain = check(AggregateRoot()).has.first.excludes

        assert chain.flags == {CheckFlag.HAS, CheckFlag.FIRST, CheckFlag.EXCLUDES}

    def test_and_starts_a_fresh_chain(self) -> None:
        aggregate = AggregateRoot()
        chain = check(aggregate).has.first.exactly(3)
        fresh = chain.and_

        assert fresh.flags == frozenset()
        assert fresh.get_aggregate() is aggregate

    def test_flags_persist_across_evaluations(self) -> None:
        chain = check(AggregateRoot()).when(apply_stream).has.first.event(First)

        with pytest.raises(EventAssertionError):
            chain.last.event(Last)

    def test_debug_from_settings(self) -> None:
        chain = check(AggregateRoot(), settings=CheckSettings(debug=True))

        assert CheckFlag.DEBUG in chain.flags


class TestFailingChecks:
    def test_empty_stream_fails(self) -> None:
        with pytest.raises(EventAssertionError) as exc_info:
            check(AggregateRoot()).has.event(Created)

        assert "no events" in exc_info.value.message
        assert exc_info.value.actual == 0

    def test_missing_event(self) -> None:
        with pytest.raises(EventAssertionError) as exc_info:
            check(AggregateRoot()).when(apply_updated).has.event(Created)

        assert "'Created' did not match any events" in exc_info.value.message

    def test_first_event_mismatch(self) -> None:
        with pytest.raises(EventAssertionError) as exc_info:
            check(AggregateRoot()).when(apply_stream).has.first.event(Middle)

        assert exc_info.value.actual == "Middle"
        assert exc_info.value.expected == "First"

    def test_last_event_mismatch(self) -> None:
        with pytest.raises(EventAssertionError) as exc_info:
            check(AggregateRoot()).when(apply_stream).has.last.event(First)

        assert exc_info.value.actual == "First"
        assert exc_info.value.expected == "Last"

    def test_exactly_mismatch(self) -> None:
        aggregate = AggregateRoot()
        chain = check(aggregate) \
            .when(apply_updated) \
            .when(apply_updated) \
            .when(apply_created)

        chain.has.exactly(2).events(Updated)

        with pytest.raises(EventAssertionError) as exc_info:
            check(aggregate).has.exactly(2).events(Created)

        assert exc_info.value.actual == 1
        assert exc_info.value.expected == 2

    def test_excludes_found(self) -> None:
        aggregate = AggregateRoot()
        check(aggregate).when(apply_updated).excludes.event(Created)

        aggregate.apply(Created())

        with pytest.raises(EventAssertionError) as exc_info:
            check(aggregate).excludes.event(Created)

        assert exc_info.value.actual == 1
        assert exc_info.value.expected == 0

    def test_excludes_skips_other_modes(self) -> None:
        check(AggregateRoot()).when(apply_updated).first.excludes.event(Created)

    def test_one_not_found(self) -> None:
        with pytest.raises(EventAssertionError) as exc_info:
            check(AggregateRoot()).when(apply_updated).has.one.event(Created)

        assert "was not found" in exc_info.value.message
        assert exc_info.value.actual == 0

    def test_one_found_more_than_once(self) -> None:
        with pytest.raises(EventAssertionError) as exc_info:
            check(AggregateRoot()) \
                .when(apply_created) \
                .when(apply_created) \
                .has.one.event(Created)

        assert "more than once" in exc_info.value.message
        assert exc_info.value.actual == 2

    def test_second_target_can_fail(self) -> None:
        with pytest.raises(EventAssertionError) as exc_info:
            check(AggregateRoot()).when(apply_created).has.events([Created, Updated])

        assert "'Updated'" in exc_info.value.message

    def test_message_shows_expected_and_received(self) -> None:
        with pytest.raises(EventAssertionError) as exc_info:
            check(AggregateRoot()).when(apply_stream).has.first.event(Last)

        text = str(exc_info.value)
        assert "Expected: First" in text
        assert "Received: Last" in text

    def test_is_an_assertion_error(self) -> None:
        with pytest.raises(AssertionError):
            check(AggregateRoot()).has.event(Created)


class TestIncludes:
    def test_requires_target(self) -> None:
        with pytest.raises(EventAssertionError, match="No events listed"):
            check(AggregateRoot()).when(apply_created).includes(id="1")

    def test_field_mismatch(self) -> None:
        with pytest.raises(EventAssertionError) as exc_info:
            check(AggregateRoot()) \
                .when(lambda a: a.apply(Visited(id="2", name="Earth"))) \
                .has.event(Visited).includes(name="Mars")

        assert exc_info.value.actual == "Earth"
        assert exc_info.value.expected == "Mars"
        assert exc_info.value.context["field"] == "name"

    def test_list_not_contained(self) -> None:
        with pytest.raises(EventAssertionError) as exc_info:
            check(AggregateRoot()) \
                .when(lambda a: a.apply(Liked(id="1", name="n", likes=["film"]))) \
                .has.event(Liked).includes(likes=["film", "tech"])

        assert exc_info.value.actual == ["film"]
        assert exc_info.value.expected == ["film", "tech"]

    def test_missing_field(self) -> None:
        with pytest.raises(EventAssertionError, match="missing"):
            check(AggregateRoot()) \
                .when(lambda a: a.apply(Visited(id="2", name="Earth"))) \
                .has.event(Visited).includes(planet="Earth")

    def test_every_matching_event_is_compared(self) -> None:
        with pytest.raises(EventAssertionError):
            check(AggregateRoot()) \
                .when(lambda a: a.apply(Visited(id="1", name="Mars"))) \
                .when(lambda a: a.apply(Visited(id="2", name="Earth"))) \
                .has.event(Visited).includes(name="Earth")

    def test_last_compares_final_event(self) -> None:
        with pytest.raises(EventAssertionError) as exc_info:
            check(AggregateRoot()) \
                .when(lambda a: a.apply(Visited(id="2", name="Earth"))) \
                .when(lambda a: a.apply(Liked(id="9", name="Marz", likes=[]))) \
                .has.event(Visited).last.includes(id="2")

        assert "last aggregate event 'Liked'" in exc_info.value.message
        assert exc_info.value.actual == "9"

    def test_payload_field_shadowing_an_event_attribute(self) -> None:
        renamed = actualize_event("Renamed", '{"event_type": "custom", "name": "n"}')

        check(AggregateRoot()) \
            .when(lambda a: a.apply(renamed)) \
            .has.event("Renamed").includes(event_type="custom", name="n")

    def test_plain_object_fields(self) -> None:
        check(AggregateRoot()) \
            .when(lambda a: a.apply(Moved(3))) \
            .when(lambda a: a.apply(Turned(90))) \
            .has.event(Moved).includes(steps=3) \
            .and_.has.event(Turned).includes(degrees=90)


class TestThrows:
    @staticmethod
    def reject(aggregate: AggregateRoot) -> None:
        raise ValueError("Token INVALID")

    def test_throws(self) -> None:
        check(AggregateRoot()).throws.when(self.reject)

    def test_with_matching_message(self) -> None:
        check(AggregateRoot()).throws.with_("invalid").when(self.reject)

    def test_with_other_message(self) -> None:
        with pytest.raises(EventAssertionError) as exc_info:
            check(AggregateRoot()).throws.with_("expired").when(self.reject)

        assert exc_info.value.actual == "Token INVALID"
        assert exc_info.value.expected == "expired"

    def test_uses_domain_error_message(self) -> None:
        def fail(aggregate: AggregateRoot) -> None:
            aggregate.fail(DomainError("token invalid"))

        check(AggregateRoot()).throws.with_("TOKEN").when(fail)

    def test_no_error_raised(self) -> None:
        with pytest.raises(EventAssertionError, match="Failed to throw"):
            check(AggregateRoot()).throws.when(apply_created)

    def test_events_before_error_can_be_checked(self) -> None:
        def create_then_reject(aggregate: AggregateRoot) -> None:
            aggregate.apply(Created())
            raise ValueError("rejected")

        check(AggregateRoot()) \
            .throws.when(create_then_reject) \
            .and_.has.one.event(Created)

    def test_with_after_checked_error_is_rejected(self) -> None:
        chain = check(AggregateRoot()).throws.when(self.reject)

        with pytest.raises(RuntimeError, match="before when"):
            chain.with_("expired")

    def test_with_before_throws(self) -> None:
        check(AggregateRoot()).with_("invalid").throws.when(self.reject)

    def test_when_rejects_coroutines(self) -> None:
        async def operation(aggregate: AggregateRoot) -> None:
            aggregate.apply(Created())

        with pytest.raises(TypeError, match="after"):
            check(AggregateRoot()).when(operation)


class TestDebug:
    def test_renders_stream_and_targets(self) -> None:
        output = io.StringIO()
        console = Console(file=output, width=120, no_color=True)

        check(AggregateRoot(), console=console) \
            .when(lambda a: a.apply(Liked(id="3", name="Marz", likes=["film"]))) \
            .debug.has.event(Liked)

        rendered = output.getvalue()
        assert "DEBUG:" in rendered
        assert "Aggregate events" in rendered
        assert "Target events" in rendered
        assert "Marz" in rendered
        assert '"film"' in rendered

    def test_debug_does_not_change_outcome(self) -> None:
        console = Console(file=io.StringIO())

        with pytest.raises(EventAssertionError):
            check(AggregateRoot(), console=console).debug.has.event(Created)

    def test_prints_to_stdout_by_default(self, capsys) -> None:
        check(AggregateRoot(), settings=CheckSettings(color=False)) \
            .when(apply_created) \
            .debug.has.event(Created)

        assert "Created" in capsys.readouterr().out

    def test_renders_events_without_instance_dict(self) -> None:
        output = io.StringIO()
        console = Console(file=output, width=120, no_color=True)

        check(AggregateRoot(), console=console) \
            .when(lambda a: a.apply(Moved(3))) \
            .when(lambda a: a.apply(Turned(90))) \
            .when(lambda a: a.apply(Pinged())) \
            .debug.has.events([Moved, Turned, Pinged])

        rendered = output.getvalue()
        assert '"steps": 3' in rendered
        assert '"degrees": 90' in rendered
        assert "<ping>" in rendered
