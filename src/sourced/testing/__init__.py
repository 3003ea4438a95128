"""Assertion toolkit for testing the events aggregates produce."""

from sourced.testing.check import AggregateCheck, CheckFlag, check
from sourced.testing.config import CheckSettings
from sourced.testing.errors import EventAssertionError

__all__ = [
    "AggregateCheck",
    "CheckFlag",
    "CheckSettings",
    "EventAssertionError",
    "check",
]
