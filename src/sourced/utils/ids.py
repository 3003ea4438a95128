# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: sourced
"""
Sortable unique identifiers for aggregates.

Identifiers are ULIDs rendered as 26 character Crockford base32 strings.
They sort lexicographically in creation order.
"""

from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable

from ulid import ULID


@runtime_checkable
class IdProviderProtocol(Protocol):
    """Supplies globally unique, sortable string identifiers."""

    def next(self) -> str: ...


class UlidProvider:
    """ULID based identifier provider.

    Identifiers generated within the same millisecond are incremented from the
    previous one, so every value is strictly greater than the last.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last: ULID | None = None

    def next(self) -> str:
        with self._lock:
            candidate = ULID()
            if self._last is not None and int(candidate) <= int(self._last):
                candidate = ULID.from_int(int(self._last) + 1)
            self._last = candidate
            return str(candidate)


default_provider = UlidProvider()


def next_id() -> str:
    """Return the next identifier from the default provider."""
    return default_provider.next()
