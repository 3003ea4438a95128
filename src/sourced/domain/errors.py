# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: sourced
"""
domain.errors
Domain error definitions for sourced aggregates
"""

from __future__ import annotations

from typing import Any, Final

from sourced.errors.base import ErrorCategory, ErrorCode, ErrorSeverity, SourcedError

AGGREGATE = ErrorCategory.get_or_create("AGGREGATE")
DOMAIN_ERROR: Final = ErrorCode.get_or_create("DOMAIN_ERROR", AGGREGATE)
EVENT_HYDRATION_ERROR: Final = ErrorCode.get_or_create(
    "EVENT_HYDRATION_ERROR", AGGREGATE
)


class DomainError(SourcedError):
    """Raised by aggregate operations when a business rule rejects the request.

    Aggregates raise it from their own operation methods and usually route it
    through ``AggregateRoot.fail`` so an installed failure handler can react.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = DOMAIN_ERROR,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            code=code,
            severity=severity,
            context=context,
            **kwargs,
        )


class HydrationError(SourcedError):
    """Raised when an event cannot be rebuilt from its stored payload."""

    def __init__(
        self,
        message: str,
        event_name: str | None = None,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        if event_name:
            kwargs["event_name"] = event_name
        super().__init__(
            message,
            code=EVENT_HYDRATION_ERROR,
            severity=ErrorSeverity.ERROR,
            context=context,
            **kwargs,
        )
