# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: sourced
"""Unified error registry for sourced error codes and categories."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sourced.errors.base import ErrorCategory, ErrorCode


class ErrorRegistry:
    """Singleton registry for all error codes and categories."""

    _instance: ErrorRegistry | None = None
    _lock = threading.RLock()

    _categories: dict[str, ErrorCategory]
    _codes: dict[str, ErrorCode]

    def __new__(cls) -> ErrorRegistry:
        with cls._lock:
            if cls._instance is None:
                instance = super().__new__(cls)
                instance._categories = {}
                instance._codes = {}
                cls._instance = instance
            return cls._instance

    def get_category(
        self, name: str, parent: ErrorCategory | None = None
    ) -> ErrorCategory:
        """Get or create a category.

        Args:
            name: The category name
            parent: Optional parent category, only used on creation

        Returns:
            The registered ErrorCategory
        """
        with self._lock:
            if name in self._categories:
                return self._categories[name]

            from sourced.errors.base import ErrorCategory

            category = ErrorCategory(name, parent)
            self._categories[name] = category
            return category

    def get_code(self, code: str, category_name: str = "INTERNAL") -> ErrorCode:
        """Get or create an error code.

        Args:
            code: The error code
            category_name: The category name (defaults to INTERNAL)

        Returns:
            The registered ErrorCode
        """
        with self._lock:
            key = f"{category_name}.{code}"
            if key in self._codes:
                return self._codes[key]

            from sourced.errors.base import ErrorCode

            error_code = ErrorCode(code, self.get_category(category_name))
            self._codes[key] = error_code
            self._codes.setdefault(code, error_code)
            return error_code

    def lookup_code(self, code: str) -> ErrorCode | None:
        """Look up an error code without creating it."""
        return self._codes.get(code)

    def lookup_category(self, name: str) -> ErrorCategory | None:
        """Look up a category without creating it."""
        return self._categories.get(name)

    def get_all_categories(self) -> list[ErrorCategory]:
        return list(self._categories.values())

    def get_all_codes(self) -> list[ErrorCode]:
        # Codes are stored under two keys; dedupe by identity.
        return list({id(code): code for code in self._codes.values()}.values())


registry = ErrorRegistry()
