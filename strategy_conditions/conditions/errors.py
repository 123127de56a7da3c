"""
Errors raised for misuse of the condition tree API.

These signal caller bugs (bad paths, grouping fewer than two nodes), not
bad document data. Bad data degrades to placeholders and warnings instead.
"""

from __future__ import annotations

from collections.abc import Sequence


class ConditionTreeError(Exception):
    """Base class for condition tree contract violations."""


class InvalidPathError(ConditionTreeError, LookupError):
    """Raised when a path does not address a node, or addresses the wrong kind."""

    def __init__(self, path: Sequence[int], message: str):
        self.path = tuple(path)
        super().__init__(f"Invalid path {list(self.path)}: {message}")


class InvalidGroupSizeError(ConditionTreeError, ValueError):
    """Raised when grouping fewer than two nodes."""

    def __init__(self, count: int, minimum: int = 2):
        self.count = count
        self.minimum = minimum
        super().__init__(f"Grouping requires at least {minimum} conditions, got {count}")


__all__ = [
    "ConditionTreeError",
    "InvalidPathError",
    "InvalidGroupSizeError",
]
