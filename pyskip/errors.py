"""Exceptions raised by the skip-list container."""
from __future__ import annotations

__all__ = [
    "SkipListError",
    "AllocationError",
    "InvalidCursorError",
    "StructureCorruptedError",
]


class SkipListError(Exception):
    """Base class for every error raised by :mod:`pyskip`."""


class AllocationError(SkipListError, MemoryError):
    """A node or sentinel could not be allocated.

    Raised by a :class:`~pyskip.arena.NodeArena` that reached its capacity.
    Mutations that hit it are rolled back before the error propagates.
    """

    def __init__(self, capacity: int):
        super().__init__(f"node arena exhausted (capacity={capacity})")
        self.capacity = capacity


class InvalidCursorError(SkipListError, ValueError):
    """Cursor does not denote a live element of the container."""


class StructureCorruptedError(SkipListError, AssertionError):
    """Post-mutation self-check found a broken invariant."""

    def __init__(self, operation: str):
        super().__init__(f"skip list invariants violated after {operation}")
        self.operation = operation
