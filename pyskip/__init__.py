"""PySkip: an in-memory ordered set built on a skip list.

This package exposes the container via `pyskip.SkipList` while keeping the
core primitives (node arena, level generator, cursors, diagnostics) in their
own modules so each can be tested and swapped independently.
"""

from __future__ import annotations

__all__ = [
    "SkipList",
    "Cursor",
    "LevelGenerator",
    "NodeArena",
    "SkipListError",
    "AllocationError",
    "InvalidCursorError",
    "StructureCorruptedError",
]

from .arena import NodeArena
from .cursor import Cursor
from .errors import AllocationError, InvalidCursorError, SkipListError, StructureCorruptedError
from .levels import LevelGenerator
from .skiplist import SkipList
