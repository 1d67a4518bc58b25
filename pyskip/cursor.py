"""Positions inside a skip list.

A :class:`Cursor` points at a node of the bottom level, the only level that
holds every element, or at that level's tail sentinel (``end()``). It keeps the
slot generation it was created with, so it notices when its element has been
erased even if the slot was recycled since.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

from .errors import InvalidCursorError

if TYPE_CHECKING:
    from .arena import Node, NodeArena

__all__ = ["Cursor"]

T = TypeVar("T")


class Cursor(Generic[T]):
    """Bidirectional position over the bottom level of a skip list."""

    __slots__ = ("_arena", "_index", "_generation")

    def __init__(self, arena: "NodeArena[T]", index: int):
        self._arena = arena
        self._index = index
        self._generation = arena.generation(index)

    def _node(self) -> "Node[T]":
        if not self._arena.is_live(self._index, self._generation):
            raise InvalidCursorError("cursor refers to an erased element")
        return self._arena[self._index]

    @property
    def valid(self) -> bool:
        """``True`` while the denoted node (element or end) still exists."""
        return self._arena.is_live(self._index, self._generation)

    @property
    def is_end(self) -> bool:
        return self._node().sentinel

    @property
    def value(self) -> T:
        node = self._node()
        if node.sentinel:
            raise InvalidCursorError("cannot dereference end()")
        return node.value  # type: ignore[return-value]

    def next(self) -> "Cursor[T]":
        """Cursor to the following element; ``end()`` stays put."""
        node = self._node()
        if node.sentinel:
            return self
        return Cursor(self._arena, node.right)  # type: ignore[arg-type]

    def prev(self) -> "Cursor[T]":
        """Cursor to the preceding element; the first element stays put."""
        left = self._node().left
        if left is None or self._arena[left].sentinel:
            return self
        return Cursor(self._arena, left)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cursor):
            return NotImplemented
        return (
            self._arena is other._arena
            and self._index == other._index
            and self._generation == other._generation
        )

    def __hash__(self) -> int:
        return hash((id(self._arena), self._index, self._generation))

    def __repr__(self) -> str:
        if not self.valid:
            return "<Cursor invalid>"
        if self.is_end:
            return "<Cursor end>"
        return f"<Cursor {self.value!r}>"
