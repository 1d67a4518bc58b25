"""Index-addressed node storage.

Every node of a skip list (sentinels included) lives in a :class:`NodeArena`
and links to its neighbours by slot index instead of by object reference.
Released slots are recycled through a free list; each slot carries a
*generation* counter that is bumped on release, so a cursor holding
``(index, generation)`` can tell a live node from a recycled slot.
"""
from __future__ import annotations

from typing import Generic, Optional, TypeVar

from .errors import AllocationError

__all__ = ["Node", "NodeArena"]

T = TypeVar("T")


class Node(Generic[T]):
    __slots__ = ("value", "left", "right", "down", "sentinel")

    def __init__(self, value: Optional[T], sentinel: bool = False):
        self.value = value
        self.left: Optional[int] = None
        self.right: Optional[int] = None
        self.down: Optional[int] = None
        self.sentinel = sentinel

    def __repr__(self) -> str:  # pragma: no cover
        if self.sentinel:
            return "Node<sentinel>"
        return f"Node<{self.value!r}>"


class NodeArena(Generic[T]):
    """Growable pool of nodes addressed by stable integer indices.

    Parameters
    ----------
    capacity: int | None
        Maximum number of simultaneously live nodes, sentinels included.
        ``None`` means unbounded. Allocating past it raises
        :class:`~pyskip.errors.AllocationError`.
    """

    __slots__ = ("_nodes", "_generations", "_free", "_live", "_base", "capacity")

    def __init__(self, capacity: Optional[int] = None):
        if capacity is not None and capacity < 2:
            raise ValueError(f"capacity must leave room for the bottom sentinels, got {capacity}")
        self._nodes: list[Optional[Node[T]]] = []
        self._generations: list[int] = []
        self._free: list[int] = []
        self._live = 0
        self._base = 0  # generation handed to brand-new slots
        self.capacity = capacity

    # ------------------------------------------------------------------
    # Allocation
    # ------------------------------------------------------------------
    def allocate(self, value: Optional[T] = None, *, sentinel: bool = False) -> int:
        if self.capacity is not None and self._live >= self.capacity:
            raise AllocationError(self.capacity)
        node: Node[T] = Node(value, sentinel)
        if self._free:
            idx = self._free.pop()
            self._nodes[idx] = node
        else:
            idx = len(self._nodes)
            self._nodes.append(node)
            self._generations.append(self._base)
        self._live += 1
        return idx

    def release(self, idx: int) -> None:
        if self._nodes[idx] is None:
            raise KeyError(f"slot {idx} is not allocated")
        self._nodes[idx] = None
        self._generations[idx] += 1
        self._free.append(idx)
        self._live -= 1

    def clear(self) -> None:
        """Drop every slot and start over with empty storage.

        New slots start above every generation handed out so far, so
        outstanding references into the old content stay stale.
        """
        self._base = max(self._generations, default=self._base - 1) + 1
        self._nodes = []
        self._generations = []
        self._free = []
        self._live = 0

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------
    def __getitem__(self, idx: int) -> Node[T]:
        node = self._nodes[idx] if 0 <= idx < len(self._nodes) else None
        if node is None:
            raise KeyError(f"slot {idx} is not allocated")
        return node

    def generation(self, idx: int) -> int:
        return self._generations[idx]

    def is_live(self, idx: int, generation: int) -> bool:
        return (
            0 <= idx < len(self._nodes)
            and self._nodes[idx] is not None
            and self._generations[idx] == generation
        )

    def __len__(self) -> int:
        return self._live

    def __repr__(self) -> str:
        return f"NodeArena(live={self._live}, slots={len(self._nodes)}, capacity={self.capacity})"
