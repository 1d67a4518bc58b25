"""Ordered set backed by a skip list.

The structure is a ladder of doubly-linked levels. Every level is bounded by a
head and a tail sentinel, and every element present at level k is also
present at level k-1, reachable through the node's ``down`` link. Level 1
holds every element, so iteration only ever walks the bottom level.

Nodes live in a :class:`~pyskip.arena.NodeArena` and refer to each other by
index, which keeps copy (rebuild the arena) and move (hand the arena over)
simple.

Complexities (average case):
    • search   – O(log n)
    • insert   – O(log n)
    • erase    – O(log n)
    • iterate  – O(n)

The structure is probabilistic: unlucky level draws degrade it to O(n).
Nothing here is thread-safe; callers must serialise mutations.
"""
from __future__ import annotations

import copy as _copy
import logging
import operator
from collections.abc import Callable, Iterable, Iterator
from typing import IO, Generic, Optional, TypeVar

from . import debug
from .arena import NodeArena
from .cursor import Cursor
from .errors import InvalidCursorError, StructureCorruptedError
from .levels import DEFAULT_MAX_LEVEL, LevelGenerator

__all__ = ["SkipList"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

Less = Callable[[T, T], bool]


class SkipList(Generic[T]):
    """Sorted collection of unique elements.

    Parameters
    ----------
    iterable:
        Optional initial elements; duplicates are ignored.
    less:
        Strict weak ordering ``less(a, b)``. Two elements ``a`` and ``b`` are
        the same element when neither is less than the other.
    max_level:
        Ceiling on tower height and therefore on the number of levels.
    seed:
        Seed for the container's own level generator.
    level_generator:
        Zero-argument callable returning tower heights in ``[1, max_level]``;
        replaces the built-in :class:`~pyskip.levels.LevelGenerator`.
    capacity:
        Maximum number of live nodes (sentinels included). Hitting it raises
        :class:`~pyskip.errors.AllocationError` and leaves the list unchanged.
    check_invariants:
        Validate the whole structure after every mutation and raise
        :class:`~pyskip.errors.StructureCorruptedError` on failure. Slow;
        meant for tests.
    """

    __slots__ = (
        "_less",
        "_max_level",
        "_levels",
        "_capacity",
        "_check",
        "_arena",
        "_heads",
        "_tails",
        "_size",
    )

    def __init__(
        self,
        iterable: Optional[Iterable[T]] = None,
        *,
        less: Less = operator.lt,
        max_level: int = DEFAULT_MAX_LEVEL,
        seed: Optional[int] = None,
        level_generator: Optional[Callable[[], int]] = None,
        capacity: Optional[int] = None,
        check_invariants: bool = False,
    ):
        if max_level < 1:
            raise ValueError(f"max_level must be >= 1, got {max_level}")
        if level_generator is None:
            level_generator = LevelGenerator(max_level, seed=seed)
        elif seed is not None:
            raise ValueError("pass either seed or level_generator, not both")
        self._less = less
        self._max_level = max_level
        self._levels = level_generator
        self._capacity = capacity
        self._check = check_invariants
        self._arena: NodeArena[T] = NodeArena(capacity)
        self._init_ladder()
        if iterable is not None:
            self.extend(iterable)

    # ------------------------------------------------------------------
    # Ladder management 🪜
    # ------------------------------------------------------------------
    def _init_ladder(self) -> None:
        """Bottom level only: a head sentinel linked to a tail sentinel."""
        arena = self._arena
        head = arena.allocate(sentinel=True)
        try:
            tail = arena.allocate(sentinel=True)
        except MemoryError:
            arena.release(head)
            raise
        arena[head].right = tail
        arena[tail].left = head
        self._heads = [head]  # index 0 is level 1
        self._tails = [tail]
        self._size = 0

    def _grow(self, sentinels: list[int], update: list[int]) -> None:
        arena = self._arena
        for head, tail in zip(sentinels[::2], sentinels[1::2]):
            arena[head].right = tail
            arena[tail].left = head
            arena[head].down = self._heads[-1]
            arena[tail].down = self._tails[-1]
            self._heads.append(head)
            self._tails.append(tail)
            update.append(head)
        logger.debug("skip list grown to %d levels", len(self._heads))

    def _trim(self) -> None:
        """Drop empty levels from the top, never the bottom one."""
        arena = self._arena
        before = len(self._heads)
        while len(self._heads) > 1 and arena[self._heads[-1]].right == self._tails[-1]:
            arena.release(self._heads.pop())
            arena.release(self._tails.pop())
        if len(self._heads) != before:
            logger.debug("skip list trimmed from %d to %d levels", before, len(self._heads))

    def _draw_level(self) -> int:
        lvl = self._levels()
        if not 1 <= lvl <= self._max_level:
            raise ValueError(f"level generator returned {lvl}, expected 1..{self._max_level}")
        return lvl

    def _stage(self, value: T, lvl: int) -> tuple[list[int], list[int]]:
        """Allocate every sentinel and node an insert needs, linking nothing.

        Returns ``(sentinels, tower)``; sentinels come in (head, tail) pairs
        ordered bottom-up, tower nodes are ordered from level 1 upwards. On
        allocation failure everything staged so far is released again.
        """
        arena = self._arena
        n_sentinels = 2 * max(0, lvl - len(self._heads))
        staged: list[int] = []
        try:
            for _ in range(n_sentinels):
                staged.append(arena.allocate(sentinel=True))
            for _ in range(lvl):
                staged.append(arena.allocate(value))
        except MemoryError:
            for idx in staged:
                arena.release(idx)
            raise
        return staged[:n_sentinels], staged[n_sentinels:]

    def _after_mutation(self, operation: str) -> None:
        if self._check and not debug.validate(self):
            raise StructureCorruptedError(operation)

    # ------------------------------------------------------------------
    # Search primitive 🔍
    # ------------------------------------------------------------------
    def _search(self, key: T) -> list[int]:
        """Per level (index 0 is level 1), the last node ordered before ``key``."""
        arena, less = self._arena, self._less
        update = [0] * len(self._heads)
        x = self._heads[-1]
        for i in reversed(range(len(self._heads))):
            tail = self._tails[i]
            while (nxt := arena[x].right) != tail and less(arena[nxt].value, key):
                x = nxt  # type: ignore[assignment]
            update[i] = x
            if i:
                x = arena[x].down  # type: ignore[assignment]
        return update

    def _find_tower(self, key: T) -> Optional[int]:
        """Top-most node of the tower holding ``key``, or ``None``."""
        arena, less = self._arena, self._less
        x: Optional[int] = self._heads[-1]
        for i in reversed(range(len(self._heads))):
            tail = self._tails[i]
            while (nxt := arena[x].right) != tail and less(arena[nxt].value, key):  # type: ignore[index]
                x = nxt
            if nxt != tail and not less(key, arena[nxt].value):  # type: ignore[index]
                return nxt
            x = arena[x].down  # type: ignore[index]
        return None

    def _bottom(self, idx: int) -> int:
        arena = self._arena
        while (below := arena[idx].down) is not None:
            idx = below
        return idx

    # ------------------------------------------------------------------
    # Mutation API
    # ------------------------------------------------------------------
    def insert(self, value: T) -> tuple[Cursor[T], bool]:
        """Insert ``value`` unless an equal element is already present.

        Returns a cursor to the element holding ``value`` and whether it was
        inserted by this call.
        """
        arena = self._arena
        update = self._search(value)
        nxt = arena[update[0]].right
        if nxt != self._tails[0] and not self._less(value, arena[nxt].value):  # type: ignore[index]
            return Cursor(arena, nxt), False  # type: ignore[arg-type]

        lvl = self._draw_level()
        sentinels, tower = self._stage(value, lvl)
        # Nothing below can fail: all nodes exist, only links change.
        if sentinels:
            self._grow(sentinels, update)
        below: Optional[int] = None
        for i, idx in enumerate(tower):
            prev = update[i]
            node = arena[idx]
            node.left = prev
            node.right = arena[prev].right
            arena[node.right].left = idx  # type: ignore[index]
            arena[prev].right = idx
            node.down = below
            below = idx
        self._size += 1
        self._after_mutation("insert")
        return Cursor(arena, tower[0]), True

    def extend(self, iterable: Iterable[T]) -> int:
        """Insert every element of ``iterable``; return how many were new."""
        insert = self.insert
        return sum(1 for value in iterable if insert(value)[1])

    update = extend

    def erase(self, value: T) -> bool:
        """Remove the element equal to ``value``; ``False`` if absent."""
        top = self._find_tower(value)
        if top is None:
            return False
        self._erase_tower(top)
        return True

    def discard(self, value: T) -> None:
        self.erase(value)

    def remove(self, value: T) -> None:
        if not self.erase(value):
            raise KeyError(value)

    def erase_at(self, cursor: Cursor[T]) -> Cursor[T]:
        """Remove the element at ``cursor``; return the cursor that follows it."""
        idx = self._owned(cursor)
        node = self._arena[idx]
        if node.sentinel:
            raise InvalidCursorError("cannot erase end()")
        following = Cursor(self._arena, node.right)  # type: ignore[arg-type]
        self._erase_tower(self._find_tower(node.value))  # type: ignore[arg-type]
        return following

    def erase_range(self, first: Cursor[T], last: Cursor[T]) -> Cursor[T]:
        """Remove ``[first, last)``; return ``last``.

        Both cursors are checked, and ``last`` must be reachable from
        ``first``, before anything is removed.
        """
        self._owned(first)
        self._owned(last)
        if first == last:
            return last
        end = self.end()
        if first == self.begin() and last == end:
            self.clear()
            return self.end()
        cur = first
        while cur != last:
            if cur == end:
                raise InvalidCursorError("last is not reachable from first")
            cur = cur.next()
        while first != last:
            first = self.erase_at(first)
        return last

    def _erase_tower(self, idx: Optional[int]) -> None:
        arena = self._arena
        while idx is not None:
            node = arena[idx]
            arena[node.left].right = node.right  # type: ignore[index]
            arena[node.right].left = node.left  # type: ignore[index]
            below = node.down
            arena.release(idx)
            idx = below
        self._size -= 1
        self._trim()
        self._after_mutation("erase")

    def _owned(self, cursor: Cursor[T]) -> int:
        if not isinstance(cursor, Cursor) or cursor._arena is not self._arena:
            raise InvalidCursorError("cursor does not belong to this skip list")
        if not cursor.valid:
            raise InvalidCursorError("cursor refers to an erased element")
        return cursor._index

    def clear(self) -> None:
        """Remove every element; outstanding cursors become invalid."""
        self._arena.clear()
        self._init_ladder()

    def merge(self, other: "SkipList[T]") -> None:
        """Move elements of ``other`` missing here into this list.

        Elements already present stay in ``other``.
        """
        if other is self:
            return
        cur, end = other.begin(), other.end()
        while cur != end:
            value = cur.value
            if self.contains(value):
                cur = cur.next()
            else:
                self.insert(value)
                cur = other.erase_at(cur)

    # ------------------------------------------------------------------
    # Query API
    # ------------------------------------------------------------------
    def find(self, key: T) -> Cursor[T]:
        """Cursor to the element equal to ``key``, or ``end()``."""
        top = self._find_tower(key)
        if top is None:
            return self.end()
        return Cursor(self._arena, self._bottom(top))

    def contains(self, value: T) -> bool:
        return self._find_tower(value) is not None

    __contains__ = contains

    def lower_bound(self, key: T) -> Cursor[T]:
        """Cursor to the first element not less than ``key``."""
        update = self._search(key)
        return Cursor(self._arena, self._arena[update[0]].right)  # type: ignore[arg-type]

    def upper_bound(self, key: T) -> Cursor[T]:
        """Cursor to the first element greater than ``key``."""
        cur = self.lower_bound(key)
        if not cur.is_end and not self._less(key, cur.value):
            cur = cur.next()
        return cur

    def size(self) -> int:
        return self._size

    def empty(self) -> bool:
        return self._size == 0

    def max_size(self) -> int:
        """Configured ceiling on the number of levels."""
        return self._max_level

    @property
    def less(self) -> Less:
        return self._less

    @property
    def level(self) -> int:
        """Number of levels currently in the ladder."""
        return len(self._heads)

    @property
    def capacity(self) -> Optional[int]:
        return self._capacity

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    # ------------------------------------------------------------------
    # Iteration helpers (ordered)
    # ------------------------------------------------------------------
    def begin(self) -> Cursor[T]:
        return Cursor(self._arena, self._arena[self._heads[0]].right)  # type: ignore[arg-type]

    def end(self) -> Cursor[T]:
        return Cursor(self._arena, self._tails[0])

    def __iter__(self) -> Iterator[T]:
        arena, tail = self._arena, self._tails[0]
        x = arena[self._heads[0]].right
        while x != tail:
            node = arena[x]  # type: ignore[index]
            yield node.value  # type: ignore[misc]
            x = node.right

    def __reversed__(self) -> Iterator[T]:
        arena, head = self._arena, self._heads[0]
        x = arena[self._tails[0]].left
        while x != head:
            node = arena[x]  # type: ignore[index]
            yield node.value  # type: ignore[misc]
            x = node.left

    # ------------------------------------------------------------------
    # Copy / move / swap
    # ------------------------------------------------------------------
    def _fork_levels(self) -> Callable[[], int]:
        levels = self._levels
        return levels.copy() if isinstance(levels, LevelGenerator) else levels

    def _spawn(self, levels: Callable[[], int]) -> "SkipList[T]":
        return self.__class__(
            less=self._less,
            max_level=self._max_level,
            level_generator=levels,
            capacity=self._capacity,
            check_invariants=self._check,
        )

    def _copy_ladder(self, source: "SkipList[T]", copy_value: Callable[[T], T]) -> None:
        """Rebuild ``source``'s levels, bottom-up, into this empty list."""
        src, dst = source._arena, self._arena
        mapping: dict[int, int] = {}
        for i in range(len(source._heads)):
            if i:
                self._grow([dst.allocate(sentinel=True), dst.allocate(sentinel=True)], [])
            prev, tail = self._heads[i], self._tails[i]
            x = src[source._heads[i]].right
            while x != source._tails[i]:
                snode = src[x]  # type: ignore[index]
                if i:
                    down = mapping[snode.down]  # type: ignore[index]
                    idx = dst.allocate(dst[down].value)
                    dst[idx].down = down
                else:
                    idx = dst.allocate(copy_value(snode.value))  # type: ignore[arg-type]
                dst[idx].left = prev
                dst[prev].right = idx
                mapping[x] = idx  # type: ignore[index]
                prev = idx
                x = snode.right
            dst[prev].right = tail
            dst[tail].left = prev
        self._size = source._size

    def copy(self) -> "SkipList[T]":
        """Structurally independent clone sharing the element objects."""
        clone = self._spawn(self._fork_levels())
        clone._copy_ladder(self, lambda value: value)
        return clone

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> "SkipList[T]":
        clone = self._spawn(self._fork_levels())
        memo[id(self)] = clone
        clone._copy_ladder(self, lambda value: _copy.deepcopy(value, memo))
        return clone

    def take(self) -> "SkipList[T]":
        """Move every element into a new list and leave this one empty.

        The returned list owns the existing ladder, so cursors keep working
        against it. This list is reset to a fresh, usable empty state.
        """
        moved = self._spawn(self._levels)
        moved._arena = self._arena
        moved._heads = self._heads
        moved._tails = self._tails
        moved._size = self._size
        self._levels = self._fork_levels()
        self._arena = NodeArena(self._capacity)
        self._init_ladder()
        return moved

    def swap(self, other: "SkipList[T]") -> None:
        """Exchange the complete state of two lists."""
        for name in SkipList.__slots__:
            mine = getattr(self, name)
            setattr(self, name, getattr(other, name))
            setattr(other, name, mine)

    # ------------------------------------------------------------------
    # Comparisons
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SkipList):
            return NotImplemented
        return self._size == other._size and all(a == b for a, b in zip(self, other))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SkipList):
            return NotImplemented
        less = self._less
        for a, b in zip(self, other):
            if less(a, b):
                return True
            if less(b, a):
                return False
        return self._size < other._size

    # Derived from ``<`` alone: ``==`` compares values, not equivalence.
    def __le__(self, other: object) -> bool:
        if not isinstance(other, SkipList):
            return NotImplemented
        return not other < self

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, SkipList):
            return NotImplemented
        return other < self

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, SkipList):
            return NotImplemented
        return not self < other

    __hash__ = None  # type: ignore[assignment]

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    def validate(self) -> bool:
        """Check every structural invariant; log the first problem found."""
        return debug.validate(self)

    def level_values(self, level: int) -> list[T]:
        return debug.level_values(self, level)

    def format_level(self, level: int) -> str:
        return debug.format_level(self, level)

    def format_levels(self) -> str:
        return debug.format_levels(self)

    def dump(self, file: Optional[IO[str]] = None) -> None:
        debug.dump(self, file)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self)!r})"
