"""Read-only diagnostics for :class:`~pyskip.skiplist.SkipList`.

Nothing in here mutates a list. :func:`validate` walks every level and reports
the first broken invariant through :mod:`logging`; the ``format_*`` helpers
render levels as value sequences, top level first.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import IO, TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .skiplist import SkipList

__all__ = ["validate", "problems", "level_values", "format_level", "format_levels", "dump"]

logger = logging.getLogger(__name__)


def problems(sl: "SkipList[Any]") -> Iterator[str]:
    """Yield a description of each structural defect, stopping at the first
    one that makes further walking unsafe."""
    arena, heads, tails, less = sl._arena, sl._heads, sl._tails, sl._less
    if not heads or len(heads) != len(tails):
        yield f"ladder has {len(heads)} heads but {len(tails)} tails"
        return
    for i, (head, tail) in enumerate(zip(heads, tails)):
        number = i + 1
        try:
            hnode, tnode = arena[head], arena[tail]
        except KeyError:
            yield f"sentinels at level {number} have been released"
            return
        if not (hnode.sentinel and tnode.sentinel):
            yield f"level {number} is not bounded by sentinels"
            return
        if hnode.down != (heads[i - 1] if i else None) or tnode.down != (tails[i - 1] if i else None):
            yield f"sentinels at level {number} are not linked to level {number - 1}"
        if hnode.left is not None or tnode.right is not None:
            yield f"sentinels at level {number} have outer links"

        count = 0
        x = head
        steps = 0
        while x != tail:
            steps += 1
            if steps > len(arena):
                yield f"level {number} does not reach its tail sentinel"
                return
            node = arena[x]
            right = node.right
            if right is None:
                yield f"level {number} ends before its tail sentinel"
                return
            try:
                rnode = arena[right]
            except KeyError:
                yield f"level {number} links to released slot {right}"
                return
            if rnode.left != x:
                yield f"pointer mismatch at level {number} next to {_describe(node)}"
                return
            if right != tail:
                if rnode.sentinel:
                    yield f"stray sentinel inside level {number}"
                    return
                if not node.sentinel and not less(node.value, rnode.value):
                    yield f"order violation at level {number}: {node.value!r} before {rnode.value!r}"
                if i == 0:
                    if rnode.down is not None:
                        yield f"level 1 node {rnode.value!r} has a down link"
                elif rnode.down is None:
                    yield f"missing down pointer at level {number} node: {rnode.value!r}"
                else:
                    try:
                        below = arena[rnode.down].value
                    except KeyError:
                        yield f"level {number} node {rnode.value!r} links down to released slot {rnode.down}"
                        return
                    if less(below, rnode.value) or less(rnode.value, below):
                        yield f"down pointer at level {number} maps {rnode.value!r} to {below!r}"
                count += 1
            x = right

        if i == 0 and count != sl._size:
            yield f"size is {sl._size} but level 1 holds {count} elements"
        if i and i == len(heads) - 1 and count == 0:
            yield f"top level {number} is empty"


def validate(sl: "SkipList[Any]") -> bool:
    for problem in problems(sl):
        logger.error("skip list validation failed: %s", problem)
        return False
    return True


def _describe(node: Any) -> str:
    return "sentinel" if node.sentinel else repr(node.value)


# ----------------------------------------------------------------------
# Level dumps
# ----------------------------------------------------------------------
def level_values(sl: "SkipList[Any]", level: int) -> list[Any]:
    """Values at ``level`` (1 is the bottom), in order."""
    if not 1 <= level <= sl.level:
        raise ValueError(f"level must be in 1..{sl.level}, got {level}")
    arena, tail = sl._arena, sl._tails[level - 1]
    values = []
    x = arena[sl._heads[level - 1]].right
    while x != tail:
        node = arena[x]  # type: ignore[index]
        values.append(node.value)
        x = node.right
    return values


def format_level(sl: "SkipList[Any]", level: int) -> str:
    items = " ".join(str(v) for v in level_values(sl, level))
    return f"Level {level}: {items}".rstrip()


def format_levels(sl: "SkipList[Any]") -> str:
    return "\n".join(format_level(sl, lvl) for lvl in range(sl.level, 0, -1))


def dump(sl: "SkipList[Any]", file: Optional[IO[str]] = None) -> None:
    print(format_levels(sl), file=file)
