"""Ordered list diffing under a caller supplied equivalence.

A diff is computed from the longest common subsequence of the two lists.
Elements outside that subsequence are removed or inserted; a removed element
that is equivalent to an inserted one is reported as a move instead.

Index semantics (see ``apply_diff``): ``Remove.index`` and ``Move.from_index``
refer to the old list, ``Insert.index`` and ``Move.to_index`` refer to the
new list.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")

Equality = Callable[[Any, Any], bool]


@dataclass(frozen=True)
class Insert(Generic[T]):
    """Insert ``item`` at ``index`` of the new list."""

    index: int
    item: T


@dataclass(frozen=True)
class Remove(Generic[T]):
    """Remove ``item`` found at ``index`` of the old list."""

    index: int
    item: T


@dataclass(frozen=True)
class Move(Generic[T]):
    """Move ``item`` from ``from_index`` (old list) to ``to_index`` (new list)."""

    from_index: int
    to_index: int
    item: T


DiffOperation = Insert[T] | Remove[T] | Move[T]


@dataclass(frozen=True)
class ListDiff(Generic[T]):
    """Ordered operations turning one list into another.

    Removes come first (descending old index), then moves, then inserts
    (ascending new index).
    """

    operations: tuple[DiffOperation, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "ListDiff[T]":
        """Diff of two equivalent lists."""
        return cls()

    @property
    def is_empty(self) -> bool:
        """True when the two lists were equivalent."""
        return not self.operations

    @property
    def is_not_empty(self) -> bool:
        """True when at least one operation is needed."""
        return bool(self.operations)

    @property
    def inserts(self) -> list[Insert[T]]:
        """Insert operations, in diff order."""
        return [op for op in self.operations if isinstance(op, Insert)]

    @property
    def removes(self) -> list[Remove[T]]:
        """Remove operations, in diff order."""
        return [op for op in self.operations if isinstance(op, Remove)]

    @property
    def moves(self) -> list[Move[T]]:
        """Move operations, in diff order."""
        return [op for op in self.operations if isinstance(op, Move)]

    def __len__(self) -> int:
        return len(self.operations)

    def __bool__(self) -> bool:
        return self.is_not_empty

    def __iter__(self):
        return iter(self.operations)


def _common_subsequence(old: Sequence[T], new: Sequence[T], equality: Equality) -> list[tuple[int, int]]:
    """Index pairs of a longest common subsequence, in ascending order."""
    n, m = len(old), len(new)
    # lengths[i][j] = LCS length of old[i:] and new[j:]
    lengths = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(n - 1, -1, -1):
        row, below = lengths[i], lengths[i + 1]
        for j in range(m - 1, -1, -1):
            if equality(old[i], new[j]):
                row[j] = below[j + 1] + 1
            else:
                row[j] = max(below[j], row[j + 1])

    pairs: list[tuple[int, int]] = []
    i = j = 0
    while i < n and j < m:
        if equality(old[i], new[j]):
            pairs.append((i, j))
            i += 1
            j += 1
        elif lengths[i + 1][j] >= lengths[i][j + 1]:
            i += 1
        else:
            j += 1
    return pairs


def compute_diff(
    old: Sequence[T],
    new: Sequence[T],
    equality: Equality = operator.eq,
) -> ListDiff[T]:
    """Compute the operations that transform ``old`` into ``new``.

    Elements matched by the common subsequence produce no operation.
    """
    # Skip the shared prefix and suffix; typical edits touch one end
    start = 0
    while start < len(old) and start < len(new) and equality(old[start], new[start]):
        start += 1
    old_end, new_end = len(old), len(new)
    while old_end > start and new_end > start and equality(old[old_end - 1], new[new_end - 1]):
        old_end -= 1
        new_end -= 1

    pairs = _common_subsequence(old[start:old_end], new[start:new_end], equality)
    kept_old = {start + i for i, _ in pairs}
    kept_new = {start + j for _, j in pairs}

    removed = [i for i in range(start, old_end) if i not in kept_old]
    inserted = [j for j in range(start, new_end) if j not in kept_new]

    moves: list[Move[T]] = []
    unmatched_inserts = list(inserted)
    unmatched_removes: list[int] = []
    for i in removed:
        target = next((j for j in unmatched_inserts if equality(old[i], new[j])), None)
        if target is None:
            unmatched_removes.append(i)
        else:
            unmatched_inserts.remove(target)
            moves.append(Move(from_index=i, to_index=target, item=new[target]))

    operations: list[DiffOperation] = [Remove(index=i, item=old[i]) for i in reversed(unmatched_removes)]
    operations.extend(moves)
    operations.extend(Insert(index=j, item=new[j]) for j in unmatched_inserts)
    return ListDiff(operations=tuple(operations))


def apply_diff(old: Sequence[T], diff: ListDiff[T]) -> list[T]:
    """Replay ``diff`` against ``old``.

    All removes and move sources are taken out first (highest index first),
    then inserts and move targets are placed at their new indices in
    ascending order.
    """
    result = list(old)
    taken = sorted(
        [op.index for op in diff.removes] + [op.from_index for op in diff.moves],
        reverse=True,
    )
    for index in taken:
        del result[index]

    placed = sorted(
        [(op.index, op.item) for op in diff.inserts] + [(op.to_index, op.item) for op in diff.moves],
        key=lambda entry: entry[0],
    )
    for index, item in placed:
        result.insert(index, item)
    return result
