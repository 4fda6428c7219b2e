"""Ordered chip storage with atomic replace-and-diff."""

from __future__ import annotations

import asyncio
import operator
from collections.abc import Iterable, Iterator
from typing import Generic, TypeVar

from chips_input.core.diff import Equality, ListDiff, compute_diff
from chips_input.errors import DisposedStateError
from chips_input.logger import get_logger

logger = get_logger("chips.list_store")

T = TypeVar("T")


class DiffableListStore(Generic[T]):
    """Holds the accepted chips and replaces them atomically.

    The store is read-only from the outside except through ``sync``, which
    swaps in a new sequence and reports the diff. The swap happens in one
    step after the diff is computed, so observers never see a half-applied
    change. Calls to ``sync`` are serialized.

    Example:
        >>> store = DiffableListStore(["a", "b", "c"])
        >>> diff = await store.sync(["a", "c", "d"])
        >>> [type(op).__name__ for op in diff]
        ['Remove', 'Insert']
    """

    def __init__(
        self,
        items: Iterable[T] | None = None,
        *,
        equality: Equality | None = None,
        debug_label: str = "chips",
    ) -> None:
        self._items: tuple[T, ...] = tuple(items or ())
        self._equality: Equality = equality or operator.eq
        self._debug_label = debug_label
        self._lock = asyncio.Lock()
        self._disposed = False

    @property
    def equality(self) -> Equality:
        return self._equality

    @property
    def items(self) -> tuple[T, ...]:
        """Snapshot of the current contents."""
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def contains(self, item: T) -> bool:
        """Membership under the configured equivalence."""
        return any(self._equality(existing, item) for existing in self._items)

    def index_of(self, item: T) -> int:
        """Index of the first equivalent element, or -1."""
        for index, existing in enumerate(self._items):
            if self._equality(existing, item):
                return index
        return -1

    async def sync(self, new_contents: Iterable[T]) -> ListDiff[T]:
        """
        Replace the stored sequence and return the diff from old to new.

        Args:
            new_contents: The complete new sequence

        Returns:
            The diff; empty when the contents are equivalent element by element

        Raises:
            DisposedStateError: If the store has been disposed
        """
        if self._disposed:
            raise DisposedStateError(self._debug_label, "sync")

        new_items = tuple(new_contents)
        async with self._lock:
            old_items = self._items
            diff = compute_diff(old_items, new_items, self._equality)
            if diff.is_not_empty:
                self._items = new_items
                logger.debug(
                    f"{self._debug_label}: synced {len(old_items)} -> {len(new_items)} items "
                    f"({len(diff)} operation(s))"
                )
            return diff

    def dispose(self) -> None:
        self._disposed = True

    @property
    def is_disposed(self) -> bool:
        return self._disposed
