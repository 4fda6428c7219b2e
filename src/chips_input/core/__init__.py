"""Core primitives: tokenizer, list diffing, diffable store and value streams."""

from chips_input.core.diff import Insert, ListDiff, Move, Remove, apply_diff, compute_diff
from chips_input.core.list_store import DiffableListStore
from chips_input.core.tokenizer import default_tokenizer
from chips_input.core.value_stream import DebouncedValueStream, Debouncer, ValueStream

__all__ = [
    "DebouncedValueStream",
    "Debouncer",
    "DiffableListStore",
    "Insert",
    "ListDiff",
    "Move",
    "Remove",
    "ValueStream",
    "apply_diff",
    "compute_diff",
    "default_tokenizer",
]
