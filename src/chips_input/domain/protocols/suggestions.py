"""Suggestion collaborator protocols."""

from collections.abc import Sequence
from typing import Any, Protocol, TypeVar

from chips_input.domain.types import ChipSuggestions

__all__ = ["SuggestionFetcher", "ChipTokenizer", "DiffEquality"]

T_contra = TypeVar("T_contra", contravariant=True)


class SuggestionFetcher(Protocol):
    """Looks up suggestion candidates for the text the user is typing.

    The query may be empty, which callers typically answer with a default
    candidate list. Failures should raise ``FetchError``; any other
    exception is wrapped into one by the controller.
    """

    async def __call__(self, query: str) -> ChipSuggestions[Any]:
        ...


class ChipTokenizer(Protocol[T_contra]):
    """Maps a chip to the text tokens used for search and highlighting.

    ``None`` entries in the result are ignored.
    """

    def __call__(self, item: T_contra) -> Sequence[str | None]:
        ...


class DiffEquality(Protocol):
    """Equivalence between two chips.

    Must be reflexive, symmetric and deterministic. Violations are not
    detected and yield undefined diffs.
    """

    def __call__(self, a: Any, b: Any) -> bool:
        ...
