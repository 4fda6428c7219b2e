"""Value types shared across the chips input controller."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class OverlayStatus(Enum):
    """Visibility of the floating suggestion surface."""

    CLOSED = "closed"
    OPENING = "opening"  # open requested before a render surface was attached
    OPEN = "open"


class ControllerLifecycle(Enum):
    """Lifecycle of a controller instance. ``DISPOSED`` is terminal."""

    ACTIVE = "active"
    DISPOSED = "disposed"


@dataclass(frozen=True)
class Suggestion(Generic[T]):
    """A candidate chip plus the token fragment that matched the query.

    An empty suggestion (no item) stands in for "no suggestion"; the
    controller never exposes ``None`` as its current suggestion.
    """

    item: T | None = None
    highlight_text: str | None = None

    @classmethod
    def empty(cls) -> "Suggestion[T]":
        return cls()

    @classmethod
    def highlighted(cls, item: T, highlight_text: str | None) -> "Suggestion[T]":
        return cls(item=item, highlight_text=highlight_text)

    @property
    def is_empty(self) -> bool:
        return self.item is None

    @property
    def is_not_empty(self) -> bool:
        return self.item is not None

    def copy(self, highlight_text: str | None) -> "Suggestion[T]":
        return replace(self, highlight_text=highlight_text)


@dataclass(frozen=True)
class ChipSuggestions(Generic[T]):
    """The candidate set returned by a suggestion fetch.

    Attributes:
        suggestions: Candidates in priority order
        match: Optional best-match hint; when present it becomes the inline
            suggestion without running token matching
    """

    suggestions: tuple[T, ...] = field(default_factory=tuple)
    match: Suggestion[T] | None = None

    def __post_init__(self) -> None:
        # Accept any iterable but always store an immutable tuple
        object.__setattr__(self, "suggestions", tuple(self.suggestions))

    @classmethod
    def empty(cls) -> "ChipSuggestions[T]":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.suggestions

    def __len__(self) -> int:
        return len(self.suggestions)

    def remove_all(
        self,
        items: Iterable[T],
        equality: Callable[[Any, Any], bool],
    ) -> "ChipSuggestions[T]":
        """Return a copy without any candidate equivalent to one of ``items``.

        The match hint is dropped as well when its item is filtered out.
        """
        existing = list(items)
        if not existing:
            return self

        def accepted(candidate: T) -> bool:
            return any(equality(candidate, item) for item in existing)

        match = self.match
        if match is not None and match.is_not_empty and accepted(match.item):
            match = None
        return ChipSuggestions(
            suggestions=tuple(s for s in self.suggestions if not accepted(s)),
            match=match,
        )
