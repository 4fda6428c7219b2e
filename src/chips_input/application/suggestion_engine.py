"""Suggestion lookup and inline autocomplete matching."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Generic, TypeVar

from chips_input.core.diff import Equality
from chips_input.core.tokenizer import ChipTokenizerFn, keyed_tokens, matching_tokens
from chips_input.core.value_stream import ValueStream
from chips_input.domain.protocols import SuggestionFetcher
from chips_input.domain.types import ChipSuggestions, Suggestion
from chips_input.errors import DisposedStateError, FetchError
from chips_input.logger import get_logger

logger = get_logger("chips.suggestions")

T = TypeVar("T")


def compute_inline_suggestion(
    query: str | None,
    candidates: Sequence[T],
    tokenizer: ChipTokenizerFn,
) -> Suggestion[T]:
    """
    Pick the inline autocomplete suggestion for ``query``.

    The first candidate owning a token that starts with the query wins, so
    callers control priority through candidate order. Among that candidate's
    matching tokens the longest one is highlighted; ties keep token order.
    Matching is case-insensitive. An empty query never suggests anything.

    Args:
        query: Text the user is typing
        candidates: Suggestion candidates in priority order
        tokenizer: Maps a candidate to its tokens

    Returns:
        The highlighted suggestion, or an empty suggestion
    """
    if not query:
        return Suggestion.empty()

    needle = query.lower()
    for candidate in candidates:
        tokens = keyed_tokens(candidate, tokenizer)
        matches = [token for key, token in tokens.items() if key.startswith(needle)]
        if matches:
            # max() keeps the first of equally long tokens
            return Suggestion.highlighted(candidate, max(matches, key=len))
    return Suggestion.empty()


class SuggestionEngine(Generic[T]):
    """Fetches suggestions for the live query and publishes the results.

    The engine owns two streams: ``suggestions`` (the filtered candidate
    batch) and ``suggestion`` (the inline match). Every fetch takes a request
    number; a result that comes back after a newer request was issued, or
    after the live query moved on, is dropped without publishing.
    """

    def __init__(
        self,
        fetcher: SuggestionFetcher,
        *,
        tokenizer: ChipTokenizerFn,
        equality: Equality,
        query_getter: Callable[[], str],
        chips_getter: Callable[[], Sequence[T]],
        notify: Callable[[], None],
        debug_label: str = "chipsInput",
    ) -> None:
        self._fetcher = fetcher
        self._tokenizer = tokenizer
        self._equality = equality
        self._query_getter = query_getter
        self._chips_getter = chips_getter
        self._notify = notify
        self._debug_label = debug_label
        self._latest_request = 0

        self.suggestions: ValueStream[ChipSuggestions[T]] = ValueStream(
            f"{debug_label} => suggestions", ChipSuggestions.empty()
        )
        self.suggestion: ValueStream[Suggestion[T]] = ValueStream(
            f"{debug_label} => suggestion", Suggestion.empty()
        )

    @property
    def tokenizer(self) -> ChipTokenizerFn:
        return self._tokenizer

    @property
    def current_batch(self) -> ChipSuggestions[T]:
        return self.suggestions.current or ChipSuggestions.empty()

    @property
    def current_suggestion(self) -> Suggestion[T]:
        return self.suggestion.current or Suggestion.empty()

    @property
    def latest_request(self) -> int:
        return self._latest_request

    def invalidate(self) -> None:
        """Mark every in-flight fetch as stale."""
        self._latest_request += 1

    async def load_suggestions(self) -> bool:
        """
        Fetch suggestions for the live query and publish them.

        Returns:
            True if results were published, False if they were stale

        Raises:
            FetchError: If the fetch collaborator failed. Published state is
                left untouched.
            DisposedStateError: If the engine was disposed
        """
        self._ensure_active("load suggestions")

        self._latest_request += 1
        request = self._latest_request
        query = self._query_getter()
        logger.debug(f"{self._debug_label}: fetching suggestions #{request} for {query!r}")

        try:
            batch = await self._fetcher(query)
        except FetchError:
            logger.warning(f"{self._debug_label}: suggestion fetch #{request} failed for {query!r}")
            raise
        except Exception as e:
            logger.warning(f"{self._debug_label}: suggestion fetch #{request} failed for {query!r}: {e}")
            raise FetchError(f"Suggestion fetch failed for query {query!r}: {e}", query=query) from e

        if self.suggestions.is_disposed:
            logger.debug(f"{self._debug_label}: dropping fetch #{request}, engine disposed")
            return False
        if request != self._latest_request or query != self._query_getter():
            logger.debug(
                f"{self._debug_label}: dropping stale fetch #{request} for {query!r} "
                f"(latest #{self._latest_request}, live query {self._query_getter()!r})"
            )
            return False

        results = (batch or ChipSuggestions.empty()).remove_all(self._chips_getter(), self._equality)
        if not query:
            inline = Suggestion.empty()
        elif results.match is not None and results.match.is_not_empty:
            inline = self.resolve(results.match, query)
        else:
            inline = compute_inline_suggestion(query, results.suggestions, self._tokenizer)

        self.suggestion.set(inline)
        self.suggestions.set(results)
        logger.debug(
            f"{self._debug_label}: published {len(results)} suggestion(s) for {query!r}, "
            f"inline={inline.highlight_text!r}"
        )
        self._notify()
        return True

    def calculate_inline(self, batch: ChipSuggestions[T] | None) -> Suggestion[T]:
        """Recompute and publish the inline suggestion for ``batch``."""
        inline = compute_inline_suggestion(
            self._query_getter(), (batch or ChipSuggestions.empty()).suggestions, self._tokenizer
        )
        self.suggestion.set(inline)
        if inline.is_not_empty:
            logger.debug(f"{self._debug_label}: inline suggestion {inline.highlight_text!r}")
        return inline

    def resolve(self, suggestion: Suggestion[T] | None, query: str | None = None) -> Suggestion[T]:
        """Normalize a suggestion against the query.

        ``None`` becomes empty. A suggestion without highlight text gets the
        first token that prefix-matches the query and becomes empty when no
        token does (or when the query is empty).
        """
        query = self._query_getter() if query is None else query
        if suggestion is None or suggestion.is_empty:
            return Suggestion.empty()
        if suggestion.highlight_text is not None:
            return suggestion
        if not query:
            return Suggestion.empty()
        matches = matching_tokens(suggestion.item, query, self._tokenizer)
        if not matches:
            return Suggestion.empty()
        return suggestion.copy(highlight_text=matches[0])

    def reset(self) -> None:
        """Clear the inline suggestion and the batch, and drop in-flight fetches."""
        self.invalidate()
        self.suggestion.set(Suggestion.empty())
        self.suggestions.set(ChipSuggestions.empty())

    def _ensure_active(self, operation: str) -> None:
        if self.suggestions.is_disposed:
            raise DisposedStateError(self._debug_label, operation)

    def dispose(self) -> None:
        self.invalidate()
        self.suggestions.dispose()
        self.suggestion.dispose()
