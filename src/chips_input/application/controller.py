"""
ChipsInputController - state owner behind an editable chips (tag) input.

The controller keeps the accepted chips, the query the user is typing, the
fetched suggestion candidates and the inline autocomplete match. Views talk
to it through the public operations below and subscribe to change
notifications; they never mutate state directly.

Notifications are only delivered while the suggestion overlay is open.
Changes made while it is closed are not queued; views re-read the current
state when the overlay opens again.
"""

from __future__ import annotations

import asyncio
import operator
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

from chips_input.application.overlay import OverlayStateMachine
from chips_input.application.suggestion_engine import SuggestionEngine
from chips_input.config import ChipsInputConfig
from chips_input.core.diff import ListDiff
from chips_input.core.list_store import DiffableListStore
from chips_input.core.tokenizer import ChipTokenizerFn, default_tokenizer
from chips_input.core.value_stream import DebouncedValueStream, Debouncer, ValueStream
from chips_input.domain.events import ControllerChanged, EventBus
from chips_input.domain.protocols import ChipTokenizer, DiffEquality, RenderSurfaceHost, SuggestionFetcher
from chips_input.domain.types import ChipSuggestions, ControllerLifecycle, OverlayStatus, Suggestion
from chips_input.errors import DisposedStateError, FetchError
from chips_input.logger import get_logger

logger = get_logger("chips.controller")

T = TypeVar("T")

VoidCallback = Callable[[], None]


def _noop() -> None:
    return None


class ChipsInputController(Generic[T]):
    """Controls a chips input: chips, query, suggestions and overlay.

    All chip mutations go through one copy-mutate-sync path, so a chip change
    and the reset of the query and suggestions that follows it are observed
    together by listeners.

    After ``dispose()`` every operation raises ``DisposedStateError``; the
    read-only accessors keep returning the last state.

    Example:
        ```python
        async def find_tags(query: str) -> ChipSuggestions[str]:
            return ChipSuggestions(suggestions=[t for t in TAGS if query.lower() in t.lower()])

        controller = ChipsInputController(find_tags, chips=["python"])
        controller.add_listener(lambda event: view.refresh())
        controller.initialize(TextualOverlayHost(screen), suggestion_list)
        controller.open()

        controller.input_query("asy")     # debounced, then fetched
        await controller.accept_suggestion()
        ```
    """

    def __init__(
        self,
        find_suggestions: SuggestionFetcher,
        *,
        chips: Iterable[T] | None = None,
        equality: DiffEquality | None = None,
        tokenizer: ChipTokenizer | None = None,
        config: ChipsInputConfig | None = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            find_suggestions: Async callable returning suggestion candidates for a query
            chips: Initial chips
            equality: Chip equivalence used for diffing and for filtering out
                suggestions that are already chips (default: ``==``)
            tokenizer: Maps a chip to its search tokens (default: ``str(item)``)
            config: Controller settings (default: ``ChipsInputConfig()``)
        """
        self.config = config or ChipsInputConfig()
        self.debug_label = self.config.debug_label
        self.find_suggestions = find_suggestions
        self.tokenizer: ChipTokenizerFn = tokenizer or default_tokenizer
        self.enabled = self.config.enabled

        self._lifecycle = ControllerLifecycle.ACTIVE
        self._mutation_lock = asyncio.Lock()
        self._request_keyboard: VoidCallback = _noop
        self._hide_keyboard: VoidCallback = _noop

        self.events = EventBus(name=f"{self.debug_label} => events")
        self._chips: DiffableListStore[T] = DiffableListStore(
            chips,
            equality=equality or operator.eq,
            debug_label=f"{self.debug_label} => chips",
        )
        self._placeholder: ValueStream[str] = ValueStream(
            f"{self.debug_label} => placeholder", self.config.placeholder
        )
        self._query: DebouncedValueStream[str] = DebouncedValueStream(
            f"{self.debug_label} => query",
            self.config.query,
            delay=self.config.query_debounce,
        )
        self._engine: SuggestionEngine[T] = SuggestionEngine(
            find_suggestions,
            tokenizer=self.tokenizer,
            equality=self._chips.equality,
            query_getter=lambda: self.query,
            chips_getter=lambda: self._chips.items,
            notify=self.notify_listeners,
            debug_label=self.debug_label,
        )
        self._overlay = OverlayStateMachine(
            hidden=self.config.hide_suggestion_overlay,
            debug_label=self.debug_label,
        )

        self._suggest_trigger: Debouncer[str] | None = None
        if self.config.suggest_on_type:
            self._suggest_trigger = Debouncer(
                self.config.suggestion_debounce,
                self._load_on_query_change,
                name=f"{self.debug_label} => suggest",
            )
            self._query.subscribe(self._suggest_trigger.push)

        logger.debug(
            f"{self.debug_label}: controller created with {len(self._chips)} chip(s) "
            f"(suggest_on_type={self.config.suggest_on_type})"
        )

    # ------------------------------------------------------------------ state

    @property
    def lifecycle(self) -> ControllerLifecycle:
        return self._lifecycle

    @property
    def is_disposed(self) -> bool:
        return self._lifecycle is ControllerLifecycle.DISPOSED

    @property
    def disabled(self) -> bool:
        return self.enabled is not True

    @property
    def status(self) -> OverlayStatus:
        return self._overlay.status

    @property
    def hide_suggestion_overlay(self) -> bool:
        return self._overlay.hidden

    @property
    def chips(self) -> tuple[T, ...]:
        return self._chips.items

    @property
    def size(self) -> int:
        return len(self._chips)

    @property
    def query(self) -> str:
        return self._query.current or ""

    @property
    def placeholder(self) -> str | None:
        return self._placeholder.current

    @placeholder.setter
    def placeholder(self, placeholder: str | None) -> None:
        self._ensure_active("set placeholder")
        self._placeholder.set(placeholder)
        self.notify_listeners()

    @property
    def suggestion(self) -> Suggestion[T]:
        return self._engine.current_suggestion

    @suggestion.setter
    def suggestion(self, suggestion: Suggestion[T] | None) -> None:
        self._ensure_active("set suggestion")
        self._engine.suggestion.set(self._engine.resolve(suggestion))
        self.notify_listeners()

    @property
    def suggestion_token(self) -> str | None:
        return self._engine.current_suggestion.highlight_text

    @property
    def suggestions(self) -> list[T]:
        return list(self._engine.current_batch.suggestions)

    @suggestions.setter
    def suggestions(self, suggestions: Iterable[T] | None) -> None:
        self._ensure_active("set suggestions")
        batch: ChipSuggestions[T] = ChipSuggestions(suggestions=tuple(suggestions or ()))
        self._engine.calculate_inline(batch)
        self._engine.suggestions.set(batch)
        self.notify_listeners()

    @property
    def suggestion_stream(self) -> ValueStream[ChipSuggestions[T]]:
        return self._engine.suggestions

    @property
    def inline_suggestion_stream(self) -> ValueStream[Suggestion[T]]:
        return self._engine.suggestion

    @property
    def query_stream(self) -> DebouncedValueStream[str]:
        return self._query

    @property
    def placeholder_stream(self) -> ValueStream[str]:
        return self._placeholder

    # ---------------------------------------------------------- notifications

    def add_listener(self, listener: Callable[[ControllerChanged], None]) -> None:
        """Subscribe to change notifications (synchronous callables only)."""
        self._ensure_active("add listener")
        self.events.subscribe(ControllerChanged, listener)

    def remove_listener(self, listener: Callable[[ControllerChanged], None]) -> None:
        self.events.unsubscribe(ControllerChanged, listener)

    def notify_listeners(self) -> None:
        """
        Tell listeners that state changed.

        Suppressed (not queued) unless the overlay is open.

        Raises:
            DisposedStateError: If called after dispose
        """
        if self.is_disposed:
            raise DisposedStateError(self.debug_label, "notify listeners")
        if self._overlay.status is not OverlayStatus.OPEN:
            return
        self.events.publish(ControllerChanged(source=self.debug_label))

    # ------------------------------------------------------------------ query

    async def set_query(self, query: str | None) -> None:
        """Replace the query immediately, discarding debounced input."""
        self._ensure_active("set query")
        await self._query.update(lambda: query)
        self.notify_listeners()

    def input_query(self, text: str | None) -> None:
        """Feed a raw keystroke value; it becomes the query once typing settles."""
        self._ensure_active("input query")
        self._query.add(text)

    # ------------------------------------------------------------ suggestions

    async def load_suggestions(self) -> bool:
        """
        Fetch suggestions for the current query and publish them.

        Candidates that are already chips are filtered out. A result for a
        query that is no longer current is discarded.

        Returns:
            True if results were published, False if they were discarded as stale

        Raises:
            FetchError: If the fetch failed; suggestion state is unchanged
        """
        self._ensure_active("load suggestions")
        return await self._engine.load_suggestions()

    async def _load_on_query_change(self, query: str | None) -> None:
        if self.is_disposed:
            return
        try:
            await self._engine.load_suggestions()
        except FetchError as e:
            logger.opt(exception=e).error(f"{self.debug_label}: suggestions for {query!r} could not be loaded")

    def calculate_inline_suggestion(
        self,
        suggestions: ChipSuggestions[T] | None = None,
        *,
        notify: bool = False,
    ) -> Suggestion[T]:
        """Recompute the inline suggestion from ``suggestions`` (default: current batch)."""
        self._ensure_active("calculate inline suggestion")
        batch = suggestions if suggestions is not None else self._engine.current_batch
        inline = self._engine.calculate_inline(batch)
        if notify:
            self.notify_listeners()
        return inline

    def set_inline_suggestion(
        self,
        item: T,
        *,
        suggestion_token: str | None = None,
        notify: bool = False,
    ) -> None:
        """
        Force the inline suggestion to ``item``.

        Args:
            item: The suggested chip
            suggestion_token: Highlight text; defaults to the item's first token
            notify: Whether to notify listeners afterwards
        """
        self._ensure_active("set inline suggestion")
        if suggestion_token is None:
            tokens = [token for token in self.tokenizer(item) or () if token is not None]
            suggestion_token = tokens[0] if tokens else None
        self._engine.suggestion.set(Suggestion.highlighted(item, suggestion_token))
        if notify:
            self.notify_listeners()

    async def accept_suggestion(self, suggestion: T | None = None) -> ListDiff[T]:
        """
        Turn the inline suggestion into a chip.

        Nothing happens unless an inline suggestion token is present. The
        suggestion is cleared before the chip is added so the add's own reset
        cannot bring it back.

        Args:
            suggestion: Chip to add instead of the inline suggestion's item
        """
        self._ensure_active("accept suggestion")
        if self.suggestion_token is None:
            return ListDiff.empty()

        item = suggestion if suggestion is not None else self.suggestion.item
        self._engine.suggestion.set(Suggestion.empty())
        if item is None:
            return ListDiff.empty()
        return await self.add_chip(item, reset_query=True)

    async def reset_suggestions(self) -> None:
        """Clear the inline suggestion, the query and the candidate batch."""
        self._ensure_active("reset suggestions")
        self._reset_suggestion_state()
        self.notify_listeners()

    def _reset_suggestion_state(self) -> None:
        self._engine.suggestion.set(Suggestion.empty())
        self._query.set(None)
        self._engine.reset()

    # ------------------------------------------------------------------ chips

    async def _apply_diff(self, mutation: Callable[[list[T]], Any], *, notify: bool = True) -> ListDiff[T]:
        """Apply ``mutation`` to a copy of the chips and sync the store with it."""
        self._ensure_active("change chips")
        if not self.enabled:
            logger.debug(f"{self.debug_label}: controller disabled, ignoring chip change")
            return ListDiff.empty()

        async with self._mutation_lock:
            copy = list(self._chips.items)
            mutation(copy)
            diff = await self._chips.sync(copy)
            if diff.is_not_empty:
                # Chips changed, so suggestions computed for the old chips are stale
                self._reset_suggestion_state()
                if notify:
                    self.notify_listeners()
        return diff

    async def add_chip(self, item: T, *, reset_query: bool = False) -> ListDiff[T]:
        """Append ``item``. With ``reset_query`` the query is cleared even if nothing changed."""
        diff = await self._apply_diff(lambda chips: chips.append(item))
        if reset_query and diff.is_empty:
            await self.reset_suggestions()
        return diff

    async def add_all(self, items: Iterable[T] | None) -> ListDiff[T]:
        return await self._apply_diff(lambda chips: chips.extend(items or ()))

    async def delete_chip(self, item: T) -> ListDiff[T]:
        """Remove the first chip equivalent to ``item``; unknown items are ignored."""

        def remove(chips: list[T]) -> None:
            for index, existing in enumerate(chips):
                if self._chips.equality(existing, item):
                    del chips[index]
                    return

        return await self._apply_diff(remove)

    async def remove_at(self, index: int) -> ListDiff[T]:
        """Remove the chip at ``index``.

        Raises:
            IndexError: If ``index`` is out of range
        """

        def remove(chips: list[T]) -> None:
            del chips[index]

        return await self._apply_diff(remove)

    async def pop(self) -> ListDiff[T]:
        """Remove the last chip. A no-op when there are no chips."""

        def remove_last(chips: list[T]) -> None:
            if chips:
                chips.pop()

        return await self._apply_diff(remove_last)

    async def sync_chips(self, items: Iterable[T]) -> ListDiff[T]:
        """Replace all chips with ``items``."""
        new_items = list(items)

        def replace(chips: list[T]) -> None:
            chips[:] = new_items

        return await self._apply_diff(replace)

    async def update_chips(self, items: Iterable[T]) -> ListDiff[T]:
        """Replace all chips without resetting the query or suggestions."""
        self._ensure_active("update chips")
        async with self._mutation_lock:
            diff = await self._chips.sync(items)
        self.notify_listeners()
        return diff

    # ---------------------------------------------------------------- overlay

    def initialize(self, host: RenderSurfaceHost, surface: Any) -> None:
        """Attach the render host and suggestion surface; replays a pending open."""
        self._ensure_active("initialize overlay")
        self._overlay.initialize(host, surface)

    def open(self) -> bool:
        """Show the suggestion overlay. Returns False if it cannot be shown yet."""
        self._ensure_active("open overlay")
        return self._overlay.open()

    def close(self) -> None:
        self._ensure_active("close overlay")
        self._overlay.close()

    def toggle(self) -> None:
        self._ensure_active("toggle overlay")
        self._overlay.toggle()

    # --------------------------------------------------------------- keyboard

    @property
    def request_keyboard_callback(self) -> VoidCallback:
        return self._request_keyboard

    @request_keyboard_callback.setter
    def request_keyboard_callback(self, callback: VoidCallback | None) -> None:
        self._request_keyboard = callback or _noop

    @property
    def hide_keyboard_callback(self) -> VoidCallback:
        return self._hide_keyboard

    @hide_keyboard_callback.setter
    def hide_keyboard_callback(self, callback: VoidCallback | None) -> None:
        self._hide_keyboard = callback or _noop

    def request_keyboard(self) -> None:
        self._request_keyboard()

    def hide_keyboard(self) -> None:
        self._hide_keyboard()

    # -------------------------------------------------------------- lifecycle

    async def dispose(self) -> None:
        """
        Tear down all streams and stop notifying.

        An open overlay is removed from its host first. Pending debounced
        input and in-flight background fetches are cancelled. Calling it
        again does nothing.
        """
        if self.is_disposed:
            return

        self._lifecycle = ControllerLifecycle.DISPOSED
        self._overlay.close()
        self._overlay.reset()
        if self._suggest_trigger is not None:
            await self._suggest_trigger.aclose()
        await self._query.aclose()
        self._placeholder.dispose()
        self._engine.dispose()
        self._chips.dispose()
        self.events.clear()
        logger.debug(f"{self.debug_label}: controller disposed")

    def _ensure_active(self, operation: str) -> None:
        if self.is_disposed:
            raise DisposedStateError(self.debug_label, operation)
