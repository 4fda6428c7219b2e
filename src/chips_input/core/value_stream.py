"""Reactive value cells used for controller state.

``ValueStream`` holds a current value, versions every write and notifies
subscribers when the value changes. ``DebouncedValueStream`` adds a raw
input channel whose values only become current once input has settled.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Generic, TypeVar

from chips_input.errors import DisposedStateError
from chips_input.logger import get_logger

logger = get_logger("chips.streams")

V = TypeVar("V")

Listener = Callable[[V], None]


class ValueStream(Generic[V]):
    """An owned observable cell.

    Writes are synchronous and versioned. Listeners are synchronous callables
    invoked with the new value when it differs from the previous one.
    After ``dispose()`` all listeners are dropped and writes are rejected.
    """

    def __init__(self, name: str, initial_value: V | None = None) -> None:
        self._name = name
        self._current: V | None = initial_value
        self._version = 0
        self._listeners: list[Listener] = []
        self._update_lock = asyncio.Lock()
        self._disposed = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def current(self) -> V | None:
        return self._current

    @current.setter
    def current(self, value: V | None) -> None:
        self.set(value)

    @property
    def version(self) -> int:
        """Number of writes applied so far."""
        return self._version

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def set(self, value: V | None) -> None:
        """Write ``value`` and notify listeners if it changed.

        Raises:
            DisposedStateError: If the stream has been disposed
        """
        if self._disposed:
            raise DisposedStateError(self._name, "write")

        previous = self._current
        self._current = value
        self._version += 1
        if value != previous:
            self._emit(value)

    async def update(self, producer: Callable[[], V | None] | Callable[[], Awaitable[V | None]]) -> V | None:
        """
        Compute a new value, possibly asynchronously, and publish it.

        Concurrent updates on the same stream are applied one at a time in
        call order.

        Args:
            producer: Sync or async zero-argument callable returning the new value

        Returns:
            The value that was published
        """
        if self._disposed:
            raise DisposedStateError(self._name, "update")

        async with self._update_lock:
            value = producer()
            if inspect.isawaitable(value):
                value = await value
            self.set(value)
            return value

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for value changes.

        Returns:
            A zero-argument callable that removes the listener again
        """
        if self._disposed:
            raise DisposedStateError(self._name, "subscribe")
        if asyncio.iscoroutinefunction(listener):
            raise TypeError(f"{self._name}: stream listeners must be synchronous")

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _emit(self, value: V | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception as e:
                logger.opt(exception=e).error(f"{self._name}: listener failed: {e}")

    def dispose(self) -> None:
        """Drop all listeners and reject further writes. Safe to call twice."""
        if self._disposed:
            return
        self._disposed = True
        self._listeners.clear()
        logger.debug(f"{self._name}: disposed (version={self._version})")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r}, current={self._current!r}, version={self._version})"


class Debouncer(Generic[V]):
    """Trailing-edge debounce of pushed values.

    Each ``push`` restarts the window; only the most recent value is handed to
    the callback once ``delay`` seconds pass without another push. A callback
    that has already started is not cancelled by later pushes.

    Callback failures have no caller to propagate to, so they are logged.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[V], Any] | Callable[[V], Awaitable[Any]],
        *,
        name: str = "debouncer",
    ) -> None:
        self._delay = delay
        self._callback = callback
        self._name = name
        self._pending: asyncio.Task | None = None
        self._pending_value: V | None = None
        self._running: set[asyncio.Task] = set()
        self._closed = False

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def is_pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    @property
    def is_running(self) -> bool:
        """True while a callback started by this debouncer is still executing."""
        return bool(self._running)

    def push(self, value: V) -> None:
        """Schedule ``value``, superseding any value still waiting."""
        if self._closed:
            raise DisposedStateError(self._name, "push")

        self.cancel()
        self._pending_value = value
        self._pending = asyncio.create_task(self._wait_then_fire(value))

    def cancel(self) -> None:
        """Drop the waiting value, if any."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
            logger.debug(f"{self._name}: superseded pending value {self._pending_value!r}")
        self._pending = None
        self._pending_value = None

    async def flush(self) -> None:
        """Fire the waiting value now instead of at the end of the window."""
        if not self.is_pending:
            return
        value = self._pending_value
        self.cancel()
        await self._fire(value)

    async def _wait_then_fire(self, value: V) -> None:
        try:
            await asyncio.sleep(self._delay)
        except asyncio.CancelledError:
            return

        task = asyncio.current_task()
        # Detach from the window so a later push cannot cancel this run
        if self._pending is task:
            self._pending = None
            self._pending_value = None
        if task is not None:
            self._running.add(task)
        try:
            await self._fire(value)
        finally:
            if task is not None:
                self._running.discard(task)

    async def _fire(self, value: V | None) -> None:
        logger.debug(f"{self._name}: firing with {value!r}")
        try:
            result = self._callback(value)
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.opt(exception=e).error(f"Error in {self._name} callback: {e}")

    async def aclose(self) -> None:
        """Cancel waiting and running callbacks and wait for them to finish."""
        self._closed = True
        tasks = [t for t in [self._pending, *self._running] if t is not None and not t.done()]
        self.cancel()
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass

    def close(self) -> None:
        """Synchronous variant of ``aclose`` that does not wait."""
        self._closed = True
        self.cancel()
        for task in list(self._running):
            task.cancel()


class DebouncedValueStream(ValueStream[V]):
    """A ``ValueStream`` with a debounced raw-input channel.

    Values passed to ``add`` become current only after ``delay`` seconds
    without newer input; intermediate values are discarded, never queued.
    A direct write through ``set`` also discards any waiting input.
    """

    def __init__(self, name: str, initial_value: V | None = None, *, delay: float = 0.3) -> None:
        super().__init__(name, initial_value)
        self._input = Debouncer(delay, self._land, name=f"{name} => input")

    @property
    def has_pending_input(self) -> bool:
        return self._input.is_pending

    def add(self, raw: V | None) -> None:
        """Feed a raw value into the debounce window."""
        if self._disposed:
            raise DisposedStateError(self._name, "add input")
        self._input.push(raw)

    def set(self, value: V | None) -> None:
        self._input.cancel()
        super().set(value)

    async def flush(self) -> None:
        """Land any waiting input immediately."""
        await self._input.flush()

    def _land(self, value: V | None) -> None:
        if self._disposed:
            return
        ValueStream.set(self, value)

    def dispose(self) -> None:
        self._input.close()
        super().dispose()

    async def aclose(self) -> None:
        await self._input.aclose()
        super().dispose()
