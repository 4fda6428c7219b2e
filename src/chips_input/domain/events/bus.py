"""Event bus used to deliver controller change notifications.

Views subscribe to controller events instead of holding a reference back
into the widget tree, which keeps the controller free of UI imports.

Event Handler Contract:
    Event handlers MUST be synchronous (non-async) functions. This is enforced
    at subscription time. A handler that needs async work should schedule it
    with asyncio.create_task().
"""

import asyncio
from typing import Callable, Type, TypeVar

from chips_input.logger import get_logger

from .types import Event

logger = get_logger("chips.events")

T = TypeVar("T", bound=Event)

# Type alias for event handlers - must be synchronous
EventHandler = Callable[[Event], None]


class EventBus:
    """Publish-subscribe hub keyed by event type.

    Example:
        ```python
        bus = EventBus()

        def rerender(event: ControllerChanged):
            view.refresh()

        bus.subscribe(ControllerChanged, rerender)
        bus.publish(ControllerChanged(source="tags"))
        ```

    Thread safety:
        Not thread-safe. All operations are expected to run on the event loop
        that owns the controller.
    """

    def __init__(self, name: str = "events"):
        self._name = name
        self._handlers: dict[Type[Event], list[Callable[[Event], None]]] = {}
        """Registry of event handlers by event type."""

    def subscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """
        Subscribe to events of a specific type.

        Args:
            event_type: The type of event to subscribe to
            handler: Synchronous callback receiving the event instance

        Raises:
            TypeError: If handler is an async function (coroutine function)
        """
        if asyncio.iscoroutinefunction(handler):
            raise TypeError(
                f"Event handlers must be synchronous functions. "
                f"Handler {getattr(handler, '__name__', handler)!r} is an async function. "
                f"To perform async work, schedule it using asyncio.create_task() instead."
            )

        handlers = self._handlers.setdefault(event_type, [])

        # Avoid duplicate subscriptions of the same handler
        if handler not in handlers:
            handlers.append(handler)
            logger.debug(f"{self._name}: subscribed handler for {event_type.__name__}")
        else:
            logger.debug(f"{self._name}: handler already subscribed for {event_type.__name__}, skipping")

    def unsubscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """
        Unsubscribe a handler. Unknown handlers are ignored.
        """
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            logger.debug(f"{self._name}: unsubscribed handler for {event_type.__name__}")

    def publish(self, event: Event) -> None:
        """
        Publish an event to all subscribed handlers.

        Handlers run synchronously in subscription order. A handler that raises
        is logged and does not prevent the remaining handlers from running.
        """
        event_type = type(event)
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            return

        logger.debug(f"{self._name}: publishing {event_type.__name__} to {len(handlers)} handler(s)")

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.opt(exception=e).error(f"Error in event handler for {event_type.__name__}: {e}")

    def clear(self) -> None:
        """Drop every subscription."""
        self._handlers.clear()
        logger.debug(f"{self._name}: cleared")

    def has_subscribers(self, event_type: Type[Event]) -> bool:
        """Check if there are any subscribers for a specific event type."""
        return bool(self._handlers.get(event_type))
