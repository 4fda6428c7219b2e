"""Event system for controller change notifications.

Example:
    ```python
    from chips_input.domain.events import ControllerChanged, EventBus

    bus = EventBus()
    bus.subscribe(ControllerChanged, lambda event: print(event.source))
    bus.publish(ControllerChanged(source="tags"))
    ```
"""

from .bus import EventBus
from .types import ControllerChanged, Event

__all__ = [
    "EventBus",
    "Event",
    "ControllerChanged",
]
