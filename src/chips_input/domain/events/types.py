"""Event types published by the chips input controller."""

import time
from dataclasses import dataclass, field


@dataclass
class Event:
    """Base class for all events.

    The timestamp field is automatically set when the event is created.
    """

    timestamp: float = field(default_factory=time.time, init=False)
    """Timestamp when the event was created (Unix timestamp)."""


@dataclass
class ControllerChanged(Event):
    """Signal that controller state changed and views should re-render.

    The event deliberately carries no state. Subscribers read chips, query,
    suggestion, suggestions and placeholder back from the controller.
    """

    source: str
    """Debug label of the controller that changed."""
