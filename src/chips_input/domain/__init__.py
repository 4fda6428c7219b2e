"""Domain layer: value types, collaborator protocols and events."""

from chips_input.domain.types import ChipSuggestions, ControllerLifecycle, OverlayStatus, Suggestion

__all__ = [
    "ChipSuggestions",
    "ControllerLifecycle",
    "OverlayStatus",
    "Suggestion",
]
