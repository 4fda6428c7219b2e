"""Application layer: suggestion engine, overlay state machine and controller."""

from chips_input.application.controller import ChipsInputController
from chips_input.application.overlay import OverlayStateMachine
from chips_input.application.suggestion_engine import SuggestionEngine, compute_inline_suggestion

__all__ = [
    "ChipsInputController",
    "OverlayStateMachine",
    "SuggestionEngine",
    "compute_inline_suggestion",
]
