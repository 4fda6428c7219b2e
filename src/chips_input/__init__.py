"""Controller for editable chips (tag) inputs with async suggestions."""

from chips_input.logger import get_logger, setup_logger
from chips_input.application import ChipsInputController, OverlayStateMachine, compute_inline_suggestion
from chips_input.config import ChipsInputConfig, load_chips_input_config
from chips_input.core import DiffableListStore, ListDiff
from chips_input.domain import ChipSuggestions, ControllerLifecycle, OverlayStatus, Suggestion
from chips_input.domain.events import ControllerChanged
from chips_input.errors import ChipsInputError, DisposedStateError, FetchError

__version__ = "0.1.0"

__all__ = [
    "ChipSuggestions",
    "ChipsInputConfig",
    "ChipsInputController",
    "ChipsInputError",
    "ControllerChanged",
    "ControllerLifecycle",
    "DiffableListStore",
    "DisposedStateError",
    "FetchError",
    "ListDiff",
    "OverlayStateMachine",
    "OverlayStatus",
    "Suggestion",
    "compute_inline_suggestion",
    "get_logger",
    "load_chips_input_config",
    "setup_logger",
]
