"""Presentation adapters connecting the controller to Textual."""

from chips_input.presentation.textual_host import TextualOverlayHost

__all__ = ["TextualOverlayHost"]
