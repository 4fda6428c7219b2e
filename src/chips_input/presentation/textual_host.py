"""
TextualOverlayHost - render surface host backed by a Textual widget tree.

The controller inserts and removes an opaque surface; with Textual that
surface is a widget mounted on (and removed from) a parent such as the
active screen.
"""

from typing import TYPE_CHECKING

from chips_input.logger import get_logger

if TYPE_CHECKING:
    from textual.widget import Widget

logger = get_logger("chips.textual_host")


class TextualOverlayHost:
    """
    Mounts the suggestion overlay widget on demand.

    Example:
        ```python
        host = TextualOverlayHost(app.screen)
        controller.initialize(host, SuggestionList(controller))
        controller.open()   # mounts the list
        controller.close()  # removes it again
        ```
    """

    def __init__(self, parent: "Widget"):
        """
        Initialize the host.

        Args:
            parent: Widget (or screen) the overlay is mounted on
        """
        self.parent = parent
        self._mounted: "Widget | None" = None

    def insert(self, surface: "Widget") -> None:
        """Mount ``surface`` on the parent widget."""
        if self._mounted is surface:
            logger.debug("Overlay surface already mounted, skipping")
            return
        self.parent.mount(surface)
        self._mounted = surface
        logger.debug(f"Mounted overlay surface {type(surface).__name__}")

    def remove(self, surface: "Widget") -> None:
        """Remove ``surface`` from the widget tree."""
        if self._mounted is not surface:
            logger.debug("Overlay surface not mounted, nothing to remove")
            return
        surface.remove()
        self._mounted = None
        logger.debug(f"Removed overlay surface {type(surface).__name__}")

    @property
    def is_mounted(self) -> bool:
        """Check if an overlay surface is currently mounted."""
        return self._mounted is not None
