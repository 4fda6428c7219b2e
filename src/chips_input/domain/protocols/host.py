"""Render surface host protocol."""

from typing import Any, Protocol

__all__ = ["RenderSurfaceHost"]


class RenderSurfaceHost(Protocol):
    """Visual host the suggestion overlay is inserted into.

    The controller treats surfaces as opaque and never inspects them.
    """

    def insert(self, surface: Any) -> None:
        """Show ``surface`` in the host."""
        ...

    def remove(self, surface: Any) -> None:
        """Take ``surface`` out of the host."""
        ...
