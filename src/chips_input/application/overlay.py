"""Visibility state machine for the floating suggestion overlay.

Transitions:

    ============  ==========================  =========================
    status        open()                      close()
    ============  ==========================  =========================
    CLOSED        OPEN if a surface is        no-op
                  attached, else OPENING
    OPENING       no-op (already pending)     no-op
    OPEN          no-op                       CLOSED (surface removed)
    ============  ==========================  =========================

``initialize`` attaches the host and surface; a pending OPENING request is
replayed as soon as a surface is available.
"""

from __future__ import annotations

from typing import Any

from chips_input.domain.protocols import RenderSurfaceHost
from chips_input.domain.types import OverlayStatus
from chips_input.logger import get_logger

logger = get_logger("chips.overlay")


class OverlayStateMachine:
    """Tracks whether the suggestion surface is shown, pending or hidden.

    With ``hidden=True`` (the ``hide_suggestion_overlay`` setting) the
    overlay never opens and ``open``/``close``/``toggle`` do nothing;
    suggestion computation is unaffected.
    """

    def __init__(self, *, hidden: bool = False, debug_label: str = "chipsInput") -> None:
        self._hidden = hidden
        self._debug_label = debug_label
        self._status = OverlayStatus.CLOSED
        self._host: RenderSurfaceHost | None = None
        self._surface: Any = None

    @property
    def status(self) -> OverlayStatus:
        return self._status

    @property
    def is_open(self) -> bool:
        return self._status is OverlayStatus.OPEN

    @property
    def hidden(self) -> bool:
        return self._hidden

    @property
    def surface(self) -> Any:
        return self._surface

    @property
    def is_attached(self) -> bool:
        return self._host is not None and self._surface is not None

    def initialize(self, host: RenderSurfaceHost, surface: Any) -> None:
        """
        Attach the render host and the overlay surface.

        When the overlay is hidden the surface is not kept. If an open was
        requested earlier it is carried out now.
        """
        self._host = host
        if not self._hidden:
            self._surface = surface
        logger.debug(f"{self._debug_label}: overlay attached (status={self._status.value})")

        if self._status is OverlayStatus.OPENING:
            self._transition(OverlayStatus.CLOSED)
            self.open()

    def open(self) -> bool:
        """
        Request the overlay to be shown.

        Returns:
            True if the overlay is shown or an open is already pending,
            False if it could not be shown yet (or is hidden)
        """
        if self._hidden:
            return False

        if self._status is OverlayStatus.OPEN:
            return True
        if self._status is OverlayStatus.OPENING:
            return True

        if self.is_attached:
            self._host.insert(self._surface)
            self._transition(OverlayStatus.OPEN)
            return True

        self._transition(OverlayStatus.OPENING)
        return False

    def close(self) -> None:
        """Hide the overlay. Only has an effect while it is open."""
        if self._hidden or self._status is not OverlayStatus.OPEN:
            return
        if self._host is not None and self._surface is not None:
            self._host.remove(self._surface)
        self._transition(OverlayStatus.CLOSED)

    def toggle(self) -> None:
        if self._hidden:
            return
        if self._status is not OverlayStatus.CLOSED:
            self.close()
        else:
            self.open()

    def reset(self) -> None:
        """Force the CLOSED status without touching the host."""
        self._status = OverlayStatus.CLOSED

    def _transition(self, status: OverlayStatus) -> None:
        logger.debug(f"{self._debug_label}: overlay {self._status.value} -> {status.value}")
        self._status = status
