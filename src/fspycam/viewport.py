"""
Viewport size and resize notification.

Viewport is a thin QObject holding the current size and emitting
`resized` when it changes. Subscriptions are explicit handles so a
discarded camera can detach itself.
"""

from __future__ import annotations

import logging
from typing import Callable

from PySide6.QtCore import QEvent, QObject, Signal
from PySide6.QtWidgets import QWidget

from .types import ViewportSize

logger = logging.getLogger(__name__)


class ResizeSubscription:
    """
    Connection between a Viewport and a resize handler.

    close() disconnects; calling it again does nothing.
    """

    def __init__(self, viewport: "Viewport", slot: Callable[[int, int], None]):
        self._viewport = viewport
        self._slot = slot
        self._active = True
        viewport.resized.connect(slot)

    @property
    def active(self) -> bool:
        return self._active

    def close(self) -> None:
        if not self._active:
            return
        self._active = False
        self._viewport.resized.disconnect(self._slot)

    def __enter__(self) -> "ResizeSubscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class Viewport(QObject):
    """
    Notification source for viewport-size changes.

    Hosts call resize() from whatever delivers their size events.
    """

    resized = Signal(int, int)  # width, height

    def __init__(self, width: int = 1280, height: int = 720, parent: QObject | None = None):
        super().__init__(parent)
        self._size = ViewportSize(width=int(width), height=int(height))

    def size(self) -> ViewportSize:
        """Current viewport size."""
        return self._size

    def resize(self, width: int, height: int) -> None:
        """Record a new size and notify subscribers."""
        self._size = ViewportSize(width=int(width), height=int(height))
        logger.debug("Viewport resized to %dx%d", width, height)
        self.resized.emit(int(width), int(height))

    def subscribe(self, slot: Callable[[int, int], None]) -> ResizeSubscription:
        """Connect slot to resize notifications."""
        return ResizeSubscription(self, slot)


class WidgetViewport(Viewport):
    """
    Viewport that follows a QWidget's size.
    """

    def __init__(self, widget: QWidget, parent: QObject | None = None):
        super().__init__(widget.width(), widget.height(), parent)
        self.widget = widget
        widget.installEventFilter(self)

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if watched is self.widget and event.type() == QEvent.Type.Resize:
            self.resize(self.widget.width(), self.widget.height())
        return False
