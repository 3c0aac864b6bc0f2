"""
Repeating timer handle backed by ``QTimer``.

An ``Interval`` owns one registered repeating callback.  It is created
running and must be released exactly once; after ``release()`` the
callback is never invoked again, even for a timeout Qt had already queued.

Usage:
    handle = Interval(1, on_tick)
    ...
    handle.release()

    # or scoped
    with Interval(16, on_tick):
        ...
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QCoreApplication, QObject, QTimer

from ..errors import ResourceError

log = logging.getLogger(__name__)


class Interval:
    """Repeating ``QTimer`` callback with exactly-once release."""

    def __init__(self, millis: int, callback: Callable[[], None],
                 parent: Optional[QObject] = None):
        if millis < 0:
            raise ValueError(f"interval period must be >= 0 ms, got {millis}")
        if QCoreApplication.instance() is None:
            raise ResourceError("no Qt application instance to run the timer on")

        self._callback: Optional[Callable[[], None]] = callback
        self._millis = millis
        self._timer: Optional[QTimer] = QTimer(parent)
        self._timer.setInterval(millis)
        self._timer.timeout.connect(self._fire)
        self._timer.start()
        if not self._timer.isActive():
            self._callback = None
            self._dispose_timer()
            raise ResourceError(f"could not start a {millis} ms timer")

        self._active = True
        log.debug("Interval started (%d ms)", millis)

    @property
    def active(self) -> bool:
        return self._active

    @property
    def millis(self) -> int:
        return self._millis

    def release(self) -> None:
        """Stop and delete the timer and drop the callback.

        Raises:
            RuntimeError: if the handle was already released.
        """
        if not self._active:
            raise RuntimeError("interval already released")
        self._active = False
        self._callback = None
        self._dispose_timer()
        log.debug("Interval released")

    def _dispose_timer(self) -> None:
        timer, self._timer = self._timer, None
        timer.stop()
        timer.timeout.disconnect(self._fire)
        # Deferred; release() can run from inside _fire
        timer.deleteLater()

    def _fire(self) -> None:
        if not self._active or self._callback is None:
            return
        self._callback()

    def __enter__(self) -> Interval:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._active:
            self.release()
