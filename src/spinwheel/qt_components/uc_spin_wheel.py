#!/usr/bin/env python3
"""
Spinning color wheel widget.

Shows the wheel canvas above a "Spin" button.  Each click starts a new
spin on the widget's ``SpinController`` (a spin in progress is replaced);
every timer tick repaints the canvas and refreshes the label.
"""
from __future__ import annotations

import logging
import math
import sys
from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QApplication, QLabel, QPushButton, QVBoxLayout, QWidget

from ..conf import settings
from ..core.controllers import SpinController
from ..core.models import SpinState, Wheel
from ..errors import ResourceError
from ..wheel_renderer import draw_wheel
from .canvas import QtCanvas
from .interval import Interval

log = logging.getLogger(__name__)

# Rotation of the first frame shown before any spin
IDLE_ROTATION = math.pi


class UCSpinWheel(QWidget):
    """Wheel canvas plus Spin button.

    Attributes:
        spin_started: Emitted after a click started a spin.
        spin_finished: Emitted when a spin ran through its tick budget.
        spin_failed: Emitted with the error text when drawing failed.
    """

    spin_started = Signal()
    spin_finished = Signal()
    spin_failed = Signal(str)

    def __init__(self, wheel: Optional[Wheel] = None,
                 tick_budget: Optional[int] = None,
                 speed_factor: Optional[float] = None,
                 period_ms: Optional[int] = None,
                 parent=None):
        super().__init__(parent)
        self.wheel = wheel or settings.wheel()
        self.tick_budget = settings.tick_budget if tick_budget is None else tick_budget
        self.speed_factor = settings.speed_factor if speed_factor is None else speed_factor
        self.period_ms = settings.period_ms if period_ms is None else period_ms

        width, height = self.wheel.extent
        self.canvas = QtCanvas(width, height)

        self.controller = SpinController(self.canvas, self._create_interval)
        self.controller.on_frame = self._on_frame
        self.controller.on_spin_finished = self._on_spin_finished
        self.controller.on_spin_failed = self._on_spin_failed

        self._setup_ui()

        draw_wheel(self.canvas, self.wheel, IDLE_ROTATION)
        self._refresh()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(6)

        self.canvas_label = QLabel()
        self.canvas_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.canvas_label.setFixedSize(*self.canvas.size)
        layout.addWidget(self.canvas_label, alignment=Qt.AlignmentFlag.AlignCenter)

        self.spin_button = QPushButton("Spin")
        self.spin_button.setObjectName("spin")
        self.spin_button.clicked.connect(self.spin)
        layout.addWidget(self.spin_button)

    # ----------------------------------------------------------------
    # Public API
    # ----------------------------------------------------------------

    def spin(self):
        """Start a spin with the widget's settings."""
        try:
            self.controller.start(self.wheel, self.tick_budget,
                                  self.speed_factor, self.period_ms)
        except ResourceError as e:
            log.error("Cannot start spin: %s", e)
            self.spin_failed.emit(str(e))
            return
        self.spin_started.emit()

    def stop(self):
        """Stop the spin in progress, if any."""
        self.controller.stop()

    def is_spinning(self) -> bool:
        return self.controller.is_spinning()

    # ----------------------------------------------------------------
    # Controller callbacks
    # ----------------------------------------------------------------

    def _create_interval(self, millis: int, callback) -> Interval:
        return Interval(millis, callback, parent=self)

    def _on_frame(self, rotation: float):
        self._refresh()

    def _on_spin_finished(self, state: SpinState):
        self.spin_finished.emit()

    def _on_spin_failed(self, error: Exception):
        self.spin_failed.emit(str(error))

    def _refresh(self):
        self.canvas_label.setPixmap(self.canvas.to_pixmap())

    def closeEvent(self, event):
        self.controller.stop()
        super().closeEvent(event)


def run_app() -> int:
    """Show the wheel window and run the Qt event loop."""
    app = QApplication.instance() or QApplication(sys.argv)
    window = UCSpinWheel()
    window.setWindowTitle("SpinWheel")
    window.show()
    log.debug("SpinWheel window shown (%dx%d canvas)", *window.canvas.size)
    return app.exec()
