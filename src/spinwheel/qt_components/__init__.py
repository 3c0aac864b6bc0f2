"""PySide6 GUI components for SpinWheel."""

from .canvas import QtCanvas
from .interval import Interval
from .uc_spin_wheel import UCSpinWheel, run_app

__all__ = [
    'QtCanvas',
    'Interval',
    'UCSpinWheel',
    'run_app',
]
