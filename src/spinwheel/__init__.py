"""
SpinWheel - segmented color wheel with a timer-driven spin

Features:
- Wheel renderer for any canvas-like 2D raster surface
- Spin controller owning a single repeating timer per spin
- QPainter canvas and click-to-spin widget (PySide6)
- Pillow canvas for headless PNG frames and animated GIF export

Usage:
    # As a library
    from spinwheel import PillowCanvas, Wheel, draw_wheel
    canvas = PillowCanvas(64, 64)
    draw_wheel(canvas, Wheel(), rotation=0.0)

    # Command line
    spinwheel gui             # Open the wheel window
    spinwheel render out.png  # Save one frame
"""

from spinwheel.__version__ import __version__

# Core exports (no Qt import here; see spinwheel.qt_components)
from spinwheel.canvas import PillowCanvas
from spinwheel.core.controllers import SpinController
from spinwheel.core.models import SpinPhase, SpinState, Wheel, spin_rotation
from spinwheel.errors import ResourceError, SurfaceError
from spinwheel.wheel_renderer import draw_wheel, sector_angles

__all__ = [
    # Version
    "__version__",
    # Rendering
    "PillowCanvas",
    "draw_wheel",
    "sector_angles",
    # Spin
    "SpinController",
    "SpinPhase",
    "SpinState",
    "Wheel",
    "spin_rotation",
    # Errors
    "ResourceError",
    "SurfaceError",
]
