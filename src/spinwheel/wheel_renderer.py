"""
Wheel renderer - draws a segmented color wheel onto a 2D raster surface.

Works against any object implementing the :class:`Surface` drawing contract
(``QtCanvas`` for the GUI, ``PillowCanvas`` for headless export).  The
renderer holds no state: each call clears the surface and repaints every
sector for the given rotation.
"""
from __future__ import annotations

import math
from typing import Protocol, Tuple

from .core.models import Wheel


class Surface(Protocol):
    """Canvas-like drawing surface.

    Angles are in radians, measured clockwise from the +x axis (y grows
    downward).  Primitives raise ``SurfaceError`` when the underlying
    drawing context cannot be obtained or used.
    """

    @property
    def size(self) -> Tuple[int, int]: ...

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None: ...

    def begin_path(self) -> None: ...

    def arc(self, cx: float, cy: float, radius: float,
            start_angle: float, end_angle: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def set_fill_style(self, color: str) -> None: ...

    def stroke(self) -> None: ...

    def fill(self) -> None: ...


def sector_angles(index: int, sector_count: int, rotation: float) -> Tuple[float, float]:
    """Start/end angle of sector ``index``.

    The rotation is divided by ``sector_count`` together with the sector
    offset, so a full turn of the wheel needs ``rotation == 2π * sector_count``.
    """
    start = (2 * math.pi * index + rotation) / sector_count
    end = (2 * math.pi * (index + 1) + rotation) / sector_count
    return start, end


def draw_wheel(surface: Surface, wheel: Wheel, rotation: float) -> None:
    """Clear ``surface`` and paint every sector of ``wheel`` at ``rotation``.

    Sectors are painted in index order, so later sectors cover earlier ones
    on shared edge pixels.  A ``SurfaceError`` from any primitive aborts the
    draw and propagates unchanged.

    Args:
        surface: Drawing surface.
        wheel: Wheel configuration.
        rotation: Rotation in radians (not normalized).
    """
    width, height = surface.size
    surface.clear_rect(0, 0, width, height)

    cx, cy = wheel.center
    for i in range(wheel.sector_count):
        start, end = sector_angles(i, wheel.sector_count, rotation)

        # Pie slice: rim arc, then back to the hub
        surface.begin_path()
        surface.arc(cx, cy, wheel.radius, start, end)
        surface.line_to(cx, cy)

        surface.set_fill_style(wheel.color_for(i))
        surface.stroke()
        surface.fill()
