"""
Pillow raster canvas.

Headless implementation of the wheel drawing surface, used for PNG/GIF
export and anywhere a Qt event loop is not available.  Paths are kept as
point lists; arcs are flattened into short line segments before Pillow
draws them.
"""
from __future__ import annotations

import math
from typing import List, Tuple

from PIL import Image, ImageColor, ImageDraw

from .errors import SurfaceError

TAU = 2 * math.pi

# Flattening step for arcs (2 degrees)
ARC_STEP = math.pi / 90

STROKE_COLOR = (0, 0, 0, 255)
TRANSPARENT = (0, 0, 0, 0)


def clockwise_sweep(start_angle: float, end_angle: float) -> float:
    """Clockwise sweep of a canvas arc, clamped to one full turn."""
    sweep = end_angle - start_angle
    if sweep >= TAU:
        return TAU
    if sweep < 0:
        return sweep % TAU
    return sweep


def arc_points(cx: float, cy: float, radius: float,
               start_angle: float, end_angle: float) -> List[Tuple[float, float]]:
    """Flatten a clockwise arc into points (inclusive of both ends).

    Sweeps of a full turn or more draw the whole circle; a negative sweep
    wraps around the way a clockwise canvas arc does.
    """
    sweep = clockwise_sweep(start_angle, end_angle)
    steps = max(1, math.ceil(sweep / ARC_STEP))
    points = []
    for k in range(steps + 1):
        angle = start_angle + sweep * k / steps
        points.append((cx + radius * math.cos(angle), cy + radius * math.sin(angle)))
    return points


class PillowCanvas:
    """RGBA Pillow image exposing the canvas drawing primitives."""

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"canvas size must be positive, got {width}x{height}")
        self._image = Image.new('RGBA', (width, height), TRANSPARENT)
        self._draw = ImageDraw.Draw(self._image)
        self._path: List[Tuple[float, float]] = []
        self._fill_color = (0, 0, 0, 255)
        self._closed = False

    @property
    def size(self) -> Tuple[int, int]:
        return self._image.size

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the image; further drawing raises ``SurfaceError``."""
        self._closed = True
        self._draw = None
        self._path = []

    def to_image(self, mode: str = 'RGBA') -> Image.Image:
        """Copy of the current pixels."""
        self._context()
        return self._image.convert(mode) if mode != 'RGBA' else self._image.copy()

    # ----------------------------------------------------------------
    # Drawing primitives
    # ----------------------------------------------------------------

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        draw = self._context()
        if width <= 0 or height <= 0:
            return
        box = (x, y, x + width - 1, y + height - 1)
        draw.rectangle(box, fill=TRANSPARENT)

    def begin_path(self) -> None:
        self._context()
        self._path = []

    def arc(self, cx: float, cy: float, radius: float,
            start_angle: float, end_angle: float) -> None:
        self._context()
        # Connected to the current point, if any, by a straight segment
        self._path.extend(arc_points(cx, cy, radius, start_angle, end_angle))

    def line_to(self, x: float, y: float) -> None:
        self._context()
        self._path.append((x, y))

    def set_fill_style(self, color: str) -> None:
        self._context()
        try:
            r, g, b, *alpha = ImageColor.getrgb(color)
        except (ValueError, AttributeError) as e:
            raise SurfaceError(f"unsupported fill style {color!r}") from e
        self._fill_color = (r, g, b, alpha[0] if alpha else 255)

    def stroke(self) -> None:
        draw = self._context()
        if len(self._path) >= 2:
            draw.line(self._path, fill=STROKE_COLOR, width=1)

    def fill(self) -> None:
        draw = self._context()
        if len(self._path) >= 2:
            draw.polygon(self._path, fill=self._fill_color)

    def _context(self) -> ImageDraw.ImageDraw:
        if self._closed or self._draw is None:
            raise SurfaceError("canvas is closed")
        return self._draw
