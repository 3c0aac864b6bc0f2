"""
QPainter raster canvas.

Backs the wheel drawing surface with a premultiplied ARGB ``QImage``.  A
short-lived ``QPainter`` is opened for every primitive, so the image can be
shown (``to_pixmap()``) between any two calls.
"""
from __future__ import annotations

import math
from typing import Tuple

import numpy as np
from PIL import Image
from PySide6.QtCore import QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QImage, QPainter, QPainterPath, QPen, QPixmap

from ..canvas import clockwise_sweep
from ..errors import SurfaceError


class QtCanvas:
    """``QImage`` exposing the canvas drawing primitives."""

    def __init__(self, width: int, height: int, antialias: bool = True):
        if width <= 0 or height <= 0:
            raise ValueError(f"canvas size must be positive, got {width}x{height}")
        self._image = QImage(width, height, QImage.Format.Format_ARGB32_Premultiplied)
        if self._image.isNull():
            raise SurfaceError(f"cannot allocate {width}x{height} canvas image")
        self._image.fill(Qt.GlobalColor.transparent)
        self._antialias = antialias
        self._path = QPainterPath()
        self._fill_color = QColor(0, 0, 0)
        self._closed = False

    @property
    def size(self) -> Tuple[int, int]:
        return (self._image.width(), self._image.height())

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Stop drawing; further primitives raise ``SurfaceError``."""
        self._closed = True

    # ----------------------------------------------------------------
    # Drawing primitives
    # ----------------------------------------------------------------

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        painter = self._painter()
        try:
            painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Clear)
            painter.fillRect(QRectF(x, y, width, height), Qt.GlobalColor.transparent)
        finally:
            painter.end()

    def begin_path(self) -> None:
        self._check_open()
        self._path = QPainterPath()

    def arc(self, cx: float, cy: float, radius: float,
            start_angle: float, end_angle: float) -> None:
        self._check_open()
        sweep = clockwise_sweep(start_angle, end_angle)

        sx = cx + radius * math.cos(start_angle)
        sy = cy + radius * math.sin(start_angle)
        if self._path.elementCount() == 0:
            self._path.moveTo(sx, sy)
        else:
            self._path.lineTo(sx, sy)

        # Qt angles run counter-clockwise in degrees
        rect = QRectF(cx - radius, cy - radius, 2 * radius, 2 * radius)
        self._path.arcTo(rect, -math.degrees(start_angle), -math.degrees(sweep))

    def line_to(self, x: float, y: float) -> None:
        self._check_open()
        if self._path.elementCount() == 0:
            self._path.moveTo(x, y)
        else:
            self._path.lineTo(x, y)

    def set_fill_style(self, color: str) -> None:
        self._check_open()
        qcolor = QColor(color)
        if not qcolor.isValid():
            raise SurfaceError(f"unsupported fill style {color!r}")
        self._fill_color = qcolor

    def stroke(self) -> None:
        painter = self._painter()
        try:
            painter.strokePath(self._path, QPen(QColor(0, 0, 0), 1))
        finally:
            painter.end()

    def fill(self) -> None:
        painter = self._painter()
        try:
            painter.fillPath(self._path, QBrush(self._fill_color))
        finally:
            painter.end()

    # ----------------------------------------------------------------
    # Export
    # ----------------------------------------------------------------

    def to_image(self) -> QImage:
        """Copy of the current ``QImage``."""
        return self._image.copy()

    def to_pixmap(self) -> QPixmap:
        return QPixmap.fromImage(self._image)

    def pixels(self) -> np.ndarray:
        """Current pixels as an (height, width, 4) RGBA ``uint8`` array."""
        rgba = self._image.convertToFormat(QImage.Format.Format_RGBA8888)
        width, height = rgba.width(), rgba.height()
        buf = np.frombuffer(rgba.constBits(), dtype=np.uint8)
        rows = buf.reshape(height, rgba.bytesPerLine())
        return rows[:, :width * 4].reshape(height, width, 4).copy()

    def to_pil(self) -> Image.Image:
        return Image.fromarray(self.pixels())

    def _check_open(self) -> None:
        if self._closed:
            raise SurfaceError("canvas is closed")

    def _painter(self) -> QPainter:
        self._check_open()
        painter = QPainter()
        if not painter.begin(self._image):
            raise SurfaceError("cannot open a painter on the canvas image")
        if self._antialias:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        return painter
