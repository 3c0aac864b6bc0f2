"""
Headless wheel frames.

Renders single frames and whole spins with ``PillowCanvas`` instead of a
live timer, for PNG snapshots and animated GIF export.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from PIL import Image

from .canvas import PillowCanvas
from .core.models import SpinState, Wheel
from .wheel_renderer import draw_wheel

log = logging.getLogger(__name__)

BACKGROUND = (255, 255, 255)


def render_frame(wheel: Wheel, rotation: float,
                 size: Optional[Tuple[int, int]] = None) -> Image.Image:
    """Draw ``wheel`` at ``rotation`` on a fresh transparent RGBA image.

    Args:
        wheel: Wheel configuration.
        rotation: Rotation in radians.
        size: Canvas size; defaults to ``wheel.extent``.
    """
    width, height = size or wheel.extent
    canvas = PillowCanvas(width, height)
    draw_wheel(canvas, wheel, rotation)
    return canvas.to_image()


def spin_rotations(tick_budget: int, speed_factor: float, step: int = 1) -> Iterator[float]:
    """Rotations a timer-driven spin would draw, keeping every ``step``-th tick."""
    if step < 1:
        raise ValueError(f"step must be >= 1, got {step}")
    state = SpinState(tick_budget=tick_budget, speed_factor=speed_factor)
    while not state.exhausted:
        if state.tick % step == 0:
            yield state.rotation
        state.advance()


def flatten(frame: Image.Image, background=BACKGROUND) -> Image.Image:
    """Composite an RGBA frame onto an opaque background (GIF has no alpha)."""
    base = Image.new('RGBA', frame.size, background + (255,))
    return Image.alpha_composite(base, frame.convert('RGBA')).convert('RGB')


def export_spin_gif(path: Union[str, Path], wheel: Wheel,
                    tick_budget: int, speed_factor: float,
                    step: int = 1, frame_ms: int = 20,
                    size: Optional[Tuple[int, int]] = None) -> int:
    """
    Write a spin as an animated GIF.

    Args:
        path: Output file.
        wheel: Wheel configuration.
        tick_budget: Ticks in the spin.
        speed_factor: Spin speed factor.
        step: Keep every Nth tick as a frame.
        frame_ms: Display time per frame.
        size: Canvas size; defaults to ``wheel.extent``.

    Returns:
        Number of frames written.
    """
    frames: List[Image.Image] = [
        flatten(render_frame(wheel, rotation, size))
        for rotation in spin_rotations(tick_budget, speed_factor, step)
    ]
    if not frames:
        raise ValueError("spin has no frames (tick_budget is 0)")

    frames[0].save(str(path), format='GIF', save_all=True,
                   append_images=frames[1:], duration=frame_ms, loop=0)
    log.info("Exported %d frames to %s", len(frames), path)
    return len(frames)
