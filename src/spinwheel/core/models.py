"""
SpinWheel Models - Pure data classes with no GUI dependencies.

These models can be used by any front-end (Qt widget, headless export, tests).
"""

import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Tuple

from PIL import ImageColor

# Sector colors, lime through yellow around the wheel
DEFAULT_PALETTE: Tuple[str, ...] = (
    "#B8D430", "#3AB745", "#029990", "#3501CB",
    "#2E2C75", "#673A7E", "#CC0071", "#F80120",
    "#F35B20", "#FB9A00", "#FFCC00", "#FEF200",
)

DEFAULT_SECTOR_COUNT = 12
DEFAULT_CENTER = (32.0, 32.0)
DEFAULT_RADIUS = 32.0

DEFAULT_TICK_BUDGET = 5000
DEFAULT_SPEED_FACTOR = 4.0
DEFAULT_PERIOD_MS = 1


# =============================================================================
# Wheel Model
# =============================================================================

@dataclass(frozen=True)
class Wheel:
    """
    Wheel configuration.

    Sector ``i`` is painted with ``palette[i % len(palette)]``, so the palette
    length does not have to match ``sector_count``.
    """
    sector_count: int = DEFAULT_SECTOR_COUNT
    palette: Tuple[str, ...] = DEFAULT_PALETTE
    center: Tuple[float, float] = DEFAULT_CENTER
    radius: float = DEFAULT_RADIUS

    def __post_init__(self):
        # Accept lists from config files; the stored value is always a tuple
        object.__setattr__(self, 'palette', tuple(self.palette))
        object.__setattr__(self, 'center', (float(self.center[0]), float(self.center[1])))

        if (not isinstance(self.sector_count, int) or isinstance(self.sector_count, bool)
                or self.sector_count < 1):
            raise ValueError(f"sector_count must be an integer >= 1, got {self.sector_count!r}")
        if not self.palette:
            raise ValueError("palette must contain at least one color")
        if self.radius <= 0:
            raise ValueError(f"radius must be positive, got {self.radius}")
        for color in self.palette:
            try:
                ImageColor.getrgb(color)
            except (ValueError, AttributeError) as e:
                raise ValueError(f"invalid palette color {color!r}") from e

    def color_for(self, index: int) -> str:
        """Fill color of sector ``index`` (wraps around the palette)."""
        return self.palette[index % len(self.palette)]

    @property
    def extent(self) -> Tuple[int, int]:
        """Smallest canvas size (width, height) that holds the whole wheel."""
        cx, cy = self.center
        return (math.ceil(cx + self.radius), math.ceil(cy + self.radius))


# =============================================================================
# Spin Model
# =============================================================================

def spin_rotation(tick: int, speed_factor: float) -> float:
    """Rotation angle in radians reached after ``tick`` ticks."""
    return tick * speed_factor / 100 * 2 * math.pi


class SpinPhase(Enum):
    """Spin controller phase."""
    IDLE = auto()       # No timer owned
    SPINNING = auto()   # Timer owned, budget not yet exhausted


@dataclass
class SpinState:
    """
    Progress of a single spin.

    ``tick`` only moves forward, one step per drawn frame, and never passes
    ``tick_budget``.
    """
    tick_budget: int = DEFAULT_TICK_BUDGET
    speed_factor: float = DEFAULT_SPEED_FACTOR
    tick: int = 0

    @property
    def rotation(self) -> float:
        """Rotation for the current tick."""
        return spin_rotation(self.tick, self.speed_factor)

    @property
    def exhausted(self) -> bool:
        return self.tick >= self.tick_budget

    @property
    def progress(self) -> float:
        """Spin progress (0-100)."""
        if self.tick_budget <= 0:
            return 100.0
        return (self.tick / self.tick_budget) * 100

    def advance(self) -> int:
        """Move to the next tick. Returns the new tick."""
        if self.exhausted:
            raise RuntimeError(
                f"spin already exhausted ({self.tick}/{self.tick_budget} ticks)")
        self.tick += 1
        return self.tick
