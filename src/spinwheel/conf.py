"""Application settings and config persistence for SpinWheel.

Single source of truth for wheel layout and spin defaults.
Config is stored at ~/.config/spinwheel/config.json (XDG-compliant).
Only preferences live there; spins themselves are never persisted.

Usage:
    from spinwheel.conf import settings

    settings.wheel()            # Wheel built from the saved preferences
    settings.tick_budget        # ticks per spin
    settings.speed_factor       # rotation speed
    settings.period_ms          # timer period

    # Low-level config access
    from spinwheel.conf import load_config, save_config
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable, Dict, Optional

from .core.models import (
    DEFAULT_PALETTE,
    DEFAULT_PERIOD_MS,
    DEFAULT_RADIUS,
    DEFAULT_SECTOR_COUNT,
    DEFAULT_SPEED_FACTOR,
    DEFAULT_TICK_BUDGET,
    Wheel,
)

log = logging.getLogger(__name__)

# =========================================================================
# Config file location (XDG-compliant)
# =========================================================================

_XDG_CONFIG = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
CONFIG_DIR = os.path.join(_XDG_CONFIG, 'spinwheel')
CONFIG_PATH = os.path.join(CONFIG_DIR, 'config.json')


# =========================================================================
# Low-level config persistence
# =========================================================================

def load_config() -> dict:
    """Load user config from disk. Returns empty dict on missing/corrupt file."""
    try:
        with open(CONFIG_PATH, 'r') as f:
            config = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return {}
    return config if isinstance(config, dict) else {}


def save_config(config: dict):
    """Save user config to disk."""
    os.makedirs(os.path.dirname(CONFIG_PATH), exist_ok=True)
    with open(CONFIG_PATH, 'w') as f:
        json.dump(config, f, indent=2)


# =========================================================================
# Value parsing
# =========================================================================

def _positive_int(value: Any) -> int:
    number = int(value)
    if number < 1:
        raise ValueError(f"expected an integer >= 1, got {value!r}")
    return number


def _non_negative_int(value: Any) -> int:
    number = int(value)
    if number < 0:
        raise ValueError(f"expected an integer >= 0, got {value!r}")
    return number


def _positive_float(value: Any) -> float:
    number = float(value)
    if number <= 0:
        raise ValueError(f"expected a number > 0, got {value!r}")
    return number


def _palette(value: Any) -> list:
    if isinstance(value, str):
        value = [c.strip() for c in value.split(',') if c.strip()]
    colors = [str(c) for c in value]
    # Wheel does the color validation
    Wheel(palette=tuple(colors))
    return colors


# key -> (parser, default)
FIELDS: Dict[str, tuple[Callable[[Any], Any], Any]] = {
    'sector_count': (_positive_int, DEFAULT_SECTOR_COUNT),
    'palette': (_palette, list(DEFAULT_PALETTE)),
    'radius': (_positive_float, DEFAULT_RADIUS),
    'canvas_size': (_positive_int, int(DEFAULT_RADIUS * 2)),
    'tick_budget': (_non_negative_int, DEFAULT_TICK_BUDGET),
    'speed_factor': (_positive_float, DEFAULT_SPEED_FACTOR),
    'period_ms': (_non_negative_int, DEFAULT_PERIOD_MS),
}


# =========================================================================
# Settings singleton
# =========================================================================

class Settings:
    """Application-wide settings singleton.

    Values are read from config.json on ``reload()``; anything missing or
    invalid falls back to the built-in default.
    """

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}
        self.reload()

    def reload(self) -> None:
        """Re-read config.json."""
        config = load_config()
        values = {}
        for key, (parse, default) in FIELDS.items():
            if key not in config:
                values[key] = default
                continue
            try:
                values[key] = parse(config[key])
            except (TypeError, ValueError) as e:
                log.warning("Settings: ignoring invalid %s=%r (%s)", key, config[key], e)
                values[key] = default
        self._values = values

    def get(self, key: str) -> Any:
        return self._values[key]

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    @property
    def sector_count(self) -> int:
        return self._values['sector_count']

    @property
    def palette(self) -> list:
        return list(self._values['palette'])

    @property
    def radius(self) -> float:
        return self._values['radius']

    @property
    def canvas_size(self) -> int:
        return self._values['canvas_size']

    @property
    def tick_budget(self) -> int:
        return self._values['tick_budget']

    @property
    def speed_factor(self) -> float:
        return self._values['speed_factor']

    @property
    def period_ms(self) -> int:
        return self._values['period_ms']

    def wheel(self, size: Optional[int] = None) -> Wheel:
        """Build the configured wheel.

        With ``size`` the radius is scaled by ``size / canvas_size``.  The
        wheel is centered on a ``size`` x ``size`` canvas, grown to the wheel's
        diameter when the radius does not fit; ``wheel.extent`` is the canvas
        to draw on.
        """
        radius = self.radius
        if size is None:
            size = self.canvas_size
        else:
            radius = radius * size / self.canvas_size
        half = max(size / 2, radius)
        return Wheel(
            sector_count=self.sector_count,
            palette=tuple(self.palette),
            center=(half, half),
            radius=radius,
        )

    def set_value(self, key: str, raw: Any, persist: bool = True) -> Any:
        """Parse ``raw`` for ``key``, apply it and (optionally) persist it.

        Raises:
            ValueError: unknown key or unparsable value.
        """
        if key not in FIELDS:
            raise ValueError(f"unknown setting {key!r} (known: {', '.join(FIELDS)})")
        parse, _default = FIELDS[key]
        try:
            value = parse(raw)
        except TypeError as e:
            raise ValueError(f"invalid value for {key}: {raw!r}") from e
        log.info("Settings: %s → %r", key, value)
        self._values[key] = value
        if persist:
            config = load_config()
            config[key] = value
            save_config(config)
        return value


# Module-level singleton — import and use directly
settings = Settings()
