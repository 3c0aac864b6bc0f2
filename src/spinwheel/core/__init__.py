"""
SpinWheel Core - Models + Controllers

Models: Data classes only (Wheel, SpinState, SpinPhase)
Controllers: GUI-framework independent spin logic

Note: Controllers are NOT re-exported here to avoid circular imports
(wheel_renderer → core.models → core.__init__ → controllers → wheel_renderer).
Import controllers directly: `from spinwheel.core.controllers import ...`
"""

from .models import (
    DEFAULT_PALETTE,
    SpinPhase,
    SpinState,
    Wheel,
    spin_rotation,
)

__all__ = [
    'DEFAULT_PALETTE',
    'SpinPhase',
    'SpinState',
    'Wheel',
    'spin_rotation',
]
