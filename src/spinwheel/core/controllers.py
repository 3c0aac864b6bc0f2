"""
SpinWheel Controllers - Business logic between the wheel models and views.

Controllers are GUI-framework independent. They:
1. Own and manage Models
2. Provide methods that Views call for user actions
3. Emit callbacks that Views subscribe to for updates

The repeating timer is created through an injected interval factory
(``factory(period_ms, callback) -> handle``); the handle only needs a
``release()`` method.  The Qt front-end passes
``spinwheel.qt_components.interval.Interval``.
"""
from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, Optional

from ..errors import ResourceError, SurfaceError
from ..wheel_renderer import Surface, draw_wheel
from .models import (
    DEFAULT_PERIOD_MS,
    DEFAULT_SPEED_FACTOR,
    DEFAULT_TICK_BUDGET,
    SpinPhase,
    SpinState,
    Wheel,
)

log = logging.getLogger(__name__)

IntervalFactory = Callable[[int, Callable[[], None]], Any]


class SpinController:
    """
    Controller for wheel spins.

    Owns at most one live timer handle.  Every exit from ``SPINNING``
    (budget exhausted, ``stop()``, a new ``start()``, draw failure)
    releases that handle exactly once.
    """

    def __init__(self, surface: Surface, interval_factory: IntervalFactory):
        self.surface = surface
        self._interval_factory = interval_factory
        self._interval: Optional[Any] = None
        self._wheel: Optional[Wheel] = None
        self.state: Optional[SpinState] = None
        self._spin_id = 0

        # View callbacks
        self.on_frame: Optional[Callable[[float], None]] = None  # rotation
        self.on_spin_finished: Optional[Callable[[SpinState], None]] = None
        self.on_spin_failed: Optional[Callable[[Exception], None]] = None
        self.on_phase_changed: Optional[Callable[[SpinPhase], None]] = None

    @property
    def phase(self) -> SpinPhase:
        return SpinPhase.SPINNING if self._interval is not None else SpinPhase.IDLE

    @property
    def wheel(self) -> Optional[Wheel]:
        """Wheel of the current (or last) spin."""
        return self._wheel

    def is_spinning(self) -> bool:
        return self._interval is not None

    def start(self, wheel: Wheel,
              tick_budget: int = DEFAULT_TICK_BUDGET,
              speed_factor: float = DEFAULT_SPEED_FACTOR,
              period_ms: int = DEFAULT_PERIOD_MS):
        """
        Start a new spin, replacing any spin in progress.

        Raises:
            ValueError: on a negative budget/period or non-positive speed.
            ResourceError: if the timer cannot be registered; the controller
                is left idle.
        """
        if tick_budget < 0:
            raise ValueError(f"tick_budget must be >= 0, got {tick_budget}")
        if speed_factor <= 0:
            raise ValueError(f"speed_factor must be positive, got {speed_factor}")
        if period_ms < 0:
            raise ValueError(f"period_ms must be >= 0, got {period_ms}")

        preempted = self._interval is not None
        if preempted:
            log.debug("Spin preempted at tick %d", self.state.tick if self.state else 0)
            self._release(notify=False)

        state = SpinState(tick_budget=tick_budget, speed_factor=speed_factor)
        self._spin_id += 1
        try:
            interval = self._interval_factory(period_ms, partial(self._on_tick, self._spin_id))
        except ResourceError:
            if preempted:
                self._set_phase(SpinPhase.IDLE)
            raise

        self._wheel = wheel
        self.state = state
        self._interval = interval
        log.info("Spin started: %d ticks, speed %.2f, every %d ms",
                 tick_budget, speed_factor, period_ms)
        self._set_phase(SpinPhase.SPINNING)

    def stop(self):
        """Stop the spin in progress. No-op when idle."""
        if self._interval is None:
            return
        log.debug("Spin stopped at tick %d", self.state.tick if self.state else 0)
        self._release()

    def _on_tick(self, spin_id: int):
        """Timer callback: draw the next frame or finish the spin."""
        state = self.state
        if spin_id != self._spin_id or self._interval is None or state is None:
            return

        if state.exhausted:
            self._finish()
            return

        rotation = state.rotation
        try:
            draw_wheel(self.surface, self._wheel, rotation)
        except SurfaceError as e:
            log.error("Spin aborted at tick %d: %s", state.tick, e)
            self._release()
            if self.on_spin_failed:
                self.on_spin_failed(e)
            return

        state.advance()
        if self.on_frame:
            self.on_frame(rotation)

        # on_frame may have stopped or replaced this spin
        if spin_id != self._spin_id or self._interval is None:
            return
        if state.exhausted:
            self._finish()

    def _finish(self):
        state = self.state
        log.info("Spin finished after %d ticks", state.tick)
        self._release()
        if self.on_spin_finished:
            self.on_spin_finished(state)

    def _release(self, notify: bool = True):
        interval, self._interval = self._interval, None
        if interval is None:
            return
        interval.release()
        if notify:
            self._set_phase(SpinPhase.IDLE)

    def _set_phase(self, phase: SpinPhase):
        if self.on_phase_changed:
            self.on_phase_changed(phase)
