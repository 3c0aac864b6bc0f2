"""
Tests for core.controllers – SpinController timer/tick logic.

Uses a manual interval factory, so ticks are fired explicitly instead of by
a real event loop.

Tests cover:
- start(): handle creation, argument validation, preemption releases exactly
  one handle, ResourceError leaves the controller idle
- ticks: rotation sequence, renderer invocation, budget exhaustion releases
  the handle, post-budget quiescence, stale callbacks ignored
- stop(): releases once, no-op when idle
- draw failure: handle released before on_spin_failed, spin not resumed
- callbacks: on_frame, on_spin_finished, on_phase_changed
"""

import math
import unittest

from spinwheel.core.controllers import SpinController
from spinwheel.core.models import SpinPhase, Wheel
from spinwheel.errors import ResourceError, SurfaceError


class FakeInterval:
    """Manually fired interval handle."""

    def __init__(self, millis, callback):
        self.millis = millis
        self.callback = callback
        self.release_count = 0

    @property
    def active(self):
        return self.release_count == 0

    def release(self):
        if self.release_count:
            raise RuntimeError("interval already released")
        self.release_count += 1

    def fire(self, times=1):
        for _ in range(times):
            if self.active:
                self.callback()


class FakeIntervalFactory:
    """Creates FakeIntervals and remembers them."""

    def __init__(self):
        self.handles = []
        self.fail = False

    def __call__(self, millis, callback):
        if self.fail:
            raise ResourceError("no timer")
        handle = FakeInterval(millis, callback)
        self.handles.append(handle)
        return handle

    @property
    def last(self):
        return self.handles[-1]

    def live(self):
        return [h for h in self.handles if h.active]


class CountingSurface:
    """Surface counting clears/fills; optionally fails on the Nth clear."""

    def __init__(self, fail_on_clear=None):
        self.size = (64, 64)
        self.clears = 0
        self.fills = 0
        self.strokes = 0
        self._fail_on_clear = fail_on_clear

    def clear_rect(self, x, y, width, height):
        self.clears += 1
        if self._fail_on_clear is not None and self.clears == self._fail_on_clear:
            raise SurfaceError("context lost")

    def begin_path(self):
        pass

    def arc(self, cx, cy, radius, start_angle, end_angle):
        pass

    def line_to(self, x, y):
        pass

    def set_fill_style(self, color):
        pass

    def stroke(self):
        self.strokes += 1

    def fill(self):
        self.fills += 1


def _make_controller(surface=None):
    factory = FakeIntervalFactory()
    controller = SpinController(surface or CountingSurface(), factory)
    return controller, factory


class TestSpinControllerStart(unittest.TestCase):

    def test_initially_idle(self):
        controller, factory = _make_controller()
        self.assertEqual(controller.phase, SpinPhase.IDLE)
        self.assertFalse(controller.is_spinning())
        self.assertIsNone(controller.state)
        self.assertEqual(factory.handles, [])

    def test_start_creates_one_handle(self):
        controller, factory = _make_controller()
        controller.start(Wheel(), tick_budget=10, speed_factor=4.0, period_ms=1)
        self.assertEqual(len(factory.handles), 1)
        self.assertEqual(factory.last.millis, 1)
        self.assertEqual(controller.phase, SpinPhase.SPINNING)
        self.assertEqual(controller.state.tick, 0)

    def test_start_defaults(self):
        controller, factory = _make_controller()
        controller.start(Wheel())
        self.assertEqual(controller.state.tick_budget, 5000)
        self.assertEqual(controller.state.speed_factor, 4.0)
        self.assertEqual(factory.last.millis, 1)

    def test_start_does_not_draw_synchronously(self):
        surface = CountingSurface()
        controller, _ = _make_controller(surface)
        controller.start(Wheel(), tick_budget=10)
        self.assertEqual(surface.clears, 0)

    def test_invalid_arguments(self):
        controller, factory = _make_controller()
        with self.assertRaises(ValueError):
            controller.start(Wheel(), tick_budget=-1)
        with self.assertRaises(ValueError):
            controller.start(Wheel(), speed_factor=0)
        with self.assertRaises(ValueError):
            controller.start(Wheel(), period_ms=-5)
        self.assertEqual(factory.handles, [])
        self.assertEqual(controller.phase, SpinPhase.IDLE)

    def test_preemption_releases_exactly_one(self):
        controller, factory = _make_controller()
        controller.start(Wheel(), tick_budget=100)
        first = factory.last
        first.fire(3)
        controller.start(Wheel(), tick_budget=100)
        self.assertEqual(first.release_count, 1)
        self.assertEqual(len(factory.live()), 1)
        self.assertIs(factory.live()[0], factory.last)
        self.assertEqual(controller.state.tick, 0)

    def test_rapid_restarts_never_leak(self):
        controller, factory = _make_controller()
        for _ in range(10):
            controller.start(Wheel(), tick_budget=100)
        self.assertEqual(len(factory.handles), 10)
        self.assertEqual(len(factory.live()), 1)
        for handle in factory.handles[:-1]:
            self.assertEqual(handle.release_count, 1)

    def test_resource_error_leaves_idle(self):
        controller, factory = _make_controller()
        factory.fail = True
        with self.assertRaises(ResourceError):
            controller.start(Wheel(), tick_budget=10)
        self.assertEqual(controller.phase, SpinPhase.IDLE)
        self.assertIsNone(controller.state)

    def test_resource_error_after_preemption(self):
        controller, factory = _make_controller()
        controller.start(Wheel(), tick_budget=10)
        first = factory.last
        factory.fail = True
        with self.assertRaises(ResourceError):
            controller.start(Wheel(), tick_budget=10)
        self.assertEqual(first.release_count, 1)
        self.assertEqual(controller.phase, SpinPhase.IDLE)
        self.assertEqual(factory.live(), [])


class TestSpinControllerTicks(unittest.TestCase):

    def test_five_tick_spin(self):
        """Budget 5: five draws at tick*4/100*2π, then the handle is released."""
        surface = CountingSurface()
        controller, factory = _make_controller(surface)
        rotations = []
        controller.on_frame = rotations.append

        controller.start(Wheel(sector_count=12, radius=32, center=(32, 32)),
                         tick_budget=5, speed_factor=4.0, period_ms=1)
        factory.last.fire(5)

        self.assertEqual(len(rotations), 5)
        for tick, rotation in enumerate(rotations):
            self.assertAlmostEqual(rotation, tick * 4.0 / 100 * 2 * math.pi)
        self.assertAlmostEqual(rotations[1], 0.2513274, places=6)
        self.assertEqual(surface.clears, 5)
        self.assertEqual(surface.fills, 60)
        self.assertEqual(surface.strokes, 60)
        self.assertEqual(factory.last.release_count, 1)
        self.assertEqual(controller.phase, SpinPhase.IDLE)

    def test_no_draws_after_budget(self):
        surface = CountingSurface()
        controller, factory = _make_controller(surface)
        controller.start(Wheel(), tick_budget=3)
        handle = factory.last
        handle.fire(3)
        # A firing queued before the release reaches the controller anyway
        handle.callback()
        handle.callback()
        self.assertEqual(surface.clears, 3)
        self.assertEqual(controller.state.tick, 3)
        self.assertEqual(handle.release_count, 1)

    def test_zero_budget_releases_on_first_firing(self):
        surface = CountingSurface()
        controller, factory = _make_controller(surface)
        finished = []
        controller.on_spin_finished = finished.append
        controller.start(Wheel(), tick_budget=0)
        factory.last.fire()
        self.assertEqual(surface.clears, 0)
        self.assertEqual(factory.last.release_count, 1)
        self.assertEqual(len(finished), 1)

    def test_tick_never_exceeds_budget(self):
        controller, factory = _make_controller()
        controller.start(Wheel(), tick_budget=4)
        factory.last.fire(10)
        self.assertEqual(controller.state.tick, 4)

    def test_stale_callback_from_preempted_spin_ignored(self):
        surface = CountingSurface()
        controller, factory = _make_controller(surface)
        controller.start(Wheel(), tick_budget=10)
        stale = factory.last.callback
        controller.start(Wheel(), tick_budget=10)
        stale()
        self.assertEqual(surface.clears, 0)
        self.assertEqual(controller.state.tick, 0)

    def test_spin_finished_callback(self):
        controller, factory = _make_controller()
        finished = []
        controller.on_spin_finished = finished.append
        controller.start(Wheel(), tick_budget=2)
        factory.last.fire(2)
        self.assertEqual(len(finished), 1)
        self.assertEqual(finished[0].tick, 2)

    def test_phase_changes(self):
        controller, factory = _make_controller()
        phases = []
        controller.on_phase_changed = phases.append
        controller.start(Wheel(), tick_budget=1)
        factory.last.fire()
        self.assertEqual(phases, [SpinPhase.SPINNING, SpinPhase.IDLE])

    def test_wheel_used_for_drawing(self):
        surface = CountingSurface()
        controller, factory = _make_controller(surface)
        wheel = Wheel(sector_count=3)
        controller.start(wheel, tick_budget=1)
        factory.last.fire()
        self.assertIs(controller.wheel, wheel)
        self.assertEqual(surface.fills, 3)


class TestSpinControllerStop(unittest.TestCase):

    def test_stop_while_idle_is_noop(self):
        controller, factory = _make_controller()
        controller.stop()
        controller.stop()
        self.assertEqual(controller.phase, SpinPhase.IDLE)

    def test_stop_releases_handle(self):
        surface = CountingSurface()
        controller, factory = _make_controller(surface)
        controller.start(Wheel(), tick_budget=10)
        factory.last.fire(2)
        controller.stop()
        self.assertEqual(factory.last.release_count, 1)
        self.assertEqual(controller.phase, SpinPhase.IDLE)
        factory.last.callback()
        self.assertEqual(surface.clears, 2)

    def test_stop_twice_releases_once(self):
        controller, factory = _make_controller()
        controller.start(Wheel(), tick_budget=10)
        controller.stop()
        controller.stop()
        self.assertEqual(factory.last.release_count, 1)

    def test_stop_after_finish_is_noop(self):
        controller, factory = _make_controller()
        controller.start(Wheel(), tick_budget=1)
        factory.last.fire()
        controller.stop()
        self.assertEqual(factory.last.release_count, 1)

    def test_restart_after_stop(self):
        controller, factory = _make_controller()
        controller.start(Wheel(), tick_budget=10)
        controller.stop()
        controller.start(Wheel(), tick_budget=10)
        self.assertEqual(len(factory.live()), 1)
        self.assertEqual(controller.phase, SpinPhase.SPINNING)


class TestSpinControllerReentrantCallbacks(unittest.TestCase):
    """View callbacks calling back into the controller."""

    def test_stop_from_on_frame_on_last_tick(self):
        controller, factory = _make_controller()
        controller.on_frame = lambda rotation: controller.stop()
        finished = []
        controller.on_spin_finished = finished.append
        controller.start(Wheel(), tick_budget=1)
        factory.last.fire()
        self.assertEqual(factory.last.release_count, 1)
        self.assertEqual(controller.phase, SpinPhase.IDLE)
        self.assertEqual(finished, [])

    def test_stop_from_on_frame_mid_spin(self):
        surface = CountingSurface()
        controller, factory = _make_controller(surface)
        controller.on_frame = lambda rotation: controller.stop()
        controller.start(Wheel(), tick_budget=10)
        factory.last.fire(3)
        self.assertEqual(surface.clears, 1)
        self.assertEqual(factory.last.release_count, 1)

    def test_restart_from_on_frame_on_last_tick(self):
        controller, factory = _make_controller()
        restarted = []

        def restart(rotation):
            if not restarted:
                restarted.append(True)
                controller.start(Wheel(), tick_budget=10)

        controller.on_frame = restart
        controller.start(Wheel(), tick_budget=1)
        first = factory.last
        first.fire()

        self.assertEqual(len(factory.handles), 2)
        self.assertEqual(first.release_count, 1)
        self.assertEqual(factory.last.release_count, 0)
        self.assertTrue(controller.is_spinning())
        self.assertEqual(controller.state.tick_budget, 10)
        self.assertEqual(controller.state.tick, 0)

    def test_restart_from_on_spin_finished(self):
        controller, factory = _make_controller()
        finished = []

        def restart(state):
            finished.append(state)
            if len(finished) == 1:
                controller.start(Wheel(), tick_budget=5)

        controller.on_spin_finished = restart
        controller.start(Wheel(), tick_budget=2)
        first = factory.last
        first.fire(2)

        self.assertEqual(finished[0].tick_budget, 2)
        self.assertEqual(first.release_count, 1)
        self.assertEqual(factory.live(), [factory.last])
        self.assertEqual(controller.state.tick_budget, 5)


class TestSpinControllerDrawFailure(unittest.TestCase):

    def test_failure_releases_and_stops(self):
        surface = CountingSurface(fail_on_clear=3)
        controller, factory = _make_controller(surface)
        errors = []
        released_at_failure = []
        controller.on_spin_failed = lambda e: (
            errors.append(e), released_at_failure.append(factory.last.release_count))

        controller.start(Wheel(), tick_budget=10)
        factory.last.fire(10)

        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], SurfaceError)
        self.assertEqual(released_at_failure, [1])
        self.assertEqual(controller.phase, SpinPhase.IDLE)
        # Two good frames, then the failing clear; no retries
        self.assertEqual(surface.clears, 3)
        self.assertEqual(controller.state.tick, 2)

    def test_failure_not_resumed_by_stale_callback(self):
        surface = CountingSurface(fail_on_clear=1)
        controller, factory = _make_controller(surface)
        controller.start(Wheel(), tick_budget=10)
        factory.last.fire()
        factory.last.callback()
        self.assertEqual(surface.clears, 1)

    def test_new_spin_after_failure(self):
        surface = CountingSurface(fail_on_clear=1)
        controller, factory = _make_controller(surface)
        controller.start(Wheel(), tick_budget=3)
        factory.last.fire()
        controller.start(Wheel(), tick_budget=3)
        factory.last.fire(3)
        self.assertEqual(controller.state.tick, 3)
        self.assertEqual(factory.live(), [])


if __name__ == '__main__':
    unittest.main()
