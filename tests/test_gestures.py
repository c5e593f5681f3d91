"""
Tests for DragTracker - pointer deltas and release velocity.
"""
import cv2
import pytest

from ui.gestures import DragTracker, dispatch_mouse
from ui.screens import BUTTON_CENTER, DISC_CENTER
from conftest import FakeClock


class TestDeltas:

    def test_move_returns_delta_since_last_sample(self):
        tracker = DragTracker(clock=FakeClock())
        tracker.on_down((100, 100))

        assert tracker.on_move((110, 95)) == (10, -5)
        assert tracker.on_move((115, 95)) == (5, 0)

    def test_move_without_down_ignored(self):
        tracker = DragTracker(clock=FakeClock())
        assert tracker.on_move((50, 50)) == (0, 0)


class TestVelocity:

    def test_release_velocity(self):
        clock = FakeClock()
        tracker = DragTracker(clock=clock)
        tracker.on_down((0, 0))
        clock.advance(0.05)
        tracker.on_move((50, 0))
        clock.advance(0.05)

        vx, vy = tracker.on_up((100, 0))

        assert vx == pytest.approx(1000.0)
        assert vy == pytest.approx(0.0)
        assert not tracker.dragging

    def test_only_recent_samples_count(self):
        """A long slow drag ending in a flick reports the flick speed."""
        clock = FakeClock()
        tracker = DragTracker(clock=clock)
        tracker.on_down((0, 0))
        clock.advance(2.0)
        tracker.on_move((10, 0))
        clock.advance(0.05)

        vx, _ = tracker.on_up((110, 0))

        assert vx == pytest.approx(2000.0)

    def test_instant_release_is_bounded(self):
        clock = FakeClock()
        tracker = DragTracker(clock=clock)
        tracker.on_down((0, 0))

        vx, _ = tracker.on_up((10, 0))

        assert vx == pytest.approx(10 / DragTracker.MIN_VELOCITY_SPAN)

    def test_up_without_down(self):
        tracker = DragTracker(clock=FakeClock())
        assert tracker.on_up((10, 10)) == (0.0, 0.0)


class RecordingController:
    """Records the controller calls made by dispatch_mouse."""

    def __init__(self):
        self.calls = []

    def toggle(self):
        self.calls.append('toggle')

    def begin_drag(self):
        self.calls.append('begin_drag')

    def update_drag(self, dx, dy):
        self.calls.append(('update_drag', dx, dy))

    def end_drag(self, velocity=(0.0, 0.0)):
        self.calls.append('end_drag')


class TestDispatchMouse:
    """OpenCV mouse events routed to the controller."""

    def test_click_on_button_toggles(self):
        controller = RecordingController()
        tracker = DragTracker(clock=FakeClock())

        dispatch_mouse(tracker, controller, cv2.EVENT_LBUTTONDOWN, BUTTON_CENTER, 0)

        assert controller.calls == ['toggle']
        assert not tracker.dragging

    def test_drag_on_disc(self):
        controller = RecordingController()
        tracker = DragTracker(clock=FakeClock())
        x, y = DISC_CENTER

        dispatch_mouse(tracker, controller, cv2.EVENT_LBUTTONDOWN, (x, y), cv2.EVENT_FLAG_LBUTTON)
        dispatch_mouse(tracker, controller, cv2.EVENT_MOUSEMOVE, (x + 10, y), cv2.EVENT_FLAG_LBUTTON)
        dispatch_mouse(tracker, controller, cv2.EVENT_LBUTTONUP, (x + 10, y), 0)

        assert controller.calls == ['begin_drag', ('update_drag', 10, 0),
                                    ('update_drag', 0, 0), 'end_drag']
        assert not tracker.dragging

    def test_release_outside_window_ends_drag(self):
        """A move with the button up ends the drag instead of scratching."""
        controller = RecordingController()
        tracker = DragTracker(clock=FakeClock())
        x, y = DISC_CENTER
        dispatch_mouse(tracker, controller, cv2.EVENT_LBUTTONDOWN, (x, y), cv2.EVENT_FLAG_LBUTTON)

        dispatch_mouse(tracker, controller, cv2.EVENT_MOUSEMOVE, (x + 50, y), 0)
        dispatch_mouse(tracker, controller, cv2.EVENT_MOUSEMOVE, (x + 90, y), 0)

        assert controller.calls == ['begin_drag', 'end_drag']
        assert not tracker.dragging
