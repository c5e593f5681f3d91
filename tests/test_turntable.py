"""
Tests for the Turntable rotation model.
"""
import pytest

from core.turntable import Turntable, wrap_phase


class TestWrapPhase:

    @pytest.mark.parametrize('value, expected', [
        (0.0, 0.0),
        (0.25, 0.25),
        (1.0, 0.0),
        (1.5, 0.5),
        (-0.25, 0.75),
        (-1e-17, 0.0),
    ])
    def test_wraps_into_unit_interval(self, value, expected):
        assert wrap_phase(value) == pytest.approx(expected)
        assert 0.0 <= wrap_phase(value) < 1.0


class TestSpin:
    """Time-driven rotation."""

    def test_stationary_until_spun(self):
        table = Turntable(turn_duration=3.0)
        assert table.advance(10.0) == 0.0

    def test_full_turn_per_duration(self):
        table = Turntable(turn_duration=3.0)
        table.spin(0.0)

        assert table.advance(1.5) == pytest.approx(0.5)
        assert table.advance(3.0) == pytest.approx(0.0, abs=1e-9)

    def test_stop_keeps_phase(self):
        table = Turntable(turn_duration=4.0)
        table.spin(0.0)
        table.stop(1.0)

        assert table.advance(5.0) == pytest.approx(0.25)
        assert not table.spinning

    def test_reverse_direction(self):
        table = Turntable(turn_duration=4.0)
        table.spin(0.0, direction=-1)

        assert table.advance(1.0) == pytest.approx(0.75)

    def test_retune_keeps_progress(self):
        table = Turntable(turn_duration=4.0)
        table.spin(0.0)
        table.spin(1.0, turn_duration=1.0)

        assert table.advance(1.5) == pytest.approx(0.75)


class TestNudge:
    """Drag-driven rotation."""

    def test_nudge_forward(self):
        table = Turntable()
        assert table.nudge(0.3) == pytest.approx(0.3)

    def test_nudge_backward_wraps(self):
        table = Turntable()
        assert table.nudge(-0.1) == pytest.approx(0.9)

    def test_angle(self):
        table = Turntable()
        table.nudge(0.5)
        assert table.angle_degrees == pytest.approx(180.0)
