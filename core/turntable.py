"""
Turntable rotation model for the now-playing vinyl
Tracks the rotation phase as a fraction of a full turn in [0, 1)
"""

from config.settings import SPIN_DURATION


def wrap_phase(phase):
    """Wrap a phase value into [0, 1)"""
    phase = phase % 1.0
    # -1e-17 % 1.0 == 1.0 in floating point
    if phase >= 1.0:
        phase = 0.0
    return phase


class Turntable:
    """Rotation phase driven either by a timed spin or by direct nudges"""

    def __init__(self, turn_duration=SPIN_DURATION):
        self.phase = 0.0
        self.turn_duration = turn_duration
        self.direction = 1
        self.spinning = False
        self._last_time = None

    def spin(self, now, turn_duration=None, direction=None):
        """Start (or retune) the timed spin"""
        self.advance(now)
        if turn_duration is not None:
            self.turn_duration = turn_duration
        if direction is not None:
            self.direction = 1 if direction >= 0 else -1
        self.spinning = True
        self._last_time = now

    def stop(self, now):
        """Stop the timed spin, keeping the phase reached so far"""
        self.advance(now)
        self.spinning = False
        self._last_time = None

    def advance(self, now):
        """Bring the phase up to date with the clock"""
        if self.spinning and self._last_time is not None and self.turn_duration > 0:
            elapsed = max(0.0, now - self._last_time)
            self.phase = wrap_phase(self.phase + self.direction * elapsed / self.turn_duration)
        if self.spinning:
            self._last_time = now
        return self.phase

    def nudge(self, turns):
        """Move the phase directly by a fraction of a turn (drag input)"""
        self.phase = wrap_phase(self.phase + turns)
        return self.phase

    @property
    def angle_degrees(self):
        return self.phase * 360.0
