"""
Now-playing interaction controller
Keeps the vinyl spinning with playback and turns drags into scratches
"""

import math
import logging
from dataclasses import replace

from config.settings import (
    SPIN_DURATION,
    DRAG_SENSITIVITY,
    FLING_SPEED_THRESHOLD,
    MOMENTUM_FACTOR,
    MOMENTUM_MIN_DURATION,
    MOMENTUM_MAX_DURATION,
    RELAX_DELAY,
    RESUME_DELAY
)
from core.playback_state import PlaybackState
from core.turntable import Turntable

logger = logging.getLogger(__name__)


def momentum_duration(speed):
    """Turn duration for a fling at the given release speed (px/s)"""
    if speed <= 0:
        return MOMENTUM_MAX_DURATION
    return max(MOMENTUM_MIN_DURATION, min(MOMENTUM_MAX_DURATION, MOMENTUM_FACTOR / speed))


class NowPlayingController:
    """
    Interaction state for the now-playing screen

    Only one drive owns the turntable at a time: the timed spin (idle or
    momentum) or the drag. Starting a drag stops the spin.
    """

    def __init__(self, gateway, scheduler, worker, turntable=None):
        """
        Args:
            gateway: Playback gateway; pause/resume run on the worker
            scheduler: UI-thread Scheduler for the relax and resume timers
            worker: CommandWorker that keeps transport calls off the UI thread
        """
        self.gateway = gateway
        self.scheduler = scheduler
        self.worker = worker
        self.turntable = turntable if turntable is not None else Turntable(SPIN_DURATION)
        self.state = PlaybackState()

        self.dragging = False
        self.momentum = False
        self.closed = False
        self._was_playing = False
        self._resume_timer = None
        self._relax_timer = None

    # Playback state

    @property
    def is_paused(self):
        return self.state.is_paused

    @property
    def toggle_label(self):
        return "Play" if self.state.is_paused else "Pause"

    @property
    def phase(self):
        return self.turntable.phase

    def apply_state(self, state):
        """Take a playback state notification (most recent wins)"""
        self.state = state
        self._sync_drive()

    def toggle(self):
        """Play/pause button. Overrides any resume still pending from a drag."""
        self._cancel_timer('_resume_timer')
        self._was_playing = False
        if self.state.is_paused:
            self._send('resume')
            self._mark_paused(False)
        else:
            self._send('pause')
            self._mark_paused(True)

    # Drag gestures

    def begin_drag(self):
        now = self.scheduler.now()
        resume_pending = self._cancel_timer('_resume_timer')
        self._cancel_timer('_relax_timer')

        self.dragging = True
        self.momentum = False
        self.turntable.stop(now)
        self.turntable.turn_duration = SPIN_DURATION
        self.turntable.direction = 1

        self._was_playing = resume_pending or not self.state.is_paused
        if not self.state.is_paused:
            logger.debug("Drag started while playing - pausing")
            self._send('pause')
            self._mark_paused(True)

    def update_drag(self, dx, dy):
        """Scratch by one pointer sample. Returns the new phase."""
        if not self.dragging:
            return self.turntable.phase
        return self.turntable.nudge((dx - dy) / DRAG_SENSITIVITY)

    def end_drag(self, velocity=(0.0, 0.0)):
        """
        Release the disc

        Args:
            velocity: (vx, vy) release velocity in px/s
        """
        if not self.dragging:
            return
        self.dragging = False
        now = self.scheduler.now()

        vx, vy = velocity
        speed = math.hypot(vx, vy)
        if speed > FLING_SPEED_THRESHOLD:
            duration = momentum_duration(speed)
            direction = 1 if (vx - vy) >= 0 else -1
            logger.debug("Fling at %.0f px/s - spinning %.2fs per turn", speed, duration)
            self.momentum = True
            self.turntable.spin(now, turn_duration=duration, direction=direction)
            self._relax_timer = self.scheduler.call_later(RELAX_DELAY, self._relax)
        else:
            self._sync_drive()

        if self._was_playing:
            self._resume_timer = self.scheduler.call_later(RESUME_DELAY, self._resume_after_drag)

    # Frame updates

    def tick(self):
        """Advance the spin to the current time. Returns the phase."""
        return self.turntable.advance(self.scheduler.now())

    def close(self):
        """Tear down on leaving the screen"""
        self.closed = True
        self._cancel_timer('_resume_timer')
        self._cancel_timer('_relax_timer')
        self.turntable.stop(self.scheduler.now())

    # Internals

    def _send(self, command):
        """Fire-and-forget transport command; the state stream reports the outcome"""
        self.worker.submit(getattr(self.gateway, command))

    def _mark_paused(self, paused):
        self.state = replace(self.state, is_paused=paused)
        self._sync_drive()

    def _sync_drive(self):
        if self.dragging or self.momentum or self.closed:
            return
        now = self.scheduler.now()
        if self.state.is_paused:
            if self.turntable.spinning:
                self.turntable.stop(now)
        elif not self.turntable.spinning:
            self.turntable.spin(now, turn_duration=SPIN_DURATION, direction=1)

    def _relax(self):
        self._relax_timer = None
        if self.dragging or self.closed:
            return
        self.momentum = False
        now = self.scheduler.now()
        if self.state.is_paused:
            self.turntable.stop(now)
            self.turntable.turn_duration = SPIN_DURATION
            self.turntable.direction = 1
        else:
            self.turntable.spin(now, turn_duration=SPIN_DURATION, direction=1)

    def _resume_after_drag(self):
        self._resume_timer = None
        if self.dragging or self.closed:
            return
        logger.debug("Resuming playback after drag")
        self._was_playing = False
        self._send('resume')
        self._mark_paused(False)

    def _cancel_timer(self, name):
        """Cancel a pending timer attribute. Returns True if it was still pending."""
        timer = getattr(self, name)
        setattr(self, name, None)
        if timer is None:
            return False
        pending = timer.pending
        timer.cancel()
        return pending
