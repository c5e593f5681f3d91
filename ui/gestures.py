"""
Drag tracking for the vinyl disc
Turns pointer down/move/up into per-sample deltas and a release velocity
"""

import time
import logging
from typing import List, Optional, Tuple

import cv2

from ui.screens import in_button, in_disc

logger = logging.getLogger(__name__)


class DragTracker:
    """Track a single pointer drag."""

    # Only samples this recent count towards the release velocity
    VELOCITY_WINDOW = 0.1  # seconds
    # Minimum time span to prevent extreme velocity on instant release
    MIN_VELOCITY_SPAN = 0.02  # seconds

    def __init__(self, clock=time.monotonic):
        self.clock = clock
        self.dragging = False
        self.last_pos: Optional[Tuple[int, int]] = None
        self._samples: List[Tuple[float, int, int]] = []

    def on_down(self, pos: Tuple[int, int]):
        """Called on pointer down."""
        self.dragging = True
        self.last_pos = pos
        self._samples = [(self.clock(), pos[0], pos[1])]
        logger.debug(f'Drag start at ({pos[0]}, {pos[1]})')

    def on_move(self, pos: Tuple[int, int]) -> Tuple[int, int]:
        """Called on pointer move. Returns (dx, dy) since the previous sample."""
        if not self.dragging:
            return (0, 0)
        dx = pos[0] - self.last_pos[0]
        dy = pos[1] - self.last_pos[1]
        self.last_pos = pos
        self._record(pos)
        return (dx, dy)

    def on_up(self, pos: Tuple[int, int]) -> Tuple[float, float]:
        """
        Called on pointer up.

        Returns:
            (vx, vy) release velocity in px/s, (0, 0) if not dragging.
        """
        if not self.dragging:
            return (0.0, 0.0)
        self.dragging = False
        self._record(pos)

        now = self._samples[-1][0]
        recent = [s for s in self._samples if now - s[0] <= self.VELOCITY_WINDOW]
        first, last = recent[0], recent[-1]
        span = max(self.MIN_VELOCITY_SPAN, last[0] - first[0])
        velocity = ((last[1] - first[1]) / span, (last[2] - first[2]) / span)
        self._samples = []
        logger.debug(f'Drag end, velocity=({velocity[0]:.0f}, {velocity[1]:.0f}) px/s')
        return velocity

    def _record(self, pos: Tuple[int, int]):
        self._samples.append((self.clock(), pos[0], pos[1]))
        # Keep the list short during long drags
        if len(self._samples) > 64:
            self._samples = self._samples[-32:]


def dispatch_mouse(drag: DragTracker, controller, event: int, pos: Tuple[int, int], flags: int):
    """
    Route one OpenCV mouse event to the now-playing controller.

    Button presses toggle playback, presses on the disc start a scratch.
    A move without the left button held ends the drag, since the release
    happened outside the window and no LBUTTONUP will arrive.
    """
    if event == cv2.EVENT_LBUTTONDOWN:
        if in_button(pos):
            controller.toggle()
        elif in_disc(pos):
            drag.on_down(pos)
            controller.begin_drag()
    elif event == cv2.EVENT_MOUSEMOVE and drag.dragging:
        if not flags & cv2.EVENT_FLAG_LBUTTON:
            logger.debug('Button released outside the window')
            controller.end_drag(drag.on_up(drag.last_pos))
            return
        controller.update_drag(*drag.on_move(pos))
    elif event == cv2.EVENT_LBUTTONUP and drag.dragging:
        controller.update_drag(*drag.on_move(pos))
        controller.end_drag(drag.on_up(pos))
