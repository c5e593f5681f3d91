"""
UI-thread timers for QR Vinyl
Delayed callbacks run from the main loop, never from a background thread
"""

import sched
import time
import logging

logger = logging.getLogger(__name__)


class Timer:
    """Handle for a scheduled callback"""

    def __init__(self, scheduler, event):
        self._scheduler = scheduler
        self._event = event
        self.cancelled = False

    @property
    def due(self):
        return self._event.time

    @property
    def pending(self):
        return not self.cancelled and self._event in self._scheduler.queue

    def cancel(self):
        """Cancel the callback. No-op if it already ran."""
        if self.cancelled:
            return
        self.cancelled = True
        try:
            self._scheduler.cancel(self._event)
        except ValueError:
            pass  # Already ran or removed by cancel_all


class Scheduler:
    """Run delayed callbacks when the main loop calls run_pending()"""

    def __init__(self, clock=time.monotonic):
        self.clock = clock
        self._sched = sched.scheduler(clock, self._no_sleep)

    @staticmethod
    def _no_sleep(seconds):
        # run(blocking=False) never sleeps; the main loop paces itself
        pass

    def now(self):
        return self.clock()

    def call_later(self, delay, callback, *args):
        """
        Schedule callback(*args) after delay seconds

        Returns:
            Timer: handle that can cancel the callback
        """
        event = self._sched.enter(max(0.0, delay), 0, callback, args)
        return Timer(self._sched, event)

    def run_pending(self):
        """Run every callback that is due. Returns seconds until the next one, or None."""
        return self._sched.run(blocking=False)

    def cancel_all(self):
        """Drop every pending callback"""
        for event in list(self._sched.queue):
            try:
                self._sched.cancel(event)
            except ValueError:
                pass
        logger.debug("Cancelled all pending timers")

    def __len__(self):
        return len(self._sched.queue)
