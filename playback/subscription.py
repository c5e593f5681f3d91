"""
Playback state subscription
Polls Spotify on a background thread and hands snapshots to the UI thread
"""

import queue
import logging
import threading

from config.settings import STATE_POLL_INTERVAL
from core.errors import SessionEnded

logger = logging.getLogger(__name__)


class StateSubscription:
    """
    Cancellable channel of PlaybackState notifications

    The polling thread only fetches and enqueues. Consumers call drain() from
    the main loop and apply the states in delivery order.
    """

    def __init__(self, fetch, interval=STATE_POLL_INTERVAL, on_close=None):
        """
        Args:
            fetch: Callable returning a PlaybackState; raises SessionEnded when
                the session is gone
            interval: Seconds between polls
            on_close: Optional callback run once when the subscription closes
        """
        self._fetch = fetch
        self.interval = interval
        self._on_close = on_close
        self._queue = queue.Queue()
        self._stopped = threading.Event()
        self._thread = None
        self._close_lock = threading.Lock()
        self._close_notified = False

    @property
    def closed(self):
        return self._stopped.is_set()

    def start(self):
        """Start polling in a daemon thread"""
        if self._thread is not None or self.closed:
            return self
        self._thread = threading.Thread(target=self._poll_loop, daemon=True)
        self._thread.start()
        logger.debug("Playback state subscription started (every %.1fs)", self.interval)
        return self

    def cancel(self, timeout=0.1):
        """
        Stop delivering notifications

        Waits at most timeout seconds for the poller. A poll still in flight
        finishes on its daemon thread and its result is dropped.
        """
        self._close()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)

    def poll_once(self):
        """
        Fetch one snapshot and enqueue it

        Returns:
            bool: False once the subscription is closed
        """
        if self.closed:
            return False
        try:
            state = self._fetch()
        except SessionEnded as e:
            logger.info("Playback session ended: %s", e)
            self._close()
            return False
        except Exception as e:
            logger.warning("Playback state poll failed: %s", e)
            return True
        if not self.closed:
            self._queue.put(state)
        return not self.closed

    def drain(self):
        """Return every snapshot received since the last call, oldest first"""
        states = []
        while True:
            try:
                states.append(self._queue.get_nowait())
            except queue.Empty:
                return states

    def __iter__(self):
        return iter(self.drain())

    def _poll_loop(self):
        while self.poll_once():
            if self._stopped.wait(self.interval):
                break

    def _close(self):
        self._stopped.set()
        with self._close_lock:
            if self._close_notified:
                return
            self._close_notified = True
        if self._on_close:
            self._on_close(self)
