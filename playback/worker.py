"""
Background command worker
Runs Spotify calls off the UI thread, one at a time and in order
"""

import queue
import logging
import threading

logger = logging.getLogger(__name__)


class CommandWorker:
    """
    Serial executor for blocking gateway calls

    Jobs run on a single daemon thread in submission order, so a disconnect
    queued after a connect always runs after it. Results come back through
    drain(), which the main loop calls to run each job's callback on the UI
    thread.
    """

    def __init__(self, name='spotify-commands'):
        self.name = name
        self._jobs = queue.Queue()
        self._results = queue.Queue()
        self._stopped = threading.Event()
        self._thread = None

    @property
    def running(self):
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        """Start the worker thread"""
        if self._thread is None and not self._stopped.is_set():
            self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
            self._thread.start()
            logger.debug("Command worker started")
        return self

    def submit(self, func, *args, callback=None):
        """
        Queue func(*args) for the worker thread

        Args:
            callback: Optional callable(result, error) run by drain() on the
                caller's thread once the job finished

        Returns:
            bool: False if the worker is stopped and the job was dropped
        """
        if self._stopped.is_set():
            logger.warning("Command worker stopped - dropping %s", _job_name(func))
            return False
        self._jobs.put((func, args, callback))
        return True

    def drain(self):
        """Run the callbacks of finished jobs. Returns how many ran."""
        count = 0
        while True:
            try:
                callback, result, error = self._results.get_nowait()
            except queue.Empty:
                return count
            callback(result, error)
            count += 1

    def stop(self, timeout=1.0):
        """Finish the queued jobs, then end the thread"""
        if self._stopped.is_set():
            return
        self._stopped.set()
        self._jobs.put(None)
        if self._thread is not None and timeout:
            self._thread.join(timeout=timeout)

    def _run(self):
        while True:
            job = self._jobs.get()
            if job is None:
                break
            func, args, callback = job
            try:
                result, error = func(*args), None
            except Exception as e:
                logger.error("Command %s failed: %s", _job_name(func), e)
                result, error = None, e
            if callback is not None:
                self._results.put((callback, result, error))
        logger.debug("Command worker stopped")


def _job_name(func):
    return getattr(func, '__name__', repr(func))
