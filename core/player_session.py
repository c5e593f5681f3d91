"""
Now-playing session
Lives from navigating to the player screen until leaving it
"""

import logging
from enum import Enum

from core.errors import ConnectionFailure, PlaybackCommandFailure
from core.now_playing import NowPlayingController
from core.scheduler import Scheduler

logger = logging.getLogger(__name__)

CONNECT_ERROR = 'Failed to connect to Spotify'


class SessionStatus(Enum):
    LOADING = 'loading'
    READY = 'ready'
    ERROR = 'error'
    CLOSED = 'closed'


class PlayerSession:
    """
    Connects, plays the scanned track and feeds the interaction controller

    Every gateway call goes through the shared CommandWorker. start() only
    queues the connect; pump() picks up its outcome on the UI thread.
    """

    def __init__(self, gateway, track_uri, worker, scheduler=None):
        self.gateway = gateway
        self.track_uri = track_uri
        self.worker = worker
        self.scheduler = scheduler if scheduler is not None else Scheduler()
        self.controller = NowPlayingController(gateway, self.scheduler, worker)
        self.status = SessionStatus.LOADING
        self.error_message = None
        self.subscription = None
        self._start_pending = False

    @property
    def ready(self):
        return self.status is SessionStatus.READY

    @property
    def stream_closed(self):
        return self.subscription is not None and self.subscription.closed

    def start(self):
        """
        Queue connect, subscribe and play. The session stays LOADING until
        pump() sees the result; failures end in ERROR and start() retries.
        """
        if self.status is SessionStatus.CLOSED or self._start_pending:
            return self.status
        self._cancel_subscription()
        self.status = SessionStatus.LOADING
        self.error_message = None
        self._start_pending = True
        self.worker.submit(self._connect_and_play, callback=self._on_started)
        return self.status

    retry = start

    def pump(self):
        """Main-loop step: finish commands, apply notifications, run due timers, advance the disc"""
        if self.status is SessionStatus.CLOSED:
            return
        self.worker.drain()
        if self.status is SessionStatus.CLOSED:
            return
        if self.subscription is not None:
            for state in self.subscription.drain():
                self.controller.apply_state(state)
        self.scheduler.run_pending()
        self.controller.tick()

    def close(self):
        """Leave the screen: stop timers, end the subscription, disconnect"""
        if self.status is SessionStatus.CLOSED:
            return
        self.status = SessionStatus.CLOSED
        self.controller.close()
        self.scheduler.cancel_all()
        self._cancel_subscription()
        # Queued behind any connect still in flight, so it also ends that one
        self.worker.submit(self.gateway.disconnect)
        logger.debug("Player session closed")

    def _connect_and_play(self):
        """
        Runs on the worker thread

        Returns:
            tuple: (subscription, error message); exactly one is None
        """
        if not self.gateway.connect():
            return None, CONNECT_ERROR
        subscription = None
        try:
            subscription = self.gateway.subscribe_state()
            self.gateway.play(self.track_uri)
        except (ConnectionFailure, PlaybackCommandFailure) as e:
            if subscription is not None:
                subscription.cancel()
            return None, f'Error: {e}'
        return subscription, None

    def _on_started(self, result, error):
        self._start_pending = False
        subscription, message = result if result is not None else (None, f'Error: {error}')
        if self.status is SessionStatus.CLOSED:
            if subscription is not None:
                subscription.cancel()
            return
        if message is not None:
            self._fail(message)
            return
        self.subscription = subscription
        self.status = SessionStatus.READY
        logger.info("Now playing %s", self.track_uri)

    def _fail(self, message):
        logger.error("Player failed: %s", message)
        self.status = SessionStatus.ERROR
        self.error_message = message
        return self.status

    def _cancel_subscription(self):
        if self.subscription is not None:
            self.subscription.cancel()
            self.subscription = None
