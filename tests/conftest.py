"""
Pytest configuration and shared fixtures for QR Vinyl tests.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.errors import PlaybackCommandFailure
from core.playback_state import PlaybackState
from core.scheduler import Scheduler


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeSubscription:
    """In-memory stand-in for StateSubscription."""

    def __init__(self):
        self.pending = []
        self.closed = False

    def push(self, state):
        self.pending.append(state)

    def drain(self):
        states, self.pending = self.pending, []
        return states

    def cancel(self):
        self.closed = True


class FakeGateway:
    """Records every call made to the playback gateway."""

    def __init__(self, connect_result=True, play_error=None):
        self.connect_result = connect_result
        self.play_error = play_error
        self.calls = []
        self.subscriptions = []

    def connect(self):
        self.calls.append('connect')
        return self.connect_result

    def subscribe_state(self):
        self.calls.append('subscribe_state')
        subscription = FakeSubscription()
        self.subscriptions.append(subscription)
        return subscription

    def play(self, track_uri):
        self.calls.append(('play', track_uri))
        if self.play_error:
            raise PlaybackCommandFailure(self.play_error)

    def pause(self):
        self.calls.append('pause')
        return True

    def resume(self):
        self.calls.append('resume')
        return True

    def disconnect(self):
        self.calls.append('disconnect')

    def count(self, name):
        return self.calls.count(name)


class InlineWorker:
    """CommandWorker stand-in that runs each job at once on the calling thread."""

    def __init__(self):
        self.jobs = []
        self._results = []

    def submit(self, func, *args, callback=None):
        self.jobs.append(func)
        try:
            result, error = func(*args), None
        except Exception as e:
            result, error = None, e
        if callback is not None:
            self._results.append((callback, result, error))
        return True

    def drain(self):
        results, self._results = self._results, []
        for callback, result, error in results:
            callback(result, error)
        return len(results)


class FakeCamera:
    """Camera handle that only counts start/stop."""

    def __init__(self):
        self.running = True
        self.starts = 0
        self.stops = 0

    def start(self):
        self.running = True
        self.starts += 1

    def stop(self):
        self.running = False
        self.stops += 1


PLAYING = PlaybackState(is_paused=False, playback_position_ms=1000, track_duration_ms=180000)
PAUSED = PlaybackState(is_paused=True, playback_position_ms=1000, track_duration_ms=180000)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock=clock)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def worker():
    return InlineWorker()

@pytest.fixture
def camera():
    return FakeCamera()
