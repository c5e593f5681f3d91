"""
Tests for PlayerSession - connect, play, error screen and teardown.
"""
import threading

from core.player_session import PlayerSession, SessionStatus, CONNECT_ERROR
from core.scheduler import Scheduler
from playback.worker import CommandWorker
from conftest import FakeClock, FakeGateway, InlineWorker, PLAYING, PAUSED

TRACK = 'spotify:track:ABC123'


def make_session(gateway, scheduler, worker=None):
    return PlayerSession(gateway, TRACK, worker or InlineWorker(), scheduler=scheduler)


def started(gateway, scheduler, worker=None):
    """Session that has finished connecting."""
    session = make_session(gateway, scheduler, worker)
    session.start()
    session.pump()
    return session


class TestConstruction:

    def test_uses_injected_empty_scheduler(self, gateway):
        scheduler = Scheduler(clock=FakeClock())
        assert len(scheduler) == 0

        session = make_session(gateway, scheduler)

        assert session.scheduler is scheduler
        assert session.controller.scheduler is scheduler


class TestStart:

    def test_starts_loading(self, gateway, scheduler):
        session = make_session(gateway, scheduler)
        assert session.status is SessionStatus.LOADING

    def test_stays_loading_until_pumped(self, gateway, scheduler):
        session = make_session(gateway, scheduler)

        assert session.start() is SessionStatus.LOADING

        session.pump()
        assert session.status is SessionStatus.READY

    def test_connect_subscribe_then_play(self, gateway, scheduler):
        session = started(gateway, scheduler)

        assert session.ready
        assert gateway.calls == ['connect', 'subscribe_state', ('play', TRACK)]
        assert session.error_message is None
        assert session.subscription is gateway.subscriptions[0]

    def test_connection_failure_shows_error(self, scheduler):
        gateway = FakeGateway(connect_result=False)
        session = started(gateway, scheduler)

        assert session.status is SessionStatus.ERROR
        assert session.error_message == CONNECT_ERROR
        assert ('play', TRACK) not in gateway.calls

    def test_play_failure_shows_error(self, scheduler):
        gateway = FakeGateway(play_error='Premium required')
        session = started(gateway, scheduler)

        assert session.status is SessionStatus.ERROR
        assert session.error_message == 'Error: Premium required'
        assert gateway.subscriptions[0].closed

    def test_unexpected_exception_shows_error(self, scheduler):
        gateway = FakeGateway()
        gateway.connect = lambda: 1 / 0
        session = started(gateway, scheduler)

        assert session.status is SessionStatus.ERROR
        assert session.error_message.startswith('Error: ')

    def test_retry_after_error(self, scheduler):
        gateway = FakeGateway(connect_result=False)
        session = started(gateway, scheduler)

        gateway.connect_result = True
        session.retry()
        session.pump()

        assert session.ready
        assert session.error_message is None

    def test_start_while_pending_is_ignored(self, gateway, scheduler):
        session = make_session(gateway, scheduler)

        session.start()
        session.start()
        session.pump()

        assert gateway.count('connect') == 1

    def test_no_automatic_retry(self, scheduler):
        gateway = FakeGateway(connect_result=False)
        session = started(gateway, scheduler)

        session.pump()
        session.pump()

        assert gateway.count('connect') == 1


class BlockingGateway(FakeGateway):
    """Gateway whose connect blocks until released."""

    def __init__(self):
        super().__init__()
        self.release = threading.Event()

    def connect(self):
        self.release.wait(timeout=5.0)
        return super().connect()


class TestBackgroundStart:
    """Connecting runs on the worker thread."""

    def test_start_returns_while_connect_in_flight(self, scheduler):
        gateway = BlockingGateway()
        worker = CommandWorker().start()
        session = make_session(gateway, scheduler, worker)
        try:
            assert session.start() is SessionStatus.LOADING
            session.pump()
            assert session.status is SessionStatus.LOADING
        finally:
            gateway.release.set()
            worker.stop(timeout=2.0)

        session.pump()
        assert session.ready

    def test_close_during_connect_disconnects_afterwards(self, scheduler):
        gateway = BlockingGateway()
        worker = CommandWorker().start()
        session = make_session(gateway, scheduler, worker)
        session.start()

        session.close()
        gateway.release.set()
        worker.stop(timeout=2.0)

        assert gateway.calls[-1] == 'disconnect'
        assert gateway.calls.index('connect') < gateway.calls.index('disconnect')
        assert session.status is SessionStatus.CLOSED


class TestPump:

    def test_applies_notifications_in_order(self, gateway, scheduler):
        session = started(gateway, scheduler)
        subscription = gateway.subscriptions[0]
        subscription.push(PAUSED)
        subscription.push(PLAYING)

        session.pump()

        assert session.controller.state == PLAYING
        assert session.controller.turntable.spinning

    def test_state_defaults_until_notified(self, gateway, scheduler):
        session = started(gateway, scheduler)

        session.pump()

        assert session.controller.is_paused

    def test_runs_due_timers(self, gateway, scheduler, clock):
        session = started(gateway, scheduler)
        fired = []
        scheduler.call_later(0.1, fired.append, True)

        clock.advance(0.2)
        session.pump()

        assert fired == [True]


class TestClose:

    def test_close_tears_everything_down(self, gateway, scheduler):
        session = started(gateway, scheduler)
        subscription = gateway.subscriptions[0]
        scheduler.call_later(1.0, lambda: None)

        session.close()

        assert session.status is SessionStatus.CLOSED
        assert subscription.closed
        assert len(scheduler) == 0
        assert gateway.calls[-1] == 'disconnect'
        assert session.controller.closed

    def test_close_twice_disconnects_once(self, gateway, scheduler):
        session = started(gateway, scheduler)

        session.close()
        session.close()

        assert gateway.count('disconnect') == 1

    def test_close_after_error(self, scheduler):
        gateway = FakeGateway(connect_result=False)
        session = started(gateway, scheduler)

        session.close()

        assert gateway.count('disconnect') == 1

    def test_pump_after_close_ignores_notifications(self, gateway, scheduler):
        session = started(gateway, scheduler)
        subscription = gateway.subscriptions[0]
        session.close()
        subscription.push(PLAYING)

        session.pump()

        assert session.controller.is_paused
