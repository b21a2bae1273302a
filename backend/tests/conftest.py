import os
import sys
from collections import defaultdict

import pytest

# Ensure the backend root (containing the `relay` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from relay import create_app, lobby, socketio
from relay.services.matchmaking import Lobby
from relay.services.matchmaking.transport import ScheduledTask


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    MATCH_DELAY_MS = 10000
    TYPING_DELAY_MS = 1500
    RESPONDER_URL = 'http://responder.test'
    RESPONDER_PATH = '/api/bot/respond'
    RESPONDER_TIMEOUT_SEC = 1
    ALLOWED_ORIGINS = ['http://localhost']
    SOCKETIO_NAMESPACE = '/'
    END_SESSION_ON_DISCONNECT = False


class ManualScheduler:
    """Deterministic stand-in for the background scheduler.

    Time only moves when ``advance`` is called; due tasks run in order.
    ``spawn`` runs its work immediately.
    """

    def __init__(self):
        self.now = 0.0
        self._pending = []
        self._seq = 0

    def clock(self):
        return self.now

    def call_later(self, delay_sec, fn, *args, name=''):
        task = ScheduledTask(name)
        self._seq += 1
        self._pending.append((self.now + max(0.0, delay_sec), self._seq, task, fn, args))
        return task

    def spawn(self, fn, *args, name=''):
        task = ScheduledTask(name)
        fn(*args)
        task.done = True
        return task

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [item for item in self._pending if item[0] <= target]
            if not due:
                break
            item = min(due, key=lambda i: (i[0], i[1]))
            self._pending.remove(item)
            when, _, task, fn, args = item
            self.now = max(self.now, when)
            if not task.cancelled:
                fn(*args)
                task.done = True
        self.now = target

    def pending(self):
        return [item[2] for item in self._pending if not item[2].cancelled]


class FakeTransport:
    """Records emits per recipient; a target that is not a room is a connection id."""

    def __init__(self):
        self.rooms = defaultdict(set)
        self.events = []

    def join(self, sid, room):
        self.rooms[room].add(sid)

    def leave(self, sid, room):
        if room in self.rooms:
            self.rooms[room].discard(sid)

    def close(self, room):
        self.rooms.pop(room, None)

    def emit(self, event, data=None, to=None, skip_sid=None):
        recipients = set(self.rooms[to]) if to in self.rooms else {to}
        for sid in sorted(recipients):
            if sid != skip_sid:
                self.events.append((sid, event, data))

    def events_for(self, sid, name=None):
        return [(event, data) for (to, event, data) in self.events
                if to == sid and (name is None or event == name)]


class FakeResponder:
    def __init__(self, reply='beep boop', error=None, on_call=None):
        self.reply = reply
        self.error = error
        self.on_call = on_call
        self.calls = []
        self.url = 'fake://responder'

    def respond(self, text, session_id):
        self.calls.append((text, session_id))
        if self.on_call is not None:
            self.on_call(text, session_id)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def transport():
    return FakeTransport()


@pytest.fixture()
def responder():
    return FakeResponder()


@pytest.fixture()
def game_lobby(scheduler, transport, responder):
    """A lobby detached from Flask, driven by the manual scheduler."""
    standalone = Lobby()
    standalone.configure(
        transport=transport,
        scheduler=scheduler,
        responder=responder,
        clock=scheduler.clock,
        match_delay=10.0,
        typing_delay=1.5,
    )
    yield standalone
    standalone.reset()


@pytest.fixture()
def flask_app(scheduler, responder):
    application = create_app(TestConfig)
    # Keep the real Socket.IO transport but control time and the responder
    lobby.configure(scheduler=scheduler, clock=scheduler.clock, responder=responder)
    yield application
    lobby.reset()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
