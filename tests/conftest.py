"""Shared fixtures: an in-memory socket and a fake lamp on a real port."""

import pytest

from fake_lamp_server import FakeLampServer
from yeelamp import lamp as lamp_module


class FakeSocket:
    """Stands in for a connected socket; records writes, replays reads."""

    def __init__(self, replies=(), fail_send=None):
        self.sent = []
        self.timeouts = []
        self.replies = list(replies)
        self.fail_send = fail_send
        self.closed = False

    def settimeout(self, value):
        self.timeouts.append(value)

    def sendall(self, data):
        if self.fail_send is not None:
            raise self.fail_send
        self.sent.append(data)

    def recv(self, size):
        if not self.replies:
            return b""
        return self.replies.pop(0)

    def close(self):
        self.closed = True


class Dialer:
    """Replacement for socket.create_connection that counts calls."""

    def __init__(self, sock=None, failures=0, error=None):
        self.sock = sock if sock is not None else FakeSocket()
        self.failures = failures
        self.error = error or ConnectionRefusedError("connection refused")
        self.calls = []

    def __call__(self, address, timeout=None):
        self.calls.append((address, timeout))
        if self.failures is None or len(self.calls) <= self.failures:
            raise self.error
        return self.sock


@pytest.fixture
def sleeps(monkeypatch):
    recorded = []
    monkeypatch.setattr(lamp_module.time, "sleep", recorded.append)
    return recorded


@pytest.fixture
def dialer(monkeypatch):
    """A dialer that connects on the first try; tweak attributes per test."""
    d = Dialer()
    monkeypatch.setattr(lamp_module.socket, "create_connection", d)
    return d


@pytest.fixture
def connected_lamp(dialer, sleeps):
    lamp = lamp_module.Lamp("Livingroom", "192.168.1.3:55443")
    lamp.connect(3.0, 3.0, 1, 0.0, 1.0)
    return lamp


@pytest.fixture
def fake_lamp():
    server = FakeLampServer("127.0.0.1", 0)
    server.start_background()
    yield server
    server.shutdown()
    server.server_close()
