"""Tests for the connection manager and response correlation."""

import pytest

from conftest import FakeSocket
from yeelamp.command import Command, CommandKind
from yeelamp.constants import LAMP_PORT, MAX_RESPONSE_BYTES
from yeelamp.errors import (
    ConnectError,
    InconsistentCommand,
    MalformedId,
    NoIdFound,
    NotConnected,
    ResponseTooLong,
    SendError,
)
from yeelamp.lamp import ConnectionSettings, Lamp, extract_id
from yeelamp.values import Value, ValueKind


def test_address_parsing():
    lamp = Lamp("Livingroom", "192.168.1.3:55443")
    assert (lamp.host, lamp.port) == ("192.168.1.3", 55443)
    assert Lamp("Bedroom", "192.168.1.4").port == LAMP_PORT


def test_bad_address_rejected():
    with pytest.raises(ValueError):
        Lamp("Livingroom", "192.168.1.3:notaport")


def test_starts_disconnected():
    lamp = Lamp("Livingroom", "192.168.1.3:55443")
    assert not lamp.connected
    assert lamp.next_id == 0


def test_connect_first_try(dialer, sleeps):
    lamp = Lamp("Livingroom", "192.168.1.3:55443")
    timeouts = lamp.connect(3.0, None, 5, 1.0, 2.0)
    assert lamp.connected
    assert timeouts == (3.0, None)
    assert dialer.calls == [(("192.168.1.3", 55443), 2.0)]
    assert sleeps == []


def test_connect_retries_then_succeeds(dialer, sleeps):
    dialer.failures = 2
    lamp = Lamp("Livingroom", "192.168.1.3:55443")
    lamp.connect(3.0, 3.0, 3, 0.5, 1.0)
    assert lamp.connected
    assert len(dialer.calls) == 3
    assert sleeps == [0.5, 0.5]


def test_connect_gives_up_after_max_tries(dialer, sleeps):
    dialer.failures = None
    lamp = Lamp("Livingroom", "192.168.1.3:55443")
    with pytest.raises(ConnectError) as excinfo:
        lamp.connect(3.0, 3.0, 3, 0.5, 1.0)
    assert excinfo.value.attempts == 3
    assert isinstance(excinfo.value.__cause__, ConnectionRefusedError)
    assert len(dialer.calls) == 3
    assert sleeps == [0.5, 0.5]
    assert not lamp.connected


def test_zero_attempt_timeout_fails_without_dialing(dialer, sleeps):
    lamp = Lamp("Livingroom", "192.168.1.3:55443")
    with pytest.raises(ConnectError) as excinfo:
        lamp.connect(3.0, 3.0, 3, 0.5, 0)
    assert excinfo.value.attempts == 0
    assert dialer.calls == []
    assert sleeps == []


@pytest.mark.parametrize("timeout", [-1.0, None])
def test_negative_attempt_timeout_fails_without_dialing(dialer, sleeps, timeout):
    lamp = Lamp("Livingroom", "192.168.1.3:55443")
    with pytest.raises(ConnectError) as excinfo:
        lamp.connect(3.0, 3.0, 3, 0.5, timeout)
    assert excinfo.value.attempts == 0
    assert dialer.calls == []


def test_unusable_timeout_is_not_fatal(dialer, sleeps):
    lamp = Lamp("Livingroom", "192.168.1.3:55443")
    timeouts = lamp.connect(-1.0, 2.0, 1, 0.0, 1.0)
    assert lamp.connected
    assert timeouts == (None, 2.0)
    assert lamp.timeouts == (None, 2.0)


def test_connect_with_settings(dialer, sleeps):
    settings = ConnectionSettings(
        read_timeout=4.0, write_timeout=None, conn_timeout=1.5, conn_tries=2, conn_wait=0.1
    )
    lamp = Lamp("Livingroom", "192.168.1.3:55443")
    assert lamp.connect_with(settings) == (4.0, None)
    assert dialer.calls[0][1] == 1.5


def test_send_requires_connection():
    lamp = Lamp("Livingroom", "192.168.1.3:55443")
    with pytest.raises(NotConnected):
        lamp.send(Command.toggle())
    assert lamp.next_id == 0


def test_send_writes_request_and_returns_id(connected_lamp, dialer):
    cmd_id = connected_lamp.send(Command.set_ct_abx(3700))
    assert cmd_id == 0
    assert dialer.sock.sent == [b'{"id":0,"method":"set_ct_abx","params":[3700,"sudden"]}\r\n']
    assert connected_lamp.next_id == 1


def test_ids_wrap_after_255(connected_lamp):
    ids = [connected_lamp.send(Command.toggle()) for _ in range(257)]
    assert ids == list(range(256)) + [0]
    assert connected_lamp.next_id == 1


def test_counter_returns_to_zero_after_256_sends(connected_lamp):
    for _ in range(256):
        connected_lamp.send(Command.toggle())
    assert connected_lamp.next_id == 0
    assert connected_lamp.last_id == 255


def test_encoding_failure_does_not_advance_counter(connected_lamp, dialer):
    bad = Command(CommandKind.TOGGLE, Value(5, ValueKind.BRIGHT))
    with pytest.raises(SendError) as excinfo:
        connected_lamp.send(bad)
    assert isinstance(excinfo.value.__cause__, InconsistentCommand)
    assert connected_lamp.next_id == 0
    assert dialer.sock.sent == []


def test_write_failure_does_not_advance_counter(connected_lamp, dialer):
    dialer.sock.fail_send = BrokenPipeError("broken pipe")
    with pytest.raises(SendError) as excinfo:
        connected_lamp.send(Command.toggle())
    assert isinstance(excinfo.value.__cause__, BrokenPipeError)
    assert connected_lamp.next_id == 0


def test_is_latest_after_six_sends(connected_lamp):
    for _ in range(6):
        connected_lamp.send(Command.toggle())
    assert connected_lamp.is_latest(b'{"id":5,"result":["ok"]}')
    assert not connected_lamp.is_latest(b'{"id":4,"result":["ok"]}')


def test_is_latest_wraps_below_zero():
    lamp = Lamp("Livingroom", "192.168.1.3:55443")
    assert lamp.last_id == 255
    assert lamp.is_latest(b'{"id":255,"result":["ok"]}')


def test_is_latest_uses_first_id():
    lamp = Lamp("Livingroom", "192.168.1.3:55443")
    assert lamp.is_latest(b'{"id":255,"result":[{"id":3}], "id":7}')


def test_extract_id_errors():
    with pytest.raises(NoIdFound):
        extract_id(b'{"method":"props","params":{"power":"on"}}')
    with pytest.raises(NoIdFound):
        extract_id(b'{"id": 5}')
    with pytest.raises(MalformedId):
        extract_id(b'{"id":256,"result":["ok"]}')


def test_receive_reads_one_line_at_a_time(dialer, sleeps):
    dialer.sock = FakeSocket(replies=[b'{"id":0,"result":["ok"]}\r\n{"id":1,', b'"result":["ok"]}\r\n'])
    lamp = Lamp("Livingroom", "192.168.1.3:55443")
    lamp.connect(3.0, 3.0, 1, 0.0, 1.0)
    assert lamp.receive() == b'{"id":0,"result":["ok"]}'
    assert lamp.receive() == b'{"id":1,"result":["ok"]}'


def test_receive_on_closed_connection(connected_lamp, dialer):
    with pytest.raises(ConnectionResetError):
        connected_lamp.receive()
    assert not connected_lamp.connected


def test_receive_requires_connection():
    with pytest.raises(NotConnected):
        Lamp("Livingroom", "192.168.1.3:55443").receive()


def test_close_and_context_manager(dialer, sleeps):
    with Lamp("Livingroom", "192.168.1.3:55443") as lamp:
        lamp.connect(3.0, 3.0, 1, 0.0, 1.0)
        assert lamp.connected
    assert not lamp.connected
    assert dialer.sock.closed


def test_reconnect_keeps_counter(connected_lamp, dialer):
    connected_lamp.send(Command.toggle())
    connected_lamp.connect(3.0, 3.0, 1, 0.0, 1.0)
    assert connected_lamp.next_id == 1


def test_extract_id_rejects_huge_digit_runs():
    with pytest.raises(MalformedId):
        extract_id(b'{"id":' + b"9" * 5000 + b"}")
    with pytest.raises(MalformedId):
        extract_id(b'{"id":' + b"0" * 5000 + b"1000}")


def test_extract_id_allows_leading_zeros():
    assert extract_id(b'{"id":' + b"0" * 5000 + b'5,"result":["ok"]}') == 5


def test_receive_gives_up_on_endless_line(dialer, sleeps):
    dialer.sock = FakeSocket(replies=[b"x" * 4096] * (MAX_RESPONSE_BYTES // 4096 + 2))
    lamp = Lamp("Livingroom", "192.168.1.3:55443")
    lamp.connect(3.0, 3.0, 1, 0.0, 1.0)
    with pytest.raises(ResponseTooLong):
        lamp.receive()
    assert not lamp.connected
