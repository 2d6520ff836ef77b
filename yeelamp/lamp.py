"""
Connection manager for a single Yeelight lamp.

The lamp keeps one TCP session open. Each request carries an 8-bit id taken
from a wrapping counter so responses can be matched to the last request.
"""

import re
import socket
import time
from dataclasses import dataclass
from typing import Optional, Tuple

from .command import Command
from .constants import ID_MODULUS, LINE_TERMINATOR, MAX_RESPONSE_BYTES
from .errors import (
    ConnectError,
    EncodingError,
    MalformedId,
    NoIdFound,
    NotConnected,
    ResponseTooLong,
    SendError,
)
from .log import debug, info, recv, send, warn
from .request import encode
from .utils import parse_address

Timeouts = Tuple[Optional[float], Optional[float]]

_RESPONSE_ID = re.compile(rb'"id":(\d+)')


@dataclass(frozen=True)
class ConnectionSettings:
    """Everything Lamp.connect() needs. Times are in seconds; None blocks."""

    read_timeout: Optional[float]
    write_timeout: Optional[float]
    conn_timeout: float
    conn_tries: int
    conn_wait: float


def extract_id(resp: bytes) -> int:
    """Return the first `"id":<digits>` value in a raw response.

    Raises NoIdFound when there is none and MalformedId when the digits do
    not fit in 8 bits.
    """
    match = _RESPONSE_ID.search(resp)
    if match is None:
        raise NoIdFound("No ID match found in response")
    raw = match.group(1).decode("ascii")
    digits = raw.lstrip("0") or "0"
    # more than three significant digits can never be an 8-bit id
    if len(digits) > 3 or int(digits) >= ID_MODULUS:
        raise MalformedId(raw[:16] + ("..." if len(raw) > 16 else ""))
    return int(digits)


def _checked_timeout(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    if value <= 0:
        raise ValueError(f"timeout must be positive or None, got {value}")
    return float(value)


class Lamp:
    """A lamp on the local network, reached at `address` ("host:port").

    Example:
        lamp = Lamp("Livingroom", "192.168.1.3:55443")
        lamp.connect(read_timeout=3, write_timeout=None, max_tries=5,
                     retry_wait=3, per_attempt_timeout=3)
        cmd_id = lamp.send(Command.set_rgb(0xDEADFE, Effect.smooth(2000)))
    """

    def __init__(self, name: str, address: str):
        self.name = name
        self.host, self.port = parse_address(address)
        self._sock: Optional[socket.socket] = None
        self._cmd_count = 0
        self._read_timeout: Optional[float] = None
        self._write_timeout: Optional[float] = None
        self._rx_buffer = b""
        debug(f"{self.name} | Created lamp for {self.host}:{self.port}")

    def __repr__(self):
        state = "connected" if self.connected else "disconnected"
        return f"Lamp({self.name!r}, '{self.host}:{self.port}', {state}, next_id={self._cmd_count})"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def connected(self) -> bool:
        return self._sock is not None

    @property
    def next_id(self) -> int:
        """Id the next sent command will carry."""
        return self._cmd_count

    @property
    def last_id(self) -> int:
        """Id of the most recently sent command (255 before the first send)."""
        return (self._cmd_count - 1) % ID_MODULUS

    @property
    def timeouts(self) -> Timeouts:
        return (self._read_timeout, self._write_timeout)

    def connect(
        self,
        read_timeout: Optional[float],
        write_timeout: Optional[float],
        max_tries: int,
        retry_wait: float,
        per_attempt_timeout: float,
    ) -> Timeouts:
        """Open the TCP session, retrying up to `max_tries` times.

        Returns the read/write timeouts actually in effect, which differ
        from the requested ones when a value could not be applied.
        Raises ConnectError once every attempt has failed.
        """
        if per_attempt_timeout is None or per_attempt_timeout <= 0:
            raise ConnectError(
                f"per_attempt_timeout must be positive, got {per_attempt_timeout}", attempts=0
            )

        info(f"{self.name} | Connecting to {self.host}:{self.port}")
        if self._sock is not None:
            debug(f"{self.name} | Dropping previous session")
            self.close()

        tries = 0
        while True:
            debug(f"{self.name} | Connection attempt {tries + 1}/{max_tries}")
            try:
                sock = socket.create_connection((self.host, self.port), timeout=per_attempt_timeout)
            except OSError as e:
                tries += 1
                if tries < max_tries:
                    info(f"{self.name} | Connection failed (try {tries}/{max_tries}): {e}")
                    time.sleep(retry_wait)
                    continue
                warn(f"{self.name} | Could not connect after {tries}/{max_tries} tries; giving up")
                raise ConnectError(
                    f"Could not connect to {self.host}:{self.port} after {tries} tries: {e}",
                    attempts=tries,
                ) from e
            break

        self._sock = sock
        self._rx_buffer = b""
        self._read_timeout = None
        self._write_timeout = None

        debug(f"{self.name} | Setting timeout values")
        try:
            self._read_timeout = _checked_timeout(read_timeout)
        except (TypeError, ValueError) as e:
            warn(f"{self.name} | Could not set read timeout: {e}")
        try:
            self._write_timeout = _checked_timeout(write_timeout)
        except (TypeError, ValueError) as e:
            warn(f"{self.name} | Could not set write timeout: {e}")
        self._sock.settimeout(self._write_timeout)

        info(f"{self.name} | Connected")
        return self.timeouts

    def connect_with(self, settings: ConnectionSettings) -> Timeouts:
        return self.connect(
            settings.read_timeout,
            settings.write_timeout,
            settings.conn_tries,
            settings.conn_wait,
            settings.conn_timeout,
        )

    def close(self) -> None:
        if self._sock is None:
            return
        debug(f"{self.name} | Closing connection")
        try:
            self._sock.close()
        finally:
            self._sock = None
            self._rx_buffer = b""

    def send(self, command: Command) -> int:
        """Send `command` and return the id it was sent with.

        The id counter only advances when the whole request was written.
        """
        debug(f"{self.name} | Attempting to send command {command!r}")
        if self._sock is None:
            warn(f"{self.name} | Lamp not connected, cannot send command")
            raise NotConnected(f"{self.name} is not connected yet")

        cmd_id = self._cmd_count
        debug(f"{self.name} | Command ID {cmd_id}")
        try:
            req = encode(command, cmd_id)
        except EncodingError as e:
            raise SendError(f"Could not encode command: {e}") from e

        send("TCP", req.rstrip(LINE_TERMINATOR))
        try:
            self._sock.settimeout(self._write_timeout)
            self._sock.sendall(req.encode("ascii"))
        except OSError as e:
            warn(f"{self.name} | Write failed: {e}")
            raise SendError(f"Could not write to {self.host}:{self.port}: {e}") from e

        self._cmd_count = (self._cmd_count + 1) % ID_MODULUS
        debug(f"{self.name} | New Command ID {self._cmd_count}")
        return cmd_id

    def receive(self, max_bytes: int = 4096) -> bytes:
        """Read one CRLF-terminated response line (terminator stripped).

        Blocks for at most the read timeout. Raises NotConnected when there
        is no session, ResponseTooLong when the lamp sends more than
        MAX_RESPONSE_BYTES without a line end, and socket.timeout / OSError
        from the transport.
        """
        if self._sock is None:
            raise NotConnected(f"{self.name} is not connected yet")

        terminator = LINE_TERMINATOR.encode("ascii")
        self._sock.settimeout(self._read_timeout)
        while terminator not in self._rx_buffer:
            chunk = self._sock.recv(max_bytes)
            if not chunk:
                warn(f"{self.name} | Connection closed by lamp")
                self.close()
                raise ConnectionResetError(f"{self.name} closed the connection")
            self._rx_buffer += chunk
            if len(self._rx_buffer) > MAX_RESPONSE_BYTES:
                warn(f"{self.name} | Response exceeds {MAX_RESPONSE_BYTES} bytes without a line end")
                self.close()
                raise ResponseTooLong(f"No CRLF within {MAX_RESPONSE_BYTES} bytes from {self.name}")

        line, self._rx_buffer = self._rx_buffer.split(terminator, 1)
        recv("TCP", line.decode("utf-8", errors="replace"))
        return line

    def is_latest(self, resp: bytes) -> bool:
        """True if `resp` answers the most recently sent command."""
        resp_id = extract_id(resp)
        debug(f"{self.name} | Obtained response ID {resp_id}")
        return resp_id == self.last_id
