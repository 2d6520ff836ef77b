"""
Command handling for the command-line tool.
Turns parsed arguments into a lamp command and delivers it.
"""

from typing import Optional

from .command import Command
from .config import LampConfig
from .constants import (
    DEFAULT_CONNECTION_TIMEOUT,
    DEFAULT_CONNECTION_TRIES,
    DEFAULT_CONNECTION_WAIT,
    DEFAULT_IO_TIMEOUT,
)
from .effect import Effect
from .errors import (
    ConnectError,
    CorrelationError,
    ResponseTooLong,
    SendError,
    ValidationError,
)
from .lamp import ConnectionSettings, Lamp
from .log import debug, info, success, warn
from .request import encode


def parse_rgb(text: str) -> int:
    """Parse a hex colour: "DEADFE", "#deadfe" or "0xdeadfe"."""
    candidate = text.strip().lower()
    if candidate.startswith("#"):
        candidate = candidate[1:]
    return int(candidate, 16)


class CommandHandler:
    def __init__(self, args, lamp_config: Optional[LampConfig] = None):
        self.args = args
        self.lamp_config = lamp_config

    def resolve_effect(self) -> Effect:
        if self.args.sudden:
            return Effect.sudden()
        if self.args.smooth is not None:
            return Effect.smooth(self.args.smooth)
        if self.lamp_config is not None:
            return self.lamp_config.default_effect()
        return Effect.sudden()

    def build_command(self) -> Command:
        """Build the command selected on the command line.

        Raises ValidationError for out-of-range values and ValueError for
        unparsable ones.
        """
        effect = self.resolve_effect()
        if self.args.toggle:
            return Command.toggle()
        if self.args.ct is not None:
            return Command.set_ct_abx(self.args.ct, effect)
        if self.args.rgb is not None:
            return Command.set_rgb(parse_rgb(self.args.rgb), effect)
        if self.args.hsv is not None:
            hue, *rest = self.args.hsv
            if len(rest) > 1:
                raise ValueError("--hsv takes a hue and an optional saturation")
            sat = rest[0] if rest else None
            return Command.set_hsv(hue, sat, effect)
        if self.args.bright is not None:
            return Command.set_bright(self.args.bright, effect)
        raise ValueError("No command given (--toggle, --ct, --rgb, --hsv or --bright)")

    def connection_settings(self) -> ConnectionSettings:
        if self.lamp_config is not None:
            base = self.lamp_config.connection_settings()
        else:
            base = ConnectionSettings(
                read_timeout=DEFAULT_IO_TIMEOUT,
                write_timeout=DEFAULT_IO_TIMEOUT,
                conn_timeout=DEFAULT_CONNECTION_TIMEOUT,
                conn_tries=DEFAULT_CONNECTION_TRIES,
                conn_wait=DEFAULT_CONNECTION_WAIT,
            )
        return ConnectionSettings(
            read_timeout=base.read_timeout,
            write_timeout=base.write_timeout,
            conn_timeout=self.args.timeout if self.args.timeout is not None else base.conn_timeout,
            conn_tries=self.args.tries if self.args.tries is not None else base.conn_tries,
            conn_wait=self.args.wait if self.args.wait is not None else base.conn_wait,
        )

    def make_lamp(self) -> Lamp:
        if self.args.ip:
            return Lamp(self.args.name, self.args.ip)
        return self.lamp_config.make_lamp()

    def handle(self) -> int:
        """Run the requested action and return the process exit status."""
        try:
            cmd = self.build_command()
        except (ValidationError, ValueError) as e:
            warn(f"Invalid command: {e}")
            return 2

        if self.args.dry_run:
            print(encode(cmd, 0), end="")
            return 0

        try:
            lamp = self.make_lamp()
        except ValueError as e:
            warn(f"Invalid lamp address: {e}")
            return 2

        settings = self.connection_settings()
        with lamp:
            try:
                timeouts = lamp.connect_with(settings)
            except ConnectError as e:
                warn(str(e))
                return 1
            if timeouts != (settings.read_timeout, settings.write_timeout):
                warn(f"Actual timeouts different from configured ones: {timeouts}")

            try:
                cmd_id = lamp.send(cmd)
            except SendError as e:
                warn(f"Could not send command: {e}")
                return 1
            success(f"Sent {cmd.kind.method} with id {cmd_id}")

            if self.args.wait_response:
                return self._await_response(lamp)
        return 0

    def _await_response(self, lamp: Lamp) -> int:
        try:
            resp = lamp.receive()
        except (OSError, ResponseTooLong) as e:
            warn(f"No response from lamp: {e}")
            return 1
        info(f"Response: {resp.decode('utf-8', errors='replace')}")
        try:
            latest = lamp.is_latest(resp)
        except CorrelationError as e:
            warn(f"Could not correlate response: {e}")
            return 1
        if latest:
            success("Response matches the command sent")
            return 0
        warn(f"Response does not match command id {lamp.last_id}")
        debug(f"Lamp state: {lamp!r}")
        return 1
