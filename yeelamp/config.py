"""
Lamp configuration file support.

Settings live in a TOML file with a [lamp] table:

    [lamp]
    name = "Livingroom"
    ip = "192.168.1.3:55443"
    default-duration = "350ms"
    read-timeout = "3s"
    write-timeout = ""        # empty: writes may block indefinitely
    connection-tries = 5
    connection-tries-wait = "3s"
    connection-timeout = "3s"

Other tables are ignored.
"""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .constants import (
    DEFAULT_CONNECTION_TIMEOUT,
    DEFAULT_CONNECTION_WAIT,
    DEFAULT_IO_TIMEOUT,
)
from .effect import Effect
from .errors import ConfigError
from .lamp import ConnectionSettings, Lamp
from .log import debug
from .utils import default_config_path, parse_address, parse_duration


@dataclass(frozen=True)
class LampConfig:
    name: str
    ip: str
    default_duration: float
    read_timeout: Optional[float]
    write_timeout: Optional[float]
    connection_tries: int
    connection_tries_wait: float
    connection_timeout: float

    def connection_settings(self) -> ConnectionSettings:
        return ConnectionSettings(
            read_timeout=self.read_timeout,
            write_timeout=self.write_timeout,
            conn_timeout=self.connection_timeout,
            conn_tries=self.connection_tries,
            conn_wait=self.connection_tries_wait,
        )

    def default_effect(self) -> Effect:
        return Effect.smooth(self.default_duration * 1000)

    def make_lamp(self) -> Lamp:
        return Lamp(self.name, self.ip)


def _required(table: Dict[str, Any], key: str) -> Any:
    if key not in table:
        raise ConfigError("missing required setting", key=f"lamp.{key}")
    return table[key]


def _duration(table: Dict[str, Any], key: str, default: Optional[float], allow_none: bool) -> Optional[float]:
    if key not in table:
        return default
    try:
        value = parse_duration(table[key])
    except ValueError as e:
        raise ConfigError(str(e), key=f"lamp.{key}") from e
    if value is None and not allow_none:
        raise ConfigError("a duration is required here", key=f"lamp.{key}")
    return value


def parse_config(data: Dict[str, Any]) -> LampConfig:
    """Build a LampConfig from an already-parsed TOML document."""
    table = data.get("lamp")
    if not isinstance(table, dict):
        raise ConfigError("missing [lamp] table")

    name = _required(table, "name")
    if not isinstance(name, str) or not name:
        raise ConfigError("must be a non-empty string", key="lamp.name")

    ip = _required(table, "ip")
    try:
        parse_address(ip)
    except (TypeError, AttributeError, ValueError) as e:
        raise ConfigError(f"invalid address {ip!r}", key="lamp.ip") from e

    if "default-duration" not in table:
        raise ConfigError("missing required setting", key="lamp.default-duration")
    default_duration = _duration(table, "default-duration", None, allow_none=False)

    tries = _required(table, "connection-tries")
    if isinstance(tries, bool) or not isinstance(tries, int) or not 1 <= tries <= 255:
        raise ConfigError("must be an integer between 1 and 255", key="lamp.connection-tries")

    connection_timeout = _duration(table, "connection-timeout", DEFAULT_CONNECTION_TIMEOUT, allow_none=False)
    if not connection_timeout:
        raise ConfigError("cannot be zero", key="lamp.connection-timeout")

    return LampConfig(
        name=name,
        ip=ip,
        default_duration=default_duration,
        read_timeout=_duration(table, "read-timeout", DEFAULT_IO_TIMEOUT, allow_none=True),
        write_timeout=_duration(table, "write-timeout", DEFAULT_IO_TIMEOUT, allow_none=True),
        connection_tries=tries,
        connection_tries_wait=_duration(table, "connection-tries-wait", DEFAULT_CONNECTION_WAIT, allow_none=False),
        connection_timeout=connection_timeout,
    )


def load_config(path: Union[str, Path, None] = None) -> LampConfig:
    """Read the lamp settings from `path` (default ~/.yeelamp/config.toml)."""
    config_file = Path(path) if path is not None else default_config_path()
    debug(f"Reading config from {config_file}")
    try:
        with open(config_file, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"cannot read {config_file}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid TOML in {config_file}: {e}") from e
    debug("File read successfully")
    return parse_config(data)
