import re
from pathlib import Path
from typing import Optional, Tuple, Union

from .constants import CONFIG_DIR_NAME, CONFIG_FILE_NAME, LAMP_PORT

_DURATION_UNITS = {
    "s": 1.0,
    "sec": 1.0,
    "m": 60.0,
    "min": 60.0,
    "h": 3600.0,
}

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)\s*(ms|sec|min|s|m|h)")


def get_config_dir() -> Path:
    """Gets the configuration directory for the application."""
    return Path.home() / CONFIG_DIR_NAME


def default_config_path() -> Path:
    return get_config_dir() / CONFIG_FILE_NAME


def parse_duration(text: Union[str, int, float, None]) -> Optional[float]:
    """Return a duration in seconds from "350ms", "5s", "1m 30s" or a bare number.

    An empty string means "no timeout" and gives None.
    Raises ValueError for anything else.
    """
    if text is None:
        return None
    if isinstance(text, bool):
        raise ValueError(f"Invalid duration: {text!r}")
    if isinstance(text, (int, float)):
        if text < 0:
            raise ValueError(f"Duration cannot be negative: {text}")
        return float(text)

    candidate = text.strip().lower()
    if not candidate:
        return None

    try:
        seconds = float(candidate)
    except ValueError:
        pass
    else:
        if seconds < 0:
            raise ValueError(f"Duration cannot be negative: {text}")
        return seconds

    compact = re.sub(r"\s+", "", candidate)
    parts = _DURATION_PART.findall(candidate)
    if not parts or "".join(n + u for n, u in parts) != compact:
        raise ValueError(f"Invalid duration format: {text}")
    return sum(
        float(number) / 1000 if unit == "ms" else float(number) * _DURATION_UNITS[unit]
        for number, unit in parts
    )


def parse_address(address: str) -> Tuple[str, int]:
    """Split "host:port" (or "[v6]:port", or a bare host) into (host, port).

    Raises ValueError if the port is not a number in 1..65535.
    """
    if not address or not address.strip():
        raise ValueError("Address cannot be empty")

    candidate = address.strip()
    match = re.fullmatch(r"\[([^\]]+)\](?::(\d+))?", candidate)
    if match:
        host, port = match.group(1), match.group(2)
    elif candidate.count(":") == 1:
        host, port = candidate.split(":")
    else:
        # bare host or bare IPv6 address
        host, port = candidate, None

    if not host:
        raise ValueError(f"Invalid address format: {address}")
    if port is None:
        return host, LAMP_PORT
    if not port.isdigit() or not 0 < int(port) < 65536:
        raise ValueError(f"Invalid port in address: {address}")
    return host, int(port)
