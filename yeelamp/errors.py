"""
Exception hierarchy for the Yeelight control library.

Every failure in the library is one of these; callers can catch
YeelampError to handle them all.
"""

from typing import Optional, Tuple


class YeelampError(Exception):
    """Base class for all library errors."""


class ValidationError(YeelampError, ValueError):
    """A magnitude lies outside the range of its value kind."""

    def __init__(self, kind, magnitude: int, allowed: Tuple[int, int]):
        self.kind = kind
        self.magnitude = magnitude
        self.allowed = allowed
        low, high = allowed
        super().__init__(
            f"{kind.label} value {magnitude} out of range (allowed {low}-{high})"
        )


class EncodingError(YeelampError):
    """A command could not be turned into a request."""


class InconsistentCommand(EncodingError):
    def __init__(self, command):
        self.command = command
        expected = ", ".join(
            k.label if k is not None else "none" for k in command.kind.associated()
        )
        actual = ", ".join(
            k.label if k is not None else "none" for k in command.actual_kinds()
        )
        super().__init__(
            f"{command.kind.method} expects parameters ({expected}), got ({actual})"
        )


class MissingParameter(EncodingError):
    def __init__(self, command, position: int):
        self.command = command
        self.position = position
        super().__init__(f"{command.kind.method} is missing parameter {position}")


class ConnectError(YeelampError):
    """Connecting to the lamp failed; `attempts` dials were made."""

    def __init__(self, message: str, attempts: int = 0):
        self.attempts = attempts
        super().__init__(message)


class SendError(YeelampError):
    """A command could not be delivered. The cause is chained."""


class NotConnected(SendError):
    pass


class ResponseTooLong(YeelampError):
    """The lamp sent more data than a single response line may hold."""


class CorrelationError(YeelampError):
    """A response id could not be read."""


class NoIdFound(CorrelationError):
    pass


class MalformedId(CorrelationError):
    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"Response id {raw!r} is not an 8-bit id")


class ConfigError(YeelampError):
    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(f"{key}: {message}" if key else message)
