"""
Validated parameter values for lamp commands.
"""

from enum import Enum
from typing import Tuple

from .errors import ValidationError


class ValueKind(Enum):
    COLOR_TEMP = "color temperature"
    RGB = "rgb"
    HUE = "hue"
    SAT = "saturation"
    BRIGHT = "brightness"

    @property
    def label(self) -> str:
        return self.value


# Inclusive ranges accepted by the lamp for each kind.
_LIMITS = {
    ValueKind.COLOR_TEMP: (1700, 6500),
    ValueKind.RGB: (0, 0xFFFFFF),
    ValueKind.HUE: (0, 359),
    ValueKind.SAT: (0, 100),
    ValueKind.BRIGHT: (0, 100),
}


class Value:
    """A magnitude tagged with its kind, always within the kind's range.

    Instances are immutable; the constructor is the only way to make one
    and it raises ValidationError for out-of-range magnitudes.
    """

    __slots__ = ("_magnitude", "_kind")

    def __init__(self, magnitude: int, kind: ValueKind):
        if isinstance(magnitude, bool) or not isinstance(magnitude, int):
            raise TypeError(f"{kind.label} value must be an int, got {magnitude!r}")
        low, high = Value.limit(kind)
        if not low <= magnitude <= high:
            raise ValidationError(kind, magnitude, (low, high))
        object.__setattr__(self, "_magnitude", magnitude)
        object.__setattr__(self, "_kind", kind)

    @staticmethod
    def limit(kind: ValueKind) -> Tuple[int, int]:
        """Return the inclusive (low, high) range for a kind."""
        return _LIMITS[kind]

    @property
    def magnitude(self) -> int:
        return self._magnitude

    @property
    def kind(self) -> ValueKind:
        return self._kind

    def __setattr__(self, name, value):
        raise AttributeError("Value is immutable")

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return (self._magnitude, self._kind) == (other._magnitude, other._kind)

    def __hash__(self):
        return hash((self._magnitude, self._kind))

    def __repr__(self):
        return f"Value({self._magnitude}, {self._kind})"

    def __str__(self):
        if self._kind is ValueKind.RGB:
            return f"#{self._magnitude:06X}"
        if self._kind is ValueKind.COLOR_TEMP:
            return f"{self._magnitude}K"
        return str(self._magnitude)


def describe_limits() -> str:
    """One line per kind, used for CLI help."""
    lines = []
    for kind in ValueKind:
        low, high = Value.limit(kind)
        if kind is ValueKind.RGB:
            lines.append(f"{kind.label}: 0x{low:06X}-0x{high:06X}")
        else:
            lines.append(f"{kind.label}: {low}-{high}")
    return "\n".join(lines)
