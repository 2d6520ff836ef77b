"""
Transition effects: the lamp either jumps to the new state or fades to it.
"""

from dataclasses import dataclass
from typing import Optional

from .constants import MIN_SMOOTH_MS
from .log import info


@dataclass(frozen=True)
class Effect:
    """How the lamp transitions to a new state.

    Build one with Effect.sudden() or Effect.smooth(duration_ms). The
    fields are private so a smooth duration below 30 ms cannot exist.
    """

    _duration_ms: Optional[int] = None

    @classmethod
    def sudden(cls) -> "Effect":
        return cls()

    @classmethod
    def smooth(cls, duration_ms: float) -> "Effect":
        """Smooth transition over `duration_ms` milliseconds.

        Zero gives a sudden effect. Positive durations under 30 ms,
        fractions of a millisecond included, are raised to 30 ms. Longer
        ones are rounded to whole milliseconds.
        """
        if duration_ms < 0:
            raise ValueError(f"Transition duration cannot be negative: {duration_ms}")
        if duration_ms == 0:
            info("Zero duration converted to sudden effect")
            return cls.sudden()
        if duration_ms < MIN_SMOOTH_MS:
            info(f"Clamped smooth effect duration to {MIN_SMOOTH_MS} ms")
            return cls(MIN_SMOOTH_MS)
        return cls(round(duration_ms))

    @property
    def is_smooth(self) -> bool:
        return self._duration_ms is not None

    @property
    def duration_ms(self) -> Optional[int]:
        """Transition length, or None for a sudden effect."""
        return self._duration_ms

    def render(self) -> str:
        """Wire form: `"sudden"` or `"smooth",<ms>`."""
        if self._duration_ms is None:
            return '"sudden"'
        return f'"smooth",{self._duration_ms}'

    def __repr__(self):
        if self._duration_ms is None:
            return "Effect.sudden()"
        return f"Effect.smooth({self._duration_ms})"
