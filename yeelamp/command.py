"""
Lamp commands: a command kind plus up to two parameter values and an effect.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .effect import Effect
from .errors import InconsistentCommand
from .values import Value, ValueKind


Shape = Tuple[Optional[ValueKind], Optional[ValueKind]]


class CommandKind(Enum):
    SET_CT_ABX = "SetCtAbx"
    SET_RGB = "SetRgb"
    SET_HSV = "SetHsv"
    SET_BRIGHT = "SetBright"
    TOGGLE = "Toggle"

    def associated(self) -> Shape:
        """Parameter kinds this command expects, in position order."""
        return _SHAPES[self]

    @property
    def method(self) -> str:
        """Method name on the wire, e.g. set_ct_abx."""
        return re.sub(r"(?<!^)(?=[A-Z])", "_", self.value).lower()


_SHAPES = {
    CommandKind.SET_CT_ABX: (ValueKind.COLOR_TEMP, None),
    CommandKind.SET_RGB: (ValueKind.RGB, None),
    CommandKind.SET_HSV: (ValueKind.HUE, ValueKind.SAT),
    CommandKind.SET_BRIGHT: (ValueKind.BRIGHT, None),
    CommandKind.TOGGLE: (None, None),
}


def _kind_of(param: Optional[Value]) -> Optional[ValueKind]:
    return param.kind if param is not None else None


@dataclass(frozen=True)
class Command:
    """A request to the lamp, not yet bound to an id.

    Construction does not check the parameter shape; `is_consistent()`
    does, and the encoder refuses inconsistent commands. Use `create()`
    or the per-kind constructors to fail early instead.
    """

    kind: CommandKind
    param_1: Optional[Value] = None
    param_2: Optional[Value] = None
    effect: Effect = field(default_factory=Effect.sudden)

    def actual_kinds(self) -> Shape:
        return (_kind_of(self.param_1), _kind_of(self.param_2))

    def is_consistent(self) -> bool:
        actual = self.actual_kinds()
        if actual == self.kind.associated():
            return True
        # set_hsv may leave out saturation; the encoder sends 100 for it.
        return self.kind is CommandKind.SET_HSV and actual == (ValueKind.HUE, None)

    @classmethod
    def create(
        cls,
        kind: CommandKind,
        param_1: Optional[Value] = None,
        param_2: Optional[Value] = None,
        effect: Optional[Effect] = None,
    ) -> "Command":
        """Build a command, raising InconsistentCommand if the shape is wrong."""
        cmd = cls(kind, param_1, param_2, effect if effect is not None else Effect.sudden())
        if not cmd.is_consistent():
            raise InconsistentCommand(cmd)
        return cmd

    @classmethod
    def set_ct_abx(cls, kelvin: int, effect: Optional[Effect] = None) -> "Command":
        return cls.create(CommandKind.SET_CT_ABX, Value(kelvin, ValueKind.COLOR_TEMP), None, effect)

    @classmethod
    def set_rgb(cls, rgb: int, effect: Optional[Effect] = None) -> "Command":
        return cls.create(CommandKind.SET_RGB, Value(rgb, ValueKind.RGB), None, effect)

    @classmethod
    def set_hsv(cls, hue: int, sat: Optional[int] = None, effect: Optional[Effect] = None) -> "Command":
        sat_value = Value(sat, ValueKind.SAT) if sat is not None else None
        return cls.create(CommandKind.SET_HSV, Value(hue, ValueKind.HUE), sat_value, effect)

    @classmethod
    def set_bright(cls, percent: int, effect: Optional[Effect] = None) -> "Command":
        return cls.create(CommandKind.SET_BRIGHT, Value(percent, ValueKind.BRIGHT), None, effect)

    @classmethod
    def toggle(cls) -> "Command":
        return cls.create(CommandKind.TOGGLE)
