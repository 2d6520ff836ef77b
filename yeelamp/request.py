"""
Request encoding for the Yeelight LAN protocol.

A request is one JSON object on one line, e.g.
    {"id":16,"method":"set_hsv","params":[150,42,"smooth",350]}\r\n
The text is assembled by hand so the byte layout is exactly what the lamp
expects (no spaces, effect name quoted, duration bare).
"""

from .command import Command, CommandKind
from .constants import DEFAULT_SATURATION, ID_MODULUS, LINE_TERMINATOR
from .errors import InconsistentCommand, MissingParameter
from .log import info


def _params(command: Command) -> str:
    kind = command.kind
    if kind is CommandKind.TOGGLE:
        return ""

    if command.param_1 is None:
        raise MissingParameter(command, 1)

    if kind is CommandKind.SET_HSV:
        if command.param_2 is None:
            info(f"No saturation given for set_hsv, using {DEFAULT_SATURATION}")
            sat = DEFAULT_SATURATION
        else:
            sat = command.param_2.magnitude
        return f"{command.param_1.magnitude},{sat},{command.effect.render()}"

    return f"{command.param_1.magnitude},{command.effect.render()}"


def encode(command: Command, request_id: int) -> str:
    """Return the full wire text for `command` sent with `request_id`.

    Raises InconsistentCommand or MissingParameter; never returns a
    partial request.
    """
    if isinstance(request_id, bool) or not isinstance(request_id, int):
        raise TypeError(f"Request id must be an int, got {request_id!r}")
    if not 0 <= request_id < ID_MODULUS:
        raise ValueError(f"Request id {request_id} does not fit in 8 bits")
    if not command.is_consistent():
        raise InconsistentCommand(command)

    params = _params(command)
    return (
        f'{{"id":{request_id},"method":"{command.kind.method}","params":[{params}]}}'
        f"{LINE_TERMINATOR}"
    )
