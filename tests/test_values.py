"""Tests for validated parameter values."""

import pytest

from yeelamp.errors import ValidationError
from yeelamp.values import Value, ValueKind, describe_limits


LIMITS = {
    ValueKind.COLOR_TEMP: (1700, 6500),
    ValueKind.RGB: (0, 0xFFFFFF),
    ValueKind.HUE: (0, 359),
    ValueKind.SAT: (0, 100),
    ValueKind.BRIGHT: (0, 100),
}


@pytest.mark.parametrize("kind", list(ValueKind))
def test_limit_table(kind):
    assert Value.limit(kind) == LIMITS[kind]


@pytest.mark.parametrize("kind", list(ValueKind))
def test_bounds_are_inclusive(kind):
    low, high = Value.limit(kind)
    assert Value(low, kind).magnitude == low
    assert Value(high, kind).magnitude == high


@pytest.mark.parametrize("kind", list(ValueKind))
def test_just_outside_bounds_rejected(kind):
    low, high = Value.limit(kind)
    for bad in (low - 1, high + 1):
        with pytest.raises(ValidationError) as excinfo:
            Value(bad, kind)
        assert excinfo.value.kind is kind
        assert excinfo.value.magnitude == bad
        assert excinfo.value.allowed == (low, high)


def test_validation_error_is_a_value_error():
    with pytest.raises(ValueError, match="out of range"):
        Value(15000, ValueKind.COLOR_TEMP)


def test_non_int_magnitude_rejected():
    with pytest.raises(TypeError):
        Value(50.5, ValueKind.BRIGHT)
    with pytest.raises(TypeError):
        Value(True, ValueKind.BRIGHT)


def test_value_is_immutable():
    v = Value(3500, ValueKind.COLOR_TEMP)
    with pytest.raises(AttributeError):
        v.magnitude = 4000
    with pytest.raises(AttributeError):
        v._magnitude = 4000
    assert v.magnitude == 3500


def test_equality_and_hash():
    assert Value(42, ValueKind.SAT) == Value(42, ValueKind.SAT)
    assert Value(42, ValueKind.SAT) != Value(42, ValueKind.BRIGHT)
    assert len({Value(42, ValueKind.SAT), Value(42, ValueKind.SAT)}) == 1


def test_display():
    assert str(Value(3500, ValueKind.COLOR_TEMP)) == "3500K"
    assert str(Value(0xDEADFE, ValueKind.RGB)) == "#DEADFE"
    assert str(Value(80, ValueKind.BRIGHT)) == "80"


def test_describe_limits_lists_every_kind():
    text = describe_limits()
    assert "color temperature: 1700-6500" in text
    assert "rgb: 0x000000-0xFFFFFF" in text
    assert len(text.splitlines()) == len(ValueKind)
