import io
import math

import pytest

from lazyjson.values import (
    FalseAny,
    FloatAny,
    IntAny,
    InvalidAny,
    NilAny,
    StringAny,
    TrueAny,
    ValueType,
    new_invalid_any,
    wrap_float64,
    wrap_int32,
    wrap_int64,
    wrap_string,
    wrap_uint32,
    wrap_uint64,
)


def written(value):
    sink = io.StringIO()
    value.write_to(sink)
    return sink.getvalue()


def test_invalid_any_conversions_are_zero():
    invalid = IntAny(1).get(0.3)
    assert invalid.value_type() is ValueType.INVALID
    assert invalid.get_interface() is None
    assert invalid.to_bool() is False
    assert invalid.to_int() == 0
    assert invalid.to_int32() == 0
    assert invalid.to_int64() == 0
    assert invalid.to_uint() == 0
    assert invalid.to_uint32() == 0
    assert invalid.to_uint64() == 0
    assert invalid.to_float32() == 0.0
    assert invalid.to_float64() == 0.0
    assert invalid.to_string() == ""
    assert invalid.get(0.1).get(1).value_type() is ValueType.INVALID


def test_invalid_error_messages_chain():
    invalid = IntAny(1).get(0.3)
    assert str(invalid.last_error()) == "GetIndex [0.3] from simple value"
    chained = invalid.get(1)
    assert str(chained.last_error()) == "GetIndex [0.3] from simple value, get [1] from invalid"
    assert str(InvalidAny().get("a").last_error()) == "get [a] from invalid"


def test_new_invalid_any_message_and_must_be_valid():
    invalid = new_invalid_any(["Colors", 5])
    assert str(invalid.last_error()) == "[Colors 5] not found"
    with pytest.raises(ValueError, match="not found"):
        invalid.must_be_valid()
    assert written(invalid) == ""


def test_valid_values_must_be_valid_returns_self():
    value = StringAny("x")
    assert value.must_be_valid() is value
    assert value.last_error() is None


def test_nil_and_bools():
    assert NilAny().value_type() is ValueType.NIL
    assert written(NilAny()) == "null"
    assert NilAny().get_interface() is None
    assert TrueAny().to_int() == 1
    assert TrueAny().to_float64() == 1.0
    assert TrueAny().to_string() == "true"
    assert written(TrueAny()) == "true"
    assert FalseAny().to_uint32() == 0
    assert FalseAny().to_string() == "false"
    assert written(FalseAny()) == "false"
    assert TrueAny().value_type() is ValueType.BOOL


def test_simple_values_have_no_children():
    value = TrueAny()
    assert value.size() == 0
    assert value.keys() == []
    assert value.get("a").value_type() is ValueType.INVALID


@pytest.mark.parametrize(
    "wrapper, given, expected",
    [
        (wrap_int32, 2**31, -(2**31)),
        (wrap_int32, -1, -1),
        (wrap_int64, 2**63, -(2**63)),
        (wrap_uint32, -1, 4294967295),
        (wrap_uint64, -1, 2**64 - 1),
    ],
)
def test_wrappers_truncate(wrapper, given, expected):
    assert wrapper(given).get_interface() == expected


def test_int_any_conversions():
    value = IntAny(-1)
    assert value.to_uint32() == 4294967295
    assert value.to_uint64() == 2**64 - 1
    assert value.to_int32() == -1
    assert value.to_bool() is True
    assert IntAny(0).to_bool() is False
    assert wrap_uint64(2**64 - 1).to_int64() == -1
    assert IntAny(4294967296 + 5).to_int32() == 5
    assert IntAny(42).to_string() == "42"
    assert written(IntAny(-9223372036854775808)) == "-9223372036854775808"


def test_float_any_integer_conversions():
    assert FloatAny(3.9).to_int() == 3
    assert FloatAny(-3.9).to_int() == -3
    assert FloatAny(-1.0).to_uint() == 0
    assert FloatAny(7.5).to_uint32() == 7
    assert FloatAny(0.0).to_bool() is False
    assert FloatAny(0.5).to_bool() is True


def test_float_any_float32_rounding():
    assert FloatAny(10.1).to_float32() == pytest.approx(10.1, rel=1e-6)
    assert FloatAny(10.1).to_float32() != 10.1
    assert FloatAny(1e300).to_float32() == math.inf


@pytest.mark.parametrize(
    "given, expected",
    [
        (1.5, "1.5E+00"),
        (100.0, "1E+02"),
        (0.1, "1E-01"),
        (123.456, "1.23456E+02"),
        (0.0, "0E+00"),
        (-2.5, "-2.5E+00"),
        (math.inf, "+Inf"),
        (math.nan, "NaN"),
    ],
)
def test_float_any_to_string(given, expected):
    assert FloatAny(given).to_string() == expected


@pytest.mark.parametrize(
    "given, expected",
    [
        (0.0, "0"),
        (1.0, "1"),
        (-1.0, "-1"),
        (1.001, "1.001"),
        (1.234567, "1.234567"),
        (float(0xFFFFFFF), "268435455"),
        (0.0000001, "1e-07"),
        (1e21, "1e+21"),
        (1e20, "100000000000000000000"),
    ],
)
def test_float_any_write(given, expected):
    assert written(wrap_float64(given)) == expected


def test_float_any_write_rejects_nan():
    with pytest.raises(ValueError, match="unsupported value"):
        written(FloatAny(math.nan))


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", False),
        ("0", False),
        ("  \n\t", False),
        ("false", True),
        (" a", True),
    ],
)
def test_string_to_bool(text, expected):
    assert StringAny(text).to_bool() is expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123true", 123),
        ("-12abc", -12),
        ("+7", 7),
        ("", 0),
        ("-", 0),
        ("abc", 0),
        ("99999999999999999999", 2**63 - 1),
    ],
)
def test_string_to_int64(text, expected):
    assert StringAny(text).to_int64() == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("-5", 0),
        ("+7", 7),
        ("12x", 12),
        ("999999999999999999999", 2**64 - 1),
    ],
)
def test_string_to_uint64(text, expected):
    assert StringAny(text).to_uint64() == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("-12.12xxa", -12.12),
        ("123true", 123.0),
        ("1e3x", 1000.0),
        ("abc", 0.0),
        ("", 0.0),
        ("1+2", 0.0),
    ],
)
def test_string_to_float64(text, expected):
    assert StringAny(text).to_float64() == expected


def test_string_to_int32_wraps():
    assert StringAny("4294967301").to_int32() == 5


def test_string_get_without_path_returns_self():
    value = wrap_string("hello")
    assert value.get() is value
    assert value.get(0).value_type() is ValueType.INVALID


def test_string_write_escapes():
    assert written(StringAny('a"b\\c\n\x01')) == '"a\\"b\\\\c\\n\\u0001"'
    assert written(StringAny("中文")) == '"中文"'
    assert written(StringAny("<>")) == '"<>"'