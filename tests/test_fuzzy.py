import struct

import pytest

from lazyjson.fuzzy import FuzzyKind, fuzzy_decode, fuzzy_decode_empty_array

INTEGER_KINDS = [
    FuzzyKind.INT,
    FuzzyKind.UINT,
    FuzzyKind.INT8,
    FuzzyKind.UINT8,
    FuzzyKind.INT16,
    FuzzyKind.UINT16,
    FuzzyKind.INT32,
    FuzzyKind.UINT32,
    FuzzyKind.INT64,
    FuzzyKind.UINT64,
]


def _float32(value):
    return struct.unpack("f", struct.pack("f", value))[0]


@pytest.mark.parametrize(
    "data, expected",
    [('"100"', "100"), ("10", "10"), ("10.1", "10.1"), ('"10.1"', "10.1"), ("null", "")],
)
def test_any_to_string(data, expected):
    assert fuzzy_decode(data, FuzzyKind.STRING) == expected


@pytest.mark.parametrize("data", ["{}", "[]"])
def test_any_to_string_rejects_containers(data):
    with pytest.raises(ValueError):
        fuzzy_decode(data, FuzzyKind.STRING)


@pytest.mark.parametrize("kind", INTEGER_KINDS)
@pytest.mark.parametrize(
    "data, expected",
    [('"100"', 100), ('"10.1"', 10), ("10.1", 10), ("10", 10), ("false", 0), ("true", 1)],
)
def test_any_to_integer(kind, data, expected):
    assert fuzzy_decode(data, kind) == expected


@pytest.mark.parametrize("kind", INTEGER_KINDS)
@pytest.mark.parametrize("data", ["{}", "[]", "1234512345123451234512345.0"])
def test_any_to_integer_errors(kind, data):
    with pytest.raises(ValueError):
        fuzzy_decode(data, kind)


def test_int64_specific_cases():
    assert fuzzy_decode('""', FuzzyKind.INT64) == 0
    assert fuzzy_decode("-10", FuzzyKind.INT64) == -10


@pytest.mark.parametrize("kind", [FuzzyKind.UINT64, FuzzyKind.UINT32, FuzzyKind.UINT16])
def test_negative_to_unsigned_fails(kind):
    with pytest.raises(ValueError):
        fuzzy_decode("-10", kind)


@pytest.mark.parametrize(
    "data, expected",
    [('"100"', 100.0), ('"10.1"', 10.1), ("10.1", 10.1), ("10", 10.0), ("false", 0.0), ("true", 1.0)],
)
def test_any_to_float64(data, expected):
    assert fuzzy_decode(data, FuzzyKind.FLOAT64) == expected


@pytest.mark.parametrize(
    "data, expected",
    [('"100"', 100.0), ('"10.1"', 10.1), ("10.1", 10.1), ("10", 10.0), ("false", 0.0), ("true", 1.0)],
)
def test_any_to_float32(data, expected):
    assert fuzzy_decode(data, FuzzyKind.FLOAT32) == _float32(expected)


@pytest.mark.parametrize("kind", [FuzzyKind.FLOAT32, FuzzyKind.FLOAT64])
@pytest.mark.parametrize("data", ["{}", "[]"])
def test_any_to_float_errors(kind, data):
    with pytest.raises(ValueError):
        fuzzy_decode(data, kind)


def test_empty_array_as_map():
    assert fuzzy_decode_empty_array("[]") == {}


def test_object_decodes_normally():
    assert fuzzy_decode_empty_array('{"a": "b"}') == {"a": "b"}


def test_empty_array_rejects_scalars():
    with pytest.raises(ValueError):
        fuzzy_decode_empty_array("12")


def test_bad_case():
    text = """
{
    "extra_type": 181760,
    "combo_type": 0,
    "trigger_time_ms": 1498800398000,
    "_create_time": "2017-06-16 11:21:39",
    "_msg_type": 41000
}
"""
    decoded = fuzzy_decode_empty_array(text)
    assert decoded["extra_type"] == 181760
    assert fuzzy_decode("181760", FuzzyKind.UINT64) == 181760


@pytest.mark.parametrize(
    "kind, expected",
    [
        (FuzzyKind.STRING, ""),
        (FuzzyKind.INT, 0),
        (FuzzyKind.FLOAT32, 0.0),
        (FuzzyKind.FLOAT64, 0.0),
    ],
)
def test_null_decodes_to_zero_value(kind, expected):
    assert fuzzy_decode(b"null", kind) == expected


def test_trailing_bytes_rejected():
    with pytest.raises(ValueError):
        fuzzy_decode("10 11", FuzzyKind.INT)