"""Tolerant decoding: strings, numbers, booleans and null convert into one another."""

from __future__ import annotations

import math
from enum import Enum

from .config import _read_value
from .containers import _NUMBER_RE, _Scanner, _ScanError, _as_text, _parse_integer
from .values import ValueType, _to_float32

__all__ = ["FuzzyKind", "fuzzy_decode", "fuzzy_decode_empty_array"]

_NUMBER_CHARS = frozenset("0123456789+-.eE")


class FuzzyKind(Enum):
    """Target type of a tolerant decode."""

    STRING = "string"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    INT = "int"
    UINT = "uint"
    INT8 = "int8"
    UINT8 = "uint8"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"


# kind -> (bits, signed)
_INTEGER_SPECS = {
    FuzzyKind.INT: (64, True),
    FuzzyKind.UINT: (64, False),
    FuzzyKind.INT8: (8, True),
    FuzzyKind.UINT8: (8, False),
    FuzzyKind.INT16: (16, True),
    FuzzyKind.UINT16: (16, False),
    FuzzyKind.INT32: (32, True),
    FuzzyKind.UINT32: (32, False),
    FuzzyKind.INT64: (64, True),
    FuzzyKind.UINT64: (64, False),
}


def _what_is_next(scanner: _Scanner) -> ValueType:
    char = scanner.peek()
    if char == '"':
        return ValueType.STRING
    if char and char in "-0123456789":
        return ValueType.NUMBER
    if char == "n":
        return ValueType.NIL
    if char in ("t", "f"):
        return ValueType.BOOL
    if char == "[":
        return ValueType.ARRAY
    if char == "{":
        return ValueType.OBJECT
    return ValueType.INVALID


def _read_bool(scanner: _Scanner) -> bool:
    if scanner.peek() == "t":
        scanner.expect_literal("true")
        return True
    scanner.expect_literal("false")
    return False


def _read_float(text: str) -> float:
    end = 0
    while end < len(text) and text[end] in _NUMBER_CHARS:
        end += 1
    number = text[:end]
    if _NUMBER_RE.fullmatch(number) is None:
        raise _ScanError(f"readFloat64: invalid number {number!r}")
    value = float(number)
    if math.isinf(value):
        raise _ScanError(f"readFloat64: value out of range: {number}")
    return value


def _decode_string(scanner: _Scanner) -> str:
    kind = _what_is_next(scanner)
    if kind is ValueType.NUMBER:
        return scanner.capture()
    if kind is ValueType.STRING:
        return scanner.read_string()
    if kind is ValueType.NIL:
        scanner.skip()
        return ""
    scanner.fail("fuzzyStringDecoder", "not number or string")
    return ""


def _integer_text(scanner: _Scanner) -> str:
    kind = _what_is_next(scanner)
    if kind is ValueType.NUMBER:
        text = scanner.capture()
    elif kind is ValueType.STRING:
        text = scanner.read_string()
    elif kind is ValueType.BOOL:
        text = "1" if _read_bool(scanner) else "0"
    elif kind is ValueType.NIL:
        scanner.skip()
        text = "0"
    else:
        scanner.fail("fuzzyIntegerDecoder", "not number or string")
        text = ""
    return text or "0"


def _decode_integer(scanner: _Scanner, kind: FuzzyKind) -> int:
    bits, signed = _INTEGER_SPECS[kind]
    text = _integer_text(scanner)
    if "." in text:
        low = -(1 << (bits - 1)) if signed else 0
        high = (1 << (bits - 1)) - 1 if signed else (1 << bits) - 1
        value = _read_float(text)
        if value > float(high) or value < float(low):
            raise _ScanError(f"fuzzy decode {kind.value}: exceed range")
        result = int(value)
        if not low <= result <= high:
            raise _ScanError(f"fuzzy decode {kind.value}: exceed range")
        return result
    value, err = _parse_integer(text, bits, signed)
    if err is not None:
        raise err
    return value


def _decode_float(scanner: _Scanner, kind: FuzzyKind) -> float:
    where = "fuzzyFloat32Decoder" if kind is FuzzyKind.FLOAT32 else "fuzzyFloat64Decoder"
    next_kind = _what_is_next(scanner)
    if next_kind is ValueType.NUMBER:
        value = _read_float(scanner.capture())
    elif next_kind is ValueType.STRING:
        value = _read_float(scanner.read_string())
    elif next_kind is ValueType.BOOL:
        value = 1.0 if _read_bool(scanner) else 0.0
    elif next_kind is ValueType.NIL:
        scanner.skip()
        value = 0.0
    else:
        scanner.fail(where, "not number or string")
        value = 0.0
    return _to_float32(value) if kind is FuzzyKind.FLOAT32 else value


def _ensure_consumed(scanner: _Scanner) -> None:
    if scanner.peek():
        scanner.fail("Unmarshal", "there are bytes left after unmarshal")


def fuzzy_decode(data: str | bytes, kind: FuzzyKind) -> object:
    """Decode one JSON value as ``kind``, converting between strings, numbers, booleans and null."""
    scanner = _Scanner(_as_text(data))
    if kind is FuzzyKind.STRING:
        value: object = _decode_string(scanner)
    elif kind in (FuzzyKind.FLOAT32, FuzzyKind.FLOAT64):
        value = _decode_float(scanner, kind)
    else:
        value = _decode_integer(scanner, kind)
    _ensure_consumed(scanner)
    return value


def fuzzy_decode_empty_array(data: str | bytes) -> dict | None:
    """Decode a JSON object as a dict, reading any array in its place as an empty object."""
    scanner = _Scanner(_as_text(data))
    char = scanner.peek()
    if char == "[":
        scanner.skip()
        value: dict | None = {}
    elif char in ("{", "n"):
        value = _read_value(scanner, False)  # type: ignore[assignment]
    else:
        scanner.fail("ReadMapCB", "expect { or n")
        value = None
    _ensure_consumed(scanner)
    return value