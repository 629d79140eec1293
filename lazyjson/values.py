"""Scalar value wrappers: the generic ``Any`` interface and its simple implementations."""

from __future__ import annotations

import math
import struct
from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum
from typing import Any as _TypingAny
from typing import Optional, Protocol, Sequence

__all__ = [
    "ValueType",
    "Any",
    "InvalidAny",
    "NilAny",
    "TrueAny",
    "FalseAny",
    "FloatAny",
    "IntAny",
    "StringAny",
    "new_invalid_any",
    "wrap_int32",
    "wrap_int64",
    "wrap_uint32",
    "wrap_uint64",
    "wrap_float64",
    "wrap_string",
]


class _TextSink(Protocol):
    def write(self, text: str) -> _TypingAny: ...


class ValueType(Enum):
    """Kind of JSON value an ``Any`` holds."""

    INVALID = 0
    STRING = 1
    NUMBER = 2
    NIL = 3
    BOOL = 4
    ARRAY = 5
    OBJECT = 6


_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_UINT64_MAX = (1 << 64) - 1


def _wrap_signed(value: int, bits: int) -> int:
    mask = (1 << bits) - 1
    value &= mask
    if value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def _wrap_unsigned(value: int, bits: int) -> int:
    return value & ((1 << bits) - 1)


def _to_float32(value: float) -> float:
    if math.isnan(value) or math.isinf(value):
        return value
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _float_to_signed(value: float, bits: int) -> int:
    lowest = -(1 << (bits - 1))
    if not math.isfinite(value):
        return lowest
    truncated = int(value)
    if lowest <= truncated < (1 << (bits - 1)):
        return truncated
    return lowest


def _format_path(path: Sequence[object]) -> str:
    def one(item: object) -> str:
        if isinstance(item, bool):
            return "true" if item else "false"
        return str(item)

    return "[" + " ".join(one(p) for p in path) + "]"


def _shortest_digits(value: float) -> tuple[str, int]:
    """Return the shortest round-trip digits of ``abs(value)`` and its decimal exponent."""
    decimal_tuple = Decimal(repr(abs(value))).as_tuple()
    digits = list(decimal_tuple.digits)
    exponent = int(decimal_tuple.exponent)
    while len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1
    if digits == [0]:
        return "0", 0
    return "".join(map(str, digits)), exponent + len(digits) - 1


def _format_exponent(value: float, marker: str) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    sign = "-" if math.copysign(1.0, value) < 0 else ""
    digits, exp10 = _shortest_digits(value)
    mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
    exp_sign = "+" if exp10 >= 0 else "-"
    return f"{sign}{mantissa}{marker}{exp_sign}{abs(exp10):02d}"


def _format_fixed(value: float) -> str:
    sign = "-" if math.copysign(1.0, value) < 0 else ""
    digits, exp10 = _shortest_digits(value)
    if exp10 >= len(digits) - 1:
        text = digits + "0" * (exp10 - len(digits) + 1)
    elif exp10 >= 0:
        text = digits[: exp10 + 1] + "." + digits[exp10 + 1 :]
    else:
        text = "0." + "0" * (-exp10 - 1) + digits
    return sign + text


def _json_float(value: float) -> str:
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"unsupported value: {value}")
    magnitude = abs(value)
    if magnitude != 0 and (magnitude < 1e-6 or magnitude >= 1e21):
        return _format_exponent(value, "e")
    return _format_fixed(value)


_SHORT_ESCAPES = {'"': '\\"', "\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t"}


def _json_string(text: str) -> str:
    parts = []
    for char in text:
        if char in _SHORT_ESCAPES:
            parts.append(_SHORT_ESCAPES[char])
        elif ord(char) < 0x20:
            parts.append(f"\\u{ord(char):04x}")
        else:
            parts.append(char)
    return '"' + "".join(parts) + '"'


class Any(ABC):
    """Generic representation of a JSON value with lenient conversions."""

    @abstractmethod
    def value_type(self) -> ValueType:
        """Kind of value held."""

    def last_error(self) -> Optional[Exception]:
        """Error recorded by the last operation, if any."""
        return None

    def must_be_valid(self) -> "Any":
        """Return self, or raise if the value is invalid."""
        return self

    @abstractmethod
    def to_bool(self) -> bool: ...

    @abstractmethod
    def to_int64(self) -> int: ...

    @abstractmethod
    def to_uint64(self) -> int: ...

    @abstractmethod
    def to_float64(self) -> float: ...

    @abstractmethod
    def to_string(self) -> str: ...

    @abstractmethod
    def get_interface(self) -> object:
        """The plain Python value held."""

    @abstractmethod
    def write_to(self, stream: _TextSink) -> None:
        """Write the value as JSON text to ``stream``."""

    def to_int(self) -> int:
        return self.to_int64()

    def to_int32(self) -> int:
        return _wrap_signed(self.to_int64(), 32)

    def to_uint(self) -> int:
        return self.to_uint64()

    def to_uint32(self) -> int:
        return _wrap_unsigned(self.to_uint64(), 32)

    def to_float32(self) -> float:
        return _to_float32(self.to_float64())

    def get(self, *args: object) -> "Any":
        """Look up a nested value by path; simple values have none."""
        return InvalidAny(ValueError(f"GetIndex {_format_path(args)} from simple value"))

    def size(self) -> int:
        return 0

    def keys(self) -> list[str]:
        return []

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get_interface()!r})"


class InvalidAny(Any):
    """A value that could not be found or parsed; carries the error."""

    def __init__(self, err: Optional[Exception] = None) -> None:
        self.err = err

    def value_type(self) -> ValueType:
        return ValueType.INVALID

    def last_error(self) -> Optional[Exception]:
        return self.err

    def must_be_valid(self) -> Any:
        raise self.err if self.err is not None else ValueError("invalid value")

    def to_bool(self) -> bool:
        return False

    def to_int64(self) -> int:
        return 0

    def to_uint64(self) -> int:
        return 0

    def to_float64(self) -> float:
        return 0.0

    def to_string(self) -> str:
        return ""

    def get_interface(self) -> object:
        return None

    def write_to(self, stream: _TextSink) -> None:
        pass

    def get(self, *args: object) -> Any:
        path = _format_path(args)
        if self.err is None:
            return InvalidAny(ValueError(f"get {path} from invalid"))
        return InvalidAny(ValueError(f"{self.err}, get {path} from invalid"))

    def __repr__(self) -> str:
        return f"InvalidAny({self.err!r})"


def new_invalid_any(path: Sequence[object]) -> InvalidAny:
    """An invalid value reporting that ``path`` was not found."""
    return InvalidAny(ValueError(f"{_format_path(list(path))} not found"))


class NilAny(Any):
    """JSON null."""

    def value_type(self) -> ValueType:
        return ValueType.NIL

    def to_bool(self) -> bool:
        return False

    def to_int64(self) -> int:
        return 0

    def to_uint64(self) -> int:
        return 0

    def to_float64(self) -> float:
        return 0.0

    def to_string(self) -> str:
        return ""

    def get_interface(self) -> object:
        return None

    def write_to(self, stream: _TextSink) -> None:
        stream.write("null")


class TrueAny(Any):
    """JSON true."""

    def value_type(self) -> ValueType:
        return ValueType.BOOL

    def to_bool(self) -> bool:
        return True

    def to_int64(self) -> int:
        return 1

    def to_uint64(self) -> int:
        return 1

    def to_float64(self) -> float:
        return 1.0

    def to_string(self) -> str:
        return "true"

    def get_interface(self) -> object:
        return True

    def write_to(self, stream: _TextSink) -> None:
        stream.write("true")


class FalseAny(Any):
    """JSON false."""

    def value_type(self) -> ValueType:
        return ValueType.BOOL

    def to_bool(self) -> bool:
        return False

    def to_int64(self) -> int:
        return 0

    def to_uint64(self) -> int:
        return 0

    def to_float64(self) -> float:
        return 0.0

    def to_string(self) -> str:
        return "false"

    def get_interface(self) -> object:
        return False

    def write_to(self, stream: _TextSink) -> None:
        stream.write("false")


class FloatAny(Any):
    """A floating point number."""

    def __init__(self, val: float) -> None:
        self.val = float(val)

    def value_type(self) -> ValueType:
        return ValueType.NUMBER

    def to_bool(self) -> bool:
        return self.val != 0

    def to_int64(self) -> int:
        return _float_to_signed(self.val, 64)

    def to_int32(self) -> int:
        return _float_to_signed(self.val, 32)

    def to_uint64(self) -> int:
        if not self.val > 0:
            return 0
        if math.isfinite(self.val) and int(self.val) <= _UINT64_MAX:
            return int(self.val)
        return 1 << 63

    def to_uint32(self) -> int:
        if not self.val > 0:
            return 0
        return _wrap_unsigned(_float_to_signed(self.val, 64), 32)

    def to_float64(self) -> float:
        return self.val

    def to_string(self) -> str:
        return _format_exponent(self.val, "E")

    def get_interface(self) -> object:
        return self.val

    def write_to(self, stream: _TextSink) -> None:
        stream.write(_json_float(self.val))


class IntAny(Any):
    """An integer number."""

    def __init__(self, val: int) -> None:
        self.val = int(val)

    def value_type(self) -> ValueType:
        return ValueType.NUMBER

    def to_bool(self) -> bool:
        return self.val != 0

    def to_int64(self) -> int:
        return _wrap_signed(self.val, 64)

    def to_uint64(self) -> int:
        return _wrap_unsigned(self.val, 64)

    def to_float64(self) -> float:
        return float(self.val)

    def to_string(self) -> str:
        return str(self.val)

    def get_interface(self) -> object:
        return self.val

    def write_to(self, stream: _TextSink) -> None:
        stream.write(str(self.val))


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _leading_digits(text: str, start: int) -> str:
    end = start
    while end < len(text) and _is_digit(text[end]):
        end += 1
    return text[start:end]


class StringAny(Any):
    """A string, with lenient numeric and boolean conversions."""

    def __init__(self, val: str) -> None:
        self.val = val

    def value_type(self) -> ValueType:
        return ValueType.STRING

    def get(self, *args: object) -> Any:
        if not args:
            return self
        return super().get(*args)

    def to_bool(self) -> bool:
        if self.val == "0":
            return False
        return any(char not in " \n\r\t" for char in self.val)

    def to_int64(self) -> int:
        if not self.val:
            return 0
        start = 1 if self.val[0] in "+-" else 0
        sign = -1 if self.val[0] == "-" else 1
        digits = _leading_digits(self.val, start)
        parsed = min(int(digits), _INT64_MAX) if digits else 0
        return sign * parsed

    def to_uint64(self) -> int:
        if not self.val or self.val[0] == "-":
            return 0
        start = 1 if self.val[0] == "+" else 0
        digits = _leading_digits(self.val, start)
        return min(int(digits), _UINT64_MAX) if digits else 0

    def to_float64(self) -> float:
        if not self.val:
            return 0.0
        first = self.val[0]
        if first not in "+-" and not _is_digit(first):
            return 0.0
        end = 1
        for index in range(1, len(self.val)):
            char = self.val[index]
            if char in ".eE+-" or _is_digit(char):
                end = index + 1
            else:
                end = index
                break
        try:
            return float(self.val[:end])
        except ValueError:
            return 0.0

    def to_string(self) -> str:
        return self.val

    def get_interface(self) -> object:
        return self.val

    def write_to(self, stream: _TextSink) -> None:
        stream.write(_json_string(self.val))


def wrap_int32(val: int) -> IntAny:
    """Wrap an integer, truncated to 32-bit signed."""
    return IntAny(_wrap_signed(int(val), 32))


def wrap_int64(val: int) -> IntAny:
    """Wrap an integer, truncated to 64-bit signed."""
    return IntAny(_wrap_signed(int(val), 64))


def wrap_uint32(val: int) -> IntAny:
    """Wrap an integer, truncated to 32-bit unsigned."""
    return IntAny(_wrap_unsigned(int(val), 32))


def wrap_uint64(val: int) -> IntAny:
    """Wrap an integer, truncated to 64-bit unsigned."""
    return IntAny(_wrap_unsigned(int(val), 64))


def wrap_float64(val: float) -> FloatAny:
    """Wrap a float."""
    return FloatAny(val)


def wrap_string(val: str) -> StringAny:
    """Wrap a string."""
    return StringAny(val)