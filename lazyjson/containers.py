"""Container values: lazily parsed JSON text plus wrappers around Python lists, dicts and dataclasses."""

from __future__ import annotations

import base64
import dataclasses
import io
import math
import re
from collections.abc import Iterator, Mapping, Sequence
from typing import Optional

from .values import (
    Any,
    FalseAny,
    FloatAny,
    IntAny,
    InvalidAny,
    NilAny,
    StringAny,
    TrueAny,
    ValueType,
    _json_float,
    new_invalid_any,
)

__all__ = [
    "NumberLazyAny",
    "ArrayLazyAny",
    "ObjectLazyAny",
    "ArrayAny",
    "MapAny",
    "ObjectAny",
    "wrap",
    "read_any",
    "locate_path",
]

# Path element that maps the rest of the path over every element or field.
_WILDCARD = "*"

_WHITESPACE = " \t\n\r"
_NUMBER_CHARS = frozenset("0123456789+-.eE")
_NUMBER_START = frozenset("-0123456789")
_NUMBER_RE = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}
_HTML_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


class _ScanError(ValueError):
    """Malformed JSON input."""


class _Scanner:
    """Cursor over JSON text that reads, skips and captures values."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def fail(self, where: str, message: str) -> None:
        raise _ScanError(f"{where}: {message}, error found in #{self.pos} byte")

    def peek(self) -> str:
        text, pos = self.text, self.pos
        while pos < len(text) and text[pos] in _WHITESPACE:
            pos += 1
        self.pos = pos
        return text[pos] if pos < len(text) else ""

    def next_token(self) -> str:
        char = self.peek()
        if char:
            self.pos += 1
        return char

    def expect_literal(self, word: str) -> None:
        self.peek()
        if not self.text.startswith(word, self.pos):
            self.fail("readLiteral", f"expect {word}")
        self.pos += len(word)

    def capture(self) -> str:
        """Skip the next value and return its exact text."""
        self.peek()
        start = self.pos
        self.skip()
        return self.text[start : self.pos]

    def skip(self) -> None:
        char = self.peek()
        if not char:
            self.fail("Skip", "unexpected end of input")
        if char == '"':
            self.read_string()
        elif char in _NUMBER_START:
            self.skip_number()
        elif char == "{":
            for _ in self.iter_object():
                self.skip()
        elif char == "[":
            for _ in self.iter_array():
                self.skip()
        elif char == "t":
            self.expect_literal("true")
        elif char == "f":
            self.expect_literal("false")
        elif char == "n":
            self.expect_literal("null")
        else:
            self.fail("Skip", f"do not know how to skip: {char!r}")

    def skip_number(self) -> None:
        text = self.text
        start = end = self.pos
        while end < len(text) and text[end] in _NUMBER_CHARS:
            end += 1
        if start == end or _NUMBER_RE.fullmatch(text, start, end) is None:
            self.fail("skipNumber", f"invalid number {text[start:end]!r}")
        self.pos = end

    def read_string(self) -> str:
        if self.next_token() != '"':
            self.fail("readString", 'expects "')
        text = self.text
        parts: list[str] = []
        pos = self.pos
        while True:
            if pos >= len(text):
                self.pos = pos
                self.fail("readString", "incomplete string")
            char = text[pos]
            if char == '"':
                self.pos = pos + 1
                return "".join(parts)
            if char == "\\":
                pos = self._read_escape(pos + 1, parts)
                continue
            if char < " ":
                self.pos = pos
                self.fail("readString", f"invalid control character {char!r} in string")
            parts.append(char)
            pos += 1

    def _read_escape(self, pos: int, parts: list[str]) -> int:
        text = self.text
        if pos >= len(text):
            self.pos = pos
            self.fail("readEscapedChar", "incomplete escape")
        char = text[pos]
        if char in _SIMPLE_ESCAPES:
            parts.append(_SIMPLE_ESCAPES[char])
            return pos + 1
        if char != "u":
            self.pos = pos
            self.fail("readEscapedChar", f"invalid escape char after \\: {char!r}")
        code = self._hex4(pos + 1)
        pos += 5
        if 0xD800 <= code < 0xDC00:
            if text.startswith("\\u", pos):
                low = self._hex4(pos + 2)
                if 0xDC00 <= low < 0xE000:
                    parts.append(chr(0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)))
                    return pos + 6
            parts.append("\ufffd")
            return pos
        if 0xDC00 <= code < 0xE000:
            parts.append("\ufffd")
            return pos
        parts.append(chr(code))
        return pos

    def _hex4(self, pos: int) -> int:
        chunk = self.text[pos : pos + 4]
        if len(chunk) < 4 or not all(char in _HEX_DIGITS for char in chunk):
            self.pos = pos
            self.fail("readU4", f"expects four hex digits, found {chunk!r}")
        return int(chunk, 16)

    def iter_object(self) -> Iterator[str]:
        """Yield each field name; the caller consumes the value before resuming."""
        char = self.next_token()
        if char == "n":
            self.pos -= 1
            self.expect_literal("null")
            return
        if char != "{":
            self.fail("ReadObject", "expect { or n")
        char = self.next_token()
        if char == "}":
            return
        while True:
            if char != '"':
                self.fail("ReadObject", 'expect " to start a field name')
            self.pos -= 1
            key = self.read_string()
            if self.next_token() != ":":
                self.fail("ReadObject", "expect : after object field")
            yield key
            char = self.next_token()
            if char == "}":
                return
            if char != ",":
                self.fail("ReadObject", "expect , or }")
            char = self.next_token()

    def iter_array(self) -> Iterator[None]:
        """Yield once per element; the caller consumes the element before resuming."""
        char = self.next_token()
        if char == "n":
            self.pos -= 1
            self.expect_literal("null")
            return
        if char != "[":
            self.fail("ReadArray", "expect [ or n")
        if self.peek() == "]":
            self.pos += 1
            return
        while True:
            yield None
            char = self.next_token()
            if char == "]":
                return
            if char != ",":
                self.fail("ReadArray", "expect , or ]")

    def parse_value(self) -> object:
        char = self.peek()
        if char == '"':
            return self.read_string()
        if char == "{":
            return {key: self.parse_value() for key in self.iter_object()}
        if char == "[":
            return [self.parse_value() for _ in self.iter_array()]
        if char == "t":
            self.expect_literal("true")
            return True
        if char == "f":
            self.expect_literal("false")
            return False
        if char == "n":
            self.expect_literal("null")
            return None
        if char and char in _NUMBER_START:
            start = self.pos
            self.skip_number()
            return float(self.text[start : self.pos])
        self.fail("Read", f"unexpected character {char!r}")
        return None


def _as_text(data: object) -> str:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data).decode("utf-8", errors="replace")
    if isinstance(data, str):
        return data
    raise TypeError(f"expected str or bytes, got {type(data).__name__}")


def _is_index(key: object) -> bool:
    return isinstance(key, int) and not isinstance(key, bool)


def _is_wildcard(key: object) -> bool:
    return isinstance(key, str) and key == _WILDCARD


def _locate_field(text: str, target: str) -> Optional[str]:
    scanner = _Scanner(text)
    for name in scanner.iter_object():
        if name == target:
            return scanner.capture()
        scanner.skip()
    return None


def _locate_element(text: str, target: int) -> Optional[str]:
    scanner = _Scanner(text)
    for index, _ in enumerate(scanner.iter_array()):
        if index == target:
            return scanner.capture()
        scanner.skip()
    return None


def read_any(data: str | bytes) -> Any:
    """Read the first JSON value of ``data``; containers and numbers stay unparsed."""
    scanner = _Scanner(_as_text(data))
    char = scanner.peek()
    if not char:
        return InvalidAny(ValueError("input is empty"))
    try:
        if char == '"':
            return StringAny(scanner.read_string())
        if char == "n":
            scanner.expect_literal("null")
            return NilAny()
        if char == "t":
            scanner.expect_literal("true")
            return TrueAny()
        if char == "f":
            scanner.expect_literal("false")
            return FalseAny()
        if char == "{":
            return ObjectLazyAny(scanner.capture())
        if char == "[":
            return ArrayLazyAny(scanner.capture())
        return NumberLazyAny(scanner.capture())
    except _ScanError as err:
        return InvalidAny(err)


def locate_path(data: str | bytes, path: Sequence[object]) -> Any:
    """Follow ``path`` (field names, indexes or ``"*"``) into ``data`` and read what is there."""
    text = _as_text(data)
    path = list(path)
    try:
        for index, key in enumerate(path):
            if _is_wildcard(key):
                return read_any(text).get(*path[index:])
            if isinstance(key, str):
                found = _locate_field(text, key)
            elif _is_index(key):
                found = _locate_element(text, key)
            else:
                return new_invalid_any(path[index:])
            if found is None:
                return new_invalid_any(path[index:])
            text = found
    except _ScanError as err:
        return InvalidAny(err)
    return read_any(text)


def _html_escaped(text: str) -> str:
    parts = ['"']
    for char in text:
        code = ord(char)
        if char in _HTML_ESCAPES:
            parts.append(_HTML_ESCAPES[char])
        elif code < 0x20:
            parts.append(f"\\u00{code:02x}")
        elif 0xD800 <= code < 0xE000:
            parts.append("\\ufffd")
        else:
            parts.append(char)
    parts.append('"')
    return "".join(parts)


def _is_dataclass_instance(value: object) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _exported_fields(value: object) -> list[dataclasses.Field]:
    return [field for field in dataclasses.fields(value) if not field.name.startswith("_")]


def _write_key(key: object, out: io.StringIO) -> None:
    if isinstance(key, str):
        out.write(_html_escaped(key))
    elif _is_index(key):
        out.write(f'"{key}"')
    else:
        raise ValueError(f"unsupported map key type: {type(key).__name__}")


def _write_value(value: object, out: io.StringIO) -> None:
    if value is None:
        out.write("null")
    elif isinstance(value, Any):
        value.write_to(out)
    elif isinstance(value, bool):
        out.write("true" if value else "false")
    elif isinstance(value, int):
        out.write(str(value))
    elif isinstance(value, float):
        out.write(_json_float(value))
    elif isinstance(value, str):
        out.write(_html_escaped(value))
    elif isinstance(value, (bytes, bytearray, memoryview)):
        out.write('"' + base64.b64encode(bytes(value)).decode("ascii") + '"')
    elif isinstance(value, Mapping):
        out.write("{")
        for position, (key, item) in enumerate(value.items()):
            if position:
                out.write(",")
            _write_key(key, out)
            out.write(":")
            _write_value(item, out)
        out.write("}")
    elif isinstance(value, (list, tuple)):
        out.write("[")
        for position, item in enumerate(value):
            if position:
                out.write(",")
            _write_value(item, out)
        out.write("]")
    elif _is_dataclass_instance(value):
        out.write("{")
        for position, field in enumerate(_exported_fields(value)):
            if position:
                out.write(",")
            out.write(_html_escaped(field.name))
            out.write(":")
            _write_value(getattr(value, field.name), out)
        out.write("}")
    else:
        raise ValueError(f"unsupported type: {type(value).__name__}")


def _marshal(value: object) -> str:
    out = io.StringIO()
    _write_value(value, out)
    return out.getvalue()


def _parse_integer(text: str, bits: int, signed: bool) -> tuple[int, Optional[Exception]]:
    op = "readInt" if signed else "readUint"
    negative = text.startswith("-")
    if negative and not signed:
        return 0, _ScanError(f"{op}{bits}: unexpected character: -")
    start = 1 if negative else 0
    end = start
    while end < len(text) and "0" <= text[end] <= "9":
        end += 1
    digits = text[start:end]
    if not digits:
        found = text[start : start + 1] or "end of input"
        return 0, _ScanError(f"{op}{bits}: unexpected character: {found}")
    value = -int(digits) if negative else int(digits)
    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= value <= high:
        return 0, _ScanError(f"{op}{bits}: overflow: {text}")
    if end < len(text) and text[end] == ".":
        return value, _ScanError(f"assertInteger: can not decode float as int: {text}")
    return value, None


class _LazyAny(Any):
    """Raw JSON text parsed only when inspected."""

    def __init__(self, buf: str) -> None:
        self.buf = buf
        self.err: Optional[Exception] = None

    def last_error(self) -> Optional[Exception]:
        return self.err

    def to_string(self) -> str:
        return self.buf

    def write_to(self, stream) -> None:
        stream.write(self.buf)

    def get_interface(self) -> object:
        return _Scanner(self.buf).parse_value()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.buf!r})"


class _TruthNumbers:
    """Numeric conversions that report 1 for a non-empty container, else 0."""

    def to_int64(self) -> int:
        return 1 if self.to_bool() else 0

    def to_uint64(self) -> int:
        return 1 if self.to_bool() else 0

    def to_float64(self) -> float:
        return 1.0 if self.to_bool() else 0.0


class _ZeroNumbers:
    """Numeric conversions that are always zero."""

    def to_int64(self) -> int:
        return 0

    def to_uint64(self) -> int:
        return 0

    def to_float64(self) -> float:
        return 0.0


class NumberLazyAny(_LazyAny):
    """A JSON number kept as text; conversions parse it and record errors."""

    def value_type(self) -> ValueType:
        return ValueType.NUMBER

    def _read_integer(self, bits: int, signed: bool) -> int:
        value, err = _parse_integer(self.buf, bits, signed)
        if err is not None:
            self.err = err
        return value

    def to_int(self) -> int:
        return self._read_integer(64, True)

    def to_int32(self) -> int:
        return self._read_integer(32, True)

    def to_int64(self) -> int:
        return self._read_integer(64, True)

    def to_uint(self) -> int:
        return self._read_integer(64, False)

    def to_uint32(self) -> int:
        return self._read_integer(32, False)

    def to_uint64(self) -> int:
        return self._read_integer(64, False)

    def to_float64(self) -> float:
        if _NUMBER_RE.fullmatch(self.buf) is None:
            self.err = _ScanError(f"readFloat64: invalid number {self.buf!r}")
            return 0.0
        value = float(self.buf)
        if math.isinf(value):
            self.err = _ScanError(f"readFloat64: value out of range: {self.buf}")
            return 0.0
        return value

    def to_bool(self) -> bool:
        return self.to_float64() != 0


class ArrayLazyAny(_TruthNumbers, _LazyAny):
    """A JSON array kept as text."""

    def value_type(self) -> ValueType:
        return ValueType.ARRAY

    def to_bool(self) -> bool:
        scanner = _Scanner(self.buf)
        scanner.next_token()
        return scanner.peek() != "]"

    def get(self, *args: object) -> Any:
        if not args:
            return self
        first, rest = args[0], args[1:]
        if _is_index(first):
            return locate_path(self.buf, args)
        if _is_wildcard(first):
            scanner = _Scanner(self.buf)
            mapped = []
            for _ in scanner.iter_array():
                found = read_any(scanner.capture()).get(*rest)
                if found.value_type() is not ValueType.INVALID:
                    mapped.append(found)
            return ArrayAny(mapped)
        return new_invalid_any(args)

    def size(self) -> int:
        scanner = _Scanner(self.buf)
        count = 0
        for _ in scanner.iter_array():
            scanner.skip()
            count += 1
        return count


class ObjectLazyAny(_ZeroNumbers, _LazyAny):
    """A JSON object kept as text."""

    def value_type(self) -> ValueType:
        return ValueType.OBJECT

    def to_bool(self) -> bool:
        return True

    def get(self, *args: object) -> Any:
        if not args:
            return self
        first, rest = args[0], args[1:]
        if _is_wildcard(first):
            scanner = _Scanner(self.buf)
            mapped: dict[str, Any] = {}
            for name in scanner.iter_object():
                found = locate_path(scanner.capture(), rest)
                if found.value_type() is not ValueType.INVALID:
                    mapped[name] = found
            return MapAny(mapped)
        if isinstance(first, str):
            return locate_path(self.buf, args)
        return new_invalid_any(args)

    def keys(self) -> list[str]:
        scanner = _Scanner(self.buf)
        names = []
        for name in scanner.iter_object():
            scanner.skip()
            names.append(name)
        return names

    def size(self) -> int:
        return len(self.keys())


class ArrayAny(_TruthNumbers, Any):
    """A Python sequence seen as a JSON array."""

    def __init__(self, val: Sequence[object]) -> None:
        self.val = val

    def value_type(self) -> ValueType:
        return ValueType.ARRAY

    def to_bool(self) -> bool:
        return len(self.val) != 0

    def to_string(self) -> str:
        try:
            return _marshal(self.val)
        except ValueError:
            return ""

    def get(self, *args: object) -> Any:
        if not args:
            return self
        first, rest = args[0], args[1:]
        if _is_index(first):
            if not 0 <= first < len(self.val):
                return new_invalid_any(args)
            return wrap(self.val[first])
        if _is_wildcard(first):
            mapped = []
            for element in self.val:
                found = wrap(element).get(*rest)
                if found.value_type() is not ValueType.INVALID:
                    mapped.append(found)
            return ArrayAny(mapped)
        return new_invalid_any(args)

    def size(self) -> int:
        return len(self.val)

    def write_to(self, stream) -> None:
        stream.write(_marshal(self.val))

    def get_interface(self) -> object:
        return self.val


class MapAny(_ZeroNumbers, Any):
    """A Python mapping seen as a JSON object."""

    def __init__(self, val: Mapping[object, object]) -> None:
        self.val = val
        self.err: Optional[Exception] = None

    def value_type(self) -> ValueType:
        return ValueType.OBJECT

    def last_error(self) -> Optional[Exception]:
        return self.err

    def to_bool(self) -> bool:
        return True

    def to_string(self) -> str:
        try:
            text = _marshal(self.val)
        except ValueError as err:
            self.err = err
            return ""
        self.err = None
        return text

    def get(self, *args: object) -> Any:
        if not args:
            return self
        first, rest = args[0], args[1:]
        if _is_wildcard(first):
            mapped: dict[str, Any] = {}
            for key, element in self.val.items():
                found = wrap(element).get(*rest)
                if found.value_type() is not ValueType.INVALID:
                    mapped[str(key)] = found
            return MapAny(mapped)
        try:
            value = self.val[first]
        except (KeyError, TypeError):
            return new_invalid_any(args)
        return wrap(value)

    def keys(self) -> list[str]:
        return [str(key) for key in self.val]

    def size(self) -> int:
        return len(self.val)

    def write_to(self, stream) -> None:
        stream.write(_marshal(self.val))

    def get_interface(self) -> object:
        return self.val


class ObjectAny(_ZeroNumbers, Any):
    """A dataclass instance seen as a JSON object; names starting with ``_`` are private."""

    def __init__(self, val: object) -> None:
        self.val = val
        self.err: Optional[Exception] = None

    def _fields(self) -> list[dataclasses.Field]:
        return list(dataclasses.fields(self.val))

    def value_type(self) -> ValueType:
        return ValueType.OBJECT

    def last_error(self) -> Optional[Exception]:
        return self.err

    def to_bool(self) -> bool:
        return len(self._fields()) != 0

    def to_string(self) -> str:
        try:
            text = _marshal(self.val)
        except ValueError as err:
            self.err = err
            return ""
        self.err = None
        return text

    def get(self, *args: object) -> Any:
        if not args:
            return self
        first, rest = args[0], args[1:]
        if _is_wildcard(first):
            mapped: dict[str, Any] = {}
            for field in _exported_fields(self.val):
                found = wrap(getattr(self.val, field.name)).get(*rest)
                if found.value_type() is not ValueType.INVALID:
                    mapped[field.name] = found
            return MapAny(mapped)
        if isinstance(first, str):
            if first not in {field.name for field in self._fields()}:
                return new_invalid_any(args)
            return wrap(getattr(self.val, first))
        return new_invalid_any(args)

    def keys(self) -> list[str]:
        return [field.name for field in self._fields()]

    def size(self) -> int:
        return len(self._fields())

    def write_to(self, stream) -> None:
        stream.write(_marshal(self.val))

    def get_interface(self) -> object:
        return self.val


def wrap(val: object) -> Any:
    """Wrap a plain Python value as an ``Any``."""
    if val is None:
        return NilAny()
    if isinstance(val, Any):
        return val
    if isinstance(val, bool):
        return TrueAny() if val else FalseAny()
    if isinstance(val, int):
        return IntAny(val)
    if isinstance(val, float):
        return FloatAny(val)
    if isinstance(val, str):
        return StringAny(val)
    if isinstance(val, (bytes, bytearray, list, tuple)):
        return ArrayAny(val)
    if isinstance(val, Mapping):
        return MapAny(val)
    if _is_dataclass_instance(val):
        return ObjectAny(val)
    return InvalidAny(ValueError(f"unsupported type: {type(val).__name__}"))