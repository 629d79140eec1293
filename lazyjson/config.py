"""Frozen configurations and the marshal/unmarshal API built from them."""

from __future__ import annotations

import base64
import dataclasses
import io
import math
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .containers import (
    _Scanner,
    _ScanError,
    _as_text,
    _exported_fields,
    _html_escaped,
    _is_dataclass_instance,
    _is_index,
    locate_path,
)
from .values import Any, _json_float, _json_string

__all__ = [
    "Config",
    "API",
    "Encoder",
    "Decoder",
    "RawMessage",
    "CONFIG_DEFAULT",
    "CONFIG_COMPATIBLE_WITH_STANDARD_LIBRARY",
    "CONFIG_FASTEST",
]

_NUMBER_START = frozenset("-0123456789")
_LOSSY_LIMIT = 0x4FFFFFF
_LOSSY_SCALE = 1_000_000


class RawMessage(bytes):
    """Already encoded JSON, written out as it is."""


@dataclass(frozen=True)
class Config:
    """Options that decide how the API behaves; ``froze`` builds the API."""

    indention_step: int = 0
    marshal_float_with_6_digits: bool = False
    escape_html: bool = False
    sort_map_keys: bool = False
    use_number: bool = False
    disallow_unknown_fields: bool = False
    tag_key: str = ""
    only_tagged_field: bool = False
    validate_json_raw_message: bool = False
    object_field_must_be_simple_string: bool = False
    case_sensitive: bool = False

    def froze(self) -> "API":
        """Build an API from this configuration."""
        return API(self)


_FROZEN_CACHE: dict[Config, "API"] = {}


def _froze_with_cache_reuse(config: Config) -> "API":
    api = _FROZEN_CACHE.get(config)
    if api is None:
        api = config.froze()
        _FROZEN_CACHE[config] = api
    return api


def _is_valid(text: str) -> bool:
    try:
        _Scanner(text).skip()
    except _ScanError:
        return False
    return True


def _lossy_float(val: float) -> str:
    """Format with at most six fractional digits."""
    if not math.isfinite(val):
        raise ValueError(f"unsupported value: {val}")
    sign = ""
    if val < 0:
        sign = "-"
        val = -val
    if val > _LOSSY_LIMIT:
        return sign + _json_float(val)
    whole, frac = divmod(int(val * _LOSSY_SCALE + 0.5), _LOSSY_SCALE)
    if frac == 0:
        return f"{sign}{whole}"
    return f"{sign}{whole}.{frac:06d}".rstrip("0")


def _key_text(key: object) -> str:
    if isinstance(key, str):
        return key
    if _is_index(key):
        return str(key)
    raise ValueError(f"unsupported map key type: {type(key).__name__}")


class _JsonWriter:
    """Renders Python values as JSON text according to a configuration."""

    def __init__(self, config: Config) -> None:
        self._config = config
        self._out = io.StringIO()

    def render(self, value: object) -> str:
        self._value(value, 0)
        return self._out.getvalue()

    def _newline(self, depth: int) -> None:
        step = self._config.indention_step
        if step:
            self._out.write("\n" + " " * (step * depth))

    def _string(self, text: str) -> None:
        if self._config.escape_html:
            self._out.write(_html_escaped(text))
        else:
            self._out.write(_json_string(text))

    def _float(self, val: float) -> None:
        if self._config.marshal_float_with_6_digits:
            self._out.write(_lossy_float(val))
        else:
            self._out.write(_json_float(val))

    def _raw(self, raw: RawMessage) -> None:
        text = bytes(raw).decode("utf-8", errors="replace")
        if not text or (self._config.validate_json_raw_message and not _is_valid(text)):
            text = "null"
        self._out.write(text)

    def _value(self, value: object, depth: int) -> None:
        if value is None:
            self._out.write("null")
        elif isinstance(value, Any):
            value.write_to(self._out)
        elif isinstance(value, RawMessage):
            self._raw(value)
        elif isinstance(value, bool):
            self._out.write("true" if value else "false")
        elif isinstance(value, int):
            self._out.write(str(value))
        elif isinstance(value, float):
            self._float(value)
        elif isinstance(value, Decimal):
            if not value.is_finite():
                raise ValueError(f"unsupported value: {value}")
            self._out.write(str(value))
        elif isinstance(value, str):
            self._string(value)
        elif isinstance(value, (bytes, bytearray, memoryview)):
            self._out.write('"' + base64.b64encode(bytes(value)).decode("ascii") + '"')
        elif isinstance(value, Mapping):
            self._object(self._map_entries(value), depth)
        elif isinstance(value, (list, tuple)):
            self._container("[]", list(value), depth, self._value)
        elif _is_dataclass_instance(value):
            entries = [(field.name, getattr(value, field.name)) for field in _exported_fields(value)]
            self._object(entries, depth)
        else:
            raise ValueError(f"unsupported type: {type(value).__name__}")

    def _map_entries(self, mapping: Mapping) -> list[tuple[str, object]]:
        entries = [(_key_text(key), item) for key, item in mapping.items()]
        if self._config.sort_map_keys:
            entries.sort(key=lambda entry: entry[0])
        return entries

    def _object(self, entries: list[tuple[str, object]], depth: int) -> None:
        separator = ": " if self._config.indention_step else ":"

        def write_entry(entry: tuple[str, object], inner: int) -> None:
            name, item = entry
            self._string(name)
            self._out.write(separator)
            self._value(item, inner)

        self._container("{}", entries, depth, write_entry)

    def _container(self, brackets: str, items: list, depth: int, write_item) -> None:
        if not items:
            self._out.write(brackets)
            return
        self._out.write(brackets[0])
        for position, item in enumerate(items):
            if position:
                self._out.write(",")
            self._newline(depth + 1)
            write_item(item, depth + 1)
        self._newline(depth)
        self._out.write(brackets[1])


def _read_value(scanner: _Scanner, use_number: bool) -> object:
    char = scanner.peek()
    if char == "{":
        return {key: _read_value(scanner, use_number) for key in scanner.iter_object()}
    if char == "[":
        return [_read_value(scanner, use_number) for _ in scanner.iter_array()]
    if char == '"':
        return scanner.read_string()
    if char == "t":
        scanner.expect_literal("true")
        return True
    if char == "f":
        scanner.expect_literal("false")
        return False
    if char == "n":
        scanner.expect_literal("null")
        return None
    if char in _NUMBER_START:
        start = scanner.pos
        scanner.skip_number()
        text = scanner.text[start : scanner.pos]
        if use_number:
            return Decimal(text)
        value = float(text)
        if math.isinf(value):
            scanner.fail("readFloat64", f"value out of range: {text}")
        return value
    scanner.fail("ReadAny", f"unexpected character {char!r}" if char else "unexpected end of input")
    return None


class API:
    """Marshalling and unmarshalling bound to one frozen configuration."""

    def __init__(self, config: Config) -> None:
        self.config = config

    def marshal_to_string(self, v: object) -> str:
        """Encode ``v`` as JSON text."""
        return _JsonWriter(self.config).render(v)

    def marshal(self, v: object) -> bytes:
        """Encode ``v`` as UTF-8 JSON bytes."""
        return self.marshal_to_string(v).encode("utf-8")

    def marshal_indent(self, v: object, prefix: str, indent: str) -> bytes:
        """Encode with indentation; the prefix must be empty and the indent only spaces."""
        if prefix:
            raise ValueError("prefix is not supported")
        if any(char != " " for char in indent):
            raise ValueError("indent can only be space")
        config = dataclasses.replace(self.config, indention_step=len(indent))
        return _froze_with_cache_reuse(config).marshal(v)

    def unmarshal(self, data: str | bytes) -> object:
        """Decode one JSON value; trailing content is an error."""
        scanner = _Scanner(_as_text(data))
        value = _read_value(scanner, self.config.use_number)
        if scanner.peek():
            scanner.fail("Unmarshal", "there are bytes left after unmarshal")
        return value

    def unmarshal_from_string(self, text: str) -> object:
        """Decode one JSON value from a string."""
        return self.unmarshal(text)

    def get(self, data: str | bytes, *args: object) -> Any:
        """Look up a nested value lazily by path."""
        return locate_path(data, args)

    def valid(self, data: str | bytes) -> bool:
        """Whether ``data`` starts with a well-formed JSON value."""
        return _is_valid(_as_text(data))

    def new_encoder(self, writer) -> "Encoder":
        """An encoder writing to ``writer``."""
        return Encoder(writer, self)

    def new_decoder(self, reader) -> "Decoder":
        """A decoder reading from ``reader``."""
        return Decoder(reader, self)

    def __repr__(self) -> str:
        return f"API({self.config!r})"


class Encoder:
    """Writes JSON values, one per line, to a text or binary stream."""

    def __init__(self, writer, api: Optional[API] = None) -> None:
        self._writer = writer
        self._api = api if api is not None else CONFIG_DEFAULT

    def encode(self, val: object) -> None:
        """Write ``val`` followed by a newline."""
        text = self._api.marshal_to_string(val) + "\n"
        try:
            self._writer.write(text)
        except TypeError:
            self._writer.write(text.encode("utf-8"))
        flush = getattr(self._writer, "flush", None)
        if flush is not None:
            flush()

    def set_indent(self, prefix: str, indent: str) -> None:
        """Indent by the width of ``indent``; the prefix is ignored."""
        config = dataclasses.replace(self._api.config, indention_step=len(indent))
        self._api = _froze_with_cache_reuse(config)

    def set_escape_html(self, escape_html: bool) -> None:
        """Turn escaping of HTML characters in strings on or off."""
        config = dataclasses.replace(self._api.config, escape_html=escape_html)
        self._api = _froze_with_cache_reuse(config)


class Decoder:
    """Reads successive JSON values from a text or binary stream."""

    def __init__(self, reader, api: Optional[API] = None) -> None:
        self._reader = reader
        self._api = api if api is not None else CONFIG_DEFAULT
        self._scanner: Optional[_Scanner] = None
        self._failed = False

    def _load(self) -> _Scanner:
        if self._scanner is None:
            self._scanner = _Scanner(_as_text(self._reader.read()))
        return self._scanner

    def decode(self) -> object:
        """Decode the next value; raises ``EOFError`` when the input is exhausted."""
        scanner = self._load()
        if not scanner.peek():
            raise EOFError("no more JSON values")
        try:
            return _read_value(scanner, self._api.config.use_number)
        except _ScanError:
            self._failed = True
            raise

    def more(self) -> bool:
        """Whether another value follows before a closing bracket or the end."""
        if self._failed:
            return False
        char = self._load().peek()
        return bool(char) and char not in "]}"

    def buffered(self) -> io.BytesIO:
        """The input not consumed yet."""
        scanner = self._load()
        return io.BytesIO(scanner.text[scanner.pos :].encode("utf-8"))

    def use_number(self) -> None:
        """Decode numbers as exact ``Decimal`` values instead of floats."""
        config = dataclasses.replace(self._api.config, use_number=True)
        self._api = _froze_with_cache_reuse(config)

    def disallow_unknown_fields(self) -> None:
        """Record that unknown object fields should be rejected."""
        config = dataclasses.replace(self._api.config, disallow_unknown_fields=True)
        self._api = _froze_with_cache_reuse(config)


CONFIG_DEFAULT = Config(escape_html=True).froze()
CONFIG_COMPATIBLE_WITH_STANDARD_LIBRARY = Config(
    escape_html=True,
    sort_map_keys=True,
    validate_json_raw_message=True,
).froze()
CONFIG_FASTEST = Config(
    escape_html=False,
    marshal_float_with_6_digits=True,
    object_field_must_be_simple_string=True,
).froze()