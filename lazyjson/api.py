"""Module-level shortcuts that use the default configuration."""

from __future__ import annotations

from .config import CONFIG_DEFAULT, Decoder, Encoder
from .values import Any

__all__ = [
    "marshal",
    "marshal_indent",
    "marshal_to_string",
    "unmarshal",
    "unmarshal_from_string",
    "get",
    "valid",
    "new_encoder",
    "new_decoder",
]


def marshal(v: object) -> bytes:
    """Encode ``v`` as UTF-8 JSON bytes."""
    return CONFIG_DEFAULT.marshal(v)


def marshal_indent(v: object, prefix: str, indent: str) -> bytes:
    """Encode ``v`` with indentation; the prefix must be empty."""
    return CONFIG_DEFAULT.marshal_indent(v, prefix, indent)


def marshal_to_string(v: object) -> str:
    """Encode ``v`` as JSON text."""
    return CONFIG_DEFAULT.marshal_to_string(v)


def unmarshal(data: str | bytes) -> object:
    """Decode one JSON value."""
    return CONFIG_DEFAULT.unmarshal(data)


def unmarshal_from_string(text: str) -> object:
    """Decode one JSON value from a string."""
    return CONFIG_DEFAULT.unmarshal_from_string(text)


def get(data: str | bytes, *args: object) -> Any:
    """Look up a nested value lazily by path."""
    return CONFIG_DEFAULT.get(data, *args)


def valid(data: str | bytes) -> bool:
    """Whether ``data`` starts with a well-formed JSON value."""
    return CONFIG_DEFAULT.valid(data)


def new_encoder(writer) -> Encoder:
    """An encoder writing to ``writer``."""
    return CONFIG_DEFAULT.new_encoder(writer)


def new_decoder(reader) -> Decoder:
    """A decoder reading from ``reader``."""
    return CONFIG_DEFAULT.new_decoder(reader)