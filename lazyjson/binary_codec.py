"""Encode bytes as a JSON string, using ``\\\\xHH`` for bytes that are not plain printable ASCII."""

from __future__ import annotations

__all__ = ["encode_binary", "decode_binary"]

_HEX = "0123456789abcdef"
_WHITESPACE = b" \t\n\r"
_ESCAPE_ERROR = "decode binary as string: \\\\x is only supported escape"


def _is_safe(byte: int) -> bool:
    """Printable ASCII (and DEL) other than the double quote and the backslash."""
    return 0x20 <= byte < 0x80 and byte not in (0x22, 0x5C)


def encode_binary(data: bytes | bytearray | memoryview) -> str:
    """Return JSON string text for ``data``; unsafe bytes become ``\\\\x`` plus two hex digits."""
    parts = ['"']
    for byte in bytes(data):
        if _is_safe(byte):
            parts.append(chr(byte))
        else:
            parts.append("\\\\x" + _HEX[byte >> 4] + _HEX[byte & 0xF])
    parts.append('"')
    return "".join(parts)


def _hex_value(digit: int) -> int:
    if 0x30 <= digit <= 0x39:
        return digit - 0x30
    if 0x61 <= digit <= 0x66:
        return digit - 0x61 + 10
    raise ValueError(f"read hex: expects 0~9 or a~f, but found {chr(digit)}")


def _read_hex(pair: bytes) -> int:
    if len(pair) != 2:
        raise ValueError("read hex: expects two hex digits")
    return _hex_value(pair[0]) * 16 + _hex_value(pair[1])


def decode_binary(text: str | bytes | bytearray) -> bytes:
    """Decode JSON string text written by :func:`encode_binary` back into bytes."""
    raw = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    stripped = raw.strip(_WHITESPACE)
    if not stripped.startswith(b'"'):
        raise ValueError('decode binary as string: expects "')
    end = stripped.find(b'"', 1)
    if end < 0:
        raise ValueError("decode binary as string: incomplete string")
    if stripped[end + 1 :]:
        raise ValueError("decode binary as string: there are bytes left after unmarshal")
    body = stripped[1:end]
    out = bytearray()
    pos = 0
    while pos < len(body):
        byte = body[pos]
        if byte != 0x5C:
            out.append(byte)
            pos += 1
            continue
        if body[pos + 1 : pos + 3] != b"\\x":
            raise ValueError(_ESCAPE_ERROR)
        out.append(_read_hex(body[pos + 3 : pos + 5]))
        pos += 5
    return bytes(out)