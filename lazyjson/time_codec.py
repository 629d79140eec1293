"""Times as integer counts of a precision unit since the Unix epoch."""

from __future__ import annotations

from .containers import _Scanner, _as_text, _parse_integer
from .values import _wrap_signed

__all__ = ["encode_time", "decode_time"]


def _check_precision(precision_ns: int) -> None:
    if precision_ns <= 0:
        raise ValueError(f"precision must be positive, got {precision_ns}")


def encode_time(ts_ns: int, precision_ns: int) -> str:
    """JSON text for a nanosecond timestamp divided by ``precision_ns``, truncated toward zero."""
    _check_precision(precision_ns)
    quotient = abs(ts_ns) // precision_ns
    return str(-quotient if ts_ns < 0 else quotient)


def decode_time(data: str | bytes, precision_ns: int) -> int:
    """Nanoseconds since the epoch from a JSON integer counted in units of ``precision_ns``."""
    _check_precision(precision_ns)
    scanner = _Scanner(_as_text(data))
    char = scanner.peek()
    if not char or char not in "-0123456789":
        scanner.fail("ReadInt64", "expects a number")
    start = scanner.pos
    scanner.skip_number()
    text = scanner.text[start : scanner.pos]
    if scanner.peek():
        scanner.fail("Unmarshal", "there are bytes left after unmarshal")
    value, err = _parse_integer(text, 64, True)
    if err is not None:
        raise err
    return _wrap_signed(value * precision_ns, 64)