"""Lazy JSON values, path lookup, configurable marshalling and tolerant decoding helpers."""

__version__ = "0.1.0"

__all__ = [
    "api",
    "binary_codec",
    "config",
    "containers",
    "field_tags",
    "fuzzy",
    "time_codec",
    "values",
]