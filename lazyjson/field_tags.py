"""Field bindings and the tag-driven rules that rename, add or drop their JSON keys."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Optional

__all__ = [
    "Binding",
    "apply_encode_decode_only",
    "apply_multiple_keys",
    "extract_option_value",
    "apply_naming_strategy",
    "lower_case_with_underscores",
    "apply_private_fields",
    "calc_field_names",
]

_TAG_KEY = "json"


def _is_private(name: str) -> bool:
    return bool(name) and name[0].islower()


def _default_names(name: str, tag: Optional[str]) -> list[str]:
    if tag == "-":
        return []
    provided = tag.split(",")[0] if tag is not None else ""
    if not name or _is_private(name) or name[0] == "_":
        return []
    return [provided or name]


@dataclass
class Binding:
    """One struct field: its name, its tags, and the JSON keys it is read from and written to.

    When ``from_names`` or ``to_names`` are not given they follow the ``json`` tag:
    the tag's name or else the field name, and no names at all for a field whose
    tag is ``-`` or whose name starts with a lower-case letter or ``_``.
    """

    name: str
    tags: Mapping[str, str] = field(default_factory=dict)
    from_names: Optional[list[str]] = None
    to_names: Optional[list[str]] = None

    def __post_init__(self) -> None:
        defaults = _default_names(self.name, self.tag_lookup(_TAG_KEY))
        if self.from_names is None:
            self.from_names = list(defaults)
        if self.to_names is None:
            self.to_names = list(defaults)

    def tag_lookup(self, key: str) -> Optional[str]:
        """The tag stored under ``key``, or ``None`` when the field has none."""
        return self.tags.get(key)


def _has_json_option(binding: Binding, opt: str) -> bool:
    tag = binding.tag_lookup(_TAG_KEY)
    if tag is None:
        return False
    return any(part.strip().casefold() == opt.casefold() for part in tag.split(","))


def apply_encode_decode_only(bindings: Iterable[Binding]) -> None:
    """Honour ``->`` (encode only) and ``<-`` (decode only) options in ``json`` tags."""
    for binding in bindings:
        encode_only = _has_json_option(binding, "->")
        decode_only = _has_json_option(binding, "<-")
        if encode_only and decode_only:
            continue
        if encode_only:
            binding.from_names = []
        elif decode_only:
            binding.to_names = []


def extract_option_value(tag: str, opt: str) -> Optional[str]:
    """The value of the first ``opt:value`` part of ``tag``, or ``None`` when there is none."""
    for part in tag.split(","):
        part = part.strip()
        if part.startswith(opt):
            pieces = part.split(":")
            if len(pieces) > 1:
                return pieces[1]
    return None


def _option_names(binding: Binding, opt: str) -> list[str]:
    tag = binding.tag_lookup(_TAG_KEY)
    if tag is None:
        return []
    value = extract_option_value(tag, opt)
    if not value:
        return []
    return value.split(" ")


def apply_multiple_keys(bindings: Iterable[Binding]) -> None:
    """Add the extra keys named by ``<:a b`` (decode) and ``>:a b`` (encode) tag options."""
    for binding in bindings:
        binding.from_names = [*binding.from_names, *_option_names(binding, "<")]
        binding.to_names = [*binding.to_names, *_option_names(binding, ">")]


def apply_naming_strategy(bindings: Iterable[Binding], translate: Callable[[str], str]) -> None:
    """Rename public fields that the ``json`` tag does not name explicitly."""
    for binding in bindings:
        name = binding.name
        if not name or name[0].islower() or name[0] == "_":
            continue
        tag = binding.tag_lookup(_TAG_KEY)
        if tag is not None:
            first = tag.split(",")[0]
            if first == "-" or first != "":
                continue
        translated = translate(name)
        binding.to_names = [translated]
        binding.from_names = [translated]


def lower_case_with_underscores(name: str) -> str:
    """Turn ``HelloWorld`` or ``helloWorld`` into ``hello_world``."""
    parts: list[str] = []
    for position, char in enumerate(name):
        if position == 0:
            parts.append(char.lower())
        elif char.isupper():
            parts.append("_" + char.lower())
        else:
            parts.append(char)
    return "".join(parts)


def calc_field_names(
    original_field_name: str, tag_provided_field_name: str, whole_tag: str
) -> list[str]:
    """Names for a field given its tag; ignored and private fields get none."""
    if whole_tag == "-":
        return []
    names = [tag_provided_field_name or original_field_name]
    if _is_private(original_field_name):
        names = []
    return names


def apply_private_fields(bindings: Iterable[Binding]) -> None:
    """Let untagged private fields be read and written under their own names."""
    for binding in bindings:
        if not _is_private(binding.name):
            continue
        tag = binding.tag_lookup(_TAG_KEY)
        if tag is None:
            binding.from_names = [binding.name]
            binding.to_names = [binding.name]
            continue
        names = calc_field_names(binding.name, tag.split(",")[0], tag)
        binding.from_names = list(names)
        binding.to_names = list(names)