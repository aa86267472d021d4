"""Deterministic ordering of message fields and map entries."""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from google.protobuf import descriptor as descriptor_mod

from .errors import InvalidUTF8Error


def field_sort_key(fd: descriptor_mod.FieldDescriptor) -> tuple[int, int, str]:
    """Regular fields in declaration order, then extensions by full name."""
    if fd.is_extension:
        return (1, 0, fd.full_name)
    return (0, fd.index, "")


def sort_fields(
    pairs: Iterable[tuple[descriptor_mod.FieldDescriptor, Any]],
) -> list[tuple[descriptor_mod.FieldDescriptor, Any]]:
    return sorted(pairs, key=lambda pair: field_sort_key(pair[0]))


def map_key_to_string(key: Any) -> str:
    if isinstance(key, bool):
        return "true" if key else "false"
    return str(key)


def _text_key(key: Any, field_name: str) -> Any:
    # proto2 string keys that are not valid UTF-8 come back as bytes
    if not isinstance(key, bytes):
        return key
    try:
        return key.decode("utf-8")
    except UnicodeDecodeError:
        raise InvalidUTF8Error(field_name) from None


def iter_map_entries(mapping: Any, field_name: str = "") -> Iterator[tuple[str, Any]]:
    """Yield ``(string_key, value)`` pairs in canonical key order.

    Map keys are homogeneous (bool, integer or string), so the natural
    ordering of the Python values gives false < true, numeric order and
    code-point order respectively. A string key holding invalid UTF-8
    raises :class:`InvalidUTF8Error` naming *field_name*.
    """
    keys = [_text_key(key, field_name) for key in mapping.keys()]
    for key in sorted(keys):
        yield map_key_to_string(key), mapping[key]
