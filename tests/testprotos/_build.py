"""Helpers for assembling test FileDescriptorProtos by hand."""

from __future__ import annotations

from typing import Optional

from google.protobuf import descriptor_pb2 as _descriptor_pb2

FDP = _descriptor_pb2.FieldDescriptorProto

OPTIONAL = FDP.LABEL_OPTIONAL
REQUIRED = FDP.LABEL_REQUIRED
REPEATED = FDP.LABEL_REPEATED


def add_field(
    msg,
    name: str,
    number: int,
    type_: int,
    label: int = OPTIONAL,
    type_name: Optional[str] = None,
    json_name: Optional[str] = None,
    default: Optional[str] = None,
    oneof_index: Optional[int] = None,
    proto3_optional: bool = False,
    extendee: Optional[str] = None,
):
    f = msg.add()
    f.name = name
    f.number = number
    f.type = type_
    f.label = label
    if type_name is not None:
        f.type_name = type_name
    if json_name is not None:
        f.json_name = json_name
    if default is not None:
        f.default_value = default
    if oneof_index is not None:
        f.oneof_index = oneof_index
    if proto3_optional:
        f.proto3_optional = True
    if extendee is not None:
        f.extendee = extendee
    return f


def add_enum(container, name: str, values: list[tuple[str, int]]):
    enum = container.add()
    enum.name = name
    for value_name, number in values:
        v = enum.value.add()
        v.name = value_name
        v.number = number
    return enum


def add_map_entry(msg, entry_name: str, key_type: int, value_type: int, value_type_name: Optional[str] = None):
    entry = msg.nested_type.add()
    entry.name = entry_name
    entry.options.map_entry = True
    add_field(entry.field, "key", 1, key_type)
    add_field(entry.field, "value", 2, value_type, type_name=value_type_name)
    return entry
