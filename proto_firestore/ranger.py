"""Selection of the fields a message exposes for encoding."""

from __future__ import annotations

from typing import Any

from google.protobuf import descriptor as descriptor_mod
from google.protobuf.message import Message

from .ordering import sort_fields
from .settings import EncodingMode

_FD = descriptor_mod.FieldDescriptor


class _NoValue:
    def __repr__(self) -> str:
        return "NO_VALUE"


# Stands in for an unpopulated field that should be written as null.
NO_VALUE: Any = _NoValue()


def is_map_field(fd: descriptor_mod.FieldDescriptor) -> bool:
    return (
        fd.type == _FD.TYPE_MESSAGE
        and fd.message_type.GetOptions().map_entry
    )


def is_list_field(fd: descriptor_mod.FieldDescriptor) -> bool:
    return fd.label == _FD.LABEL_REPEATED and not is_map_field(fd)


def is_message_field(fd: descriptor_mod.FieldDescriptor) -> bool:
    return fd.type in (_FD.TYPE_MESSAGE, _FD.TYPE_GROUP)


def in_real_oneof(fd: descriptor_mod.FieldDescriptor) -> bool:
    """True for members of a declared oneof, false for proto3 ``optional``."""
    oneof = fd.containing_oneof
    return oneof is not None and not oneof.name.startswith("_")


def _presence_scalar(fd: descriptor_mod.FieldDescriptor) -> bool:
    return (
        fd.has_presence
        and fd.label != _FD.LABEL_REPEATED
        and not is_message_field(fd)
    )


def _singular_message(fd: descriptor_mod.FieldDescriptor) -> bool:
    return fd.label != _FD.LABEL_REPEATED and is_message_field(fd)


def _unpopulated_value(message: Message, fd: descriptor_mod.FieldDescriptor, mode: EncodingMode):
    """Return the value to emit for an unpopulated field, or None to skip it."""
    if mode == EncodingMode.EMIT_FIRESTORE_DEFAULTS:
        if fd.label == _FD.LABEL_REPEATED:
            # always empty when unpopulated
            return None
        if _presence_scalar(fd) or _singular_message(fd):
            return None
        return getattr(message, fd.name)

    if _presence_scalar(fd) or _singular_message(fd):
        if mode == EncodingMode.EMIT_DEFAULT_VALUES:
            return None
        return NO_VALUE
    return getattr(message, fd.name)


def range_fields(
    message: Message, mode: EncodingMode
) -> list[tuple[descriptor_mod.FieldDescriptor, Any]]:
    """Return the ``(field, value)`` pairs to encode for *message*, in field order.

    ``COMPACT`` yields exactly the populated fields. The other modes add
    unpopulated fields that are not part of any oneof (proto3 ``optional``
    fields included, since they sit in synthetic oneofs); see
    :class:`proto_firestore.options.MarshalOptions` for what each mode adds.
    """
    pairs = list(message.ListFields())
    if mode == EncodingMode.COMPACT:
        return sort_fields(pairs)

    populated = {fd.full_name for fd, _ in pairs}
    for fd in message.DESCRIPTOR.fields:
        if fd.full_name in populated or fd.containing_oneof is not None:
            continue
        value = _unpopulated_value(message, fd, mode)
        if value is None:
            continue
        pairs.append((fd, value))

    return sort_fields(pairs)
