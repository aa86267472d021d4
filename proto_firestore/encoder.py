from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from google.protobuf import descriptor as descriptor_mod
from google.protobuf.message import Message

from .completeness import check_initialized
from .errors import (
    IncompleteMessageError,
    InvalidUTF8Error,
    InvariantViolationError,
    RecursionDepthError,
    UnsupportedConstructError,
)
from .options import MarshalOptions
from .ordering import iter_map_entries
from .ranger import NO_VALUE, in_real_oneof, is_list_field, is_map_field, range_fields
from .settings import EncodingMode
from .well_known_types import is_message_set, is_well_known_type, well_known_type_marshaler

_log = logging.getLogger(__name__)

_FD = descriptor_mod.FieldDescriptor

_NULL_VALUE_ENUM = "google.protobuf.NullValue"


class _Absent:
    def __repr__(self) -> str:
        return "ABSENT"


def marshal(message: Optional[Message], options: Optional[MarshalOptions] = None) -> dict[str, Any]:
    """Convert *message* into a document suitable for a document store.

    Raises a :class:`proto_firestore.errors.MarshalError` when the message
    cannot be represented. Missing required fields raise
    :class:`IncompleteMessageError`, whose ``document`` attribute holds the
    fully encoded result.
    """
    return marshal_message(message, options or MarshalOptions())


def marshal_message(message: Optional[Message], opts: MarshalOptions) -> dict[str, Any]:
    if message is None:
        return {}

    full_name = message.DESCRIPTOR.full_name
    _log.debug("Marshalling %s with mode %s", full_name, opts.mode.value)

    if is_well_known_type(full_name):
        raise UnsupportedConstructError(
            "no support for well known types as top level objects in firestore documents"
        )

    document = Encoder(opts).marshal_message(message)

    try:
        check_initialized(message)
    except IncompleteMessageError as exc:
        exc.document = document
        raise
    return document


def field_key(fd: descriptor_mod.FieldDescriptor) -> str:
    if fd.is_extension:
        return f"[{fd.full_name}]"
    return fd.json_name


class Encoder:
    """Walks one message tree. A fresh instance is used for every marshal call."""

    # marks a value that must not appear in the output at all
    ABSENT: Any = _Absent()

    def __init__(self, opts: MarshalOptions):
        self.opts = opts
        self._depth = 0
        self._kind_encoders: dict[int, Callable[[Any, descriptor_mod.FieldDescriptor], Any]] = {
            _FD.TYPE_BOOL: self._encode_bool,
            _FD.TYPE_STRING: self._encode_string,
            _FD.TYPE_INT32: self._encode_int,
            _FD.TYPE_SINT32: self._encode_int,
            _FD.TYPE_SFIXED32: self._encode_int,
            _FD.TYPE_INT64: self._encode_int,
            _FD.TYPE_SINT64: self._encode_int,
            _FD.TYPE_SFIXED64: self._encode_int,
            _FD.TYPE_UINT32: self._encode_int,
            _FD.TYPE_FIXED32: self._encode_int,
            _FD.TYPE_UINT64: self._encode_int,
            _FD.TYPE_FIXED64: self._encode_int,
            _FD.TYPE_FLOAT: self._encode_float,
            _FD.TYPE_DOUBLE: self._encode_float,
            _FD.TYPE_BYTES: self._encode_bytes,
            _FD.TYPE_ENUM: self._encode_enum,
            _FD.TYPE_MESSAGE: self._encode_message,
            _FD.TYPE_GROUP: self._encode_message,
        }

    def marshal_message(self, message: Message) -> dict[str, Any]:
        """Encode the fields of *message* selected by the configured mode."""
        if is_message_set(message):
            raise UnsupportedConstructError("no support for proto1 MessageSets")

        self._depth += 1
        if self._depth > self.opts.max_depth:
            raise RecursionDepthError(self.opts.max_depth)
        try:
            document: dict[str, Any] = {}
            for fd, value in range_fields(message, self.opts.mode):
                encoded = self.encode_value(value, fd)
                if encoded is self.ABSENT:
                    continue
                document[field_key(fd)] = encoded
            return document
        finally:
            self._depth -= 1

    def encode_value(self, value: Any, fd: descriptor_mod.FieldDescriptor) -> Any:
        if value is NO_VALUE:
            return None
        if is_map_field(fd):
            return self._encode_map(value, fd)
        if is_list_field(fd):
            return self._encode_list(value, fd)

        encoded = self.encode_singular(value, fd)
        if (
            encoded is self.ABSENT
            and self.opts.mode == EncodingMode.EMIT_FIRESTORE_DEFAULTS
            and fd.type in (_FD.TYPE_MESSAGE, _FD.TYPE_GROUP)
            and in_real_oneof(fd)
        ):
            # keeps the set arm of the oneof visible
            return {}
        return encoded

    def encode_singular(self, value: Any, fd: descriptor_mod.FieldDescriptor) -> Any:
        encode = self._kind_encoders.get(fd.type)
        if encode is None:
            raise InvariantViolationError(f"{fd.full_name} has unknown kind: {fd.type}")
        return encode(value, fd)

    def _encode_list(self, values: Any, fd: descriptor_mod.FieldDescriptor) -> Any:
        if len(values) == 0:
            return self.ABSENT

        items = []
        for value in values:
            encoded = self.encode_singular(value, fd)
            items.append(None if encoded is self.ABSENT else encoded)
        return items

    def _encode_map(self, mapping: Any, fd: descriptor_mod.FieldDescriptor) -> Any:
        if len(mapping) == 0:
            return self.ABSENT

        value_fd = fd.message_type.fields_by_name["value"]
        entries: dict[str, Any] = {}
        for key, value in iter_map_entries(mapping, fd.full_name):
            encoded = self.encode_singular(value, value_fd)
            if encoded is self.ABSENT or encoded is None:
                continue
            entries[key] = encoded

        if not entries:
            return self.ABSENT
        return entries

    def _encode_bool(self, value: bool, fd: descriptor_mod.FieldDescriptor) -> bool:
        return bool(value)

    def _encode_string(self, value: Any, fd: descriptor_mod.FieldDescriptor) -> Any:
        try:
            if isinstance(value, bytes):
                # proto2 hands back the raw bytes of a string that is not UTF-8
                value = value.decode("utf-8")
            else:
                value.encode("utf-8")
        except UnicodeError:
            raise InvalidUTF8Error(fd.full_name) from None
        if value == "":
            return self.ABSENT
        return value

    def _encode_int(self, value: int, fd: descriptor_mod.FieldDescriptor) -> int:
        return int(value)

    def _encode_float(self, value: float, fd: descriptor_mod.FieldDescriptor) -> float:
        return float(value)

    def _encode_bytes(self, value: bytes, fd: descriptor_mod.FieldDescriptor) -> Any:
        if len(value) == 0:
            return self.ABSENT
        return bytes(value)

    def _encode_enum(self, value: int, fd: descriptor_mod.FieldDescriptor) -> Any:
        enum_type = fd.enum_type
        if enum_type.full_name == _NULL_VALUE_ENUM:
            return None
        desc = enum_type.values_by_number.get(value)
        if desc is None:
            return int(value)
        return desc.name

    def _encode_message(self, message: Message, fd: descriptor_mod.FieldDescriptor) -> Any:
        marshal_wkt = well_known_type_marshaler(message.DESCRIPTOR.full_name)
        if marshal_wkt is not None:
            return marshal_wkt(self, message)

        document = self.marshal_message(message)
        if not document:
            return self.ABSENT
        return document
