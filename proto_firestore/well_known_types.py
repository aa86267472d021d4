"""Document representations of google.protobuf well-known types.

Only ``Timestamp`` and ``Empty`` have a representation. The remaining
well-known types are rejected wherever they appear: their JSON mapping
(strings for ``Duration`` and ``FieldMask``, unwrapped scalars for the
wrappers, free-form values for ``Struct``) does not survive a round trip
through a document store.
"""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from google.protobuf.message import Message

from .errors import OutOfRangeError, UnsupportedConstructError

if TYPE_CHECKING:
    from .encoder import Encoder

_log = logging.getLogger(__name__)

# 0001-01-01T00:00:00Z and 9999-12-31T23:59:59Z
TIMESTAMP_MIN_SECONDS = -62135596800
TIMESTAMP_MAX_SECONDS = 253402300799
NANOS_MAX = 999_999_999

MarshalFunc = Callable[["Encoder", Message], Any]


def _marshal_timestamp(enc: "Encoder", message: Message) -> datetime.datetime:
    seconds = message.seconds
    nanos = message.nanos
    if not TIMESTAMP_MIN_SECONDS <= seconds <= TIMESTAMP_MAX_SECONDS:
        raise OutOfRangeError(
            f"{message.DESCRIPTOR.full_name}: seconds out of range {seconds}"
        )
    if not 0 <= nanos <= NANOS_MAX:
        raise OutOfRangeError(
            f"{message.DESCRIPTOR.full_name}: nanos out of range {nanos}"
        )
    # datetime stops at microseconds; ToDatetime truncates the nanos
    return message.ToDatetime(tzinfo=datetime.timezone.utc)


def _marshal_empty(enc: "Encoder", message: Message) -> Any:
    return enc.ABSENT


def _reject(enc: "Encoder", message: Message) -> Any:
    name = message.DESCRIPTOR.full_name
    _log.debug("Rejecting well-known type %s", name)
    raise UnsupportedConstructError(
        f"no support for {name} in firestore documents"
    )


def _reject_any(enc: "Encoder", message: Message) -> Any:
    type_url = message.type_url
    packed = type_url.rsplit("/", 1)[-1] if type_url else ""
    detail = ""
    if packed:
        try:
            enc.opts.get_resolver().FindMessageTypeByName(packed)
            detail = f" (packing {packed})"
        except KeyError:
            detail = f" (packing unresolvable type {packed!r})"
    _log.debug("Rejecting google.protobuf.Any%s", detail)
    raise UnsupportedConstructError(
        f"no support for google.protobuf.Any{detail} in firestore documents"
    )


_WELL_KNOWN_TYPES: dict[str, MarshalFunc] = {
    "google.protobuf.Timestamp": _marshal_timestamp,
    "google.protobuf.Empty": _marshal_empty,
    "google.protobuf.Any": _reject_any,
    "google.protobuf.Duration": _reject,
    "google.protobuf.BoolValue": _reject,
    "google.protobuf.Int32Value": _reject,
    "google.protobuf.Int64Value": _reject,
    "google.protobuf.UInt32Value": _reject,
    "google.protobuf.UInt64Value": _reject,
    "google.protobuf.FloatValue": _reject,
    "google.protobuf.DoubleValue": _reject,
    "google.protobuf.StringValue": _reject,
    "google.protobuf.BytesValue": _reject,
    "google.protobuf.Struct": _reject,
    "google.protobuf.ListValue": _reject,
    "google.protobuf.Value": _reject,
    "google.protobuf.FieldMask": _reject,
}


def well_known_type_marshaler(full_name: str) -> Optional[MarshalFunc]:
    return _WELL_KNOWN_TYPES.get(full_name)


def is_well_known_type(full_name: str) -> bool:
    return full_name in _WELL_KNOWN_TYPES


def is_message_set(message: Message) -> bool:
    """Whether the message uses the legacy MessageSet wire format."""
    return message.DESCRIPTOR.GetOptions().message_set_wire_format
