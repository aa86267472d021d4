"""Required-field checking for proto2 messages.

The walk runs over the message itself rather than the encoded document,
so its result does not depend on the encoding mode.
"""

from __future__ import annotations

import logging

from google.protobuf import descriptor as descriptor_mod
from google.protobuf.message import Message

from .errors import IncompleteMessageError
from .ordering import iter_map_entries

_log = logging.getLogger(__name__)

_FD = descriptor_mod.FieldDescriptor


def _path_segment(fd: descriptor_mod.FieldDescriptor) -> str:
    if fd.is_extension:
        return f"[{fd.full_name}]"
    return fd.name


def _join(prefix: str, segment: str) -> str:
    return f"{prefix}.{segment}" if prefix else segment


def _collect_missing(message: Message, prefix: str, missing: list[str]) -> None:
    for fd in message.DESCRIPTOR.fields:
        if fd.label == _FD.LABEL_REQUIRED and not message.HasField(fd.name):
            missing.append(_join(prefix, fd.name))

    # ListFields only reports populated fields, so empty containers and
    # unset oneofs are skipped here.
    for fd, value in message.ListFields():
        if fd.type not in (_FD.TYPE_MESSAGE, _FD.TYPE_GROUP):
            continue
        path = _join(prefix, _path_segment(fd))

        if fd.message_type.GetOptions().map_entry:
            value_fd = fd.message_type.fields_by_name["value"]
            if value_fd.type != _FD.TYPE_MESSAGE:
                continue
            for key, item in iter_map_entries(value, fd.full_name):
                _collect_missing(item, f"{path}[{key}]", missing)
        elif fd.label == _FD.LABEL_REPEATED:
            for i, item in enumerate(value):
                _collect_missing(item, f"{path}[{i}]", missing)
        else:
            _collect_missing(value, path, missing)


def find_missing_required(message: Message) -> list[str]:
    """Return the paths of all required fields left unset in *message*."""
    missing: list[str] = []
    _collect_missing(message, "", missing)
    return missing


def check_initialized(message: Message) -> None:
    missing = find_missing_required(message)
    if missing:
        _log.debug(
            "%s is missing %d required field(s)",
            message.DESCRIPTOR.full_name,
            len(missing),
        )
        raise IncompleteMessageError(missing)
