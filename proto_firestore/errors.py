"""Errors raised while marshalling protobuf messages into documents."""

from __future__ import annotations

from typing import Any, Optional


class MarshalError(Exception):
    """Base class for recoverable marshalling errors."""


class UnsupportedConstructError(MarshalError):
    """The message uses a construct that has no document representation."""


class InvalidUTF8Error(MarshalError):
    def __init__(self, field_name: str):
        super().__init__(f"field {field_name} contains invalid UTF-8")
        self.field_name = field_name


class OutOfRangeError(MarshalError):
    """A well-known type holds a value outside of its defined domain."""


class RecursionDepthError(MarshalError):
    def __init__(self, max_depth: int):
        super().__init__(f"message nesting exceeds the maximum depth of {max_depth}")
        self.max_depth = max_depth


class IncompleteMessageError(MarshalError):
    """Required fields are missing.

    The document encoded from the message is still attached, so callers
    that can live with a partial result may use it.
    """

    def __init__(self, missing: list[str], document: Optional[dict[str, Any]] = None):
        super().__init__(
            f"message is missing required fields: {', '.join(missing)}"
        )
        self.missing = missing
        self.document = document


class InvariantViolationError(RuntimeError):
    """A descriptor reported something the protobuf type system cannot produce.

    Not a MarshalError: it points at a broken descriptor, not at bad input.
    """
