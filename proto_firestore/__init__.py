"""Convert protobuf messages into documents for schemaless document stores."""

from .encoder import marshal
from .errors import (
    IncompleteMessageError,
    InvalidUTF8Error,
    InvariantViolationError,
    MarshalError,
    OutOfRangeError,
    RecursionDepthError,
    UnsupportedConstructError,
)
from .options import EncodingMode, MarshalOptions

__all__ = [
    "EncodingMode",
    "IncompleteMessageError",
    "InvalidUTF8Error",
    "InvariantViolationError",
    "MarshalError",
    "MarshalOptions",
    "OutOfRangeError",
    "RecursionDepthError",
    "UnsupportedConstructError",
    "marshal",
]
