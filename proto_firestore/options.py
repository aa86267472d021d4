from __future__ import annotations

from typing import Any, Optional

from google.protobuf import descriptor_pool
from google.protobuf.message import Message
from pydantic import BaseModel, ConfigDict, Field

from proto_firestore.settings import EncodingMode, proto_firestore_settings

__all__ = ["EncodingMode", "MarshalOptions"]


class MarshalOptions(BaseModel):
    """Options controlling how a message is turned into a document.

    ``mode`` selects which unpopulated fields are added to the document:

    ================================  ==========================================
    ``COMPACT``                       only populated fields
    ``EMIT_UNPOPULATED``              every non-oneof field; presence-tracking
                                      scalars and singular messages as ``None``
    ``EMIT_DEFAULT_VALUES``           like ``EMIT_UNPOPULATED`` without the
                                      ``None`` entries
    ``EMIT_FIRESTORE_DEFAULTS``       non-optional scalars at their zero value;
                                      populated oneof message arms kept as ``{}``
    ================================  ==========================================

    ``resolver`` is the descriptor pool used to look up the payload type of a
    ``google.protobuf.Any``. It defaults to the global pool.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    mode: EncodingMode = Field(
        default_factory=lambda: proto_firestore_settings.default_mode
    )
    # upb pools are not instances of descriptor_pool.DescriptorPool
    resolver: Optional[Any] = None
    max_depth: int = Field(
        default_factory=lambda: proto_firestore_settings.max_depth, ge=1
    )

    def get_resolver(self) -> descriptor_pool.DescriptorPool:
        if self.resolver is None:
            return descriptor_pool.Default()
        return self.resolver

    def marshal(self, message: Optional[Message]) -> dict[str, Any]:
        from proto_firestore.encoder import marshal_message

        return marshal_message(message, self)
