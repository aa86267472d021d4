import enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class EncodingMode(str, enum.Enum):
    COMPACT = "compact"
    EMIT_UNPOPULATED = "emit_unpopulated"
    EMIT_DEFAULT_VALUES = "emit_default_values"
    EMIT_FIRESTORE_DEFAULTS = "emit_firestore_defaults"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PROTO_FIRESTORE_",
        env_file=".env",
        extra="ignore",
    )

    default_mode: EncodingMode = EncodingMode.COMPACT
    # protobuf's own default recursion limit
    max_depth: int = 100


proto_firestore_settings = Settings()
