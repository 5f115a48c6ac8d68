from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from urlsigner.schemas.options import ExpiryEncoding, FormatterKind


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="URLSIGNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Only the first 64 bytes are used
    secret_key: str = Field(default="change-me-in-production")

    # Signed URL layout
    formatter: FormatterKind = FormatterKind.QUERY
    expiry_encoding: ExpiryEncoding = ExpiryEncoding.DECIMAL
    skip_query: bool = False
    skip_scheme: bool = False  # Enable behind TLS-terminating proxies
    path_prefix: str = ""

    # Default expiry: 1 hour
    default_lifespan_seconds: int = Field(default=3600, ge=0)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
