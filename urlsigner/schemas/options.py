"""Signer configuration and the composable options that build it."""

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FormatterKind(str, Enum):
    """Where the expiry and signature are embedded in the URL."""

    QUERY = "query"
    PATH = "path"


class ExpiryEncoding(str, Enum):
    """How the expiry timestamp is written as text."""

    DECIMAL = "decimal"
    BASE58 = "base58"


class SignerOptions(BaseModel):
    """Immutable Signer configuration."""

    model_config = ConfigDict(frozen=True)

    formatter: FormatterKind = FormatterKind.QUERY
    expiry_encoding: ExpiryEncoding = ExpiryEncoding.DECIMAL
    skip_query: bool = False
    skip_scheme: bool = False
    prefix: str = Field(default="", description="Literal path prefix, never signed")

    @field_validator("prefix")
    @classmethod
    def normalize_prefix(cls, value: str) -> str:
        """Force a single leading slash and no trailing slash."""
        if "?" in value or "#" in value:
            raise ValueError("prefix must not contain '?' or '#'")
        value = value.strip().strip("/")
        if not value:
            return ""
        return "/" + value

    def replace(self, **changes: Any) -> "SignerOptions":
        """Return a validated copy with *changes* applied."""
        return SignerOptions.model_validate({**self.model_dump(), **changes})


Option = Callable[[SignerOptions], SignerOptions]


def build_options(*options: Option) -> SignerOptions:
    """Apply *options* in order to the defaults; later options win."""
    result = SignerOptions()
    for option in options:
        result = option(result)
    return result


def with_query_formatter() -> Option:
    """Carry expiry and signature as query parameters."""
    return lambda opts: opts.replace(formatter=FormatterKind.QUERY)


def with_path_formatter() -> Option:
    """Carry expiry and signature as a leading path segment."""
    return lambda opts: opts.replace(formatter=FormatterKind.PATH)


def with_decimal_expiry() -> Option:
    return lambda opts: opts.replace(expiry_encoding=ExpiryEncoding.DECIMAL)


def with_base58_expiry() -> Option:
    return lambda opts: opts.replace(expiry_encoding=ExpiryEncoding.BASE58)


def skip_query(enabled: bool = True) -> Option:
    """Leave the query string (except the expiry) out of the signed payload."""
    return lambda opts: opts.replace(skip_query=enabled)


def skip_scheme(enabled: bool = True) -> Option:
    """Leave the scheme out of the signed payload."""
    return lambda opts: opts.replace(skip_scheme=enabled)


def prefix_path(prefix: str) -> Option:
    """Mark signed URLs with a literal path prefix, e.g. ``/signed``."""
    return lambda opts: opts.replace(prefix=prefix)
