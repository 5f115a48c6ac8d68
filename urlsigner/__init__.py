"""Tamper-evident, expiring URLs signed with a secret key."""

from urlsigner.errors import (
    DecodeError,
    Expired,
    InvalidFormat,
    InvalidSignature,
    InvalidURL,
    SignedURLError,
)
from urlsigner.schemas.options import (
    ExpiryEncoding,
    FormatterKind,
    SignerOptions,
    prefix_path,
    skip_query,
    skip_scheme,
    with_base58_expiry,
    with_decimal_expiry,
    with_path_formatter,
    with_query_formatter,
)
from urlsigner.signer import Signer

__all__ = [
    "DecodeError",
    "Expired",
    "ExpiryEncoding",
    "FormatterKind",
    "InvalidFormat",
    "InvalidSignature",
    "InvalidURL",
    "SignedURLError",
    "Signer",
    "SignerOptions",
    "prefix_path",
    "skip_query",
    "skip_scheme",
    "with_base58_expiry",
    "with_decimal_expiry",
    "with_path_formatter",
    "with_query_formatter",
]
