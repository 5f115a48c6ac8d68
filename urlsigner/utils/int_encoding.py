"""Text encodings for expiry timestamps."""

import base64
import binascii
import re

import base58

from urlsigner.errors import DecodeError
from urlsigner.schemas.options import ExpiryEncoding

FLICKR_ALPHABET = b"123456789abcdefghijkmnopqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_DECIMAL_PATTERN = re.compile(r"[+-]?[0-9]+")


def _check_range(value: int, text: str) -> int:
    if not INT64_MIN <= value <= INT64_MAX:
        raise DecodeError(f"Value out of 64-bit range: {text!r}")
    return value


class DecimalEncoding:
    """Plain base-10 digits."""

    def encode(self, value: int) -> str:
        return str(value)

    def decode(self, text: str) -> int:
        # int() would also accept whitespace, underscores and non-ASCII digits
        if not _DECIMAL_PATTERN.fullmatch(text):
            raise DecodeError(f"Invalid decimal integer: {text!r}")
        return _check_range(int(text), text)


class Base58Encoding:
    """Flickr-alphabet base58 over the unsigned 64-bit value."""

    def encode(self, value: int) -> str:
        if value < 0:
            raise ValueError("base58 can only encode non-negative integers")
        return base58.b58encode_int(value, alphabet=FLICKR_ALPHABET).decode("ascii")

    def decode(self, text: str) -> int:
        if not text or text != text.strip():
            raise DecodeError(f"Invalid base58 integer: {text!r}")
        try:
            value = base58.b58decode_int(text, alphabet=FLICKR_ALPHABET)
        except ValueError as exc:
            raise DecodeError(f"Invalid base58 integer: {text!r}") from exc
        return _check_range(value, text)


class Base64Encoding:
    """
    Eight big-endian bytes as unpadded URL-safe base64.

    Not selectable through ``SignerOptions``; kept for callers that build
    their own pipeline around the formatters.
    """

    def encode(self, value: int) -> str:
        raw = value.to_bytes(8, "big", signed=True)
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    def decode(self, text: str) -> int:
        try:
            raw = base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))
        except (binascii.Error, ValueError) as exc:
            raise DecodeError(f"Invalid base64 integer: {text!r}") from exc
        if len(raw) != 8:
            raise DecodeError(f"Expected 8 bytes, got {len(raw)}: {text!r}")
        return int.from_bytes(raw, "big", signed=True)


IntEncoding = DecimalEncoding | Base58Encoding | Base64Encoding

_ENCODINGS: dict[ExpiryEncoding, IntEncoding] = {
    ExpiryEncoding.DECIMAL: DecimalEncoding(),
    ExpiryEncoding.BASE58: Base58Encoding(),
}


def get_int_encoding(kind: ExpiryEncoding) -> IntEncoding:
    """Return the encoder for a configured expiry encoding."""
    return _ENCODINGS[kind]
