"""Keyed BLAKE2b signatures and their URL-safe text form."""

import base64
import binascii
import hashlib
import hmac
import logging
import re
import threading

from urlsigner.errors import InvalidSignature

logger = logging.getLogger(__name__)

MAX_KEY_SIZE = hashlib.blake2b.MAX_KEY_SIZE  # 64 bytes
DIGEST_SIZE = 32

_B64URL_PATTERN = re.compile(r"[A-Za-z0-9_-]*")


class KeyedHash:
    """
    Signs payloads with a secret-keyed BLAKE2b-256.

    The key is absorbed once, at construction. Every call works on its own
    copy of that pre-keyed context, so one instance can be shared between
    threads.
    """

    def __init__(self, secret: bytes | str):
        if isinstance(secret, str):
            secret = secret.encode("utf-8")
        if len(secret) > MAX_KEY_SIZE:
            logger.debug("Secret is %d bytes, using the first %d", len(secret), MAX_KEY_SIZE)
            secret = secret[:MAX_KEY_SIZE]
        self._lock = threading.Lock()
        self._keyed = hashlib.blake2b(key=secret, digest_size=DIGEST_SIZE)

    def sign(self, payload: bytes) -> bytes:
        with self._lock:
            h = self._keyed.copy()
        h.update(payload)
        return h.digest()

    def verify(self, payload: bytes, signature: bytes) -> bool:
        """Constant-time check of *signature* against *payload*."""
        return hmac.compare_digest(self.sign(payload), signature)


def encode_signature(signature: bytes) -> str:
    """URL-safe base64 without padding."""
    return base64.urlsafe_b64encode(signature).rstrip(b"=").decode("ascii")


def decode_signature(encoded: str) -> bytes:
    """
    Decode text produced by :func:`encode_signature`.

    Only the canonical encoding is accepted: characters outside the URL-safe
    alphabet, padding, impossible lengths and non-zero trailing bits are all
    rejected, so that changing any character changes the decoded bytes.

    Raises:
        InvalidSignature: if *encoded* is not valid unpadded base64url
    """
    if not _B64URL_PATTERN.fullmatch(encoded) or len(encoded) % 4 == 1:
        raise InvalidSignature(f"invalid base64: {encoded!r}")
    try:
        signature = base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4))
    except binascii.Error as exc:
        raise InvalidSignature(f"invalid base64: {encoded!r}") from exc
    if encode_signature(signature) != encoded:
        raise InvalidSignature(f"non-canonical base64: {encoded!r}")
    return signature
