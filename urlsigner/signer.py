"""Sign URLs with an expiry and verify them later without server-side state."""

import logging
import time
from datetime import UTC, datetime, timedelta

from urlsigner.config import Settings, get_settings
from urlsigner.errors import Expired, InvalidFormat, InvalidSignature, SignedURLError
from urlsigner.formatters import get_formatter
from urlsigner.schemas.options import (
    ExpiryEncoding,
    FormatterKind,
    Option,
    SignerOptions,
    build_options,
    prefix_path,
    skip_query,
    skip_scheme,
    with_base58_expiry,
    with_decimal_expiry,
    with_path_formatter,
    with_query_formatter,
)
from urlsigner.utils.int_encoding import get_int_encoding
from urlsigner.utils.keyed_hash import KeyedHash, decode_signature, encode_signature
from urlsigner.utils.url import SignableURL

logger = logging.getLogger(__name__)


class Signer:
    """
    Issues and verifies signed, expiring URLs.

    Construct once per secret and reuse; the secret is absorbed into the
    hash state at construction. Instances are safe to share between threads.

    Example::

        signer = Signer(b"secret", with_path_formatter(), prefix_path("/signed"))
        signed = signer.sign("https://example.com/a/b/c?foo=bar", 3600)
        signer.verify(signed)
    """

    def __init__(self, secret: bytes | str, *options: Option):
        self._options = build_options(*options)
        self._hash = KeyedHash(secret)
        self._formatter = get_formatter(self._options.formatter)
        self._encoding = get_int_encoding(self._options.expiry_encoding)
        logger.debug(
            "Signer created (formatter=%s, expiry_encoding=%s, skip_query=%s, skip_scheme=%s)",
            self._options.formatter.value,
            self._options.expiry_encoding.value,
            self._options.skip_query,
            self._options.skip_scheme,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "Signer":
        """Build a signer from environment settings."""
        if settings is None:
            settings = get_settings()
        return cls(
            settings.secret_key,
            with_path_formatter()
            if settings.formatter == FormatterKind.PATH
            else with_query_formatter(),
            with_base58_expiry()
            if settings.expiry_encoding == ExpiryEncoding.BASE58
            else with_decimal_expiry(),
            skip_query(settings.skip_query),
            skip_scheme(settings.skip_scheme),
            prefix_path(settings.path_prefix),
        )

    @property
    def options(self) -> SignerOptions:
        return self._options

    def sign(
        self,
        url: str,
        lifespan: timedelta | int | float | None = None,
        *,
        expires_at: datetime | int | None = None,
    ) -> str:
        """
        Return *url* with an embedded expiry and signature.

        Args:
            url: Absolute URL or absolute path to sign
            lifespan: How long the URL stays valid, from now
            expires_at: Absolute expiry instead of *lifespan*

        Returns:
            The signed URL

        Raises:
            InvalidURL: if *url* does not parse
        """
        expiry = _resolve_expiry(lifespan, expires_at)
        u = SignableURL.parse(url)

        self._formatter.add_expiry(u, self._encoding.encode(expiry))
        payload = self._formatter.build_payload(
            u, skip_query=self._options.skip_query, skip_scheme=self._options.skip_scheme
        )
        signature = self._hash.sign(payload)
        self._formatter.add_signature(u, encode_signature(signature))

        if self._options.prefix:
            u.path = self._options.prefix + u.path
        return u.geturl()

    def verify(self, url: str) -> None:
        """
        Check the signature and expiry of a signed URL.

        Raises:
            InvalidURL: if *url* does not parse
            InvalidFormat: if the prefix, signature or expiry is missing
            InvalidSignature: if the signature is malformed or does not match
            DecodeError: if the expiry is present but malformed
            Expired: if the URL is past its expiry
        """
        u = SignableURL.parse(url)

        prefix = self._options.prefix
        if prefix:
            rest = u.path[len(prefix):]
            if not u.path.startswith(prefix) or (rest and not rest.startswith("/")):
                raise InvalidFormat(f"Path does not start with prefix {prefix!r}")
            u.path = rest

        signature = decode_signature(self._formatter.extract_signature(u))
        payload = self._formatter.build_payload(
            u, skip_query=self._options.skip_query, skip_scheme=self._options.skip_scheme
        )
        if not self._hash.verify(payload, signature):
            raise InvalidSignature("Signature does not match")

        expiry = self._encoding.decode(self._formatter.extract_expiry(u))
        if expiry <= time.time():
            raise Expired(expiry)

    def is_valid(self, url: str) -> bool:
        """True if :meth:`verify` accepts *url*."""
        try:
            self.verify(url)
        except SignedURLError:
            return False
        return True


def _resolve_expiry(lifespan: timedelta | int | float | None, expires_at: datetime | int | None) -> int:
    if (lifespan is None) == (expires_at is None):
        raise TypeError("Pass exactly one of lifespan or expires_at")

    if lifespan is not None:
        if isinstance(lifespan, timedelta):
            lifespan = lifespan.total_seconds()
        expiry = int(time.time() + lifespan)
    elif isinstance(expires_at, datetime):
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        expiry = int(expires_at.timestamp())
    else:
        expiry = int(expires_at)

    if expiry < 0:
        raise ValueError(f"Expiry must not be before the Unix epoch: {expiry}")
    return expiry
