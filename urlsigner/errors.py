"""Errors raised while signing and verifying URLs."""


class SignedURLError(Exception):
    """Base class for every signing and verification failure."""


class InvalidURL(SignedURLError):
    """The input is not an absolute URL or an absolute path."""


class InvalidFormat(SignedURLError):
    """A component required by the configured formatter is missing."""


class InvalidSignature(SignedURLError):
    """The signature is malformed or does not match the URL."""


class Expired(SignedURLError):
    """The signature is valid but the URL is past its expiry."""

    def __init__(self, expiry: int):
        super().__init__(f"URL expired at {expiry}")
        self.expiry = expiry


class DecodeError(SignedURLError, ValueError):
    """An encoded integer is present but cannot be decoded."""
