"""Signed URL shortcuts backed by the environment settings."""

from functools import lru_cache

from urlsigner.config import get_settings
from urlsigner.signer import Signer


@lru_cache
def get_signer() -> Signer:
    """Get the cached signer configured from settings."""
    return Signer.from_settings(get_settings())


def sign_url(url: str, expiry_seconds: int | None = None) -> str:
    """
    Generate a signed URL.

    Args:
        url: Absolute URL or path (e.g., "https://example.com/files/report.pdf")
        expiry_seconds: How long the URL is valid (default from settings)

    Returns:
        Signed URL with expiry and signature embedded
    """
    if expiry_seconds is None:
        expiry_seconds = get_settings().default_lifespan_seconds
    return get_signer().sign(url, expiry_seconds)


def verify_url(url: str) -> bool:
    """
    Verify a signed URL.

    Args:
        url: The signed URL as received

    Returns:
        True if signature is valid and not expired
    """
    return get_signer().is_valid(url)
