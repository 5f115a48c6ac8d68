"""
Formatters decide where the expiry and signature live in a signed URL.

Each formatter is driven through the same sequence while signing::

    add_expiry -> build_payload -> add_signature

and the reverse while verifying::

    extract_signature -> build_payload -> extract_expiry

``build_payload`` must see the URL in the same shape both times: expiry
embedded, signature absent.
"""

from urlsigner.errors import InvalidFormat
from urlsigner.schemas.options import FormatterKind
from urlsigner.utils.url import SignableURL

EXPIRY_PARAM = "expiry"
SIGNATURE_PARAM = "signature"


class QueryFormatter:
    """``/path?other=x&expiry=<exp>&signature=<sig>``"""

    def add_expiry(self, url: SignableURL, expiry: str) -> None:
        url.set_param(EXPIRY_PARAM, expiry)

    def build_payload(self, url: SignableURL, *, skip_query: bool, skip_scheme: bool) -> bytes:
        """
        Sign every other parameter in its original order, then the expiry.

        Only the expiry survives ``skip_query``; it has to be signed because
        the verifier reads it back out of the URL. The signature is never
        part of the payload.
        """
        expiry = [(k, v) for k, v in url.query if k == EXPIRY_PARAM]
        if skip_query:
            pairs = expiry
        else:
            others = [(k, v) for k, v in url.query if k not in (EXPIRY_PARAM, SIGNATURE_PARAM)]
            pairs = others + expiry
        return url.payload(query=pairs, skip_scheme=skip_scheme)

    def add_signature(self, url: SignableURL, signature: str) -> None:
        url.set_param(SIGNATURE_PARAM, signature)

    def extract_signature(self, url: SignableURL) -> str:
        return self._pop(url, SIGNATURE_PARAM)

    def extract_expiry(self, url: SignableURL) -> str:
        return self._pop(url, EXPIRY_PARAM)

    @staticmethod
    def _pop(url: SignableURL, name: str) -> str:
        value = url.get_param(name)
        if not value:
            raise InvalidFormat(f"Missing {name!r} query parameter")
        url.remove_param(name)
        return value


class PathFormatter:
    """``/<sig>.<exp>/path``: signature and expiry as a leading path segment."""

    def add_expiry(self, url: SignableURL, expiry: str) -> None:
        """``/foo/bar`` -> ``<exp>/foo/bar``"""
        url.path = expiry + (url.path or "/")

    def build_payload(self, url: SignableURL, *, skip_query: bool, skip_scheme: bool) -> bytes:
        """Path must be ``<exp>/...``."""
        return url.payload(query=[] if skip_query else None, skip_scheme=skip_scheme)

    def add_signature(self, url: SignableURL, signature: str) -> None:
        """``<exp>/foo/bar`` -> ``/<sig>.<exp>/foo/bar``"""
        url.path = "/" + signature + "." + url.path

    def extract_signature(self, url: SignableURL) -> str:
        """``/<sig>.<exp>/foo/bar`` -> ``<exp>/foo/bar``, returning ``<sig>``."""
        if not url.path.startswith("/"):
            raise InvalidFormat(f"Path must start with '/': {url.path!r}")
        signature, sep, rest = url.path[1:].partition(".")
        if not sep or not signature:
            raise InvalidFormat(f"Missing signature segment in path: {url.path!r}")
        url.path = rest
        return signature

    def extract_expiry(self, url: SignableURL) -> str:
        """``<exp>/foo/bar`` -> ``/foo/bar``, returning ``<exp>``."""
        expiry, sep, rest = url.path.partition("/")
        if not sep or not expiry:
            raise InvalidFormat(f"Missing expiry segment in path: {url.path!r}")
        url.path = "/" + rest
        return expiry


Formatter = QueryFormatter | PathFormatter

_FORMATTERS: dict[FormatterKind, Formatter] = {
    FormatterKind.QUERY: QueryFormatter(),
    FormatterKind.PATH: PathFormatter(),
}


def get_formatter(kind: FormatterKind) -> Formatter:
    """Return the formatter for a configured formatter kind."""
    return _FORMATTERS[kind]
