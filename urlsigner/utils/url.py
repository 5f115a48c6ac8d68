"""Mutable URL builder threaded through the sign and verify pipelines."""

import re
from dataclasses import dataclass, field
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from urlsigner.errors import InvalidURL

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")

QueryPairs = list[tuple[str, str]]


@dataclass
class SignableURL:
    """
    A URL split into the parts the formatters work on.

    The query is kept as an ordered list of decoded pairs, in the order they
    appeared in the input. It is re-encoded with ``urlencode`` whenever the
    URL is serialized, so equivalent spellings (``%7E`` and ``~``, ``a`` and
    ``a=``) converge after the first parse.
    """

    scheme: str
    netloc: str
    path: str
    query: QueryPairs = field(default_factory=list)
    fragment: str = ""

    @classmethod
    def parse(cls, raw: str) -> "SignableURL":
        """
        Parse an absolute URL (``scheme://host/...``) or an absolute path.

        Network-path references (``//host/path``) are rejected rather than
        read as a path starting with ``//``: ``urlsplit`` takes ``host`` as
        the netloc, and serializing that back as a bare path differs between
        Python versions.

        Raises:
            InvalidURL: for anything else, including relative references
        """
        if not raw or _CONTROL_CHARS.search(raw):
            raise InvalidURL(f"Invalid URL: {raw!r}")
        try:
            parts = urlsplit(raw)
        except ValueError as exc:
            raise InvalidURL(f"Invalid URL: {raw!r}") from exc

        if parts.scheme:
            if not parts.netloc:
                raise InvalidURL(f"URL has no host: {raw!r}")
        elif parts.netloc or not parts.path.startswith("/"):
            raise InvalidURL(f"Not an absolute URL or path: {raw!r}")

        return cls(
            scheme=parts.scheme,
            netloc=parts.netloc,
            path=parts.path,
            query=parse_qsl(parts.query, keep_blank_values=True),
            fragment=parts.fragment,
        )

    def payload(self, *, query: QueryPairs | None = None, skip_scheme: bool = False) -> bytes:
        """
        Canonical bytes for signing.

        *query* overrides the URL's own query pairs. The fragment is never
        included since clients do not send it to the server.
        """
        pairs = self.query if query is None else query
        scheme = "" if skip_scheme else self.scheme
        text = urlunsplit((scheme, self.netloc, self.path, urlencode(pairs), ""))
        return text.encode("utf-8")

    def geturl(self) -> str:
        return urlunsplit(
            (self.scheme, self.netloc, self.path, urlencode(self.query), self.fragment)
        )

    def get_param(self, name: str) -> str | None:
        """First value of query parameter *name*, or None."""
        for key, value in self.query:
            if key == name:
                return value
        return None

    def remove_param(self, name: str) -> None:
        self.query = [(key, value) for key, value in self.query if key != name]

    def set_param(self, name: str, value: str) -> None:
        """Replace every occurrence of *name* with a single trailing pair."""
        self.remove_param(name)
        self.query.append((name, value))
