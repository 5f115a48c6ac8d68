import pytest

from urlsigner.errors import InvalidFormat
from urlsigner.formatters import PathFormatter, QueryFormatter, get_formatter
from urlsigner.schemas.options import FormatterKind
from urlsigner.utils.url import SignableURL

EXPIRY = "3507595200"
SIGNATURE = "YWJjZGVm"  # base64url("abcdef")


class TestQueryFormatter:
    def test_four_step_protocol(self):
        f = QueryFormatter()
        u = SignableURL.parse("https://example.com/a?foo=bar")

        f.add_expiry(u, EXPIRY)
        assert u.geturl() == "https://example.com/a?foo=bar&expiry=3507595200"

        f.add_signature(u, SIGNATURE)
        assert u.geturl() == "https://example.com/a?foo=bar&expiry=3507595200&signature=YWJjZGVm"

        assert f.extract_signature(u) == SIGNATURE
        assert u.geturl() == "https://example.com/a?foo=bar&expiry=3507595200"

        assert f.extract_expiry(u) == EXPIRY
        assert u.geturl() == "https://example.com/a?foo=bar"

    def test_payload_is_identical_before_signing_and_after_extraction(self):
        f = QueryFormatter()
        u = SignableURL.parse("https://example.com/a?foo=bar&baz=cow")
        f.add_expiry(u, EXPIRY)
        before = f.build_payload(u, skip_query=False, skip_scheme=False)

        f.add_signature(u, SIGNATURE)
        reparsed = SignableURL.parse(u.geturl())
        f.extract_signature(reparsed)

        assert f.build_payload(reparsed, skip_query=False, skip_scheme=False) == before

    def test_payload_puts_expiry_last_and_drops_signature(self):
        f = QueryFormatter()
        u = SignableURL.parse("https://example.com/a?expiry=1&signature=x&foo=bar&baz=cow")

        payload = f.build_payload(u, skip_query=False, skip_scheme=False)

        assert payload == b"https://example.com/a?foo=bar&baz=cow&expiry=1"

    def test_skip_query_keeps_only_expiry(self):
        f = QueryFormatter()
        u = SignableURL.parse("https://example.com/a?foo=bar&expiry=1")

        payload = f.build_payload(u, skip_query=True, skip_scheme=False)

        assert payload == b"https://example.com/a?expiry=1"

    def test_skip_scheme(self):
        f = QueryFormatter()
        u = SignableURL.parse("https://example.com/a?expiry=1")

        assert f.build_payload(u, skip_query=False, skip_scheme=True) == b"//example.com/a?expiry=1"

    def test_add_expiry_replaces_existing_parameter(self):
        f = QueryFormatter()
        u = SignableURL.parse("https://example.com/a?expiry=9999999999&foo=bar")

        f.add_expiry(u, EXPIRY)

        assert u.query == [("foo", "bar"), ("expiry", EXPIRY)]

    @pytest.mark.parametrize("query", ["foo=bar", "foo=bar&signature=", "signature"])
    def test_missing_signature(self, query):
        u = SignableURL.parse(f"https://example.com/a?{query}")
        with pytest.raises(InvalidFormat, match="signature"):
            QueryFormatter().extract_signature(u)

    def test_missing_expiry(self):
        u = SignableURL.parse("https://example.com/a?foo=bar")
        with pytest.raises(InvalidFormat, match="expiry"):
            QueryFormatter().extract_expiry(u)


class TestPathFormatter:
    def test_four_step_protocol(self):
        f = PathFormatter()
        u = SignableURL.parse("https://example.com/foo/bar?x=1")

        f.add_expiry(u, EXPIRY)
        assert u.path == "3507595200/foo/bar"

        f.add_signature(u, SIGNATURE)
        assert u.path == "/YWJjZGVm.3507595200/foo/bar"
        assert u.geturl() == "https://example.com/YWJjZGVm.3507595200/foo/bar?x=1"

        assert f.extract_signature(u) == SIGNATURE
        assert u.path == "3507595200/foo/bar"

        assert f.extract_expiry(u) == EXPIRY
        assert u.path == "/foo/bar"

    def test_payload(self):
        f = PathFormatter()
        u = SignableURL.parse("https://example.com/foo/bar?x=1")
        f.add_expiry(u, EXPIRY)

        assert f.build_payload(u, skip_query=False, skip_scheme=False) == (
            b"https://example.com/3507595200/foo/bar?x=1"
        )
        assert f.build_payload(u, skip_query=True, skip_scheme=False) == (
            b"https://example.com/3507595200/foo/bar"
        )
        assert f.build_payload(u, skip_query=True, skip_scheme=True) == (
            b"//example.com/3507595200/foo/bar"
        )

    def test_empty_path_gets_a_slash(self):
        f = PathFormatter()
        u = SignableURL.parse("https://example.com")

        f.add_expiry(u, EXPIRY)
        f.add_signature(u, SIGNATURE)
        assert u.geturl() == "https://example.com/YWJjZGVm.3507595200/"

        f.extract_signature(u)
        assert f.extract_expiry(u) == EXPIRY
        assert u.path == "/"

    def test_dots_in_original_path_are_preserved(self):
        f = PathFormatter()
        u = SignableURL.parse("https://example.com/YWJjZGVm.3507595200/files/report.v2.pdf")

        assert f.extract_signature(u) == SIGNATURE
        assert f.extract_expiry(u) == EXPIRY
        assert u.path == "/files/report.v2.pdf"

    @pytest.mark.parametrize("path", ["/foo/bar", "/.3507595200/foo", "/"])
    def test_missing_signature_segment(self, path):
        u = SignableURL.parse(f"https://example.com{path}")
        with pytest.raises(InvalidFormat, match="signature"):
            PathFormatter().extract_signature(u)

    @pytest.mark.parametrize("path", ["3507595200", "/foo/bar"])
    def test_missing_expiry_segment(self, path):
        u = SignableURL("https", "example.com", path)
        with pytest.raises(InvalidFormat, match="expiry"):
            PathFormatter().extract_expiry(u)


class TestGetFormatter:
    def test_maps_configured_kinds(self):
        assert isinstance(get_formatter(FormatterKind.QUERY), QueryFormatter)
        assert isinstance(get_formatter(FormatterKind.PATH), PathFormatter)
