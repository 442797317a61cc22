"""Tests for canonical signing-string construction."""

from __future__ import annotations

import pytest

from httpsign.canonical import build_signing_string, encode_signing_string
from httpsign.errors import MissingHeaderError, ParseError
from httpsign.request import HTTPRequest

DATE = "Sat, 17 Oct 2026 12:00:00 GMT"


@pytest.fixture
def request_() -> HTTPRequest:
    return HTTPRequest.build(
        "GET",
        "/a/b?x=1&y=%20",
        [
            ("Host", "example.com:8443"),
            ("Date", DATE),
            ("Digest", "SHA-256=abc="),
            ("X-Multi", "first"),
            ("X-Multi", "second"),
        ],
    )


class TestBuildSigningString:
    def test_request_target(self, request_: HTTPRequest):
        assert build_signing_string(request_, ["(request-target)"]) == "(request-target): get /a/b?x=1&y=%20"

    def test_method_lowercased(self):
        request = HTTPRequest.build("PATCH", "/a")
        assert build_signing_string(request, ["(request-target)"]) == "(request-target): patch /a"

    def test_lines_joined_without_trailing_newline(self, request_: HTTPRequest):
        text = build_signing_string(request_, ["(request-target)", "date", "digest"])
        assert text == f"(request-target): get /a/b?x=1&y=%20\ndate: {DATE}\ndigest: SHA-256=abc="
        assert not text.endswith("\n")

    def test_order_follows_list(self, request_: HTTPRequest):
        text = build_signing_string(request_, ["digest", "date"])
        assert text == f"digest: SHA-256=abc=\ndate: {DATE}"

    def test_host_from_request(self, request_: HTTPRequest):
        assert build_signing_string(request_, ["host"]) == "host: example.com:8443"

    def test_host_without_literal_header(self):
        request = HTTPRequest.build("GET", "/", {}, host="internal:9000")
        assert build_signing_string(request, ["host"]) == "host: internal:9000"

    def test_header_lookup_case_insensitive_name_preserved(self, request_: HTTPRequest):
        assert build_signing_string(request_, ["Date"]) == f"Date: {DATE}"

    def test_first_value_used(self, request_: HTTPRequest):
        assert build_signing_string(request_, ["x-multi"]) == "x-multi: first"

    def test_value_verbatim(self):
        request = HTTPRequest.build("GET", "/", {"X-Spaced": "  a  b  "})
        assert build_signing_string(request, ["x-spaced"]) == "x-spaced:   a  b  "

    def test_missing_header(self, request_: HTTPRequest):
        with pytest.raises(MissingHeaderError) as exc_info:
            build_signing_string(request_, ["date", "x-absent"])
        assert exc_info.value.header == "x-absent"

    def test_empty_header_treated_as_missing(self):
        request = HTTPRequest.build("GET", "/", {"X-Empty": ""})
        with pytest.raises(MissingHeaderError):
            build_signing_string(request, ["x-empty"])

    def test_deterministic(self, request_: HTTPRequest):
        headers = ["(request-target)", "host", "date", "digest"]
        assert build_signing_string(request_, headers) == build_signing_string(request_, headers)


class TestEncodeSigningString:
    def test_latin1_round_trip(self):
        assert encode_signing_string("x: caf\xe9") == b"x: caf\xe9"

    def test_outside_latin1(self):
        with pytest.raises(ParseError):
            encode_signing_string("x: ☃")
