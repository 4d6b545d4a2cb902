"""
Unit tests for request method flags.
"""

import pytest

from httpexchange.http.methods import Method, MethodSet


class TestMethod:
    """Tests for Method lookups and matching."""

    @pytest.mark.parametrize("name,expected", [
        ("GET", Method.GET),
        ("Get", Method.GET),
        (b"POST", Method.POST),
        (b"Patch", Method.PATCH),
        ("CONNECT", Method.CONNECT),
    ])
    def test_from_name(self, name, expected):
        assert Method.from_name(name) == expected

    @pytest.mark.parametrize("name", ["get", "gEt", "TRACE", "", b"\xff"])
    def test_from_name_unknown(self, name):
        assert Method.from_name(name) == Method.UNKNOWN

    def test_from_names(self):
        allowed = Method.from_names(["GET", "HEAD", "TRACE"])

        assert allowed == Method.GET | Method.HEAD

    def test_matches(self):
        allowed: MethodSet = Method.GET | Method.HEAD

        assert Method.GET.matches(allowed)
        assert Method.HEAD.matches(allowed)
        assert not Method.POST.matches(allowed)

    def test_all_covers_every_method(self):
        for method in (Method.GET, Method.PUT, Method.DELETE, Method.POST,
                       Method.HEAD, Method.OPTIONS, Method.PATCH, Method.CONNECT):
            assert method.matches(Method.ALL)

    def test_unknown_never_matches(self):
        assert not Method.UNKNOWN.matches(Method.ALL)
        assert not Method.UNKNOWN.matches(Method.UNKNOWN)

    def test_bit_values(self):
        assert int(Method.GET) == 0x01
        assert int(Method.CONNECT) == 0x80
        assert int(Method.ALL) == 0xFF

    def test_token(self):
        assert Method.DELETE.token == "DELETE"
        assert Method.UNKNOWN.token == "UNKNOWN"
