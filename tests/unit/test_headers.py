"""
Unit tests for the ordered header collection.
"""

import pytest

from httpexchange.http.headers import HeaderList, to_bytes


class TestHeaderList:
    """Tests for HeaderList."""

    def test_preserves_insertion_order(self):
        headers = HeaderList([("X-B", "2"), ("X-A", "1"), ("X-B", "3")])

        assert list(headers) == [(b"X-B", b"2"), (b"X-A", b"1"), (b"X-B", b"3")]
        assert len(headers) == 3

    def test_get_all_and_first(self):
        headers = HeaderList()
        headers.add("Set-Cookie", "a=1")
        headers.add("Set-Cookie", "b=2")

        assert headers.get_all("Set-Cookie") == [b"a=1", b"b=2"]
        assert headers.first("Set-Cookie") == b"a=1"

    def test_first_default(self):
        headers = HeaderList()

        assert headers.first("X-Missing") is None
        assert headers.first("X-Missing", b"fallback") == b"fallback"

    def test_set_replaces(self):
        headers = HeaderList([("X-A", "1"), ("X-A", "2")])
        headers.set("X-A", "3")

        assert headers.items() == [(b"X-A", b"3")]

    def test_remove_is_noop_when_absent(self):
        headers = HeaderList([("X-A", "1")])
        headers.remove("X-B")

        assert headers.items() == [(b"X-A", b"1")]

    def test_clear(self):
        headers = HeaderList([("X-A", "1"), ("X-B", "2")])
        headers.clear()

        assert len(headers) == 0
        assert not headers.contains("X-A")

    def test_contains_with_value(self):
        headers = HeaderList([("Vary", "Accept"), ("Vary", "Origin")])

        assert headers.contains("Vary", "Origin")
        assert not headers.contains("Vary", "Cookie")
        assert not headers.contains("vary")

    def test_in_operator(self):
        headers = HeaderList([("X-A", "1")])

        assert "X-A" in headers
        assert b"X-A" in headers
        assert "x-a" not in headers
        assert 42 not in headers

    def test_items_is_a_snapshot(self):
        headers = HeaderList([("X-A", "1")])
        snapshot = headers.items()

        headers.add("X-B", "2")

        assert snapshot == [(b"X-A", b"1")]

    def test_iteration_survives_mutation(self):
        headers = HeaderList([("X-A", "1"), ("X-B", "2")])

        for name, _ in headers:
            headers.remove(name)

        assert len(headers) == 0

    def test_equality(self):
        assert HeaderList([("X-A", "1")]) == HeaderList([(b"X-A", b"1")])
        assert HeaderList([("X-A", "1")]) != HeaderList([("X-A", "2")])

    def test_repr(self):
        assert repr(HeaderList([("X-A", "1")])) == "HeaderList([(b'X-A', b'1')])"


class TestToBytes:
    """Tests for header field coercion."""

    def test_str_is_latin1(self):
        assert to_bytes("café") == b"caf\xe9"

    def test_bytes_like(self):
        assert to_bytes(bytearray(b"abc")) == b"abc"
        assert to_bytes(memoryview(b"abc")) == b"abc"

    def test_non_latin1_text_rejected(self):
        with pytest.raises(UnicodeEncodeError):
            to_bytes("日本")

    def test_other_types_rejected(self):
        with pytest.raises(TypeError):
            to_bytes(42)
