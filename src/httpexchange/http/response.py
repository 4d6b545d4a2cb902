"""
=============================================================================
HTTP RESPONSE MODEL
=============================================================================

The outgoing half of an exchange: a status code, an ordered header
collection and a body, built up by handler code and then written once to
a responder.

=============================================================================
RESPONSE LIFECYCLE
=============================================================================

    handler builds          handler mutates          server writes
    ──────────────►         ───────────────►         ─────────────►
    HTTPResponse.from_json  response.add_header(...)  response.write(responder)
    ({"id": 1})             response.set_header(...)
                                                     (read-only, exactly once)

=============================================================================
CONSTRUCTION PATHS
=============================================================================

Every path funnels into one canonical constructor,

    HTTPResponse(mime_type, data, status)

which is the only place Content-Type gets set:

    ┌──────────────────────────────┬──────────────────────────┬────────────┐
    │ Path                         │ Content-Type             │ Status     │
    ├──────────────────────────────┼──────────────────────────┼────────────┤
    │ from_status(status)          │ application/x-empty      │ given      │
    │ from_data(bytes | str)       │ sniffed from the bytes   │ 200        │
    │ from_json(dict | list)       │ application/json         │ 200        │
    │ HTTPResponse(mime, data, st) │ mime (none if empty)     │ given      │
    │ from_file(path)              │ sniffed from name+bytes  │ 200 / 404  │
    └──────────────────────────────┴──────────────────────────┴────────────┘

from_file() never raises for a missing or unreadable file: it answers with
an empty 404 instead, so a response object can always be produced.

=============================================================================
SERIALIZATION
=============================================================================

write() emits, in this order:

    HTTP/1.1 200 OK\r\n                 ← status line
    X-A: 1\r\n                          ┐
    X-A: 2\r\n                          │ stored headers, as stored:
    X-B: 3\r\n                          ┘ no dedup, no reordering
    Content-Length: 5\r\n               ← always computed from the body
    \r\n
    hello                               ← body

Content-Length is appended at write time from len(data). A caller-set
Content-Length is still sent, but the computed one always follows it.

If the responder is no longer connected, write() emits nothing and
returns quietly.

=============================================================================
"""

from pathlib import Path
from typing import Any, Iterable, Optional, Union
import json
import logging

from .headers import (
    CONTENT_LENGTH_HEADER,
    CONTENT_TYPE_HEADER,
    HeaderList,
    HeaderName,
    HeaderValue,
    to_bytes,
)
from .mime_types import (
    CONTENT_TYPE_JSON,
    CONTENT_TYPE_TEXT_HTML,
    CONTENT_TYPE_X_EMPTY,
    DEFAULT_SNIFF_LENGTH,
    mime_type_for_data,
    mime_type_for_filename_and_data,
)
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)

Body = Union[bytes, bytearray, memoryview]


class HTTPResponse:
    """
    Mutable HTTP response, written once to a responder.

    =========================================================================
    OWNERSHIP
    =========================================================================

    The body is always stored as an immutable ``bytes`` object. Passing a
    bytearray or memoryview copies it, so later changes to the caller's
    buffer never leak into the response.

    Responses are moved, not copied. take() hands the status, headers and
    body to a new response and leaves this one empty:

        response = HTTPResponse.from_data(b"payload")
        moved = response.take()
        # moved.data == b"payload"; response.data == b""

    copy.copy() and copy.deepcopy() raise TypeError.

    =========================================================================
    """

    __slots__ = ("_status", "_headers", "_data")

    def __init__(
        self,
        mime_type: HeaderValue = b"",
        data: Union[Body, str] = b"",
        status: Union[HTTPStatus, int] = HTTPStatus.OK,
    ):
        """
        Canonical constructor.

        Args:
            mime_type: Content-Type value. Empty means no Content-Type
                       header is set.
            data: Body. Text is encoded as UTF-8; buffers are copied.
            status: Status code (100-599).

        Raises:
            ValueError: If ``status`` is outside 100-599.
        """
        self._status = HTTPStatus(status)
        self._headers = HeaderList()
        self._data = _to_body(data)

        mime_type = to_bytes(mime_type)
        if mime_type:
            self.set_header(CONTENT_TYPE_HEADER, mime_type)

    # =========================================================================
    # CONVENIENCE CONSTRUCTORS
    # =========================================================================

    @classmethod
    def from_status(cls, status: Union[HTTPStatus, int]) -> "HTTPResponse":
        """Empty response with the given status."""
        return cls(CONTENT_TYPE_X_EMPTY, b"", status)

    @classmethod
    def from_data(
        cls,
        data: Union[Body, str],
        status: Union[HTTPStatus, int] = HTTPStatus.OK,
        sniff_length: int = DEFAULT_SNIFF_LENGTH,
        config=None,
    ) -> "HTTPResponse":
        """
        Response whose Content-Type is sniffed from the body.

        ``config`` (an ExchangeConfig) overrides ``sniff_length`` with
        its own sniff_length.

        Example:
            >>> HTTPResponse.from_data(b"\\x89PNG\\r\\n\\x1a\\n...").mime_type()
            b'image/png'
        """
        if config is not None:
            sniff_length = config.sniff_length
        body = _to_body(data)
        mime_type = mime_type_for_data(body, sniff_length)
        return cls(mime_type, body, status)

    @classmethod
    def from_json(cls, value: Union[dict, list]) -> "HTTPResponse":
        """
        200 response carrying ``value`` as compact JSON.

        Only objects (dict) and arrays (list) are accepted:

            >>> HTTPResponse.from_json({"a": 1}).data
            b'{"a":1}'

        Raises:
            TypeError: For any other top-level type.
            ValueError: If ``value`` holds NaN or an infinity.
        """
        if not isinstance(value, (dict, list)):
            raise TypeError(
                f"JSON responses need an object or array, not {type(value).__name__}"
            )
        return cls(CONTENT_TYPE_JSON, _json_body(value))

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        sniff_length: int = DEFAULT_SNIFF_LENGTH,
        config=None,
    ) -> "HTTPResponse":
        """
        Response with the contents of a file.

        The caller is responsible for deciding which paths may be served;
        no sanitising happens here. ``config`` works as in from_data().

        Returns:
            200 with the file's bytes and a Content-Type inferred from the
            filename and content, or an empty 404 if the file cannot be
            opened or read (including paths open() refuses outright, such
            as names with a NUL byte).
        """
        if config is not None:
            sniff_length = config.sniff_length
        try:
            with open(path, "rb") as fh:
                data = fh.read()
        except (OSError, ValueError) as e:
            logger.debug(f"Cannot read {path}: {e}; answering 404")
            return cls.from_status(HTTPStatus.NOT_FOUND)

        mime_type = mime_type_for_filename_and_data(path, data, sniff_length)
        return cls(mime_type, data)

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    @property
    def data(self) -> bytes:
        """Response body."""
        return self._data

    @property
    def status_code(self) -> HTTPStatus:
        return self._status

    def mime_type(self) -> bytes:
        """
        Value of the first Content-Type header.

        Defaults to b"text/html" when no Content-Type is set.
        """
        return self._headers.first(CONTENT_TYPE_HEADER, CONTENT_TYPE_TEXT_HTML)

    @property
    def raw_headers(self) -> list[tuple[bytes, bytes]]:
        """Every (name, value) pair in emission order."""
        return self._headers.items()

    # =========================================================================
    # HEADER MUTATION
    # =========================================================================

    def add_header(self, name: HeaderName, value: HeaderValue) -> None:
        """Add a header without touching existing ones of the same name."""
        self._headers.add(name, value)

    def add_headers(self, headers: Iterable[tuple[HeaderName, HeaderValue]]) -> None:
        """add_header() for each pair, left to right."""
        for name, value in headers:
            self.add_header(name, value)

    def set_header(self, name: HeaderName, value: HeaderValue) -> None:
        """Replace every header named ``name`` with this single value."""
        self.clear_header(name)
        self.add_header(name, value)

    def set_headers(self, headers: Iterable[tuple[HeaderName, HeaderValue]]) -> None:
        """
        Set several headers, left to right.

        Each name's pre-existing entries are cleared the first time it
        appears in ``headers``. Pairs within the batch never clear each
        other:

            response.set_headers([("X-A", "1"), ("X-A", "2")])
            response.headers("X-A")  # [b"1", b"2"]
        """
        cleared: set[bytes] = set()
        for name, value in headers:
            key = to_bytes(name)
            if key not in cleared:
                self.clear_header(key)
                cleared.add(key)
            self.add_header(key, value)

    def clear_header(self, name: HeaderName) -> None:
        """Remove every header named ``name``."""
        self._headers.remove(name)

    def clear_headers(self) -> None:
        """Remove all headers. Status and body are untouched."""
        self._headers.clear()

    # =========================================================================
    # HEADER QUERIES
    # =========================================================================

    def has_header(self, name: HeaderName, value: Optional[HeaderValue] = None) -> bool:
        """
        Whether a header named ``name`` exists, optionally with exactly
        ``value``.
        """
        return self._headers.contains(name, value)

    def headers(self, name: HeaderName) -> list[bytes]:
        """All values of header ``name`` in insertion order."""
        return self._headers.get_all(name)

    # =========================================================================
    # OWNERSHIP
    # =========================================================================

    def take(self) -> "HTTPResponse":
        """
        Move this response's contents into a new object.

        Afterwards this response is empty: 200 OK, no headers, no body.
        """
        moved = HTTPResponse.__new__(HTTPResponse)
        moved._status = self._status
        moved._headers = self._headers
        moved._data = self._data

        self._status = HTTPStatus.OK
        self._headers = HeaderList()
        self._data = b""
        return moved

    def __copy__(self):
        raise TypeError("HTTPResponse cannot be copied; use take() to move it")

    def __deepcopy__(self, memo):
        raise TypeError("HTTPResponse cannot be copied; use take() to move it")

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def write(self, responder) -> None:
        """
        Write the response to ``responder``.

        Does nothing if the responder reports it is not connected.
        """
        if not responder.is_connected():
            logger.debug(f"Dropping {int(self._status)} response: connection is closed")
            return

        responder.write_status_line(self._status)

        for name, value in self._headers:
            responder.write_header(name, value)

        responder.write_header(CONTENT_LENGTH_HEADER, str(len(self._data)).encode("ascii"))

        responder.write_body(self._data)

    def to_bytes(self, version: str = "HTTP/1.1") -> bytes:
        """Serialize to the exact bytes write() would send."""
        # Imported here: core.responder imports from this package
        from ..core.responder import BufferResponder

        responder = BufferResponder(version=version)
        self.write(responder)
        return responder.getvalue()

    def __repr__(self) -> str:
        return (
            f"<HTTPResponse [{int(self._status)}] "
            f"{len(self._headers)} headers, {len(self._data)} bytes>"
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# One-liners for common responses, all built on the canonical constructor.
#
#     return no_content()
#     return redirect("/login")
#     return json_error(HTTPStatus.BAD_REQUEST, "Missing field: name")
#
# =============================================================================

def no_content() -> HTTPResponse:
    """204 No Content with no Content-Type header."""
    return HTTPResponse(b"", b"", HTTPStatus.NO_CONTENT)


def redirect(location: HeaderValue, permanent: bool = False) -> HTTPResponse:
    """
    301 (permanent) or 302 (temporary) redirect to ``location``.
    """
    status = HTTPStatus.MOVED_PERMANENTLY if permanent else HTTPStatus.FOUND
    response = HTTPResponse.from_status(status)
    response.set_header("Location", location)
    return response


def json_error(status: Union[HTTPStatus, int], message: str) -> HTTPResponse:
    """
    Error response with body {"error": message}.

    Example:
        >>> json_error(404, "User not found").data
        b'{"error":"User not found"}'
    """
    return HTTPResponse(CONTENT_TYPE_JSON, _json_body({"error": message}), status)


def _json_body(value: Any) -> bytes:
    # NaN and Infinity are not valid JSON
    return json.dumps(
        value, separators=(",", ":"), ensure_ascii=False, allow_nan=False
    ).encode("utf-8")


def _to_body(data: Any) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"Response body must be bytes or str, not {type(data).__name__}")
