"""
=============================================================================
HTTP REQUEST VIEW
=============================================================================

A read-only picture of one parsed incoming request, plus the parser that
builds it from raw bytes.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    GET /api/users?page=1&limit=10 HTTP/1.1\r\n     ← request line
    Host: example.com\r\n                            ┐
    Accept: application/json\r\n                     │ headers
    Content-Length: 13\r\n                           ┘
    \r\n                                             ← separator
    {"name":"x"}\n                                   ← body

becomes

    HTTPRequest(
        method=Method.GET,
        url=SplitResult("http", "example.com", "/api/users", "page=1&limit=10", ""),
        query=(("page", "1"), ("limit", "10")),
        headers={b"host": (b"example.com",), b"accept": (...), ...},
        body=b'{"name":"x"}\\n',
        remote_address=("203.0.113.7", 51514),
    )

=============================================================================
LIFETIME AND OWNERSHIP
=============================================================================

    socket bytes ──► RequestParser.parse() ──► HTTPRequest ──► handler(request)
                     (server infrastructure)    (frozen)        (reads only)

One HTTPRequest exists per request-handling cycle. Handlers receive it by
reference and cannot change it: the dataclass is frozen, the header
mapping is a read-only proxy, and copying is refused so nobody ends up
holding a detached duplicate of a request that has already been answered.

=============================================================================
HEADER KEYS
=============================================================================

RequestParser lower-cases header names as it reads them, because clients
spell them however they like. Lookups on the view are exact byte matches
against those stored names, so ask for b"content-type", not
b"Content-Type". Repeated headers keep every value in arrival order.

=============================================================================
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union
from urllib.parse import SplitResult, parse_qsl, unquote, urlsplit
import json
import logging
import re

from .methods import Method
from .headers import to_bytes


logger = logging.getLogger(__name__)

Headers = Mapping[bytes, tuple[bytes, ...]]


class HTTPParseError(Exception):
    """
    Raised when HTTP request parsing fails.

    Carries the status code the server should answer with:

        400 Bad Request                - malformed request syntax
        413 Payload Too Large          - request exceeds size limit
        505 HTTP Version Not Supported - unknown HTTP version
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True, eq=False)
class HTTPRequest:
    """
    Immutable view of one parsed HTTP request.

    Attributes:
        method:         Method flag (UNKNOWN for unrecognised tokens).
        url:            Absolute URL as a urllib SplitResult.
        query:          Query parameters as ordered (name, value) pairs.
        headers:        Read-only mapping of name → values, both bytes.
        body:           Raw body bytes.
        remote_address: (host, port) of the peer. Required.
        version:        HTTP version from the request line.
    """

    method: Method
    url: SplitResult
    remote_address: tuple[str, int]
    query: tuple[tuple[str, str], ...] = ()
    headers: Headers = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    def __post_init__(self):
        if self.remote_address is None:
            raise ValueError("HTTPRequest requires a remote address")

        # Freeze the header mapping and detach it from the caller's dict
        frozen = {
            to_bytes(name): tuple(to_bytes(value) for value in values)
            for name, values in self.headers.items()
        }
        object.__setattr__(self, "headers", MappingProxyType(frozen))
        object.__setattr__(self, "query", tuple(self.query))
        object.__setattr__(self, "body", bytes(self.body))

    def __copy__(self):
        raise TypeError("HTTPRequest cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("HTTPRequest cannot be copied")

    def __repr__(self) -> str:
        return (
            f"HTTPRequest(method={self.method.token}, url={self.url.geturl()!r}, "
            f"headers={len(self.headers)}, remote_address={self.remote_address!r})"
        )

    # =========================================================================
    # HEADER ACCESS
    # =========================================================================

    def value(self, key: Union[str, bytes]) -> bytes:
        """
        First value of header ``key``, or b"" if absent.

        Exact byte match against the stored (lower-cased) names.
        """
        values = self.headers.get(to_bytes(key))
        return values[0] if values else b""

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def path(self) -> str:
        """URL-decoded request path."""
        return unquote(self.url.path) or "/"

    @property
    def content_type(self) -> Optional[str]:
        """
        Content-Type without parameters, lower-cased.

        "application/json; charset=utf-8" → "application/json"
        """
        ct = self.value(b"content-type").decode("latin-1")
        ct = ct.split(";")[0].strip().lower()
        return ct or None

    @property
    def content_length(self) -> int:
        """Content-Length as an integer; 0 if missing or invalid."""
        try:
            return int(self.value(b"content-length") or 0)
        except ValueError:
            return 0

    @property
    def host(self) -> str:
        return self.value(b"host").decode("latin-1")

    @property
    def is_json(self) -> bool:
        return self.content_type == "application/json"

    @property
    def json(self) -> Any:
        """
        Parse the body as JSON.

        Returns None for an empty body.

        Raises:
            HTTPParseError: If the body is not valid JSON.
        """
        if not self.body:
            return None
        try:
            return json.loads(self.body.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise HTTPParseError(f"Invalid JSON body: {e}")

    @property
    def is_keep_alive(self) -> bool:
        """
        Whether the client wants the connection kept open.

        HTTP/1.1 keeps alive unless told "close"; HTTP/1.0 closes unless
        told "keep-alive".
        """
        connection = self.value(b"connection").decode("latin-1").lower()
        if self.version == "HTTP/1.1":
            return connection != "close"
        return connection == "keep-alive"

    # =========================================================================
    # QUERY ACCESS
    # =========================================================================

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        First value of a query parameter.

        Example:
            # URL: /users?page=1&page=2
            request.get_query("page")  # "1"
        """
        for key, value in self.query:
            if key == name:
                return value
        return default

    def get_query_list(self, name: str) -> list[str]:
        """All values of a query parameter, in URL order."""
        return [value for key, value in self.query if key == name]


class RequestParser:
    """
    Parses raw HTTP request bytes into HTTPRequest views.

    ==========================================================================
    PARSER STEPS
    ==========================================================================

        1. Size check                 too large?  → HTTPParseError(413)
        2. Find \\r\\n\\r\\n              missing?    → HTTPParseError(400)
        3. Parse request line         malformed?  → HTTPParseError(400)
                                      bad version → HTTPParseError(505)
        4. Parse headers              names lower-cased, repeats kept
        5. Extract body               exactly Content-Length bytes
        6. Build HTTPRequest

    Unrecognised methods are not an error here: the view reports them as
    Method.UNKNOWN and the routing layer decides what to do.

    ==========================================================================
    """

    # Method is any RFC 9110 token; unrecognised ones become Method.UNKNOWN
    REQUEST_LINE_PATTERN = re.compile(r"^([!#$%&'*+.^_`|~0-9A-Za-z-]+) ([^ ]+) (HTTP/\d\.\d)$")
    HEADER_PATTERN = re.compile(r"^([^:]+):\s*(.*)$")

    SUPPORTED_VERSIONS = ("HTTP/1.0", "HTTP/1.1")

    def __init__(self, max_request_size: int = 10 * 1024 * 1024):
        """
        Args:
            max_request_size: Largest accepted request in bytes (10 MB).
        """
        self.max_request_size = max_request_size

    @classmethod
    def from_config(cls, config) -> "RequestParser":
        """Build a parser from an ExchangeConfig."""
        return cls(max_request_size=config.max_request_size)

    def parse(self, data: bytes, remote_address: tuple[str, int]) -> HTTPRequest:
        """
        Parse one complete raw request.

        Args:
            data: Raw request bytes (headers and full body).
            remote_address: Peer (host, port). Must not be None.

        Returns:
            The immutable request view.

        Raises:
            HTTPParseError: If the request is malformed.
        """
        if len(data) > self.max_request_size:
            raise HTTPParseError(
                f"Request too large: {len(data)} bytes",
                status_code=413,
            )

        header_end = data.find(b"\r\n\r\n")
        if header_end == -1:
            raise HTTPParseError("Incomplete request: no header terminator")

        # Header section is latin-1 so every byte survives the round trip
        header_section = data[:header_end].decode("latin-1")
        body = data[header_end + 4:]

        lines = header_section.split("\r\n")
        method, target, version = self._parse_request_line(lines[0])
        headers = self._parse_headers(lines[1:])

        content_length = self._content_length(headers)
        if len(body) < content_length:
            raise HTTPParseError(
                f"Incomplete body: expected {content_length} bytes, got {len(body)}"
            )
        # Anything after Content-Length belongs to the next pipelined request
        body = body[:content_length]

        url = self._build_url(target, headers, remote_address)
        query = tuple(parse_qsl(url.query, keep_blank_values=True))

        request = HTTPRequest(
            method=method,
            url=url,
            remote_address=remote_address,
            query=query,
            headers=headers,
            body=body,
            version=version,
        )
        logger.debug(f"Parsed {request!r}")
        return request

    def _parse_request_line(self, line: str) -> tuple[Method, str, str]:
        """
        Split "METHOD SP REQUEST-TARGET SP HTTP-VERSION".

        Returns:
            (method, request target, version)
        """
        match = self.REQUEST_LINE_PATTERN.match(line)
        if not match:
            raise HTTPParseError(f"Invalid request line: {line}")

        token, target, version = match.groups()

        if version not in self.SUPPORTED_VERSIONS:
            raise HTTPParseError(
                f"Unsupported HTTP version: {version}",
                status_code=505,
            )

        return Method.from_name(token), target, version

    def _parse_headers(self, lines: list[str]) -> dict[bytes, list[bytes]]:
        """
        Parse "Name: value" lines into name → [values].

        Names are lower-cased. Repeated names keep each value separately.
        A line starting with whitespace continues the previous value
        (obsolete folding). Lines without a colon are skipped.
        """
        headers: dict[bytes, list[bytes]] = {}
        current_name: Optional[bytes] = None

        for line in lines:
            if not line:
                continue

            if line[0] in (" ", "\t"):
                if current_name is not None:
                    values = headers[current_name]
                    values[-1] = values[-1] + b" " + line.strip().encode("latin-1")
                continue

            match = self.HEADER_PATTERN.match(line)
            if not match:
                continue

            name, value = match.groups()
            current_name = name.strip().lower().encode("latin-1")
            headers.setdefault(current_name, []).append(value.strip().encode("latin-1"))

        return headers

    @staticmethod
    def _content_length(headers: dict[bytes, list[bytes]]) -> int:
        values = headers.get(b"content-length")
        if not values:
            return 0
        # Plain ASCII digits only; no sign, no underscores
        if not values[0].isdigit():
            raise HTTPParseError(f"Invalid Content-Length: {values[0]!r}")
        return int(values[0])

    @staticmethod
    def _build_url(
        target: str,
        headers: dict[bytes, list[bytes]],
        remote_address: Optional[tuple[str, int]],
    ) -> SplitResult:
        """
        Turn the request target into an absolute URL.

        Origin-form targets ("/path?q") take their authority from the Host
        header, or from the peer address when Host is missing.
        """
        parsed = urlsplit(target)
        if parsed.scheme and parsed.netloc:
            return parsed

        host_values = headers.get(b"host")
        if host_values:
            netloc = host_values[0].decode("latin-1")
        elif remote_address:
            netloc = remote_address[0]
            if ":" in netloc:
                netloc = f"[{netloc}]"  # IPv6 literal
        else:
            netloc = ""

        return SplitResult("http", netloc, parsed.path or "/", parsed.query, "")


def parse_request(
    data: bytes,
    remote_address: tuple[str, int],
    max_size: int = 10 * 1024 * 1024,
) -> HTTPRequest:
    """One-shot helper around RequestParser.parse()."""
    parser = RequestParser(max_request_size=max_size)
    return parser.parse(data, remote_address)
