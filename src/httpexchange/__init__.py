"""
=============================================================================
httpexchange
=============================================================================

Request and response models for one HTTP exchange on a server.

    from httpexchange import HTTPResponse, RequestParser, SocketResponder

    request = RequestParser().parse(raw_bytes, client_address)

    if request.path == "/report":
        response = HTTPResponse.from_file("reports/latest.pdf")
    else:
        response = HTTPResponse.from_json({"path": request.path})
    response.add_header("Set-Cookie", "seen=1")

    with SocketResponder(client_socket, client_address) as responder:
        response.write(responder)

Sockets, routing and keep-alive handling belong to the server that uses
this package.

=============================================================================
"""

__version__ = "1.0.0"

from .config import ExchangeConfig, setup_logging
from .core import BufferResponder, Responder, SocketResponder
from .http import (
    HTTPParseError,
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    HeaderList,
    Method,
    MethodSet,
    RequestParser,
    parse_request,
)

__all__ = [
    "ExchangeConfig",
    "setup_logging",
    "Responder",
    "SocketResponder",
    "BufferResponder",
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "parse_request",
    "HTTPResponse",
    "HeaderList",
    "HTTPStatus",
    "Method",
    "MethodSet",
    "__version__",
]
