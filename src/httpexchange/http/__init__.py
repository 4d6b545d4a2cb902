"""
=============================================================================
HTTP MESSAGE MODELS
=============================================================================

The two halves of one HTTP exchange as seen by a server:

    ┌──────────────────────┐                    ┌──────────────────────┐
    │     HTTPRequest      │    handler(req)    │     HTTPResponse     │
    │  (immutable view of  │ ─────────────────► │ (mutable until it is │
    │   a parsed request)  │                    │  written to the wire)│
    └──────────────────────┘                    └──────────┬───────────┘
                                                           │ write()
                                                           ▼
                                                     core.responder

Supporting pieces:
    methods      Method / MethodSet bit flags
    headers      HeaderList ordered multimap
    mime_types   Content-Type inference from filenames and bytes
    status_codes HTTPStatus

=============================================================================
"""

from .request import HTTPRequest, RequestParser, HTTPParseError, parse_request
from .response import (
    HTTPResponse,
    no_content,     # 204 No Content
    redirect,       # 301/302 Redirect
    json_error,     # 4xx/5xx with {"error": ...}
)
from .headers import HeaderList
from .methods import Method, MethodSet
from .status_codes import HTTPStatus
from .mime_types import (
    get_mime_type,
    mime_type_for_data,
    mime_type_for_filename_and_data,
)

__all__ = [
    # Requests
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "parse_request",
    "Method",
    "MethodSet",

    # Responses
    "HTTPResponse",
    "HeaderList",
    "no_content",
    "redirect",
    "json_error",

    # Status codes
    "HTTPStatus",

    # MIME types
    "get_mime_type",
    "mime_type_for_data",
    "mime_type_for_filename_and_data",
]
