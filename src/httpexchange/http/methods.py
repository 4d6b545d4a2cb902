"""
=============================================================================
HTTP REQUEST METHODS
=============================================================================

Request methods as bit flags.

A single request has exactly one method, but route tables usually want to
say "GET or HEAD". Giving each method its own bit lets one type serve both
purposes:

    ┌──────────┬────────┐        allowed = Method.GET | Method.HEAD
    │  Method  │  Bit   │                = 0b0001_0001
    ├──────────┼────────┤
    │ GET      │ 0x0001 │        Method.GET.matches(allowed)   → True
    │ PUT      │ 0x0002 │        Method.POST.matches(allowed)  → False
    │ DELETE   │ 0x0004 │
    │ POST     │ 0x0008 │
    │ HEAD     │ 0x0010 │
    │ OPTIONS  │ 0x0020 │
    │ PATCH    │ 0x0040 │
    │ CONNECT  │ 0x0080 │
    │ UNKNOWN  │ 0x0000 │        (never matches anything)
    └──────────┴────────┘

MethodSet is the name used where a combination is meant rather than a
single method. It is the same type.

=============================================================================
"""

from enum import IntFlag
from typing import Iterable, Union


class Method(IntFlag):
    """HTTP request method (one bit per method)."""

    UNKNOWN = 0x0000
    GET = 0x0001
    PUT = 0x0002
    DELETE = 0x0004
    POST = 0x0008
    HEAD = 0x0010
    OPTIONS = 0x0020
    PATCH = 0x0040
    CONNECT = 0x0080

    ALL = GET | PUT | DELETE | POST | HEAD | OPTIONS | PATCH | CONNECT

    @classmethod
    def from_name(cls, name: Union[str, bytes]) -> "Method":
        """
        Look up a method by its request-line token.

        Accepts the wire spelling ("GET") and the capitalised alias
        ("Get"). Method tokens are case-sensitive on the wire, so "get" and
        anything unrecognised come back as UNKNOWN.

        Examples:
            >>> Method.from_name("POST")
            <Method.POST: 8>
            >>> Method.from_name(b"Patch")
            <Method.PATCH: 64>
            >>> Method.from_name("TRACE")
            <Method.UNKNOWN: 0>
        """
        if isinstance(name, bytes):
            name = name.decode("ascii", errors="replace")

        upper = name.upper()
        if name not in (upper, name.capitalize()):
            return cls.UNKNOWN

        member = _METHODS_BY_NAME.get(upper)
        return member if member is not None else cls.UNKNOWN

    @classmethod
    def from_names(cls, names: Iterable[Union[str, bytes]]) -> "Method":
        """Combine several method names into one MethodSet."""
        result = cls.UNKNOWN
        for name in names:
            result |= cls.from_name(name)
        return result

    def matches(self, allowed: "Method") -> bool:
        """
        Check whether this method is one of ``allowed``.

        UNKNOWN has no bits set and so never matches, not even Method.ALL.
        """
        return bool(self & allowed)

    @property
    def token(self) -> str:
        """Wire spelling of a single method ("GET"), or "UNKNOWN"."""
        return self.name if self.name else "UNKNOWN"


# Alias for flag combinations used in "any of" matching.
MethodSet = Method

_METHODS_BY_NAME = {
    "GET": Method.GET,
    "PUT": Method.PUT,
    "DELETE": Method.DELETE,
    "POST": Method.POST,
    "HEAD": Method.HEAD,
    "OPTIONS": Method.OPTIONS,
    "PATCH": Method.PATCH,
    "CONNECT": Method.CONNECT,
}
