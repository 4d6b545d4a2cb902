"""
=============================================================================
RESPONDERS (WIRE WRITERS)
=============================================================================

A responder owns the outgoing side of one connection and knows how to put
the three parts of an HTTP response on it, in the order they are called:

    write_status_line(404)           HTTP/1.1 404 Not Found\r\n
    write_header("X-A", "1")         X-A: 1\r\n
    write_header("Content-Length",   Content-Length: 5\r\n
                 "5")
    write_body(b"hello")             \r\n
                                     hello

The framing lives once, in the Responder base class. Subclasses only say
where bytes go (_send) and whether anyone is still listening
(is_connected).

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          Responder (ABC)                            │
    │   write_status_line / write_header / write_body  →  _send(bytes)    │
    ├───────────────────────────────┬─────────────────────────────────────┤
    │        SocketResponder        │          BufferResponder            │
    │  sendall() on a live socket   │  append to an in-memory bytearray   │
    │  tracks ConnectionState       │  used by to_bytes() and in tests    │
    └───────────────────────────────┴─────────────────────────────────────┘

=============================================================================
FAILURE POLICY
=============================================================================

A response is written exactly once; there are no retries. If the peer has
gone away mid-write, SocketResponder logs a warning and marks itself
closed. Every later write is then dropped, and HTTPResponse.write() sees
is_connected() == False before it starts.

=============================================================================
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Union
import logging
import socket
import time
import uuid

from ..http.headers import to_bytes
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)

CRLF = b"\r\n"


class Responder(ABC):
    """
    Writes HTTP/1.x response framing onto some byte sink.

    Subclasses provide ``version``, ``is_connected()`` and ``_send()``.
    """

    version: str = "HTTP/1.1"

    @abstractmethod
    def is_connected(self) -> bool:
        """Whether the peer can still receive bytes."""

    @abstractmethod
    def _send(self, data: bytes) -> None:
        """Deliver ``data`` to the sink, synchronously and in order."""

    def write_status_line(self, status: Union[HTTPStatus, int]) -> None:
        """Write "<version> <code> <phrase>\\r\\n"."""
        status = HTTPStatus(status)
        line = f"{self.version} {int(status)} {status.phrase}"
        self._send(line.encode("latin-1") + CRLF)

    def write_header(self, name: Union[str, bytes], value: Union[str, bytes]) -> None:
        """Write "<name>: <value>\\r\\n" exactly as given."""
        self._send(to_bytes(name) + b": " + to_bytes(value) + CRLF)

    def write_body(self, body: bytes) -> None:
        """End the header block and write the payload."""
        self._send(CRLF + bytes(body))


class BufferResponder(Responder):
    """
    Responder that collects the response in memory.

    Example:
        >>> responder = BufferResponder()
        >>> HTTPResponse.from_data(b"hi").write(responder)
        >>> responder.getvalue()
        b'HTTP/1.1 200 OK\\r\\nContent-Type: text/plain\\r\\nContent-Length: 2\\r\\n\\r\\nhi'
    """

    def __init__(self, version: str = "HTTP/1.1", connected: bool = True):
        self.version = version
        self.connected = connected
        self._buffer = bytearray()

    def is_connected(self) -> bool:
        return self.connected

    def _send(self, data: bytes) -> None:
        self._buffer += data

    def getvalue(self) -> bytes:
        return bytes(self._buffer)


class ConnectionState(Enum):
    """Lifecycle of the socket behind a SocketResponder."""
    OPEN = "open"            # Connected, nothing written yet
    WRITING = "writing"      # At least one piece of the response sent
    CLOSING = "closing"      # Shutdown sequence in progress
    CLOSED = "closed"        # Socket released or peer gone


@dataclass(eq=False)
class SocketResponder(Responder):
    """
    Responder bound to a live, connected socket.

    Each write is a blocking sendall(), so pieces hit the wire in call
    order. A failed send closes the responder for good.

    Attributes:
        socket: Connected client socket.
        address: Peer (ip, port), for log messages.
        version: HTTP version for the status line.
        id: Short identifier used in log lines.
        state: Current ConnectionState.
        bytes_sent: Total bytes handed to the socket.
    """

    socket: socket.socket
    address: tuple[str, int] = ("", 0)
    version: str = "HTTP/1.1"
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.OPEN
    created_at: float = field(default_factory=time.time)
    bytes_sent: int = 0

    @classmethod
    def from_config(cls, sock: socket.socket, address: tuple[str, int], config) -> "SocketResponder":
        """Build a responder using ExchangeConfig.http_version."""
        return cls(socket=sock, address=address, version=config.http_version)

    def is_connected(self) -> bool:
        return self.state in (ConnectionState.OPEN, ConnectionState.WRITING)

    def _send(self, data: bytes) -> None:
        if not self.is_connected():
            return

        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
            self.bytes_sent += len(data)
        except (ConnectionResetError, BrokenPipeError, OSError) as e:
            logger.warning(f"[{self.id}] Send to {self.address[0]} failed: {e}")
            self.state = ConnectionState.CLOSED

    def close(self) -> None:
        """
        Close the connection gracefully.

        shutdown(SHUT_WR) sends FIN so the client sees the end of the
        response, then the descriptor is released. Safe to call twice,
        and still releases the descriptor after a failed send.
        """
        if self.state == ConnectionState.CLOSED and self.socket.fileno() == -1:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.bytes_sent} bytes")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
