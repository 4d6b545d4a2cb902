"""
pytest configuration and fixtures.
"""

import socket
from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httpexchange import ExchangeConfig
from httpexchange.core import BufferResponder, SocketResponder


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /api/users?page=1&limit=10&tag=a&tag=b HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: application/json\r\n"
        b"Connection: keep-alive\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with JSON body."""
    body = b'{"name": "John", "email": "john@example.com"}'
    return (
        b"POST /api/users HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Type: application/json; charset=utf-8\r\n"
        b"Content-Length: %d\r\n"
        b"Connection: close\r\n"
        b"\r\n"
    ) % len(body) + body


@pytest.fixture
def remote_address() -> tuple[str, int]:
    return ("127.0.0.1", 54321)


@pytest.fixture
def config() -> ExchangeConfig:
    """Default test configuration."""
    return ExchangeConfig(max_request_size=64 * 1024, log_level="DEBUG")


@pytest.fixture
def responder() -> BufferResponder:
    """In-memory responder that records everything written to it."""
    return BufferResponder()


@pytest.fixture
def socket_pair() -> Generator[tuple[socket.socket, socket.socket], None, None]:
    """Connected (server, client) socket pair."""
    server, client = socket.socketpair()
    server.settimeout(5.0)
    client.settimeout(5.0)

    yield server, client

    for sock in (server, client):
        try:
            sock.close()
        except OSError:
            pass


@pytest.fixture
def socket_responder(socket_pair) -> SocketResponder:
    server, _ = socket_pair
    return SocketResponder(socket=server, address=("127.0.0.1", 40000))


@pytest.fixture
def recv_all():
    """Reader that drains a socket until the peer closes its end."""
    def _recv_all(sock: socket.socket) -> bytes:
        chunks = []
        while True:
            chunk = sock.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    return _recv_all
