"""
Unit tests for responders.
"""

import logging

import pytest

from httpexchange.core.responder import (
    BufferResponder,
    ConnectionState,
    SocketResponder,
)
from httpexchange.http.response import HTTPResponse
from httpexchange.http.status_codes import HTTPStatus


class BrokenSocket:
    """Socket stand-in whose peer has hung up."""

    def __init__(self):
        self.closed = False

    def sendall(self, data):
        raise BrokenPipeError(32, "Broken pipe")

    def shutdown(self, how):
        raise OSError(107, "Transport endpoint is not connected")

    def fileno(self):
        return -1 if self.closed else 7

    def close(self):
        self.closed = True


class TestBufferResponder:
    """Framing written through the Responder base class."""

    def test_status_line(self, responder):
        responder.write_status_line(HTTPStatus.NOT_FOUND)
        assert responder.getvalue() == b"HTTP/1.1 404 Not Found\r\n"

    def test_status_line_for_unnamed_code(self, responder):
        responder.write_status_line(299)
        assert responder.getvalue() == b"HTTP/1.1 299 Unknown\r\n"

    def test_status_line_version(self):
        responder = BufferResponder(version="HTTP/1.0")
        responder.write_status_line(200)
        assert responder.getvalue() == b"HTTP/1.0 200 OK\r\n"

    def test_header(self, responder):
        responder.write_header("X-A", b"1")
        assert responder.getvalue() == b"X-A: 1\r\n"

    def test_body(self, responder):
        responder.write_body(b"hello")
        assert responder.getvalue() == b"\r\nhello"

    def test_disconnected(self):
        responder = BufferResponder(connected=False)
        HTTPResponse.from_data(b"hi").write(responder)

        assert responder.getvalue() == b""


class TestSocketResponder:
    """Writing to a real connected socket."""

    def test_round_trip(self, socket_pair, socket_responder, recv_all):
        _, client = socket_pair
        response = HTTPResponse.from_data(b"hello")
        response.add_header("X-A", "1")

        response.write(socket_responder)
        socket_responder.close()

        assert recv_all(client) == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"X-A: 1\r\n"
            b"Content-Length: 5\r\n"
            b"\r\n"
            b"hello"
        )

    def test_state_transitions(self, socket_responder):
        assert socket_responder.state == ConnectionState.OPEN
        assert socket_responder.is_connected()

        socket_responder.write_status_line(200)
        assert socket_responder.state == ConnectionState.WRITING
        assert socket_responder.is_connected()

        socket_responder.close()
        assert socket_responder.state == ConnectionState.CLOSED
        assert not socket_responder.is_connected()

    def test_bytes_sent(self, socket_responder):
        socket_responder.write_status_line(200)
        socket_responder.write_body(b"abc")

        assert socket_responder.bytes_sent == len(b"HTTP/1.1 200 OK\r\n") + 5

    def test_close_is_idempotent(self, socket_responder):
        socket_responder.close()
        socket_responder.close()

        assert socket_responder.state == ConnectionState.CLOSED

    def test_context_manager_closes(self, socket_pair, recv_all):
        server, client = socket_pair

        with SocketResponder(socket=server, address=("127.0.0.1", 40000)) as responder:
            HTTPResponse.from_status(HTTPStatus.NO_CONTENT).write(responder)

        assert responder.state == ConnectionState.CLOSED
        assert recv_all(client).startswith(b"HTTP/1.1 204 No Content\r\n")

    def test_writes_after_close_are_dropped(self, socket_responder):
        socket_responder.close()
        socket_responder.write_status_line(200)

        assert socket_responder.bytes_sent == 0

    def test_from_config(self, socket_pair, recv_all):
        server, client = socket_pair
        config = type("Config", (), {"http_version": "HTTP/1.0"})()

        responder = SocketResponder.from_config(server, ("127.0.0.1", 1), config)
        responder.write_status_line(200)
        responder.close()

        assert recv_all(client) == b"HTTP/1.0 200 OK\r\n"


class TestSendFailure:
    """A peer that vanished mid-response."""

    def test_failed_send_closes_responder(self, caplog):
        responder = SocketResponder(socket=BrokenSocket(), address=("203.0.113.9", 80))

        with caplog.at_level(logging.WARNING, logger="httpexchange"):
            responder.write_status_line(200)

        assert responder.state == ConnectionState.CLOSED
        assert not responder.is_connected()
        assert responder.bytes_sent == 0
        assert "203.0.113.9" in caplog.text

    def test_response_not_retried(self, caplog):
        sock = BrokenSocket()
        responder = SocketResponder(socket=sock, address=("203.0.113.9", 80))

        with caplog.at_level(logging.WARNING, logger="httpexchange"):
            HTTPResponse.from_data(b"payload").write(responder)

        # Only the first piece is attempted; the rest sees a closed responder
        assert len(caplog.records) == 1

    def test_close_after_failure_releases_socket(self):
        sock = BrokenSocket()
        responder = SocketResponder(socket=sock, address=("203.0.113.9", 80))

        responder.write_status_line(200)
        responder.close()

        assert sock.closed
        assert responder.state == ConnectionState.CLOSED


@pytest.mark.parametrize("status,line", [
    (HTTPStatus.OK, b"HTTP/1.1 200 OK\r\n"),
    (HTTPStatus.CREATED, b"HTTP/1.1 201 Created\r\n"),
    (HTTPStatus.MOVED_PERMANENTLY, b"HTTP/1.1 301 Moved Permanently\r\n"),
    (HTTPStatus.INTERNAL_SERVER_ERROR, b"HTTP/1.1 500 Internal Server Error\r\n"),
])
def test_status_lines(status, line):
    responder = BufferResponder()
    responder.write_status_line(status)
    assert responder.getvalue() == line
