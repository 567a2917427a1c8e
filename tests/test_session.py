import errno
import logging
import socket
import threading

import pytest

from echo_server.errors import TransferError
from echo_server.session import EchoSession
from echo_server.sockets import OwnedSocket


class FakeConnection:
    """Feeds scripted chunks to recv_into and records what was sent back."""

    def __init__(self, chunks=(), recv_error=None, send_error=None):
        self.chunks = list(chunks)
        self.recv_error = recv_error
        self.send_error = send_error
        self.sent = []
        self.closed = False

    def recv_into(self, buffer):
        if self.chunks:
            chunk = self.chunks.pop(0)
            buffer[:len(chunk)] = chunk
            return len(chunk)
        if self.recv_error is not None:
            raise self.recv_error
        return 0

    def sendall(self, data):
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(bytes(data))

    def shutdown(self, how):
        pass

    def close(self):
        self.closed = True


def test_echoes_each_read_as_its_own_chunk():
    conn = FakeConnection([b"hello", b" ", b"world"])
    echoed = EchoSession(OwnedSocket(conn)).serve()
    assert conn.sent == [b"hello", b" ", b"world"]
    assert echoed == 11
    assert conn.closed


def test_orderly_close_is_not_an_error(caplog):
    conn = FakeConnection()
    with caplog.at_level(logging.INFO, logger="echo_server"):
        assert EchoSession(OwnedSocket(conn), ("127.0.0.1", 4000)).serve() == 0
    assert "Client disconnected 127.0.0.1:4000" in caplog.text
    assert conn.closed


def test_receive_failure_raises_transfer_error_and_releases():
    conn = FakeConnection([b"abc"], recv_error=OSError(errno.ECONNRESET, "Connection reset by peer"))
    with pytest.raises(TransferError) as info:
        EchoSession(OwnedSocket(conn), ("10.0.0.1", 1234)).serve()
    assert info.value.errno == errno.ECONNRESET
    assert "receive" in str(info.value)
    assert "10.0.0.1:1234" in str(info.value)
    assert conn.sent == [b"abc"]
    assert conn.closed


def test_send_failure_raises_transfer_error_and_releases():
    conn = FakeConnection([b"abc", b"never read"], send_error=OSError(errno.EPIPE, "Broken pipe"))
    with pytest.raises(TransferError, match="Broken pipe") as info:
        EchoSession(OwnedSocket(conn)).serve()
    assert info.value.operation == "send response"
    assert conn.chunks == [b"never read"]
    assert conn.closed


def test_read_is_bounded_by_buffer_size():
    conn = FakeConnection([b"x" * 16])
    session = EchoSession(OwnedSocket(conn), buffer_size=16)
    session.serve()
    assert len(session.buffer) == 16


def test_received_chunks_logged_at_debug(caplog):
    conn = FakeConnection([b"ping"])
    with caplog.at_level(logging.DEBUG, logger="echo_server"):
        EchoSession(OwnedSocket(conn)).serve()
    assert "Received (4 bytes): b'ping'" in caplog.text


def test_echo_over_socketpair():
    server_side, client_side = socket.socketpair()
    result = {}

    def serve():
        result["echoed"] = EchoSession(OwnedSocket(server_side)).serve()

    worker = threading.Thread(target=serve, daemon=True)
    worker.start()
    with client_side:
        client_side.settimeout(5)
        client_side.sendall(b"hello")
        assert client_side.recv(64) == b"hello"
        client_side.shutdown(socket.SHUT_WR)
        assert client_side.recv(64) == b""
    worker.join(timeout=5)

    assert result["echoed"] == 5
    assert server_side.fileno() == -1
