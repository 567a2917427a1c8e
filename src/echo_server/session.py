"""
One echo session: read whatever the peer sent and write the same bytes back.

There is no framing. Each read is echoed as its own chunk, so the echo follows
the boundaries of the reads rather than of the client's messages.
"""
import logging

from .config import BUFFER_SIZE
from .errors import TransferError
from .sockets import OwnedSocket

logger = logging.getLogger(__name__)


class EchoSession:

    def __init__(self, connection: OwnedSocket, peer: tuple[str, int] | None = None,
                 buffer_size: int = BUFFER_SIZE):
        self.connection = connection
        self.peer = peer
        self.buffer = bytearray(buffer_size)
        self.bytes_echoed = 0

    def serve(self) -> int:
        """
        Echo until the peer closes its side. Returns the number of bytes echoed.
        Raises TransferError if a read or write fails. The connection is
        released either way.
        """
        with self.connection:
            sock = self.connection.sock
            view = memoryview(self.buffer)
            while True:
                try:
                    received = sock.recv_into(self.buffer)
                except OSError as exc:
                    raise TransferError.from_os_error("receive data", exc, self.peer) from exc

                if received == 0:
                    logger.info("Client disconnected%s (%d bytes echoed)", self._peer_suffix(), self.bytes_echoed)
                    return self.bytes_echoed

                chunk = view[:received]
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug("Received (%d bytes): %r", received, chunk.tobytes())

                try:
                    sock.sendall(chunk)
                except OSError as exc:
                    raise TransferError.from_os_error("send response", exc, self.peer) from exc
                self.bytes_echoed += received

    def _peer_suffix(self) -> str:
        if self.peer is None:
            return ""
        return f" {self.peer[0]}:{self.peer[1]}"
