import logging
import socket

import click

from .config import Config
from .errors import ResourceError, TransferError
from .session import EchoSession
from .sockets import OwnedSocket, apply_socket_options

logger = logging.getLogger(__name__)


class Listener:
    """
    Holds the listening socket and serves one client at a time.

    A second client waits in the OS backlog until the current session ends.
    Accept failures are fatal; transfer failures only end the current session.
    """

    def __init__(self, config: Config):
        self.config = config
        self._socket = OwnedSocket()
        self.sessions_served = 0

    @property
    def listening(self) -> bool:
        return not self._socket.closed

    @property
    def server_address(self) -> tuple[str, int] | None:
        if self._socket.closed:
            return None
        host, port = self._socket.sock.getsockname()[:2]
        return host, port

    def initialize(self) -> None:
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP)
        except OSError as exc:
            raise ResourceError.from_os_error("create a socket", exc) from exc

        guard = OwnedSocket(sock)
        try:
            apply_socket_options(sock, self.config.recv_buffer_size)

            try:
                sock.bind(self.config.bind_address)
            except OSError as exc:
                raise ResourceError.from_os_error("bind to", exc, self.config.bind_address) from exc

            try:
                sock.listen(self.config.backlog)
            except OSError as exc:
                raise ResourceError.from_os_error(
                    f"listen on port {self.config.port}", exc) from exc
        except BaseException:
            guard.close()
            raise

        self._socket.reset(guard.release())
        self._log_startup_message()

    def _log_startup_message(self) -> None:
        host, port = self.server_address
        addr_format = "%s:%d"
        message = f"Server initialized on {addr_format} (Press CTRL+C to quit)"
        color_message = "Server initialized on " + click.style(addr_format, bold=True) + " (Press CTRL+C to quit)"
        logger.info(
            message,
            host,
            port,
            extra={"color_message": color_message},
        )

    def run(self) -> None:
        if not self.listening:
            self.initialize()

        logger.info("Waiting for connections...")
        while True:
            try:
                conn, peer = self._socket.sock.accept()
            except OSError as exc:
                raise ResourceError.from_os_error("accept a connection", exc) from exc

            logger.info("Client connected from %s:%d", peer[0], peer[1])
            session = EchoSession(OwnedSocket(conn), peer, self.config.buffer_size)
            try:
                session.serve()
            except TransferError as exc:
                logger.error("%s", exc)
            self.sessions_served += 1

    def close(self) -> None:
        self._socket.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
