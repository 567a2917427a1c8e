"""
Ownership of OS sockets.

An OwnedSocket is the single owner of one socket: it shuts the socket down and
closes it exactly once, either through close() or when its ``with`` block
ends. It cannot be copied; ownership moves with release().
"""
import logging
import socket

from .config import RECV_BUFFER_SIZE
from .errors import ResourceError

logger = logging.getLogger(__name__)


class OwnedSocket:

    def __init__(self, sock: socket.socket | None = None):
        self._sock = sock

    @property
    def sock(self) -> socket.socket | None:
        return self._sock

    @property
    def closed(self) -> bool:
        return self._sock is None

    def release(self) -> socket.socket | None:
        """Give up ownership without closing. The caller now owns the socket."""
        sock, self._sock = self._sock, None
        return sock

    def reset(self, sock: socket.socket | None = None) -> None:
        """Close the current socket (if any) and take ownership of ``sock``."""
        old, self._sock = self._sock, sock
        if old is not None:
            _shutdown_and_close(old)

    def close(self) -> None:
        self.reset(None)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __copy__(self):
        raise TypeError("OwnedSocket cannot be copied; use release() to transfer ownership")

    def __deepcopy__(self, memo):
        raise TypeError("OwnedSocket cannot be copied; use release() to transfer ownership")

    def __reduce_ex__(self, protocol):
        raise TypeError("OwnedSocket cannot be pickled")

    def __repr__(self):
        if self._sock is None:
            return "<OwnedSocket closed>"
        return f"<OwnedSocket fd={self._sock.fileno()}>"


def _shutdown_and_close(sock: socket.socket) -> None:
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        # not connected, or the peer already went away
        pass
    finally:
        sock.close()


def apply_socket_options(sock: socket.socket, recv_buffer_size: int = RECV_BUFFER_SIZE) -> None:
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
    except OSError as exc:
        raise ResourceError.from_os_error("set SO_KEEPALIVE", exc) from exc

    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, recv_buffer_size)
    except OSError as exc:
        logger.debug("Ignoring SO_RCVBUF failure: %s", exc)

    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    except OSError as exc:
        raise ResourceError.from_os_error("set SO_REUSEADDR", exc) from exc
