import re
import socket

from .errors import ConfigurationError

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 55555
DEFAULT_BACKLOG = 5
BUFFER_SIZE = 8192  # 8KB
RECV_BUFFER_SIZE = 64 * 1024


def parse_port(value) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        port = value
    elif isinstance(value, str) and re.fullmatch(r"[0-9]+", value):
        port = int(value)
    else:
        raise ConfigurationError(f"Invalid port: {value!r} is not an integer")
    if not 0 <= port <= 65535:
        raise ConfigurationError(f"Invalid port: {port} is out of range 0-65535")
    return port


def resolve_address(host: str) -> str:
    """
    Accept an IPv4 dotted quad as is, otherwise resolve the host name to one.
    """
    try:
        socket.inet_pton(socket.AF_INET, host)
        return host
    except (OSError, TypeError, ValueError):
        pass
    try:
        return socket.gethostbyname(host)
    except (OSError, UnicodeError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid IP address format: {host!r} ({exc})") from None


class Config:
    """
    Endpoint configuration. Values are validated here so that a bad address or
    port is rejected before the listener touches the network.
    """

    def __init__(
            self,
            host=DEFAULT_HOST,
            port=DEFAULT_PORT,
            backlog=DEFAULT_BACKLOG,
            buffer_size=BUFFER_SIZE,
            recv_buffer_size=RECV_BUFFER_SIZE
    ):
        self._port = parse_port(port)
        self._host = host
        self._address = resolve_address(host)
        if backlog < 0:
            raise ConfigurationError(f"Invalid backlog: {backlog}")
        if buffer_size <= 0:
            raise ConfigurationError(f"Invalid buffer size: {buffer_size}")
        self._backlog = backlog
        self._buffer_size = buffer_size
        self._recv_buffer_size = recv_buffer_size

    @property
    def host(self) -> str:
        return self._host

    @property
    def address(self) -> str:
        return self._address

    @property
    def port(self) -> int:
        return self._port

    @property
    def bind_address(self) -> tuple[str, int]:
        return self._address, self._port

    @property
    def backlog(self) -> int:
        return self._backlog

    @property
    def buffer_size(self) -> int:
        return self._buffer_size

    @property
    def recv_buffer_size(self) -> int:
        return self._recv_buffer_size

    def __repr__(self):
        return f"Config(host={self._host!r}, port={self._port})"
