from .config import Config
from .errors import ConfigurationError, EchoServerError, ResourceError, TransferError
from .listener import Listener
from .session import EchoSession
from .sockets import OwnedSocket

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConfigurationError",
    "EchoServerError",
    "EchoSession",
    "Listener",
    "OwnedSocket",
    "ResourceError",
    "TransferError",
]
