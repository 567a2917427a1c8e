"""
Exception hierarchy for the echo server.

ConfigurationError and ResourceError are fatal and unwind to the command line
entry point. TransferError only ends the session it was raised in; the
listener catches it and goes back to accepting.
"""


class EchoServerError(Exception):
    pass


class ConfigurationError(EchoServerError):
    """Invalid bind address or port. Raised before any socket is created."""


class _OSFailure(EchoServerError):

    def __init__(self, message: str, operation: str | None = None, errno: int | None = None,
                 address: tuple[str, int] | None = None):
        super().__init__(message)
        self.operation = operation
        self.errno = errno
        self.address = address

    @classmethod
    def from_os_error(cls, operation: str, exc: OSError, address: tuple[str, int] | None = None):
        target = f" {address[0]}:{address[1]}" if address is not None else ""
        if exc.errno is not None:
            reason = f"[Errno {exc.errno}] {exc.strerror}"
        else:
            reason = str(exc) or exc.__class__.__name__
        return cls(f"Failed to {operation}{target}: {reason}",
                   operation=operation, errno=exc.errno, address=address)


class ResourceError(_OSFailure):
    """Creating, configuring, binding, listening on or accepting from the listening socket failed."""


class TransferError(_OSFailure):
    """Reading from or writing to a connection failed."""
