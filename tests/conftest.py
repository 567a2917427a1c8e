import logging
import socket
import threading

import pytest

from echo_server import Config, Listener


class ListenerThread:
    """Runs Listener.run() in a daemon thread and keeps whatever it raised."""

    def __init__(self, listener: Listener):
        self.listener = listener
        self.error = None
        self.thread = threading.Thread(target=self._run, daemon=True)

    def _run(self):
        try:
            self.listener.run()
        except BaseException as exc:
            self.error = exc

    @property
    def address(self):
        return self.listener.server_address

    def connect(self, timeout=5.0) -> socket.socket:
        return socket.create_connection(self.address, timeout=timeout)

    def stop(self):
        self.listener.close()
        self.thread.join(timeout=5)


@pytest.fixture
def running_listener():
    started = []

    def start(config=None) -> ListenerThread:
        listener = Listener(config or Config(port=0))
        listener.initialize()
        runner = ListenerThread(listener)
        runner.thread.start()
        started.append(runner)
        return runner

    yield start
    for runner in started:
        runner.stop()


@pytest.fixture(autouse=True)
def reset_echo_server_logger():
    yield
    logger = logging.getLogger("echo_server")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def recv_exactly():
    def recv(sock: socket.socket, size: int) -> bytes:
        data = b""
        while len(data) < size:
            chunk = sock.recv(size - len(data))
            if not chunk:
                break
            data += chunk
        return data

    return recv
