"""Shared pytest fixtures: sample source files and a one-shot TCP collector."""

import socket
import threading

import pytest


class OneShotCollector:
    """Accepts a single connection on an ephemeral port and reads it to EOF."""

    def __init__(self):
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.settimeout(5.0)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(1)
        self.host, self.port = self._sock.getsockname()
        self.payload: bytes | None = None
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def start(self):
        self._thread.start()

    def _serve(self):
        try:
            conn, _ = self._sock.accept()
        except OSError:
            return
        chunks = []
        with conn:
            conn.settimeout(5.0)
            while True:
                data = conn.recv(4096)
                if not data:
                    break
                chunks.append(data)
        self.payload = b"".join(chunks)

    def wait(self, timeout: float = 5.0) -> bytes | None:
        """Block until the connection has been read, return what was received."""
        self._thread.join(timeout=timeout)
        return self.payload

    def close(self):
        try:
            self._sock.close()
        except OSError:
            pass


@pytest.fixture
def collector():
    """A started OneShotCollector, closed after the test."""
    server = OneShotCollector()
    server.start()
    yield server
    server.close()


@pytest.fixture
def ten_line_file(tmp_path) -> str:
    """A 10-line file whose line N reads ``line N``."""
    path = tmp_path / "ten.py"
    path.write_text("".join(f"line {n}\n" for n in range(1, 11)), encoding="utf-8")
    return str(path)


@pytest.fixture
def app_file(tmp_path) -> str:
    """A small application module used as the target of synthetic frames."""
    path = tmp_path / "app.py"
    path.write_text(
        "def inner():\n"
        "    value = compute()\n"
        "    report(value)\n"
        "\n"
        "\n"
        "def outer():\n"
        "    inner()\n"
        "    return True\n",
        encoding="utf-8",
    )
    return str(path)
