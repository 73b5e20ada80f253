"""
pytest configuration and fixtures.
"""

import dataclasses
import os
import socket
import threading
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from webworker import ServerConfig, WebServer
from webworker.core import Connection
from webworker.handlers import HandlerResult, handle_connection


INDEX_HTML = (
    "<html>\n"
    "<head><title>Home</title></head>\n"
    "<body>\n"
    "<p>Served by <cs371server></p>\n"
    "</body>\n"
    "</html>\n"
)

TODAY_HTML = (
    "<html><body>\r\n"
    "<p>Today is <cs371date></p>\r\n"
    "<p>Nothing to see here</p>\r\n"
    "</body></html>\r\n"
)


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /index.html HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/html\r\n"
        b"\r\n"
    )


@pytest.fixture
def png_bytes() -> bytes:
    """PNG signature followed by enough random bytes to need several chunks."""
    return b"\x89PNG\r\n\x1a\n" + os.urandom(20000)


@pytest.fixture
def www_root(tmp_path: Path, png_bytes: bytes) -> Path:
    """A small web root with HTML pages and images."""
    root = tmp_path / "www"
    root.mkdir()
    (root / "index.html").write_text(INDEX_HTML)
    (root / "today.html").write_bytes(TODAY_HTML.encode())
    (root / "logo.png").write_bytes(png_bytes)
    (root / "photo.jpg").write_bytes(b"\xff\xd8\xff\xe0" + b"\x00" * 64)
    (root / "anim.gif").write_bytes(b"GIF89a" + bytes(range(256)))
    (root / "sub").mkdir()
    (root / "sub" / "page.html").write_text("<p>nested</p>\n")

    # A file next to, not inside, the web root
    (tmp_path / "secret.html").write_text("top secret\n")
    return root


@pytest.fixture
def config(www_root: Path) -> ServerConfig:
    """Test configuration serving the temporary web root."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let the OS pick a free port
        root_dir=str(www_root),
        request_timeout=5.0,
        log_level="WARNING",
    )


def read_all(sock: socket.socket) -> bytes:
    """Read from a socket until the peer closes it."""
    chunks = []
    while True:
        chunk = sock.recv(65536)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


class Exchange:
    """
    Runs handle_connection() against one end of a socketpair.

    The handler runs on its own thread while the test plays the client on
    the other end, exactly like a real server thread would.
    """

    def __init__(self, config: ServerConfig, timeout: float = 5.0):
        self.config = config
        server_sock, self.client = socket.socketpair()
        self.client.settimeout(timeout)
        self.conn = Connection(socket=server_sock, address=("127.0.0.1", 50000), timeout=config.request_timeout)
        self.result: HandlerResult = None
        self._thread = threading.Thread(target=self._run, daemon=True)

    def _run(self):
        self.result = handle_connection(self.conn, self.config)

    def start(self) -> "Exchange":
        self._thread.start()
        return self

    def send(self, data: bytes) -> "Exchange":
        self.client.sendall(data)
        return self

    def finish(self) -> bytes:
        """Read the whole response and wait for the handler to return."""
        try:
            raw = read_all(self.client)
        finally:
            self.client.close()
        self._thread.join(timeout=5.0)
        assert not self._thread.is_alive(), "handler did not finish"
        return raw


@pytest.fixture
def exchange(config: ServerConfig):
    """
    Factory: exchange(request_bytes, **config_overrides) -> (raw, result, conn).

    An empty request closes the client write side without sending anything.
    """
    def run(request: bytes, **overrides):
        cfg = dataclasses.replace(config, **overrides)
        ex = Exchange(cfg).start()
        if request:
            ex.send(request)
        else:
            ex.client.shutdown(socket.SHUT_WR)
        raw = ex.finish()
        return raw, ex.result, ex.conn
    return run


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False  # Not a test class

    def __init__(self, server: WebServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def address(self):
        return self.server.address

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"setup_logging": False},
            daemon=True,
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def request(self, raw: bytes) -> bytes:
        """Send raw request bytes and return the full response."""
        with socket.create_connection(self.address, timeout=5.0) as s:
            s.sendall(raw)
            return read_all(s)

    def stop(self):
        """Stop the server."""
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """A running WebServer on a free port."""
    srv = TestServer(WebServer(config))
    srv.start()

    yield srv

    srv.stop()
