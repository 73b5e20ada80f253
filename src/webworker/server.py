"""
=============================================================================
WEB SERVER
=============================================================================

Glue between the listener and the per-connection handler:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer ── accept() ──► WebServer._dispatch(conn)            │
    │                                       │                              │
    │                                       └── Thread(handle_connection)  │
    │                                               │                      │
    │                                               └── one request,       │
    │                                                   then close         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

One thread per connection. Threads are daemons: a hung client cannot keep
the process alive after shutdown. Handlers share nothing but the read-only
ServerConfig, so no locks are needed.

=============================================================================
"""

import logging
import threading
from typing import Callable, Optional

from .config import ServerConfig
from .core import Connection, SocketServer
from .handlers import handle_connection


logger = logging.getLogger(__name__)


class WebServer:
    """
    Thread-per-connection HTTP responder.

    Usage:
        server = WebServer(ServerConfig(port=8080, root_dir="./www"))
        server.run()  # Blocks until Ctrl+C
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        handler: Callable[[Connection, ServerConfig], object] = handle_connection,
    ):
        """
        Initialize the server.

        Args:
            config: Server configuration. Uses defaults if not provided.
            handler: Per-connection handler, called on its own thread.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self._handler = handler
        self._socket_server = SocketServer(self.config)
        self._running = False

    @property
    def address(self):
        """Bound (host, port); useful with port=0."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    def run(self, host: Optional[str] = None, port: Optional[int] = None, setup_logging: bool = True):
        """
        Start the server (blocking).

        Args:
            host: Override config host.
            port: Override config port.
            setup_logging: Configure the root logger from the config.
        """
        if host:
            self.config.host = host
        if port is not None:
            self.config.port = port

        if setup_logging:
            self._setup_logging()

        self._running = True
        logger.info(
            f"Serving {self.config.root_dir!r} on {self.config.host}:{self.config.port}"
        )

        try:
            self._socket_server.start(self._dispatch)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._running = False
            logger.info("Server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the listening socket is bound."""
        return self._socket_server.wait_until_ready(timeout)

    def shutdown(self):
        """Stop accepting connections. In-flight handlers finish on their own."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("webworker").setLevel(level)

    def _dispatch(self, conn: Connection):
        """Hand the connection to a fresh thread that owns it."""
        worker = threading.Thread(
            target=self._handler,
            args=(conn, self.config),
            name=f"webworker-{conn.id}",
            daemon=True,
        )
        try:
            worker.start()
        except RuntimeError as e:
            # Could not spawn a thread; nobody else owns this connection
            logger.error(f"[{conn.id}] Failed to start handler thread: {e}")
            conn.close()
