"""
=============================================================================
CONNECTION WRAPPER
=============================================================================

A Connection is one accepted TCP socket, owned by exactly one handler for
its whole life:

    ┌─────────────────────────────────────────────────────────────────┐
    │                    One Connection, One Request                   │
    ├─────────────────────────────────────────────────────────────────┤
    │                                                                  │
    │   accept() ──► Connection ──► handler thread                     │
    │                                   │                              │
    │                                   ├── read request lines         │
    │                                   ├── write header               │
    │                                   ├── write content              │
    │                                   └── flush + close (ONCE)       │
    │                                                                  │
    │   The response ends with "Connection: close", so the client      │
    │   learns where the body ends when we close the socket.           │
    │                                                                  │
    └─────────────────────────────────────────────────────────────────┘

There is no keep-alive: after close() every read or write raises
ConnectionClosedError instead of touching a dead file descriptor.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    OPEN ──────► CLOSING ──────► CLOSED

close() is idempotent. The handler calls it from a `with` block so it runs
on every exit path, success or failure.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional
import uuid


logger = logging.getLogger(__name__)


class ConnectionClosedError(OSError):
    """Raised when a closed connection is read from or written to."""


class ConnectionState(Enum):
    """Socket lifecycle states."""
    OPEN = "open"          # Accepted, readable and writable
    CLOSING = "closing"    # Shutdown sequence in progress
    CLOSED = "closed"      # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Wraps a raw socket with:

    - A buffered binary reader for line-oriented request parsing
      (socket.makefile gives us readline() for free).
    - write()/flush() that go straight to sendall(), counting bytes.
    - A request timeout so a silent client cannot pin a thread forever.
    - An exactly-once close().

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Unique connection identifier (for logging).
        state: Current connection state.
        created_at: Timestamp when connection was accepted.
        bytes_sent: Total bytes written to the client.
    """

    # Required parameters
    socket: socket.socket
    address: tuple = ("", 0)

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.OPEN
    created_at: float = field(default_factory=time.time)
    bytes_sent: int = 0

    # Configuration (passed from ServerConfig)
    timeout: Optional[float] = 30.0   # None = block forever on reads

    # Internal state (not shown in repr for cleaner logs)
    _reader: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        """Configure socket and build the line reader."""
        # Blocking reads, optionally bounded by a timeout
        self.socket.settimeout(self.timeout)
        self._reader = self.socket.makefile("rb")

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0] if self.address else ""

    @property
    def is_closed(self) -> bool:
        """True once close() has started."""
        return self.state != ConnectionState.OPEN

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    @property
    def reader(self) -> BinaryIO:
        """
        Binary line reader over the socket.

        readline() blocks until a full line, end of stream (b"") or the
        timeout (socket.timeout, an OSError).
        """
        self._check_open()
        return self._reader

    # =========================================================================
    # WRITING
    # =========================================================================

    def write(self, data: bytes) -> None:
        """
        Send bytes to the client.

        Uses sendall() so a short send never truncates the response.
        Errors propagate: a failed write is fatal for this connection.

        Raises:
            ConnectionClosedError: If the connection was already closed.
            OSError: If the peer went away (reset, broken pipe).
        """
        self._check_open()
        self.socket.sendall(data)
        self.bytes_sent += len(data)

    def flush(self) -> None:
        """
        Flush pending output.

        write() goes straight to sendall(), so nothing is buffered on our
        side; this only guards against flushing a closed connection.
        """
        self._check_open()

    def _check_open(self):
        if self.is_closed:
            raise ConnectionClosedError(f"[{self.id}] Connection is closed")

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): send FIN so the client sees end-of-body
        2. close the reader and the socket file descriptor

        Safe to call more than once; only the first call does anything.
        """
        if self.is_closed:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            if self._reader is not None:
                self._reader.close()
            self.socket.close()
        except OSError as e:
            logger.debug(f"[{self.id}] Error while closing socket: {e}")

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.bytes_sent} bytes")

    # =========================================================================
    # CONTEXT MANAGER: For use with 'with' statement
    # =========================================================================

    def __enter__(self):
        """
        Context manager entry.

            with conn:
                target = read_request_target(conn.reader)
                conn.write(b"...")
            # Connection automatically closed here
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure connection is closed."""
        self.close()
        return False  # Don't suppress exceptions
