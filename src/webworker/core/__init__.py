"""
=============================================================================
CORE MODULE - Socket Layer
=============================================================================

The low-level pieces every connection passes through:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer    bind, listen, accept loop, graceful shutdown      │
    │        │                                                             │
    │        ▼                                                             │
    │   Connection      one accepted socket: line reader, sendall()       │
    │                   writes, exactly-once close                        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .connection import Connection, ConnectionState, ConnectionClosedError
from .socket_server import SocketServer

__all__ = [
    "SocketServer",           # TCP listener - accepts connections
    "Connection",             # Wrapper for client socket - handles I/O
    "ConnectionState",        # Enum for socket lifecycle states
    "ConnectionClosedError",  # Raised on use after close
]
