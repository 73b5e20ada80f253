"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the responder and its listener.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m webworker --port 3000                           │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── WEBWORKER_PORT=3000 python -m webworker                   │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

A ServerConfig is validated once at startup and then only read. Every
handler thread sees the same instance; none of them modify it.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class ServerConfig:
    """
    Responder configuration.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK
    - host, port, backlog, request_timeout

    CONTENT
    - root_dir, chunk_size, jpg_as_png, confine_to_root

    IDENTITY
    - server_name, marker_server_text

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (development)
    - "0.0.0.0" - All network interfaces
    """

    port: int = 8080
    """The port number to listen on (0 lets the OS pick one)."""

    backlog: int = 128
    """Maximum number of queued connections."""

    request_timeout: Optional[float] = 30.0
    """
    Seconds to wait for each request line.
    None = block until the client sends something or hangs up.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    root_dir: str = "."
    """
    Web root. Request targets are resolved relative to this directory.
    "." = the directory the server was started from.
    """

    chunk_size: int = 8192
    """Block size used when copying image files to the client."""

    jpg_as_png: bool = False
    """
    Label .jpg files as image/png, like the first version of this server.
    Off by default: .jpg is served as image/jpeg.
    """

    confine_to_root: bool = True
    """
    Refuse request targets that resolve outside root_dir ("../" tricks,
    symlinks). Turning this off serves whatever path the client names.
    """

    # ─────────────────────────────────────────────────────────────────────
    # SERVER IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "Jon's very own server"
    """Value of the Server response header."""

    marker_server_text: str = "Geralds Server"
    """Text appended after <cs371server> markers in HTML pages."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """
    Access log format: 'json' or 'text'.
    JSON is better for log aggregators, text for human reading.
    """

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        WEBWORKER_HOST        Server host (default: 127.0.0.1)
        WEBWORKER_PORT        Server port (default: 8080)
        WEBWORKER_ROOT        Web root directory (default: .)
        WEBWORKER_TIMEOUT     Request timeout in seconds, "none" to block
                              (default: 30)
        WEBWORKER_LOG_LEVEL   Logging level (default: INFO)
        WEBWORKER_LOG_FORMAT  Access log format (default: text)

        =====================================================================
        """
        timeout = os.getenv("WEBWORKER_TIMEOUT", "30")
        return cls(
            host=os.getenv("WEBWORKER_HOST", "127.0.0.1"),
            port=int(os.getenv("WEBWORKER_PORT", "8080")),
            root_dir=os.getenv("WEBWORKER_ROOT", "."),
            request_timeout=None if timeout.lower() == "none" else float(timeout),
            log_level=os.getenv("WEBWORKER_LOG_LEVEL", "INFO"),
            log_format=os.getenv("WEBWORKER_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Fail fast at startup rather than on the first request.

        Raises:
            ValueError: If any value is out of range.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")

        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ValueError("request_timeout must be > 0 or None")

        if not os.path.isdir(self.root_dir):
            raise ValueError(f"root_dir is not a directory: {self.root_dir}")

        if self.log_format not in ("text", "json"):
            raise ValueError(f"log_format must be 'text' or 'json', got {self.log_format!r}")
