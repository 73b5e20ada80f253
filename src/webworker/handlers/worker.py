"""
=============================================================================
CONNECTION HANDLER
=============================================================================

Handles exactly one connection, start to finish, on whatever thread calls
it. This is the "main()" of a client interaction.

=============================================================================
STATE MACHINE
=============================================================================

    START ──► REQUEST_READ ──► HEADER_SENT ──► CONTENT_SENT ──┐
      │            │                │                         │
      │            │                │                         ▼
      └────────────┴────────────────┴──── (any error) ───► CLOSED

Transitions only move forward. There is no retry: if anything fails, the
failure is logged and we go straight to CLOSED. CLOSED flushes pending
output when the connection is still usable, then closes it exactly once.

=============================================================================
PIPELINE
=============================================================================

    read_request_target()       "GET /index.html HTTP/1.1" → "/index.html"
            │
    resolve_content_type()      "/index.html" → ContentType.HTML
            │
    lookup_resource()           opened once, shared below
            │
    write_header()              200 / 404 + headers + blank line
            │
    write_content()             HTML with markers, or image bytes
            │
    flush + close

Nothing is stored between connections. Every value flows through local
variables, so concurrent handlers never share mutable state.

=============================================================================
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .. import access_log
from ..config import ServerConfig
from ..core.connection import Connection
from ..http.mime_types import ContentType, resolve_content_type
from ..http.request import read_request_target
from ..http.response import format_log_date, write_header
from ..http.status_codes import HTTPStatus
from .render import write_content
from .static import ResourceNotFoundError, lookup_resource


logger = logging.getLogger(__name__)


class HandlerState(Enum):
    """Progress of a single connection through the pipeline."""
    START = "start"
    REQUEST_READ = "request_read"
    HEADER_SENT = "header_sent"
    CONTENT_SENT = "content_sent"
    CLOSED = "closed"


@dataclass
class HandlerResult:
    """
    Outcome of handling one connection.

    Attributes:
        target: Parsed request target ("" if none).
        content_type: Resolved category, None if the request was never read.
        status: Status sent, None if the header never went out.
        bytes_sent: Total bytes written to the client.
        last_state: Last state reached before CLOSED.
        error: The exception that ended the connection early, if any.
    """
    target: str = ""
    content_type: Optional[ContentType] = None
    status: Optional[HTTPStatus] = None
    bytes_sent: int = 0
    last_state: HandlerState = HandlerState.START
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        """True if the full response was written."""
        return self.error is None and self.last_state == HandlerState.CONTENT_SENT


def handle_connection(conn: Connection, config: Optional[ServerConfig] = None) -> HandlerResult:
    """
    Serve one HTTP request on an open connection, then close it.

    Never raises for per-connection failures: they are logged, the
    connection is closed, and the failure is recorded in the result.

    Args:
        conn: Freshly accepted connection. Ownership passes to this call.
        config: Server configuration (defaults if not provided).

    Returns:
        HandlerResult describing what was sent.
    """
    config = config or ServerConfig()
    result = HandlerResult()

    logger.debug(f"[{conn.id}] Handling connection from {conn.client_ip or 'local'}")

    with conn:
        try:
            _serve(conn, config, result)
        except (OSError, ResourceNotFoundError) as e:
            # Client went away, timed out, or the image vanished
            result.error = e
            logger.warning(f"[{conn.id}] Output error in {result.last_state.value}: {e}")
        except Exception as e:
            result.error = e
            logger.exception(f"[{conn.id}] Unexpected error in {result.last_state.value}: {e}")

        # ─────────────────────────────────────────────────────────────────
        # CLOSED: flush if still usable; `with conn` does the close
        # ─────────────────────────────────────────────────────────────────
        if not conn.is_closed:
            try:
                conn.flush()
            except OSError as e:
                logger.debug(f"[{conn.id}] Flush failed: {e}")

    result.bytes_sent = conn.bytes_sent
    _log_access(conn, config, result)
    logger.debug(f"[{conn.id}] Done handling connection.")
    return result


def _serve(conn: Connection, config: ServerConfig, result: HandlerResult) -> None:
    """Run the pipeline, recording progress in result as each stage completes."""
    # ─────────────────────────────────────────────────────────────────────
    # START → REQUEST_READ
    # ─────────────────────────────────────────────────────────────────────
    result.target = read_request_target(conn.reader)
    result.content_type = resolve_content_type(result.target, jpg_as_png=config.jpg_as_png)
    result.last_state = HandlerState.REQUEST_READ

    with lookup_resource(config.root_dir, result.target, confine=config.confine_to_root) as resource:
        # ─────────────────────────────────────────────────────────────────
        # REQUEST_READ → HEADER_SENT
        # ─────────────────────────────────────────────────────────────────
        result.status = write_header(conn, result.content_type, resource, config.server_name)
        result.last_state = HandlerState.HEADER_SENT

        # ─────────────────────────────────────────────────────────────────
        # HEADER_SENT → CONTENT_SENT
        # ─────────────────────────────────────────────────────────────────
        write_content(
            conn,
            result.content_type,
            resource,
            config.marker_server_text,
            chunk_size=config.chunk_size,
        )
        result.last_state = HandlerState.CONTENT_SENT


def _log_access(conn: Connection, config: ServerConfig, result: HandlerResult) -> None:
    entry = access_log.ConnectionLog(
        connection_id=conn.id,
        client_ip=conn.client_ip,
        target=result.target,
        content_type=result.content_type.mime if result.content_type else "-",
        status_code=int(result.status) if result.status is not None else 0,
        bytes_sent=result.bytes_sent,
        duration_ms=conn.age * 1000,
        timestamp=format_log_date(),
        error=f"{type(result.error).__name__}: {result.error}" if result.error else "",
    )
    access_log.emit(entry, config.log_format)
