"""
=============================================================================
HANDLERS MODULE
=============================================================================

Everything that turns one connection into one response:

    static.py   request target → Found / NotFound (opened once)
    render.py   body: HTML with markers, image bytes, or inline 404
    worker.py   handle_connection(): the whole pipeline for one socket

=============================================================================
USAGE
=============================================================================

    from webworker.handlers import handle_connection

    result = handle_connection(conn, ServerConfig(root_dir="./www"))
    print(result.status, result.bytes_sent)

=============================================================================
"""

from .static import (
    Found,
    NotFound,
    ResourceLookup,
    ResourceNotFoundError,
    lookup_resource,
)
from .render import write_content
from .worker import HandlerResult, HandlerState, handle_connection

__all__ = [
    "Found",
    "NotFound",
    "ResourceLookup",
    "ResourceNotFoundError",
    "lookup_resource",
    "write_content",
    "HandlerResult",
    "HandlerState",
    "handle_connection",
]
