"""
=============================================================================
WEBWORKER - Single-Request HTTP/1.1 Responder
=============================================================================

Hand it one accepted connection; it reads the request line, works out what
file was asked for and what kind of file it is, sends a header block, then
streams the file back and closes the connection.

=============================================================================
PROJECT OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    ONE CONNECTION, ONE RESPONSE                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. READ        "GET /index.html HTTP/1.1" → "/index.html"        │
    │   2. CLASSIFY    ".html" → text/html   ".gif" → image/gif          │
    │   3. LOOK UP     open ./index.html once (Found / NotFound)          │
    │   4. HEADER      200 OK or 404 Not Found, Date, Server,             │
    │                  Connection: close, Content-Type                    │
    │   5. CONTENT     HTML with <cs371date>/<cs371server> filled in,     │
    │                  or image bytes copied verbatim                     │
    │   6. CLOSE       always, exactly once                               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    webworker/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m webworker)
    ├── server.py            # WebServer: thread per connection
    ├── config.py            # ServerConfig dataclass
    ├── access_log.py        # Per-connection access log entries
    ├── core/                # Socket layer
    │   ├── socket_server.py # TCP listener
    │   └── connection.py    # Connection wrapper
    ├── http/                # Protocol pieces
    │   ├── request.py       # Request target extraction
    │   ├── response.py      # Header block, HTTP dates
    │   ├── status_codes.py  # 200 / 404
    │   └── mime_types.py    # Content type table
    └── handlers/            # The per-connection pipeline
        ├── static.py        # Resource lookup
        ├── render.py        # Body rendering
        └── worker.py        # handle_connection()

=============================================================================
QUICK START
=============================================================================

    from webworker import WebServer, ServerConfig

    server = WebServer(ServerConfig(port=8080, root_dir="./www"))
    server.run()

Or from a shell:

    python -m webworker --root ./www --port 8080

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .handlers import handle_connection
from .server import WebServer

__all__ = ["WebServer", "ServerConfig", "handle_connection", "__version__"]
