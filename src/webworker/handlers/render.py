"""
=============================================================================
CONTENT RENDERING
=============================================================================

After the header block, the body is produced in one of three ways:

    ┌──────────────┬───────────────┬──────────────────────────────────────┐
    │ Category     │ Lookup        │ Body                                 │
    ├──────────────┼───────────────┼──────────────────────────────────────┤
    │ HTML         │ Found         │ File lines + markers filled in       │
    │ HTML         │ NotFound      │ <h1>404 Not Found</h1>               │
    │ image        │ Found         │ File bytes, verbatim, in chunks      │
    │ image        │ NotFound      │ ResourceNotFoundError, then close     │
    └──────────────┴───────────────┴──────────────────────────────────────┘

=============================================================================
MARKER SUBSTITUTION
=============================================================================

Pages can ask for two values to be filled in at serve time. The marker
text stays in the output; the value is appended after the line:

    File line:   <p>Today is <cs371date></p>
    Sent:        <p>Today is <cs371date></p>18 Oct 2026\n

    File line:   <footer><cs371server></footer>
    Sent:        <footer><cs371server></footer>Geralds Server\n

The browser ignores the unknown <cs371...> tags, so the reader sees
"Today is 18 Oct 2026". "<cs371server" is a prefix match: attributes or a
self-closing slash after the tag name still count.

=============================================================================
"""

import logging
import os
from datetime import datetime
from typing import Optional

from ..core.connection import Connection
from ..http.mime_types import ContentType
from ..http.response import format_short_date
from .static import ResourceLookup, ResourceNotFoundError


logger = logging.getLogger(__name__)


DATE_MARKER = b"<cs371date>"
SERVER_MARKER = b"<cs371server"

NOT_FOUND_BODY = b"<h1>404 Not Found</h1>\n"

DEFAULT_CHUNK_SIZE = 8192


def render_line(line: bytes, date_text: str, server_text: str) -> bytes:
    """
    Render one HTML line: the line, any marker values, then a newline.

    Args:
        line: File line without its line terminator.
        date_text: Value appended for <cs371date>.
        server_text: Value appended for <cs371server.

    Returns:
        The bytes to send for this line.
    """
    out = line
    if DATE_MARKER in line:
        out += date_text.encode("utf-8")
    if SERVER_MARKER in line:
        out += server_text.encode("utf-8")
    return out + b"\n"


def write_html(
    conn: Connection,
    resource: ResourceLookup,
    server_text: str,
    now: Optional[datetime] = None,
) -> int:
    """
    Stream an HTML page with marker substitution.

    A missing page is not an error here: the body degrades to an inline
    404 fragment (the header already said 404).

    Returns:
        Number of body bytes written.
    """
    if not resource.exists:
        conn.write(NOT_FOUND_BODY)
        return len(NOT_FOUND_BODY)

    date_text = format_short_date(now)
    written = 0

    for raw in resource.handle:
        line = raw.rstrip(b"\r\n")
        data = render_line(line, date_text, server_text)
        conn.write(data)
        written += len(data)

    return written


def write_image(
    conn: Connection,
    resource: ResourceLookup,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """
    Copy an image file to the connection byte for byte.

    Raises:
        ResourceNotFoundError: The image could not be opened. The header
            is already on the wire, so the only option left is to close.

    Returns:
        Number of body bytes written (equals the file size).
    """
    if not resource.exists:
        raise ResourceNotFoundError(resource.path, resource.reason)

    size = os.fstat(resource.handle.fileno()).st_size
    logger.debug(f"Sending {size} bytes from {resource.path}")

    written = 0
    while True:
        chunk = resource.handle.read(chunk_size)
        if not chunk:
            break
        conn.write(chunk)
        written += len(chunk)

    if written != size:
        logger.warning(f"{resource.path} changed while sending: {written} of {size} bytes")

    return written


def write_content(
    conn: Connection,
    content_type: ContentType,
    resource: ResourceLookup,
    server_text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    now: Optional[datetime] = None,
) -> int:
    """
    Write the response body for the resolved content type.

    Must be called after write_header(). Write errors propagate.

    Args:
        conn: Connection to write to.
        content_type: Category resolved from the request target.
        resource: The same lookup result the header was built from.
        server_text: Text appended after <cs371server markers.
        chunk_size: Block size for image copies.
        now: Timestamp for <cs371date> (defaults to now).

    Returns:
        Number of body bytes written.
    """
    if content_type.is_image:
        return write_image(conn, resource, chunk_size)
    return write_html(conn, resource, server_text, now)
