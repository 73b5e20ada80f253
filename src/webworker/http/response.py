"""
=============================================================================
RESPONSE HEADER
=============================================================================

Every response starts with the same five lines and a blank line:

    HTTP/1.1 200 OK\r\n                         ← status line
    Date: Sun, 18 Oct 2026 09:30:00 GMT\r\n     ← when we answered
    Server: Jon's very own server\r\n           ← who answered
    Connection: close\r\n                       ← body ends at close
    Content-Type: text/html\r\n                 ← how to read the body
    \r\n                                        ← end of header block
    <body bytes...>

=============================================================================
WHY NO Content-Length?
=============================================================================

HTML bodies are rewritten while they stream (marker substitution), so the
final length is not known up front. "Connection: close" tells the client
that the body ends when the socket closes, which is all HTTP/1.1 needs.

=============================================================================
DATES
=============================================================================

Dates must not depend on the server's locale (a German server would
otherwise print "Okt"), so we format them from fixed English tables
instead of strftime("%a")/("%b"). All formats are in GMT.

    format_http_date()   Sun, 18 Oct 2026 09:30:00 GMT    (Date header)
    format_short_date()  18 Oct 2026                      (<cs371date> marker)
    format_log_date()    18/Oct/2026:09:30:00 +0000       (access log)

=============================================================================
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from ..core.connection import Connection
from .mime_types import ContentType
from .status_codes import HTTPStatus

if TYPE_CHECKING:
    from ..handlers.static import ResourceLookup


HTTP_VERSION = "HTTP/1.1"

_DAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_http_date(dt: Optional[datetime] = None) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Wed, 01 Jan 2026 12:00:00 GMT

    Args:
        dt: Datetime to format. Defaults to now. Aware datetimes are
            converted to UTC first.

    Returns:
        Formatted date string.
    """
    dt = _to_utc(dt)
    return (
        f"{_DAYS[dt.weekday()]}, "
        f"{dt.day:02d} {_MONTHS[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


def format_short_date(dt: Optional[datetime] = None) -> str:
    """
    Format the date part only, e.g. "18 Oct 2026" (GMT).

    Used for the <cs371date> marker in HTML pages.
    """
    dt = _to_utc(dt)
    return f"{dt.day:02d} {_MONTHS[dt.month - 1]} {dt.year}"


def format_log_date(dt: Optional[datetime] = None) -> str:
    """Access log timestamp, e.g. "18/Oct/2026:09:30:05 +0000" (GMT)."""
    dt = _to_utc(dt)
    return (
        f"{dt.day:02d}/{_MONTHS[dt.month - 1]}/{dt.year}:"
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} +0000"
    )


def _to_utc(dt: Optional[datetime]) -> datetime:
    if dt is None:
        return _utc_now()
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc)
    return dt


def status_for(resource: "ResourceLookup") -> HTTPStatus:
    """200 when the resource was opened, 404 otherwise."""
    return HTTPStatus.OK if resource.exists else HTTPStatus.NOT_FOUND


def status_line(status: HTTPStatus) -> str:
    """
    Get the HTTP status line.

    Example: "HTTP/1.1 404 Not Found"
    """
    return f"{HTTP_VERSION} {int(status)} {status.phrase}"


def build_header(
    content_type: ContentType,
    resource: "ResourceLookup",
    server_name: str,
    now: Optional[datetime] = None,
) -> bytes:
    """
    Serialize the status line and header block.

    Args:
        content_type: Category resolved from the request target.
        resource: The connection's single lookup result.
        server_name: Value of the Server header.
        now: Timestamp for the Date header (defaults to now).

    Returns:
        Header bytes, ending with the blank line (CRLF CRLF).
    """
    lines = [
        status_line(status_for(resource)),
        f"Date: {format_http_date(now)}",
        f"Server: {server_name}",
        "Connection: close",
        f"Content-Type: {content_type.mime}",
        "",  # Empty line separates headers from body
    ]
    return "\r\n".join(lines).encode("utf-8") + b"\r\n"


def write_header(
    conn: Connection,
    content_type: ContentType,
    resource: "ResourceLookup",
    server_name: str,
    now: Optional[datetime] = None,
) -> HTTPStatus:
    """
    Write the status line and header block to the connection.

    The whole block goes out in one write, so it is complete before any
    content byte. Write errors propagate to the caller; the connection is
    not closed here.

    Returns:
        The status that was sent.
    """
    conn.write(build_header(content_type, resource, server_name, now))
    return status_for(resource)
