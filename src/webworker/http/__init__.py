"""
=============================================================================
HTTP MODULE - Protocol Pieces
=============================================================================

    request.py       GET line → request target
    mime_types.py    request target → ContentType
    response.py      status line + header block, HTTP dates
    status_codes.py  200 / 404 and their reason phrases

=============================================================================
"""

from .request import read_request_target, extract_target, METHOD_TOKEN
from .mime_types import ContentType, resolve_content_type
from .status_codes import HTTPStatus
from .response import (
    build_header,
    write_header,
    format_http_date,
    format_log_date,
    format_short_date,
)

# Public API - what you get when you do:
# from webworker.http import *
__all__ = [
    # Request parsing
    "read_request_target",
    "extract_target",
    "METHOD_TOKEN",

    # Content types
    "ContentType",
    "resolve_content_type",

    # Status codes
    "HTTPStatus",

    # Response header
    "build_header",
    "write_header",
    "format_http_date",
    "format_log_date",
    "format_short_date",
]
