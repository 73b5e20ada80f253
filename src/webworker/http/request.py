"""
=============================================================================
REQUEST LINE PARSING
=============================================================================

We only need ONE thing from the request: the path the client asked for.

    GET /images/cat.gif HTTP/1.1\r\n     ← request line: we want "/images/cat.gif"
    Host: localhost:8080\r\n             ← header: read and discarded
    User-Agent: curl/8.0\r\n             ← header: read and discarded
    \r\n                                 ← blank line: stop reading

=============================================================================
ALGORITHM
=============================================================================

    ┌─────────────────────────────────────────────────────────────────┐
    │                  read_request_target() Flow                      │
    ├─────────────────────────────────────────────────────────────────┤
    │                                                                  │
    │   while True:                                                    │
    │       line = readline()                                          │
    │       │                                                          │
    │       ├── OSError / timeout ──► stop, keep what we have          │
    │       ├── b"" (EOF) ──────────► stop, keep what we have          │
    │       │                                                          │
    │       ├── first line with "GET " ──► target = text after         │
    │       │                              "GET " up to next space     │
    │       │                                                          │
    │       └── empty line ─────────► end of headers, stop             │
    │                                                                  │
    └─────────────────────────────────────────────────────────────────┘

Nothing is validated. A malformed or missing target simply turns into a
404 further down the pipeline. The target is computed once: later lines
that happen to contain "GET " do not overwrite it.

=============================================================================
"""

import logging
from typing import BinaryIO


logger = logging.getLogger(__name__)


# Method token, matched together with its trailing space
METHOD_TOKEN = "GET "

# Request lines are bytes on the wire; ISO-8859-1 maps every byte to a
# character, so decoding never fails.
REQUEST_ENCODING = "iso-8859-1"


def extract_target(line: str) -> str:
    """
    Extract the request target from a single request line.

    Args:
        line: A decoded request line without its line terminator.

    Returns:
        The text after the method token up to the next space, or "" if the
        line does not contain the method token.

    Examples:
        >>> extract_target("GET /index.html HTTP/1.1")
        '/index.html'

        >>> extract_target("GET /index.html")
        '/index.html'

        >>> extract_target("Host: example.com")
        ''
    """
    start = line.find(METHOD_TOKEN)
    if start < 0:
        return ""

    rest = line[start + len(METHOD_TOKEN):]
    return rest.split(" ", 1)[0]


def read_request_target(reader: BinaryIO) -> str:
    """
    Read the request header block and return the request target.

    Consumes every header line up to and including the blank line that
    ends the header block.

    Args:
        reader: Binary stream with readline(), e.g. Connection.reader.

    Returns:
        The request target, or "" if no request line was seen before the
        header block ended (or the stream failed).
    """
    target = ""
    found = False

    while True:
        try:
            raw = reader.readline()
        except OSError as e:
            # Timeout, reset, or a closed stream: keep what we have
            logger.warning(f"Request read error: {e}")
            break

        if not raw:
            logger.debug("Request stream ended before blank line")
            break

        line = raw.decode(REQUEST_ENCODING).rstrip("\r\n")
        logger.debug(f"Request line: ({line})")

        if not found and METHOD_TOKEN in line:
            target = extract_target(line)
            found = True

        if len(line) == 0:
            break

    return target
