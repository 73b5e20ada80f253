"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The responder only ever answers with two statuses:

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  Code  │ When                                                      │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  200   │ The requested file was opened for reading                 │
    │  404   │ The file is missing, unreadable, a directory, or the      │
    │        │ request line had no target at all                         │
    └────────┴───────────────────────────────────────────────────────────┘

Everything else (bad methods, oversized requests, server faults) ends with
the connection being closed, not with a status line.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    This enum extends IntEnum, so status codes can be used as integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200            # File found and streamed
    NOT_FOUND = 404     # File missing or unreadable

    @property
    def phrase(self) -> str:
        """Get the reason phrase for this status code."""
        return _STATUS_PHRASES.get(self, "Unknown")


# =============================================================================
# REASON PHRASES
# =============================================================================
#
# HTTP/1.1 404 Not Found
#          ─── ─────────
#           │      └──── Reason phrase
#           └─────────── Status code
#
# =============================================================================

_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_FOUND: "Not Found",
}
