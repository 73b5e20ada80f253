"""
=============================================================================
ACCESS LOG
=============================================================================

One log entry per connection, written after the connection is closed:

    127.0.0.1 - - [18/Oct/2026:09:30:00 +0000] "GET /index.html" 200 1342 0.84ms
    │                │                          │                │   │    │
    │                │                          │                │   │    └─ duration
    │                │                          │                │   └────── body bytes
    │                │                          │                └────────── status
    │                │                          └─────────────────────────── target
    │                └────────────────────────────────────────────────────── timestamp
    └─────────────────────────────────────────────────────────────────────── client

or, with log_format="json", the same fields as one JSON object per line
for log aggregators (ELK, Datadog).

Entries go to the "webworker.access" logger so they can be routed or
silenced independently of the diagnostic loggers:

    logging.getLogger("webworker.access").setLevel(logging.WARNING)

=============================================================================
"""

import json
import logging
from dataclasses import dataclass, asdict


logger = logging.getLogger("webworker.access")


@dataclass
class ConnectionLog:
    """
    Structured log entry for one handled connection.

    Fields:
        connection_id:  Connection identifier (matches diagnostic logs)
        client_ip:      Client's IP address
        target:         Request target ("" when none was parsed)
        content_type:   MIME type sent in the header ("-" if none)
        status_code:    Status sent, 0 if the header never went out
        bytes_sent:     Total bytes written (header + body)
        duration_ms:    Time from accept to close
        timestamp:      When the connection was handled
        error:          Failure summary, "" on success
    """

    connection_id: str
    client_ip: str
    target: str
    content_type: str
    status_code: int
    bytes_sent: int
    duration_ms: float
    timestamp: str
    error: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        """Format as an Apache-style access log line."""
        text = (
            f'{self.client_ip or "-"} - - [{self.timestamp}] '
            f'"GET {self.target or "-"}" {self.status_code or "-"} '
            f'{self.bytes_sent} {self.duration_ms:.2f}ms'
        )
        if self.error:
            text += f" error={self.error}"
        return text


def emit(entry: ConnectionLog, log_format: str = "text") -> None:
    """Write an access log entry in the configured format."""
    level = logging.WARNING if entry.error else logging.INFO
    if log_format == "json":
        logger.log(level, json.dumps(entry.to_dict()))
    else:
        logger.log(level, entry.to_text())
