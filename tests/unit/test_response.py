"""
Unit tests for the response header block.
"""

import io
from datetime import datetime, timezone, timedelta
from pathlib import Path

import pytest

from webworker.handlers.static import Found, NotFound
from webworker.http.mime_types import ContentType
from webworker.http.response import (
    build_header,
    format_http_date,
    format_log_date,
    format_short_date,
    status_line,
    write_header,
)
from webworker.http.status_codes import HTTPStatus


NOW = datetime(2026, 10, 18, 9, 30, 5, tzinfo=timezone.utc)


class RecordingConnection:
    """Stands in for Connection, keeping every write."""

    def __init__(self):
        self.writes = []

    def write(self, data: bytes) -> None:
        self.writes.append(data)


@pytest.fixture
def found() -> Found:
    return Found(Path("index.html"), io.BytesIO(b"<html></html>\n"))


@pytest.fixture
def missing() -> NotFound:
    return NotFound(Path("missing.html"), "No such file or directory")


class TestDates:
    """Tests for locale-independent GMT dates."""

    def test_http_date(self):
        assert format_http_date(NOW) == "Sun, 18 Oct 2026 09:30:05 GMT"

    def test_http_date_converts_to_gmt(self):
        """Aware datetimes in other zones are shifted to GMT."""
        local = NOW.astimezone(timezone(timedelta(hours=-6)))
        assert format_http_date(local) == "Sun, 18 Oct 2026 09:30:05 GMT"

    def test_short_date(self):
        assert format_short_date(NOW) == "18 Oct 2026"

    def test_short_date_pads_day(self):
        assert format_short_date(datetime(2026, 3, 7, tzinfo=timezone.utc)) == "07 Mar 2026"

    def test_log_date(self):
        assert format_log_date(NOW) == "18/Oct/2026:09:30:05 +0000"

    def test_log_date_converts_to_gmt(self):
        local = NOW.astimezone(timezone(timedelta(hours=-6)))
        assert format_log_date(local) == "18/Oct/2026:09:30:05 +0000"

    def test_defaults_to_now(self):
        """Without an argument the current time is used."""
        assert format_http_date().endswith(" GMT")


class TestStatusLine:
    """Tests for status_line()."""

    def test_status_line(self):
        assert status_line(HTTPStatus.OK) == "HTTP/1.1 200 OK"
        assert status_line(HTTPStatus.NOT_FOUND) == "HTTP/1.1 404 Not Found"


class TestBuildHeader:
    """Tests for build_header()."""

    def test_found_is_200(self, found):
        header = build_header(ContentType.HTML, found, "Test Server", NOW)
        assert header.startswith(b"HTTP/1.1 200 OK\r\n")

    def test_missing_is_404(self, missing):
        header = build_header(ContentType.HTML, missing, "Test Server", NOW)
        assert header.startswith(b"HTTP/1.1 404 Not Found\r\n")

    def test_header_lines(self, found):
        """All header fields are present, in order."""
        header = build_header(ContentType.GIF, found, "Test Server", NOW)

        assert header == (
            b"HTTP/1.1 200 OK\r\n"
            b"Date: Sun, 18 Oct 2026 09:30:05 GMT\r\n"
            b"Server: Test Server\r\n"
            b"Connection: close\r\n"
            b"Content-Type: image/gif\r\n"
            b"\r\n"
        )

    def test_ends_with_blank_line(self, missing):
        header = build_header(ContentType.PNG, missing, "Test Server")
        assert header.endswith(b"\r\n\r\n")
        assert header.count(b"\r\n\r\n") == 1

    def test_no_content_length(self, found):
        """The body is delimited by connection close."""
        assert b"Content-Length" not in build_header(ContentType.HTML, found, "Test Server")


class TestWriteHeader:
    """Tests for write_header()."""

    def test_single_write(self, found):
        """The header block is sent in one piece."""
        conn = RecordingConnection()
        status = write_header(conn, ContentType.HTML, found, "Test Server", NOW)

        assert status == HTTPStatus.OK
        assert len(conn.writes) == 1
        assert conn.writes[0].endswith(b"\r\n\r\n")

    def test_returns_404_for_missing(self, missing):
        conn = RecordingConnection()
        assert write_header(conn, ContentType.PNG, missing, "Test Server") == HTTPStatus.NOT_FOUND

    def test_write_errors_propagate(self, found):
        """Connection failures are not swallowed."""
        class BrokenConnection:
            def write(self, data):
                raise BrokenPipeError("gone")

        with pytest.raises(BrokenPipeError):
            write_header(BrokenConnection(), ContentType.HTML, found, "Test Server")
