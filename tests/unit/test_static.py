"""
Unit tests for resource lookup.
"""

import logging
from pathlib import Path

import pytest

from webworker.handlers.static import (
    Found,
    NotFound,
    is_within_root,
    lookup_resource,
    map_target,
)


class TestMapTarget:
    """Tests for map_target()."""

    def test_relative_to_root(self, www_root: Path):
        assert map_target(www_root, "/index.html") == www_root / "index.html"

    def test_leading_slashes_stripped(self, www_root: Path):
        """A target never escapes to an absolute filesystem path."""
        assert map_target(www_root, "//etc/passwd") == www_root / "etc" / "passwd"

    def test_empty_target_is_root(self, www_root: Path):
        assert map_target(www_root, "") == www_root


class TestLookupResource:
    """Tests for lookup_resource()."""

    def test_existing_file(self, www_root: Path):
        with lookup_resource(www_root, "/index.html") as resource:
            assert isinstance(resource, Found)
            assert resource.exists
            assert resource.handle.read().startswith(b"<html>")

    def test_handle_closed_after_scope(self, www_root: Path):
        """The file handle is released when the with block exits."""
        with lookup_resource(www_root, "/logo.png") as resource:
            handle = resource.handle
            assert not handle.closed

        assert handle.closed

    def test_handle_closed_on_error(self, www_root: Path):
        """The file handle is released even when the body raises."""
        with pytest.raises(RuntimeError):
            with lookup_resource(www_root, "/logo.png") as resource:
                handle = resource.handle
                raise RuntimeError("boom")

        assert handle.closed

    def test_nested_file(self, www_root: Path):
        with lookup_resource(www_root, "/sub/page.html") as resource:
            assert resource.exists

    @pytest.mark.parametrize("target", [
        "/missing.html",
        "/sub",
        "/",
        "",
        "/sub/missing/deeper.html",
    ])
    def test_not_found(self, www_root: Path, target: str):
        """Missing files, directories and the empty target are NotFound."""
        with lookup_resource(www_root, target) as resource:
            assert isinstance(resource, NotFound)
            assert not resource.exists
            assert resource.reason

    def test_traversal_refused(self, www_root: Path):
        """Paths resolving outside the root are NotFound when confined."""
        with lookup_resource(www_root, "/../secret.html") as resource:
            assert isinstance(resource, NotFound)
            assert resource.reason == "outside web root"

    def test_traversal_allowed_when_not_confined(self, www_root: Path):
        """Without confinement the target is mapped as-is."""
        with lookup_resource(www_root, "/../secret.html", confine=False) as resource:
            assert isinstance(resource, Found)
            assert resource.handle.read() == b"top secret\n"

    @pytest.mark.parametrize("confine", [True, False])
    def test_embedded_nul_is_not_found(self, www_root: Path, caplog, confine: bool):
        """A NUL byte in the target is NotFound, not a traversal attempt."""
        with caplog.at_level(logging.INFO, logger="webworker.handlers.static"):
            with lookup_resource(www_root, "/index\x00.html", confine=confine) as resource:
                assert isinstance(resource, NotFound)
                assert resource.reason == "malformed target"

        assert "Path traversal attempt" not in caplog.text

    def test_repeated_lookups_agree(self, www_root: Path):
        """Two lookups of an unchanged resource give the same answer."""
        for target in ("/index.html", "/missing.html", "/logo.png", ""):
            with lookup_resource(www_root, target) as first:
                with lookup_resource(www_root, target) as second:
                    assert first.exists == second.exists


class TestIsWithinRoot:
    """Tests for is_within_root()."""

    def test_inside(self, www_root: Path):
        assert is_within_root(www_root, www_root / "sub" / "page.html")

    def test_root_itself(self, www_root: Path):
        assert is_within_root(www_root, www_root)

    def test_outside(self, www_root: Path):
        assert not is_within_root(www_root, www_root / ".." / "secret.html")

    def test_symlink_out_of_root(self, www_root: Path, tmp_path: Path):
        link = www_root / "escape.html"
        try:
            link.symlink_to(tmp_path / "secret.html")
        except OSError:
            pytest.skip("symlinks not supported")

        assert not is_within_root(www_root, link)
