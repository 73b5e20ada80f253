"""
=============================================================================
RESOURCE LOOKUP
=============================================================================

Maps a request target to a file under the web root and opens it ONCE per
connection. Both the header writer (200 or 404?) and the content renderer
(what bytes?) read the same lookup result, so they can never disagree.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Target → Local File                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   root_dir = /srv/www                                               │
    │                                                                      │
    │   GET /index.html       → /srv/www/index.html                       │
    │   GET /img/cat.gif      → /srv/www/img/cat.gif                      │
    │   GET /                 → /srv/www          (directory → NotFound)  │
    │   (no target)           → /srv/www          (directory → NotFound)  │
    │   GET /../etc/passwd    → /srv/etc/passwd   (outside → NotFound)    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
TAGGED RESULT
=============================================================================

    Found(path, handle)     The file is open for binary reading.
    NotFound(path, reason)  Nothing to serve; reason is for the logs.

lookup_resource() is a context manager: the handle is closed when the
`with` block exits, whichever way it exits.

=============================================================================
PATH TRAVERSAL
=============================================================================

The request target is attacker-controlled. With confine=True (the default)
we resolve the path (following ".." and symlinks) and refuse anything that
lands outside root_dir. confine=False maps the target exactly like the
first version of this server did: root prefix plus target, no checks.

=============================================================================
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Union


logger = logging.getLogger(__name__)


class ResourceNotFoundError(LookupError):
    """Raised when content must be served from a resource that is missing."""

    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        self.reason = reason
        super().__init__(f"Resource not found: {path} ({reason})" if reason else f"Resource not found: {path}")


@dataclass(frozen=True)
class Found:
    """The resource exists and is open for binary reading."""
    path: Path
    handle: BinaryIO

    @property
    def exists(self) -> bool:
        return True


@dataclass(frozen=True)
class NotFound:
    """The resource could not be opened."""
    path: Path
    reason: str = ""

    @property
    def exists(self) -> bool:
        return False


ResourceLookup = Union[Found, NotFound]


def map_target(root_dir: Union[str, Path], target: str) -> Path:
    """
    Map a request target to a local path under root_dir.

    Leading slashes are stripped so the target is always relative to the
    root, never an absolute filesystem path.

    Args:
        root_dir: Web root directory.
        target: Request target, e.g. "/index.html".

    Returns:
        The unresolved local path.
    """
    return Path(root_dir) / target.lstrip("/")


def is_within_root(root_dir: Union[str, Path], path: Path) -> bool:
    """
    Check that path, once resolved, stays inside root_dir.

    resolve() follows symlinks and normalizes ".." components, so
    "/srv/www/../etc/passwd" is caught here.

    Raises ValueError when path cannot be resolved at all (embedded NUL).
    """
    root = Path(root_dir).resolve()
    resolved = path.resolve()
    try:
        resolved.relative_to(root)
    except ValueError:
        return False
    return True


@contextmanager
def lookup_resource(
    root_dir: Union[str, Path],
    target: str,
    confine: bool = True,
) -> Iterator[ResourceLookup]:
    """
    Resolve a request target to a Found or NotFound result.

    Usage:
        with lookup_resource(config.root_dir, target) as resource:
            write_header(conn, content_type, resource)
            write_content(conn, content_type, resource)
        # file handle closed here

    Args:
        root_dir: Web root directory.
        target: Request target from the request line.
        confine: Refuse paths that resolve outside root_dir.

    Yields:
        Found with an open binary handle, or NotFound.
    """
    path = map_target(root_dir, target)

    # A NUL byte can never name a file; resolve() and open() reject it
    # with ValueError rather than OSError.
    if "\x00" in target:
        logger.info(f"Malformed target: {target!r}")
        yield NotFound(path, "malformed target")
        return

    # ─────────────────────────────────────────────────────────────────
    # SECURITY: PATH TRAVERSAL CHECK
    # ─────────────────────────────────────────────────────────────────
    if confine and not is_within_root(root_dir, path):
        logger.warning(f"Path traversal attempt: {target}")
        yield NotFound(path, "outside web root")
        return

    # ─────────────────────────────────────────────────────────────────
    # OPEN THE FILE
    # ─────────────────────────────────────────────────────────────────
    # Opening is the existence check: a directory, a missing file and a
    # permission error all fail here with an OSError. Names the OS cannot
    # represent fail with ValueError.
    try:
        handle = open(path, "rb")
    except (OSError, ValueError) as e:
        reason = getattr(e, "strerror", None) or str(e)
        handle = None

    if handle is None:
        logger.info(f"File not found: {target} ({reason})")
        yield NotFound(path, reason)
        return

    with handle:
        yield Found(path, handle)
