"""
=============================================================================
CONTENT TYPE RESOLUTION
=============================================================================

The responder knows exactly four kinds of content. The kind decides both
the Content-Type header and HOW the body is produced:

    ┌──────────┬──────────────┬─────────────────────────────────────────┐
    │ Category │ MIME type    │ Body                                    │
    ├──────────┼──────────────┼─────────────────────────────────────────┤
    │ HTML     │ text/html    │ Re-written line by line (markers)       │
    │ PNG      │ image/png    │ Copied verbatim                         │
    │ JPEG     │ image/jpeg   │ Copied verbatim                         │
    │ GIF      │ image/gif    │ Copied verbatim                         │
    └──────────┴──────────────┴─────────────────────────────────────────┘

=============================================================================
MATCHING RULES
=============================================================================

1. Substring match, not a true suffix check: "/a.png.txt" is a PNG.
2. Case-sensitive: "/PHOTO.JPG" is HTML.
3. Table order decides ties. ".jpg" is checked before ".jpeg", which only
   matters for paths containing both.
4. No match (including no extension at all) means HTML.

=============================================================================
THE .jpg QUIRK
=============================================================================

The first version of this server labelled .jpg files as image/png. Browsers
sniff images so it mostly worked, but it is wrong. We serve image/jpeg by
default; pass jpg_as_png=True to get the old header back byte for byte.

=============================================================================
"""

from enum import Enum


class ContentType(Enum):
    """
    Content category of a requested resource.

    The value is the MIME type sent in the Content-Type header.
    """

    HTML = "text/html"
    PNG = "image/png"
    JPEG = "image/jpeg"
    GIF = "image/gif"

    @property
    def mime(self) -> str:
        """MIME type string for the Content-Type header."""
        return self.value

    @property
    def is_image(self) -> bool:
        """True for the binary image categories."""
        return self is not ContentType.HTML


# =============================================================================
# EXTENSION TABLE
# =============================================================================
#
# Ordered: the first entry whose extension appears in the path wins.
#
# =============================================================================

CONTENT_TYPE_TABLE: tuple[tuple[str, ContentType], ...] = (
    (".png", ContentType.PNG),
    (".jpg", ContentType.JPEG),
    (".jpeg", ContentType.JPEG),
    (".gif", ContentType.GIF),
)

DEFAULT_CONTENT_TYPE = ContentType.HTML


def resolve_content_type(path: str, jpg_as_png: bool = False) -> ContentType:
    """
    Get the content category for a request target.

    Args:
        path: Request target, e.g. "/images/cat.gif".
        jpg_as_png: Reproduce the legacy mapping of ".jpg" to PNG.

    Returns:
        The matching ContentType, HTML when nothing matches.

    Examples:
        >>> resolve_content_type("/logo.png")
        <ContentType.PNG: 'image/png'>

        >>> resolve_content_type("/index.html")
        <ContentType.HTML: 'text/html'>

        >>> resolve_content_type("/photo.jpg", jpg_as_png=True)
        <ContentType.PNG: 'image/png'>
    """
    for extension, content_type in CONTENT_TYPE_TABLE:
        if extension in path:
            if jpg_as_png and extension == ".jpg":
                return ContentType.PNG
            return content_type
    return DEFAULT_CONTENT_TYPE
