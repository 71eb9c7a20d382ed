"""Decide how a raw link string gets checked."""

from enum import Enum
from typing import Optional
from urllib.parse import urljoin, urlparse

SKIP_PREFIXES = ("#", "javascript:", "mailto:", "tel:")
HTTP_PREFIXES = ("http://", "https://")
HTTP_SCHEMES = ("http", "https")


class LinkKind(str, Enum):
    SKIP = "skip"
    HTTP = "http"
    FILE = "file"


def is_skipped(raw: str) -> bool:
    """Empty links, anchors and javascript/mailto/tel targets are never checked."""
    return not raw or raw.startswith(SKIP_PREFIXES)


def resolve_link(raw: str, base_url: str) -> Optional[str]:
    """Resolve a link found on a web page against the page URL.

    Returns the absolute URL when it is HTTP(S), otherwise None.
    """
    if is_skipped(raw):
        return None
    try:
        absolute = urljoin(base_url, raw)
        scheme = urlparse(absolute).scheme
    except ValueError:
        return None
    if scheme not in HTTP_SCHEMES:
        return None
    return absolute


def classify(raw: str, base_url: Optional[str] = None) -> LinkKind:
    if is_skipped(raw):
        return LinkKind.SKIP
    if base_url is not None:
        return LinkKind.HTTP if resolve_link(raw, base_url) else LinkKind.SKIP
    if raw.startswith(HTTP_PREFIXES):
        return LinkKind.HTTP
    return LinkKind.FILE
