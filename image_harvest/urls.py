"""URL resolution and local file naming for discovered images."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import unquote, urljoin, urlsplit

from .config import DEFAULT_EXTENSION
from .errors import PageURLInvalid, SourceUnresolvable

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_TRIVIAL_SEGMENTS = {"", ".", ".."}


def _check_reference(value: str) -> None:
    """Raise ValueError when ``value`` is not a parseable URL reference."""
    if _CONTROL_CHARS.search(value):
        raise ValueError("invalid control character in URL")
    parts = urlsplit(value)
    # Query strings are passed through untouched, so only path and fragment are checked.
    for component in (parts.netloc, parts.path, parts.fragment):
        if _BAD_ESCAPE.search(component):
            raise ValueError(f"invalid percent escape in {component!r}")
    # Raises ValueError for a malformed port.
    _ = parts.port


def parse_page_url(url: str) -> str:
    """Validate the page URL that relative sources are resolved against."""
    try:
        _check_reference(url)
    except ValueError as exc:
        raise PageURLInvalid(f"cannot parse page URL {url!r}: {exc}") from exc
    parts = urlsplit(url)
    if not parts.scheme:
        raise PageURLInvalid(f"page URL {url!r} has no scheme")
    if not parts.netloc and parts.scheme != "file":
        raise PageURLInvalid(f"page URL {url!r} has no host")
    return url


def resolve_source(base: str, raw: str) -> Optional[str]:
    """Resolve an ``img`` source against the page URL.

    Returns ``None`` for an empty source. Sources that already carry a scheme
    come back unchanged; everything else goes through RFC 3986
    relative resolution. Raises ``SourceUnresolvable`` when ``raw`` cannot be
    parsed at all.
    """
    if not raw:
        return None
    try:
        _check_reference(raw)
    except ValueError as exc:
        raise SourceUnresolvable(f"cannot parse source {raw!r}: {exc}") from exc
    if urlsplit(raw).scheme:
        return raw
    return urljoin(base, raw)


def _last_segment(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def file_extension(path: str) -> str:
    """Return the extension of the last path segment, or ``.jpg``."""
    segment = _last_segment(path)
    dot = segment.rfind(".")
    if dot == -1 or dot == len(segment) - 1:
        return DEFAULT_EXTENSION
    return segment[dot:]


def derive_file_name(absolute_url: str, index: int) -> str:
    """Pick the local file name for the image at 0-based ``index``.

    Uses the last segment of the decoded URL path. When that segment is empty
    or a dot segment the name becomes ``image_<index + 1><ext>``. Names are not
    made unique across a run.
    """
    path = unquote(urlsplit(absolute_url).path)
    segment = _last_segment(path)
    if segment in _TRIVIAL_SEGMENTS:
        return f"image_{index + 1}{file_extension(path)}"
    return segment
