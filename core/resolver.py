"""Extract and validate the target URL embedded in the request path."""

import re

import httpx

from core.exceptions import MalformedTarget, MissingTarget
from core.request_types import ResolvedTarget

DEFAULT_SCHEME = "http://"

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def is_root_path(path: str) -> bool:
    return path in ("", "/")


def resolve_target(method: str, path: str, query: str = "") -> ResolvedTarget:
    """Return the target URL for ``/<target>``.

    Raises:
        MissingTarget: path is empty or ``/``
        MalformedTarget: the target does not parse as an absolute URL
    """
    if is_root_path(path):
        raise MissingTarget(method, path)

    raw = path[1:] if path.startswith("/") else path
    if not raw.startswith("http"):
        raw = DEFAULT_SCHEME + raw
    if query:
        raw = f"{raw}?{query}"

    error = _parse_error(raw)
    if error:
        raise MalformedTarget(error, method, raw)

    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as e:
        raise MalformedTarget(f"parse {raw}: {e}", method, raw) from e

    if not url.is_absolute_url:
        raise MalformedTarget(f"parse {raw}: invalid URI for request", method, raw)
    if not url.host:
        raise MalformedTarget(f"parse {raw}: missing host", method, raw)

    return ResolvedTarget(url=url, requested_url=raw)


def _parse_error(raw: str) -> str | None:
    """Catch escapes that httpx would silently re-encode."""
    match = _BAD_ESCAPE.search(raw)
    if match is None:
        return None
    escape = raw[match.start() : match.start() + 3]
    return f'parse {raw}: invalid URL escape "{escape}"'
