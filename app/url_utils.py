"""Utilities for validating post-authentication redirect targets."""

import re
from urllib.parse import unquote, urlsplit

SAFE_REDIRECT_FALLBACK = "/"

_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")


def contains_control_characters(value):
    return bool(_CONTROL_RE.search(value))


def _decode_component(component):
    """Percent-decode a URL component, or return None if it is malformed."""
    if _BAD_ESCAPE_RE.search(component):
        return None
    try:
        return unquote(component, errors="strict")
    except UnicodeDecodeError:
        return None


def sanitize_redirect_url(candidate):
    """Return a same-origin relative path for an untrusted redirect target.

    Only root-relative references survive: absolute and scheme-qualified URLs,
    protocol-relative forms (``//host``, ``\\\\host``, ``/%5Chost``), raw
    control characters and malformed escapes all collapse to ``/``. Backslashes
    are treated as path separators. The fragment is dropped, the query string
    is kept as-is and the path is returned percent-decoded. Dot segments are
    not resolved.

    A path whose escapes decode to bytes that are not valid UTF-8 (``/%ff``)
    is treated as malformed and also yields ``/``.

    Control characters that only appear after percent-decoding are passed
    through. Callers emitting the result into a header must refuse them, see
    :func:`contains_control_characters`.
    """
    if not candidate or not isinstance(candidate, str):
        return SAFE_REDIRECT_FALLBACK

    # urlsplit silently strips leading blanks and control characters
    if contains_control_characters(candidate) or candidate[0] == " ":
        return SAFE_REDIRECT_FALLBACK

    normalized = candidate.replace("\\", "/")
    # "///host" parses with an empty netloc, so check the raw prefix too
    if normalized.startswith("//"):
        return SAFE_REDIRECT_FALLBACK

    try:
        parsed = urlsplit(normalized)
    except ValueError:
        return SAFE_REDIRECT_FALLBACK
    if parsed.scheme or parsed.netloc:
        return SAFE_REDIRECT_FALLBACK

    if _decode_component(parsed.fragment) is None:
        return SAFE_REDIRECT_FALLBACK

    path = _decode_component(parsed.path)
    if path is None:
        return SAFE_REDIRECT_FALLBACK

    # Decoding may reintroduce a host prefix ("%2F%2Fhost", "/%5Chost")
    if not path.startswith("/") or path.startswith(("//", "/\\")):
        return SAFE_REDIRECT_FALLBACK

    if parsed.query:
        return f"{path}?{parsed.query}"
    return path
