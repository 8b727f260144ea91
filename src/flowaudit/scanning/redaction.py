"""Redaction of matched values and sanitising of URLs for reports."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

MASK_CHAR = "*"
FULL_MASK = MASK_CHAR * 6
MAX_MASK_WIDTH = 8


def redact_value(value: str) -> str:
    """Mask a matched value, keeping a short prefix/suffix for recognition.

    ``<= 6`` chars are fully masked, ``7-10`` keep two chars on each side,
    longer values keep four chars on each side with at most eight mask
    characters in between. Redacting an already redacted value is a no-op.
    """
    length = len(value)
    if length <= 6:
        return FULL_MASK
    if length <= 10:
        return f"{value[:2]}{MASK_CHAR * (length - 4)}{value[-2:]}"
    return f"{value[:4]}{MASK_CHAR * min(length - 8, MAX_MASK_WIDTH)}{value[-4:]}"


_QUERY_OR_FRAGMENT = re.compile(r"[?#]")


def sanitize_url(url: str) -> str:
    """Reduce a URL to scheme, host and path.

    Query strings and fragments are dropped since tokens are often embedded
    there. Userinfo is dropped for the same reason.
    """
    try:
        parts = urlsplit(url)
        host = parts.hostname
        port = parts.port
    except ValueError:
        return _QUERY_OR_FRAGMENT.split(url, 1)[0]

    if not parts.scheme or not host:
        return _QUERY_OR_FRAGMENT.split(url, 1)[0]

    netloc = f"[{host}]" if ":" in host else host
    if port is not None:
        netloc = f"{netloc}:{port}"
    return f"{parts.scheme}://{netloc}{parts.path or '/'}"
