"""URL sanitization for values stored in the settings store."""

import re
from typing import Optional
from urllib.parse import urlsplit

ALLOWED_SCHEMES = ("http", "https")

# Characters that may appear in a stored URL; everything else is dropped
_DISALLOWED_CHARS = re.compile(r"[^a-z0-9\-~+_.?#=!&;,/:%@$|*'()\[\]\x80-\xff]", re.IGNORECASE)
_SCHEME = re.compile(r"^[a-z][a-z0-9+.\-]*:", re.IGNORECASE)


def sanitize_url(url: Optional[str]) -> str:
    """
    Sanitize a URL for storage.

    Whitespace is trimmed and characters that cannot appear in a URL are
    removed. A value without a scheme that looks like a host name gets
    ``http://`` prepended. Only http and https URLs with a host survive;
    anything else is reduced to an empty string.

    Args:
        url: Raw URL as submitted

    Returns:
        Sanitized URL, or empty string if the value is not an acceptable URL
    """
    if not url:
        return ""

    url = url.strip().replace(" ", "%20")
    url = _DISALLOWED_CHARS.sub("", url)
    if not url:
        return ""

    if not _SCHEME.match(url):
        if url.startswith(("/", "#", "?")) or "." not in url.split("/", 1)[0]:
            return ""
        url = f"http://{url}"

    try:
        parts = urlsplit(url)
    except ValueError:
        return ""

    if parts.scheme.lower() not in ALLOWED_SCHEMES or not parts.netloc:
        return ""

    return url


def is_valid_webhook_url(url: Optional[str]) -> bool:
    """
    Check whether a URL is usable as a webhook target.

    Args:
        url: URL to check

    Returns:
        True if the value is non-empty and unchanged by sanitization
    """
    return bool(url) and sanitize_url(url) == url
