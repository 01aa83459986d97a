"""Text helpers for slugs and HTML stripping."""

import html
import re
import unicodedata

_TAGS = re.compile(r"<[^>]*>")
_SCRIPTS = re.compile(r"<(script|style)[^>]*?>.*?</\1>", re.IGNORECASE | re.DOTALL)
_WHITESPACE = re.compile(r"\s+")
_NON_SLUG = re.compile(r"[^a-z0-9\s_-]")
_SLUG_SEPARATORS = re.compile(r"[\s_-]+")


def strip_tags(text: str) -> str:
    """
    Remove HTML tags, including the contents of script and style elements.

    Args:
        text: HTML fragment

    Returns:
        Text without markup
    """
    text = _SCRIPTS.sub("", text)
    return _TAGS.sub("", text)


def collapse_whitespace(text: str) -> str:
    """Replace runs of whitespace with a single space and trim the result."""
    return _WHITESPACE.sub(" ", text).strip()


def sanitize_title(title: str, fallback: str = "") -> str:
    """
    Build a URL slug from a title.

    Accents are transliterated to ASCII, markup and entities are dropped,
    and words are joined with hyphens.

    Args:
        title: Title or login name to convert
        fallback: Value returned when nothing usable remains

    Returns:
        Lowercase slug such as ``hello-world``
    """
    text = html.unescape(strip_tags(title or ""))
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = _NON_SLUG.sub("", text.lower())
    slug = _SLUG_SEPARATORS.sub("-", text).strip("-")
    return slug or fallback
