"""Rendering of stored post content and excerpts."""

import re

from ..utils.text import collapse_whitespace, strip_tags

EXCERPT_LENGTH = 55
EXCERPT_MORE = " [&hellip;]"

_BLOCK_TAGS = (
    "address|article|aside|blockquote|details|div|dl|fieldset|figcaption|figure|"
    "footer|form|h[1-6]|header|hr|li|main|nav|ol|p|pre|section|table|ul"
)
_BLOCK_START = re.compile(rf"^<(?:(?:{_BLOCK_TAGS})[\s/>]|!--)", re.IGNORECASE)
_BLANK_LINES = re.compile(r"\n\s*\n")


def autop(text: str) -> str:
    """
    Wrap plain-text paragraphs in ``<p>`` tags.

    Blocks separated by blank lines become paragraphs and single line breaks
    inside a paragraph become ``<br />``. Blocks that already start with a
    block-level element are kept as written.

    Args:
        text: Raw post content

    Returns:
        HTML with paragraphs applied
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n").strip()
    if not text:
        return ""

    blocks = []
    for block in _BLANK_LINES.split(text):
        block = block.strip()
        if not block:
            continue
        if _BLOCK_START.match(block):
            blocks.append(block)
        else:
            lines = [line.strip() for line in block.split("\n")]
            blocks.append("<p>" + "<br />\n".join(lines) + "</p>")

    return "\n".join(blocks) + "\n"


def render_content(raw: str) -> str:
    """Fully rendered HTML for a post body."""
    return autop(raw or "")


def trim_words(text: str, num_words: int = EXCERPT_LENGTH, more: str = EXCERPT_MORE) -> str:
    """
    Trim text to a number of words after stripping markup.

    Args:
        text: HTML or plain text
        num_words: Maximum number of words to keep
        more: Suffix appended only when words were dropped

    Returns:
        Trimmed plain text
    """
    words = collapse_whitespace(strip_tags(text)).split(" ")
    if words == [""]:
        return ""
    if len(words) > num_words:
        return " ".join(words[:num_words]) + more
    return " ".join(words)


def get_excerpt(raw_content: str, manual_excerpt: str = "") -> str:
    """
    Excerpt for a post.

    A manual excerpt wins; otherwise one is generated from the rendered
    content.
    """
    if manual_excerpt and manual_excerpt.strip():
        return manual_excerpt
    return trim_words(render_content(raw_content))
