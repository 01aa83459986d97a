"""Post content rendering and public links."""

from .links import PERMALINK_PLAIN, PERMALINK_PRETTY, Site
from .rendering import autop, get_excerpt, render_content, trim_words

__all__ = [
    "PERMALINK_PLAIN",
    "PERMALINK_PRETTY",
    "Site",
    "autop",
    "get_excerpt",
    "render_content",
    "trim_words",
]
