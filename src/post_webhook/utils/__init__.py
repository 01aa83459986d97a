"""Utility functions and helpers."""

from .dates import format_mysql_datetime, format_php_date
from .logging import setup_logging
from .text import sanitize_title, strip_tags
from .url import sanitize_url

__all__ = [
    "format_mysql_datetime",
    "format_php_date",
    "sanitize_title",
    "sanitize_url",
    "setup_logging",
    "strip_tags",
]
