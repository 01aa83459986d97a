"""Database layer for the content and settings store."""

from .engine import DatabaseEngine, init_database, session_scope
from .models import Option, Post, Term, User
from .options import get_option, get_webhook_url, set_webhook_url, update_option

__all__ = [
    "DatabaseEngine",
    "init_database",
    "session_scope",
    "Option",
    "Post",
    "Term",
    "User",
    "get_option",
    "update_option",
    "get_webhook_url",
    "set_webhook_url",
]
