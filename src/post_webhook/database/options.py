"""Site settings store backed by the options table."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..constants import WEBHOOK_OPTION
from ..utils.url import sanitize_url
from .models import Option

logger = logging.getLogger(__name__)


def get_option(session: Session, name: str, default: str = "") -> str:
    """
    Read a setting.

    Args:
        session: Database session
        name: Option name
        default: Value returned when the option has never been written

    Returns:
        Stored value or the default
    """
    option = session.query(Option).filter_by(name=name).first()
    if option is None:
        return default
    return option.value


def update_option(session: Session, name: str, value: str) -> None:
    """Write a setting, replacing any previous value."""
    option = session.query(Option).filter_by(name=name).first()
    if option is None:
        session.add(Option(name=name, value=value))
    else:
        option.value = value
    session.flush()


def get_webhook_url(session: Session) -> str:
    """Configured webhook URL, or empty string when disabled."""
    return get_option(session, WEBHOOK_OPTION, "")


def set_webhook_url(session: Session, url: Optional[str]) -> str:
    """
    Sanitize and store the webhook URL.

    Args:
        session: Database session
        url: URL as submitted; empty or invalid values disable the webhook

    Returns:
        The value actually stored
    """
    sanitized = sanitize_url(url)
    if url and not sanitized:
        logger.warning(f"Rejected webhook URL {url!r}; webhook disabled")
    update_option(session, WEBHOOK_OPTION, sanitized)
    logger.info(f"Webhook URL {'set to ' + sanitized if sanitized else 'cleared'}")
    return sanitized
