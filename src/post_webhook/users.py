"""User accounts and API tokens."""

import logging
import secrets
from typing import Optional

from sqlalchemy.orm import Session

from .constants import ROLES
from .database.models import User
from .utils.text import sanitize_title

logger = logging.getLogger(__name__)


def generate_api_token() -> str:
    """Random 64-character hex token."""
    return secrets.token_hex(32)


def create_user(
    session: Session,
    login: str,
    role: str = "subscriber",
    display_name: Optional[str] = None,
    email: Optional[str] = None,
    api_token: Optional[str] = None,
) -> User:
    """
    Create a user with an API token.

    Args:
        session: Database session
        login: Unique login name
        role: One of the known roles
        display_name: Name shown as post author (defaults to the login)
        email: Optional email address
        api_token: Token to assign (generated when omitted)

    Returns:
        The new user, flushed so its id is set

    Raises:
        ValueError: If the role is unknown or the login is taken
    """
    if role not in ROLES:
        raise ValueError(f"Unknown role '{role}'. Expected one of: {', '.join(ROLES)}")
    if session.query(User).filter_by(login=login).first() is not None:
        raise ValueError(f"User '{login}' already exists")

    user = User(
        login=login,
        display_name=display_name or login,
        nicename=sanitize_title(login, fallback=login.lower()),
        email=email,
        role=role,
        api_token=api_token or generate_api_token(),
    )
    session.add(user)
    session.flush()
    logger.info(f"Created user {login} ({role})")
    return user


def find_user_by_token(session: Session, token: str) -> Optional[User]:
    """Look up the user owning an API token."""
    if not token:
        return None
    user = session.query(User).filter_by(api_token=token).first()
    if user is None:
        return None
    # Constant-time comparison to prevent timing attacks
    if not secrets.compare_digest(user.api_token, token):
        return None
    return user
