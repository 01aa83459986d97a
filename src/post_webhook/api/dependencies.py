"""FastAPI dependency injection for database, services and the calling user."""

from typing import Callable, Generator, Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from ..config import Config
from ..content.links import Site
from ..database.engine import session_scope
from ..database.models import User
from ..posts.service import PostService
from ..users import find_user_by_token
from ..webhook.dispatcher import WebhookDispatcher

# Global Config instance (set during app startup)
_config_instance: Optional[Config] = None

# Global PostService instance (set during app startup)
_post_service_instance: Optional[PostService] = None

# Global WebhookDispatcher instance (set during app startup)
_dispatcher_instance: Optional[WebhookDispatcher] = None


def set_config_instance(config: Config) -> None:
    """
    Set the global Config instance.

    This is called during application startup to make the Config
    instance available to all API routes.

    Args:
        config: The Config instance
    """
    global _config_instance
    _config_instance = config


def set_post_service_instance(post_service: PostService) -> None:
    """Set the global PostService instance."""
    global _post_service_instance
    _post_service_instance = post_service


def set_dispatcher_instance(dispatcher: WebhookDispatcher) -> None:
    """Set the global WebhookDispatcher instance."""
    global _dispatcher_instance
    _dispatcher_instance = dispatcher


def get_db() -> Generator[Session, None, None]:
    """
    Dependency to get a database session.

    Yields:
        SQLAlchemy session

    Example:
        ```python
        @router.get("/posts")
        def list_posts(db: Session = Depends(get_db)):
            return db.query(Post).all()
        ```
    """
    with session_scope() as session:
        yield session


def get_config() -> Config:
    """
    Dependency to get the Config instance.

    Raises:
        RuntimeError: If Config instance has not been set
    """
    if _config_instance is None:
        raise RuntimeError("Config instance not initialized")
    return _config_instance


def get_site(config: Config = Depends(get_config)) -> Site:
    """Dependency to get site link and date settings."""
    return Site.from_config(config)


def get_post_service() -> PostService:
    """
    Dependency to get the PostService instance.

    Raises:
        RuntimeError: If PostService instance has not been set
    """
    if _post_service_instance is None:
        raise RuntimeError("PostService instance not initialized")
    return _post_service_instance


def get_dispatcher() -> WebhookDispatcher:
    """
    Dependency to get the WebhookDispatcher instance.

    Raises:
        RuntimeError: If WebhookDispatcher instance has not been set
    """
    if _dispatcher_instance is None:
        raise RuntimeError("WebhookDispatcher instance not initialized")
    return _dispatcher_instance


def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def get_optional_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    """
    Dependency resolving the bearer token to a user, or None.

    Used where an anonymous caller gets a regular response instead of 401.
    """
    token = _bearer_token(request)
    if not token:
        return None
    return find_user_by_token(db, token)


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """
    Dependency requiring an authenticated user.

    Raises:
        HTTPException: 401 if the token is missing or unknown
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Valid bearer token required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_capability(capability: str) -> Callable[..., User]:
    """
    Build a dependency requiring the current user to hold a capability.

    Example:
        ```python
        @router.put("/settings/webhook")
        def update(user: User = Depends(require_capability("manage_options"))):
            ...
        ```
    """

    def checker(user: User = Depends(get_current_user)) -> User:
        if not user.can(capability):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Capability '{capability}' required",
            )
        return user

    return checker
